"""Social API - storage core and HTTP adapters for a small social network."""

__version__ = "0.1.0"
