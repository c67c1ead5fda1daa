"""HTTP adapters over the storage layer."""

from social_api.api.router import api_router

__all__ = ["api_router"]
