"""Shared FastAPI dependencies."""

from fastapi import Request

from social_api.store import Storage


def get_storage(request: Request) -> Storage:
    """Dependency that provides the storage aggregate built at startup."""
    return request.app.state.storage
