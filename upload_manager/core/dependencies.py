"""Reusable FastAPI dependencies."""

from functools import lru_cache
from ..services.storage_service import StorageService


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    """
    Dependency to get the storage service.
    One instance per process so the signed URL cache and client are shared.
    """
    return StorageService()
