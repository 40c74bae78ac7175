# Storage Adapters Package
from .storage import InMemoryStore, JsonFileStore

__all__ = ["InMemoryStore", "JsonFileStore"]
