from .protocol import JobStore
from .json_file import JsonFileStore, InMemoryStore

__all__ = ["JobStore", "JsonFileStore", "InMemoryStore"]
