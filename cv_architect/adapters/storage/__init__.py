"""Key-value storage adapters.

History persistence depends on a small key-value abstraction so a JSON file
in production and an in-memory dict in tests are interchangeable.
"""

from cv_architect.adapters.storage.base import AbstractKeyValueStore
from cv_architect.adapters.storage.in_memory import InMemoryKeyValueStore
from cv_architect.adapters.storage.json_file import JsonFileKeyValueStore

__all__ = ["AbstractKeyValueStore", "InMemoryKeyValueStore", "JsonFileKeyValueStore"]
