"""JSON file persistence adapter."""

from .key_value_store import JsonFileKeyValueStore

__all__ = ["JsonFileKeyValueStore"]
