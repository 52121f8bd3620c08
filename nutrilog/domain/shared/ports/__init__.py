"""Shared ports (interfaces) implemented by infrastructure adapters."""

from nutrilog.domain.shared.ports.key_value_store import IKeyValueStore

__all__ = ["IKeyValueStore"]
