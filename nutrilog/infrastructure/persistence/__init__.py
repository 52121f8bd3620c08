"""Persistence adapters implementing the key-value store port."""
