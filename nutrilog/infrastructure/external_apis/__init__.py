"""Clients for external food databases."""
