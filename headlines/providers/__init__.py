"""Concrete adapters for the interfaces in ``headlines.interfaces``."""
