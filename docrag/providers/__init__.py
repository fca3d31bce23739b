"""Concrete adapters for the interfaces in ``docrag.interfaces``."""
