"""
Storage Layer.

This package handles all data persistence: the configuration file and the
film database that keeps downloaded payloads.
"""

from .config_manager import ConfigManager
from .film_store import FilmStore

__all__ = ["ConfigManager", "FilmStore"]
