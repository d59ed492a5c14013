"""
Media Layer.

This package is responsible for transferring film files from the remote
server into memory.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
