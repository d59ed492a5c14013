"""
Catalog Layer.

This package handles retrieval of the list of films available for download.
"""

from .catalog import SAMPLE_CATALOG, CatalogSource, parse_catalog

__all__ = ["SAMPLE_CATALOG", "CatalogSource", "parse_catalog"]
