"""
Services module containing the catalog and identity stores.
"""

from .catalog import Catalog
from .registry import Registry

__all__ = [
    "Catalog",
    "Registry",
]
