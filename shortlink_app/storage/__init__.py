"""
Storage module for redirects.

Holds the redirect table, the allocation cursor and their JSON persistence.
"""

from .table import RedirectTable
from .store import RedirectStore
from .factory import StoreFactory

__all__ = [
    "RedirectTable",
    "RedirectStore",
    "StoreFactory",
]
