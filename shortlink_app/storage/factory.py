"""
Factory for the process-wide redirect store.
Simple factory with singleton caching.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from .store import RedirectStore
from shortlink_app.config import settings

logger = logging.getLogger(__name__)


class StoreFactory:
    """
    Creates the redirect store once and hands the same instance to everyone.

    Concurrent first callers may each load the file, but only the first to
    finish installs its copy; the others drop theirs and adopt it.
    """

    _instance: Optional[RedirectStore] = None  # Single cached instance
    _lock = threading.Lock()

    @classmethod
    def create(cls, path: Union[str, Path, None] = None) -> RedirectStore:
        """
        Create or return the cached store.

        Args:
            path: Data file location. If None, uses value from settings.

        Returns:
            Singleton RedirectStore instance
        """
        if cls._instance is not None:
            return cls._instance

        # Losers of the race discard this copy
        loaded = RedirectStore.load(path if path is not None else settings.data)

        with cls._lock:
            if cls._instance is None:
                cls._instance = loaded
                logger.info("Redirect store initialized from %s", loaded.path)
            return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        with cls._lock:
            cls._instance = None
