import asyncio
import logging

from shortlink_app.errors import SymbolNotFoundError
from shortlink_app.services.allocator import SymbolAllocator
from shortlink_app.storage.store import RedirectStore

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Read-only access to the redirect table.

    Needs nothing but the store, so lookups never build the allocator or
    its symbol strategy and never touch the cursor lock.
    """

    def __init__(self, store: RedirectStore):
        self.store = store

    async def resolve(self, symbol: str) -> str:
        """Get the destination for a symbol

        Raises:
            SymbolNotFoundError: If nothing is registered under symbol
        """
        destination = self.store.get_redirect(symbol)
        if destination is None:
            raise SymbolNotFoundError(symbol)
        return destination


class LinkService(RedirectService):
    """
    Link service with the store and allocator injected.

    Mutations update memory first, then persist the whole store in a
    worker thread. A failed save leaves the in-memory change in place; the
    next successful save writes it out.
    """

    def __init__(self, store: RedirectStore, allocator: SymbolAllocator):
        """
        Initialize link service with dependencies.

        Args:
            store: Shared redirect store
            allocator: Allocator bound to the same store
        """
        super().__init__(store)
        self.allocator = allocator

    async def allocate(self, destination: str) -> str:
        """Register destination under a freshly allocated symbol

        Process:
        1. Allocate a symbol (cursor lock held only here)
        2. Insert the redirect
        3. Save the store (worker thread)

        Raises:
            AllocationExhaustedError, LockPoisonedError, StorageSaveFailedError
        """
        symbol = self.allocator.allocate()
        self.store.add_redirect(symbol, destination)
        await self._save()
        return symbol

    async def register(self, symbol: str, destination: str) -> str:
        """Register destination under an explicit symbol, replacing any existing one

        Raises:
            StorageSaveFailedError: If the store could not be saved
        """
        self.store.add_redirect(symbol, destination)
        await self._save()
        return symbol

    async def _save(self) -> None:
        await asyncio.to_thread(self.store.save)
