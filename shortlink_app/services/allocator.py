"""
Symbol allocation.

Ties a symbol strategy to the redirect store: one allocation at a time
walks the strategy's candidates from the cursor, skips symbols already in
the table and moves the cursor to the first free one.
"""

import logging

from shortlink_app.errors import AllocationExhaustedError, LockPoisonedError
from shortlink_app.storage.store import RedirectStore
from shortlink_app.symbols.strategies import SymbolStrategy

logger = logging.getLogger(__name__)


class SymbolAllocator:
    """
    Hands out fresh symbols.

    The cursor advances past every candidate it rejects, so it never moves
    backwards even when a skipped symbol was never registered. Inserting the
    redirect for the returned symbol is left to the caller and happens after
    the lock is released.

    If a strategy fails unexpectedly while the cursor lock is held, the
    allocator is poisoned and refuses every later request.
    """

    def __init__(self, store: RedirectStore, strategy: SymbolStrategy):
        self.store = store
        self.strategy = strategy
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def allocate(self) -> str:
        """
        Reserve the next free symbol.

        Returns:
            A symbol not present in the table at the time of the call

        Raises:
            AllocationExhaustedError: The strategy ran out of candidates
            LockPoisonedError: A previous allocation crashed mid-way
        """
        with self.store.cursor_lock:
            if self._poisoned:
                raise LockPoisonedError()

            try:
                symbol = self._next_free_symbol()
            except AllocationExhaustedError:
                raise
            except Exception:
                self._poisoned = True
                logger.critical("Allocation crashed while holding the cursor lock", exc_info=True)
                raise

            self.store.last_symbol = symbol
            return symbol

    def _next_free_symbol(self) -> str:
        table = self.store.table
        for candidate in self.strategy.candidates(self.store.last_symbol):
            if candidate in table:
                logger.debug("Symbol %r already taken, skipping", candidate)
                continue
            return candidate

        raise AllocationExhaustedError(
            f"All candidates after {self.store.last_symbol!r} are taken"
        )
