"""
Concurrent symbol -> destination map.

Entries are spread over shards, each guarded by its own lock, so a lookup
only waits on a write that lands in the same shard.
"""

import threading
from typing import Dict, List, Optional, Tuple


class RedirectTable:
    """
    Sharded redirect table.

    Supports lookups, existence checks and inserts (overwriting).
    Entries are never removed.
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None, shard_count: int = 16):
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(shard_count)]
        self._shards: List[Dict[str, str]] = [{} for _ in range(shard_count)]
        for symbol, destination in (entries or {}).items():
            self.insert(symbol, destination)

    def _shard(self, symbol: str) -> Tuple[threading.Lock, Dict[str, str]]:
        index = hash(symbol) % len(self._shards)
        return self._locks[index], self._shards[index]

    def get(self, symbol: str) -> Optional[str]:
        """Return the destination for symbol, or None"""
        lock, shard = self._shard(symbol)
        with lock:
            return shard.get(symbol)

    def contains(self, symbol: str) -> bool:
        lock, shard = self._shard(symbol)
        with lock:
            return symbol in shard

    def insert(self, symbol: str, destination: str) -> Optional[str]:
        """
        Store destination under symbol.

        Returns:
            The destination previously stored under symbol, if any
        """
        lock, shard = self._shard(symbol)
        with lock:
            previous = shard.get(symbol)
            shard[symbol] = destination
            return previous

    def snapshot(self) -> Dict[str, str]:
        """Copy of all entries, taken shard by shard"""
        entries: Dict[str, str] = {}
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                entries.update(shard)
        return entries

    def __contains__(self, symbol: str) -> bool:
        return self.contains(symbol)

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total
