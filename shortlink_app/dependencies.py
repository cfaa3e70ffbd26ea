"""
FastAPI dependencies for dependency injection.

This module provides the shared store, symbol strategy and allocator
that are injected into services and routes.

Pattern: Dependency Injection
- One store instance per process, created at startup
- Easy to test (override get_store with a temporary store)
- Strategy chosen by config, swappable without touching routes
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from shortlink_app.config import settings
from shortlink_app.services.allocator import SymbolAllocator
from shortlink_app.services.link_service import LinkService, RedirectService
from shortlink_app.storage.factory import StoreFactory
from shortlink_app.storage.store import RedirectStore
from shortlink_app.symbols.factory import SymbolStrategyFactory
from shortlink_app.symbols.strategies import SymbolStrategy


def get_store() -> RedirectStore:
    """
    Get the redirect store (singleton).

    Returns:
        The RedirectStore loaded from settings.data
    """
    return StoreFactory.create()


@lru_cache()
def get_symbol_strategy() -> SymbolStrategy:
    """
    Get symbol strategy instance (singleton).

    Factory gets config from settings internally.
    """
    return SymbolStrategyFactory.create_strategy()


@lru_cache()
def allocator_for(store: RedirectStore, strategy: SymbolStrategy) -> SymbolAllocator:
    """One allocator per (store, strategy) pair, so poisoning sticks"""
    return SymbolAllocator(store, strategy)


def get_allocator(
    store: RedirectStore = Depends(get_store),
    strategy: SymbolStrategy = Depends(get_symbol_strategy)
) -> SymbolAllocator:
    return allocator_for(store, strategy)


def get_redirect_service(store: RedirectStore = Depends(get_store)) -> RedirectService:
    """
    Get RedirectService for lookups.

    Built from the store alone, so reads work even when the symbol
    strategy cannot be created.
    """
    return RedirectService(store=store)


def get_link_service(
    store: RedirectStore = Depends(get_store),
    allocator: SymbolAllocator = Depends(get_allocator)
) -> LinkService:
    """
    Get LinkService with all dependencies injected.

    Controllers depend on the service only; the service depends on
    the store and the allocator.
    """
    return LinkService(store=store, allocator=allocator)


async def read_destination(request: Request) -> str:
    """
    Read the request body as a UTF-8 destination.

    Raises:
        HTTPException 413: Body larger than settings.max_body_size
        HTTPException 400: Body is not valid UTF-8
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > settings.max_body_size:
        raise HTTPException(
            status_code=413,
            detail="Payload too large"
        )

    body = await request.body()
    if len(body) > settings.max_body_size:
        raise HTTPException(
            status_code=413,
            detail="Payload too large"
        )

    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Input does not appear to be utf8"
        )
