"""
Symbol generation module.
Implements Strategy Pattern for interchangeable symbol generators.
"""

from .strategies import (
    SymbolStrategy,
    SequentialSymbolStrategy,
    KeyedSymbolStrategy,
    increment_symbol,
)
from .factory import SymbolStrategyFactory, SymbolStrategyType

__all__ = [
    "SymbolStrategy",
    "SequentialSymbolStrategy",
    "KeyedSymbolStrategy",
    "increment_symbol",
    "SymbolStrategyFactory",
    "SymbolStrategyType",
]
