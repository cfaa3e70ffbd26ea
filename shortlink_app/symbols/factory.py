"""
Factory for creating symbol generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from shortlink_app.symbols.strategies import (
    SymbolStrategy,
    SequentialSymbolStrategy,
    KeyedSymbolStrategy
)
from shortlink_app.config import settings


class SymbolStrategyType(Enum):
    """Available symbol generation strategies"""
    SEQUENTIAL = "sequential"
    KEYED = "keyed"


class SymbolStrategyFactory:
    """Factory for creating symbol generation strategies with caching"""

    _instances = {}  # Cache for strategy instances

    @classmethod
    def create_strategy(
        cls,
        strategy_type: SymbolStrategyType = None
    ) -> SymbolStrategy:
        """
        Create or return cached symbol generation strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of a SymbolStrategy

        Raises:
            ValueError: If strategy_type is unknown
            MissingSecretError: If the keyed strategy has no secret configured
        """
        # Use default from settings if not specified
        if strategy_type is None:
            strategy_type = SymbolStrategyType(settings.symbol_strategy)

        # Return cached instance if exists
        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == SymbolStrategyType.SEQUENTIAL:
            instance = SequentialSymbolStrategy(alphabet=settings.alphabet)
        elif strategy_type == SymbolStrategyType.KEYED:
            instance = KeyedSymbolStrategy(
                alphabet=settings.alphabet,
                secret=settings.symbol_secret
            )
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance

    @classmethod
    def clear_instances(cls):
        """Clear cached instances (for testing)"""
        cls._instances = {}
