"""
Factory for creating alias generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum

from alias_service.config import settings
from alias_service.services.alias_strategies import (
    AliasStrategy,
    RandomAliasStrategy,
    SecureAliasStrategy,
)


class AliasStrategyType(Enum):
    """Available alias generation strategies"""
    RANDOM = "random"
    SECURE = "secure"


class AliasStrategyFactory:
    """Factory for creating alias generation strategies with caching"""

    _instances = {}  # Cache for strategy instances

    @classmethod
    def create_strategy(
        cls,
        strategy_type: AliasStrategyType = None
    ) -> AliasStrategy:
        """
        Create or return cached alias generation strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of an AliasStrategy

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = AliasStrategyType(settings.alias_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == AliasStrategyType.RANDOM:
            instance = RandomAliasStrategy(
                length=settings.alias_length,
                alphabet=settings.alias_alphabet
            )
        elif strategy_type == AliasStrategyType.SECURE:
            instance = SecureAliasStrategy(
                length=settings.alias_length,
                alphabet=settings.alias_alphabet
            )
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance

    @classmethod
    def clear_instances(cls):
        """Clear cached instances (for testing)"""
        cls._instances.clear()
