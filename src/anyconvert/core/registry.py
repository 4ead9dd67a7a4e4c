"""Strategy registry for plugin management."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from anyconvert.models.config import ConversionConfig
    from anyconvert.providers import ProviderSet
    from anyconvert.strategies.base import BaseStrategy


def _summary(strategy: type["BaseStrategy"]) -> str:
    lines = (strategy.__doc__ or "").strip().splitlines()
    return lines[0] if lines else ""


class StrategyRegistry:
    """Registry for conversion strategies."""

    _strategies: dict[str, type["BaseStrategy"]] = {}

    @classmethod
    def register(cls, strategy_class: type["BaseStrategy"]) -> type["BaseStrategy"]:
        """Register a strategy class under its ``name``.

        Can be used as a decorator:
            @StrategyRegistry.register
            class MyStrategy(BaseStrategy):
                ...
        """
        cls._strategies[strategy_class.name] = strategy_class
        return strategy_class

    @classmethod
    def get_strategy(
        cls,
        name: str,
        providers: "ProviderSet | None" = None,
        config: "ConversionConfig | None" = None,
    ) -> "BaseStrategy | None":
        """Instantiate the strategy registered as ``name``.

        Returns None when nothing is registered under that name or the
        strategy is disabled in ``config``.
        """
        from anyconvert.models.config import ConversionConfig

        config = config or ConversionConfig()
        name = getattr(name, "value", name)

        if name in config.disabled_strategies:
            return None

        strategy_class = cls._strategies.get(name)
        if not strategy_class:
            return None

        return strategy_class(providers=providers, config=config)

    @classmethod
    def list_strategies(cls) -> list[dict]:
        """List all registered strategies."""
        return [
            {
                "name": name,
                "description": _summary(strategy),
                "outputs": strategy.supported_outputs,
            }
            for name, strategy in cls._strategies.items()
        ]
