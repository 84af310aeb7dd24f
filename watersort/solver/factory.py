"""
Strategy Factory Module - Name-based registry of solving strategies.
"""

from typing import Any, Dict, List, Type

from .base import SolverStrategy


# Registered strategy classes, keyed by SolverStrategy.name
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "bfs"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator adding a strategy to the registry.

    Raises:
        ValueError: If another class already uses the same name
    """
    existing = _STRATEGIES.get(cls.name)
    if existing is not None and existing is not cls:
        raise ValueError(f"Strategy name already registered: {cls.name}")
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str, **kwargs: Any) -> SolverStrategy:
    """
    Instantiate a registered strategy.

    Args:
        name: Strategy name (e.g., "bfs")
        **kwargs: Constructor arguments such as max_steps

    Returns:
        Strategy instance

    Raises:
        ValueError: If no strategy has that name
    """
    try:
        strategy_cls = _STRATEGIES[name]
    except KeyError:
        available = ", ".join(sorted(_STRATEGIES))
        raise ValueError(f"Unknown strategy: {name}. Available: {available}") from None
    return strategy_cls(**kwargs)


def get_strategy_names() -> List[str]:
    """Names of all registered strategies, in registration order."""
    return list(_STRATEGIES)


def get_default_strategy_name() -> str:
    """The "bfs" strategy if registered, else the first registered name."""
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES), "")
