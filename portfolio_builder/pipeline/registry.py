"""StrategyRegistry: loads named strategy sets declared in settings.yaml."""

from __future__ import annotations

import importlib

from portfolio_builder.analysis.base import WeightStrategy
from portfolio_builder.config import SETTINGS
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("registry")

_registry_instance = None


def get_registry() -> StrategyRegistry:
    """Get or create the singleton registry."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = StrategyRegistry(SETTINGS.get("strategies", {}))
    return _registry_instance


class StrategyRegistry:
    """Central registry of strategy sets (ordered lists of strategy classes)."""

    def __init__(self, config: dict | None = None):
        config = config or {}
        self._sets: dict[str, list[dict]] = dict(config.get("sets", {}))
        self.default_set: str = config.get("default_set", "compat")

    def names(self) -> list[str]:
        return list(self._sets.keys())

    def register(self, set_name: str, entries: list[dict]) -> None:
        self._sets[set_name] = list(entries)
        logger.info("Registered strategy set: %s (%d strategies)", set_name, len(entries))

    @staticmethod
    def _instantiate(entry: dict, risk_free_rate: float) -> WeightStrategy:
        module_path = entry["module"]
        class_name = entry["class"]
        try:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, class_name)
        except (ImportError, AttributeError) as e:
            logger.error("Failed to load strategy %s.%s: %s", module_path, class_name, e)
            raise
        if entry.get("risk_free_rate"):
            return cls(risk_free_rate=risk_free_rate)
        return cls()

    def get_strategies(
        self, set_name: str | None = None, risk_free_rate: float = 0.0
    ) -> list[WeightStrategy]:
        """Instantiate the strategies of *set_name* in declaration order."""
        name = set_name or self.default_set
        if name not in self._sets:
            raise KeyError(f"Unknown strategy set: {name} (available: {', '.join(self.names())})")
        return [self._instantiate(e, risk_free_rate) for e in self._sets[name]]
