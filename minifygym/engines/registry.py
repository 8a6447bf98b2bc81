"""Engine registry and lookup helpers.

Two tables exist, one per engine kind. The process-wide default registry
is built on first use and frozen, so concurrent trials can read it without
synchronisation. Tests and embedders build their own ``EngineRegistry``.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from minifygym.core import Registry

from .base import Measurer, Minifier

MINIFIER = "minifier"
MEASUREMENT = "measurement"

Engine = Union[Minifier, Measurer]


class EngineRegistry:
    def __init__(self) -> None:
        self._tables: Dict[str, Registry] = {MINIFIER: Registry(), MEASUREMENT: Registry()}

    def _table(self, kind: str) -> Registry:
        try:
            return self._tables[kind]
        except KeyError:
            raise ValueError(f"Unknown engine kind '{kind}', expected '{MINIFIER}' or '{MEASUREMENT}'") from None

    def register_minifier(self, minifier: Minifier, name: Optional[str] = None) -> None:
        self._table(MINIFIER).register((name or minifier.name).strip().lower(), minifier)

    def register_measurer(self, measurer: Measurer, name: Optional[str] = None) -> None:
        self._table(MEASUREMENT).register((name or measurer.name).strip().lower(), measurer)

    def resolve(self, kind: str, name: str) -> Optional[Engine]:
        """Return the engine registered under ``name`` or None when absent."""
        table = self._table(kind)
        key = (name or "").strip().lower()
        if key not in table:
            return None
        return table.get(key)

    def minifier(self, name: str) -> Optional[Minifier]:
        return self.resolve(MINIFIER, name)

    def measurer(self, name: str) -> Optional[Measurer]:
        return self.resolve(MEASUREMENT, name)

    def names(self, kind: str) -> Tuple[str, ...]:
        return tuple(self._table(kind).list())

    def minifier_names(self) -> Tuple[str, ...]:
        return self.names(MINIFIER)

    def measurement_names(self) -> Tuple[str, ...]:
        return self.names(MEASUREMENT)

    def freeze(self) -> "EngineRegistry":
        for table in self._tables.values():
            table.freeze()
        return self

    @property
    def frozen(self) -> bool:
        return all(table.frozen for table in self._tables.values())


_DEFAULT_REGISTRY: Optional[EngineRegistry] = None


def _build_default_registry() -> EngineRegistry:
    from .measurers import BrotliSizeMeasurer, GzipSizeMeasurer, RawSizeMeasurer
    from .minifiers import CalmJSMinifier, RJSMinMinifier, StripMinifier

    registry = EngineRegistry()
    for minifier in (RJSMinMinifier(), CalmJSMinifier(), StripMinifier()):
        registry.register_minifier(minifier)
    for measurer in (GzipSizeMeasurer(), BrotliSizeMeasurer(), RawSizeMeasurer()):
        registry.register_measurer(measurer)
    return registry.freeze()


def default_registry() -> EngineRegistry:
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = _build_default_registry()
    return _DEFAULT_REGISTRY


def get_minifier(name: str) -> Minifier:
    minifier = default_registry().minifier(name)
    if minifier is None:
        raise KeyError(f"Registry missing '{name}'")
    return minifier


def get_measurer(name: str) -> Measurer:
    measurer = default_registry().measurer(name)
    if measurer is None:
        raise KeyError(f"Registry missing '{name}'")
    return measurer


def list_minifiers() -> Tuple[str, ...]:
    return default_registry().minifier_names()


def list_measurers() -> Tuple[str, ...]:
    return default_registry().measurement_names()
