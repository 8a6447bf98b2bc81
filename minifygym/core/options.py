"""Pure helpers for option bags.

Option bags are plain nested mappings handed opaquely to engines. None of
these helpers mutate their inputs: every result is a freshly owned deep
copy, so a bag can be passed to an engine that edits it in place without
affecting any other trial.
"""

from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

PASSES_GROUP = "compress"
PASSES_KEY = "passes"


def copy_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return an independent, mutable deep copy of ``options`` (``{}`` for None).

    Read-only views made by ``freeze_options`` are turned back into plain
    dicts and lists.
    """
    if not options:
        return {}
    return {key: _thaw(value) for key, value in options.items()}


def freeze_options(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return a read-only deep copy of ``options``: nested mappings become
    ``MappingProxyType`` views and lists become tuples.
    """
    return MappingProxyType({key: _freeze(value) for key, value in (options or {}).items()})


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return freeze_options(value)
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return copy.deepcopy(value)


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return copy.deepcopy(value)


def merge_options(*layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Deep-merge option layers left to right; later layers win on conflict.

    Nested mappings are merged key by key, any other value replaces the
    earlier one wholesale.
    """
    merged: Dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        _merge_into(merged, layer)
    return merged


def _merge_into(target: Dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        elif isinstance(value, Mapping):
            target[key] = merge_options(value)
        else:
            target[key] = _thaw(value)


def fold_passes(options: Optional[Mapping[str, Any]], passes: int) -> Dict[str, Any]:
    """Return a copy of ``options`` with ``compress.passes`` set to ``passes``."""
    return merge_options(options, {PASSES_GROUP: {PASSES_KEY: passes}})


def get_passes(options: Optional[Mapping[str, Any]], default: int = 1) -> int:
    """Read ``compress.passes`` from an option bag, tolerating a boolean ``compress``."""
    if not options:
        return default
    group = options.get(PASSES_GROUP)
    if not isinstance(group, Mapping):
        return default
    value = group.get(PASSES_KEY, default)
    try:
        passes = int(value)
    except (TypeError, ValueError):
        return default
    return max(passes, 1)
