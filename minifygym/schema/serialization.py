"""Shared serialization helpers for schema objects."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from minifygym.common import FailurePolicy


def make_json_safe(obj: Any, depth: int = 0, max_depth: int = 10) -> Any:
    """Recursively convert objects to JSON-serializable forms."""
    if depth > max_depth:
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if hasattr(obj, "keys") and hasattr(obj, "items"):
        return {str(k): make_json_safe(v, depth + 1, max_depth) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [make_json_safe(x, depth + 1, max_depth) for x in obj]
    return str(obj)


def coerce_failure_policy(value: Any) -> Optional[FailurePolicy]:
    if value is None or isinstance(value, FailurePolicy):
        return value
    try:
        return FailurePolicy(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in FailurePolicy)
        raise ValueError(f"Unknown failure policy '{value}'. Valid policies are: {valid}") from None
