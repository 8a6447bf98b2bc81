"""Invocation request model and serialization helpers."""

from .request import MinifyRequest
from .serialization import coerce_failure_policy, make_json_safe

__all__ = ["MinifyRequest", "coerce_failure_policy", "make_json_safe"]
