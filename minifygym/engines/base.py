"""Engine abstraction (minify / measure)."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from minifygym.core.options import get_passes

_DROP_COMMENTS = {"", "none", "false", "0", "off"}


@dataclass(frozen=True)
class MinifyOutput:
    """Either ``code`` or ``error`` is set, never both."""

    code: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, code: str) -> "MinifyOutput":
        return cls(code=code)

    @classmethod
    def failed(cls, error: str) -> "MinifyOutput":
        return cls(error=error or "unknown error")

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.code is not None


class Minifier(ABC):
    name: str = "unknown"

    @abstractmethod
    def transform(self, source: str, options: Dict[str, Any]) -> MinifyOutput:
        """Minify ``source``; report failures through ``MinifyOutput.error``."""


class Measurer(ABC):
    name: str = "unknown"

    @abstractmethod
    def measure(self, code: str, options: Dict[str, Any]) -> Union[int, float]:
        """Return the size of ``code``, usually in bytes."""


class MultiPassMinifier(Minifier):
    """Minifier that re-applies a single-shot engine ``compress.passes`` times.

    Stops early once a pass no longer changes the output. Any exception from
    the wrapped library becomes an error value.
    """

    @abstractmethod
    def minify_once(self, source: str, options: Dict[str, Any]) -> str:
        """Run one pass of the underlying engine."""

    def transform(self, source: str, options: Dict[str, Any]) -> MinifyOutput:
        passes = get_passes(options)
        code = source
        try:
            for _ in range(passes):
                minified = self.minify_once(code, options)
                if minified == code:
                    break
                code = minified
        except Exception as exc:
            return MinifyOutput.failed(f"{type(exc).__name__}: {exc}")
        return MinifyOutput.ok(code)


class FunctionMinifier(Minifier):
    """Adapts a plain ``(source, options) -> str | MinifyOutput`` callable."""

    def __init__(self, name: str, func: Callable[[str, Dict[str, Any]], Union[str, MinifyOutput]]):
        self.name = name
        self._func = func

    def transform(self, source: str, options: Dict[str, Any]) -> MinifyOutput:
        result = self._func(source, options)
        if inspect.isawaitable(result):
            return self._finish(result)
        return self._wrap(result)

    async def _finish(self, pending) -> MinifyOutput:
        return self._wrap(await pending)

    @staticmethod
    def _wrap(result: Union[str, MinifyOutput]) -> MinifyOutput:
        if isinstance(result, MinifyOutput):
            return result
        return MinifyOutput.ok(result)


class FunctionMeasurer(Measurer):
    """Adapts a plain ``(code, options) -> int`` callable."""

    def __init__(self, name: str, func: Callable[[str, Dict[str, Any]], int]):
        self.name = name
        self._func = func

    def measure(self, code: str, options: Dict[str, Any]) -> int:
        return self._func(code, options)


def keep_license_comments(options: Mapping[str, Any]) -> bool:
    """Interpret the shared ``comments`` option; absent means ``"some"``."""
    value = options.get("comments", "some")
    if value is None or value is False:
        return False
    if isinstance(value, str) and value.strip().lower() in _DROP_COMMENTS:
        return False
    return True
