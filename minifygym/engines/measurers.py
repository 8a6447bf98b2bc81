"""Size measurement (compressor) engines."""

from __future__ import annotations

import gzip
from typing import Any, Dict

import brotli

from .base import Measurer

DEFAULT_GZIP_LEVEL = 9
DEFAULT_BROTLI_QUALITY = 11


def _encode(code: str) -> bytes:
    return code.encode("utf-8")


class RawSizeMeasurer(Measurer):
    name = "none"

    def measure(self, code: str, options: Dict[str, Any]) -> int:
        return len(_encode(code))


class GzipSizeMeasurer(Measurer):
    name = "gzip"

    def measure(self, code: str, options: Dict[str, Any]) -> int:
        level = int(options.get("level", DEFAULT_GZIP_LEVEL))
        return len(gzip.compress(_encode(code), compresslevel=level, mtime=0))


class BrotliSizeMeasurer(Measurer):
    name = "brotli"

    def measure(self, code: str, options: Dict[str, Any]) -> int:
        quality = int(options.get("quality", DEFAULT_BROTLI_QUALITY))
        return len(brotli.compress(_encode(code), quality=quality))
