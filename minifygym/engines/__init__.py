"""MinifyGym engine interfaces."""

from .base import FunctionMeasurer, FunctionMinifier, Measurer, Minifier, MinifyOutput, MultiPassMinifier
from .registry import (
    MEASUREMENT,
    MINIFIER,
    EngineRegistry,
    default_registry,
    get_measurer,
    get_minifier,
    list_measurers,
    list_minifiers,
)

__all__ = [
    "MEASUREMENT",
    "MINIFIER",
    "EngineRegistry",
    "FunctionMeasurer",
    "FunctionMinifier",
    "Measurer",
    "Minifier",
    "MinifyOutput",
    "MultiPassMinifier",
    "default_registry",
    "get_measurer",
    "get_minifier",
    "list_measurers",
    "list_minifiers",
]
