"""MinifyGym: search minifier configurations for the smallest output."""

__version__ = "0.1.0"

from .common import ErrorCode, FailurePolicy
from .core import RankedResults, ResultRecord, TrialDescriptor, TrialFailure
from .engines import EngineRegistry, Measurer, Minifier, MinifyOutput, default_registry
from .errors import (
    InvalidIntent,
    MinifierError,
    MinifyGymError,
    MissingCode,
    NoRuns,
    TrialError,
    TrialsFailed,
    UnknownMeasurement,
    UnknownMinifier,
)
from .schema import MinifyRequest
from .workflow import OptimalMinifyWorkflow, optimal_minify, run_optimal_minify

__all__ = [
    "__version__",
    "ErrorCode",
    "FailurePolicy",
    "RankedResults",
    "ResultRecord",
    "TrialDescriptor",
    "TrialFailure",
    "EngineRegistry",
    "Measurer",
    "Minifier",
    "MinifyOutput",
    "default_registry",
    "InvalidIntent",
    "MinifierError",
    "MinifyGymError",
    "MissingCode",
    "NoRuns",
    "TrialError",
    "TrialsFailed",
    "UnknownMeasurement",
    "UnknownMinifier",
    "MinifyRequest",
    "OptimalMinifyWorkflow",
    "optimal_minify",
    "run_optimal_minify",
]
