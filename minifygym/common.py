"""Common types and enums shared across modules."""

from enum import Enum


class FailurePolicy(str, Enum):
    """How a batch with failing trials resolves."""

    FAIL_FAST = "fail_fast"
    LENIENT = "lenient"


class ErrorCode(str, Enum):
    """Error code enumeration for different error types."""

    INVALID_INTENT = "INVALID_INTENT"
    UNKNOWN_MINIFIER = "UNKNOWN_MINIFIER"
    UNKNOWN_MEASUREMENT = "UNKNOWN_MEASUREMENT"
    INVALID_DESCRIPTOR = "INVALID_DESCRIPTOR"
    MINIFIER_ERROR = "MINIFIER_ERROR"
    MEASUREMENT_ERROR = "MEASUREMENT_ERROR"
    NO_RUNS = "NO_RUNS"
    MISSING_CODE = "MISSING_CODE"
    TRIALS_FAILED = "TRIALS_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
