"""Exception taxonomy for MinifyGym.

Request-level errors (``MissingCode``, ``NoRuns``, ``InvalidIntent``) abort
the whole operation before any trial starts. ``TrialError`` subclasses are
raised inside a single trial and never abort its siblings; the workflow
collects them and decides, per ``FailurePolicy``, whether to surface them
as one ``TrialsFailed``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from minifygym.common import ErrorCode

if TYPE_CHECKING:
    from minifygym.core.types import ResultRecord, TrialFailure


class MinifyGymError(Exception):
    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingCode(MinifyGymError):
    error_code = ErrorCode.MISSING_CODE


class NoRuns(MinifyGymError):
    error_code = ErrorCode.NO_RUNS


class InvalidIntent(MinifyGymError):
    error_code = ErrorCode.INVALID_INTENT


class TrialError(MinifyGymError):
    """Failure of one trial. ``index`` is the trial's position in the batch."""

    def __init__(self, message: str, minifier: str = "", index: Optional[int] = None):
        super().__init__(message)
        self.minifier = minifier
        self.index = index

    def __str__(self) -> str:
        prefix = f"Run #{self.index} " if self.index is not None else ""
        return f"{prefix}{self.minifier or '<none>'}: {self.message}"


class UnknownMinifier(TrialError):
    error_code = ErrorCode.UNKNOWN_MINIFIER


class UnknownMeasurement(TrialError):
    error_code = ErrorCode.UNKNOWN_MEASUREMENT

    def __init__(self, message: str, minifier: str = "", index: Optional[int] = None, measurement: str = ""):
        super().__init__(message, minifier=minifier, index=index)
        self.measurement = measurement


class InvalidDescriptor(TrialError):
    error_code = ErrorCode.INVALID_DESCRIPTOR


class MinifierError(TrialError):
    """The engine itself reported a failure; ``message`` is passed through verbatim."""

    error_code = ErrorCode.MINIFIER_ERROR


class MeasurementError(TrialError):
    error_code = ErrorCode.MEASUREMENT_ERROR

    def __init__(self, message: str, minifier: str = "", index: Optional[int] = None, measurement: str = ""):
        super().__init__(message, minifier=minifier, index=index)
        self.measurement = measurement


class TrialsFailed(MinifyGymError):
    """Aggregate failure naming every failing trial of a batch."""

    error_code = ErrorCode.TRIALS_FAILED

    def __init__(
        self,
        failures: Sequence["TrialFailure"],
        records: Sequence["ResultRecord"] = (),
    ):
        self.failures = tuple(failures)
        self.records = tuple(records)
        lines = [f"{len(self.failures)} trial(s) failed:"]
        lines.extend(f"  {failure.describe()}" for failure in self.failures)
        super().__init__("\n".join(lines))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "failures": [failure.to_dict() for failure in self.failures],
        }
