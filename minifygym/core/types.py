"""Core data models for MinifyGym."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from minifygym.common import ErrorCode

from .options import copy_options, fold_passes, freeze_options


@dataclass(frozen=True)
class TrialDescriptor:
    """One fully specified trial: a minifier, its measurement steps and options.

    The options bag is deep-copied on construction and exposed read-only at
    every nesting level; consumers take their own mutable copy through
    ``snapshot_options``. ``passes`` is folded into ``compress.passes`` when
    given. ``error`` marks a descriptor built from a malformed run record,
    which fails its own trial.
    """

    minifier: str
    measurements: Tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    passes: Optional[int] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "measurements", tuple(self.measurements))
        options = copy_options(self.options)
        if self.passes is not None:
            options = fold_passes(options, self.passes)
        object.__setattr__(self, "options", freeze_options(options))

    def snapshot_options(self) -> Dict[str, Any]:
        return copy_options(self.options)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minifier": self.minifier,
            "measurements": list(self.measurements),
            "options": self.snapshot_options(),
            "passes": self.passes,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "TrialDescriptor":
        if not isinstance(data, Mapping):
            return cls(minifier="", error=f"run must be a mapping, got {type(data).__name__}")

        minifier = data.get("minifier")
        minifier = minifier.strip() if isinstance(minifier, str) else ""

        measurements = data.get("measurements", data.get("compressors"))
        if isinstance(measurements, str):
            measurements = [measurements]
        if measurements is None:
            measurements = []
        if not isinstance(measurements, (list, tuple)) or not all(isinstance(m, str) for m in measurements):
            return cls(minifier=minifier, error="measurements must be a list of names")

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            return cls(minifier=minifier, measurements=measurements, error="options must be a mapping")

        passes = data.get("passes")
        if passes is not None and (isinstance(passes, bool) or not isinstance(passes, int) or passes < 1):
            return cls(
                minifier=minifier,
                measurements=measurements,
                options=options,
                error=f"passes must be a positive integer, got {passes!r}",
            )

        return cls(minifier=minifier, measurements=measurements, options=options, passes=passes)


@dataclass(frozen=True)
class ResultRecord:
    """Outcome of one measurement step of one successful trial.

    Records are self-describing: they carry the minifier and options used
    instead of a reference back to the descriptor, as a read-only view.
    ``size`` is whatever number the measurement returned. ``elapsed`` is
    minify time plus measurement time, in seconds.
    """

    code: str
    size: Union[int, float]
    elapsed: float
    minifier: str
    measurement: str
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", freeze_options(self.options))

    def to_dict(self, include_code: bool = True) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "minifier": self.minifier,
            "measurement": self.measurement,
            "size": self.size,
            "elapsed": self.elapsed,
            "options": copy_options(self.options),
        }
        if include_code:
            result["code"] = self.code
        return result


@dataclass(frozen=True)
class TrialFailure:
    index: int
    minifier: str
    error_code: ErrorCode
    message: str
    measurement: Optional[str] = None

    @classmethod
    def from_error(cls, index: int, error: Exception) -> "TrialFailure":
        from minifygym.errors import TrialError

        if isinstance(error, TrialError):
            return cls(
                index=index,
                minifier=error.minifier,
                error_code=error.error_code,
                message=error.message,
                measurement=getattr(error, "measurement", None) or None,
            )
        return cls(
            index=index,
            minifier="",
            error_code=ErrorCode.UNKNOWN_ERROR,
            message=f"{type(error).__name__}: {error}",
        )

    def describe(self) -> str:
        return f"Run #{self.index} {self.minifier or '<none>'} [{self.error_code.value}]: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "minifier": self.minifier,
            "error_code": self.error_code.value,
            "message": self.message,
            "measurement": self.measurement,
        }


@dataclass(frozen=True)
class RankedResults:
    """Records in rank order plus the failures collected along the way."""

    records: Tuple[ResultRecord, ...] = ()
    failures: Tuple[TrialFailure, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "failures", tuple(self.failures))

    @property
    def winner(self) -> Optional[ResultRecord]:
        return self.records[0] if self.records else None

    @property
    def runners_up(self) -> Sequence[ResultRecord]:
        return self.records[1:]

    def __iter__(self) -> Iterator[ResultRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
