"""Invocation request model for the optimal-minify workflow."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from minifygym.common import FailurePolicy

from .serialization import coerce_failure_policy, make_json_safe


@dataclass
class MinifyRequest:
    """Everything one optimal-minify invocation needs.

    Exactly one trial source is used, in this order: ``runs`` (explicit
    descriptors), ``runs_file`` (external descriptor source), then the
    generation intent ``minifiers`` x ``measurements`` x ``passes``. Unset
    generation fields fall back to settings in the workflow.
    """

    code: Optional[str] = None
    runs: Optional[List[Any]] = None
    runs_file: Optional[str] = None
    minifiers: Optional[List[str]] = None
    measurements: Optional[List[str]] = None
    passes: Optional[int] = None
    comments: Optional[Any] = None
    shared: Dict[str, Any] = field(default_factory=dict)
    overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    measurement_options: Optional[Dict[str, Dict[str, Any]]] = None
    failure_policy: Optional[FailurePolicy] = None

    def __post_init__(self) -> None:
        self.failure_policy = coerce_failure_policy(self.failure_policy)
        if isinstance(self.minifiers, str):
            self.minifiers = [m.strip() for m in self.minifiers.split(",") if m.strip()]
        if isinstance(self.measurements, str):
            self.measurements = [m.strip() for m in self.measurements.split(",") if m.strip()]

    def to_dict(self) -> Dict[str, Any]:
        return make_json_safe(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MinifyRequest":
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        if "measurements" not in filtered_data and "compressors" in data:
            filtered_data["measurements"] = data["compressors"]
        return cls(**{k: v for k, v in filtered_data.items() if v is not None})
