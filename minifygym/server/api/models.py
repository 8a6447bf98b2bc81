"""API request/response models for the minifygym server."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from minifygym.common import ErrorCode, FailurePolicy


def _split_names(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class MinifyApiRequest(BaseModel):
    """Request model for an optimal-minify run."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., min_length=1, description="Source code to minify")
    runs: Optional[List[Union[Dict[str, Any], str]]] = Field(
        default=None,
        description="Explicit run descriptors; takes precedence over generation fields",
    )
    minifiers: Optional[List[str]] = Field(default=None, description="Minifiers to try")
    measurements: Optional[List[str]] = Field(
        default=None,
        alias="compressors",
        description="Measurement engines applied to each minified output",
    )
    passes: Optional[int] = Field(default=None, ge=0, le=20, description="Maximum passes per minifier")
    comments: Optional[Union[str, bool]] = Field(
        default=None,
        description="Comment retention policy shared by generated runs",
    )
    shared: Optional[Dict[str, Any]] = Field(default=None, description="Options shared by generated runs")
    overrides: Optional[Dict[str, Dict[str, Any]]] = Field(
        default=None,
        description="Per-minifier option overrides for generated runs",
    )
    measurement_options: Optional[Dict[str, Dict[str, Any]]] = Field(
        default=None,
        description="Options passed to each measurement engine, keyed by engine name",
    )
    failure_policy: Optional[FailurePolicy] = Field(
        default=None,
        description="fail_fast rejects the request when any run fails; lenient ranks the rest",
    )
    include_code: bool = Field(default=False, description="Include minified code for every result")

    @field_validator("minifiers", "measurements", mode="before")
    @classmethod
    def split_names(cls, v):
        return _split_names(v)

    @field_validator("failure_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_workflow_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"include_code"}, exclude_none=True)


class ResultItem(BaseModel):
    minifier: str
    measurement: str
    size: Union[int, float]
    elapsed: float
    options: Dict[str, Any] = Field(default_factory=dict)
    code: Optional[str] = None


class FailureItem(BaseModel):
    index: int
    minifier: str
    error_code: ErrorCode
    message: str
    measurement: Optional[str] = None


class MinifyApiResponse(BaseModel):
    """Ranked results of an optimal-minify run."""

    winner: Optional[ResultItem] = None
    results: List[ResultItem] = Field(default_factory=list)
    failures: List[FailureItem] = Field(default_factory=list)
    elapsed: float = 0.0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "winner": {
                    "minifier": "calmjs",
                    "measurement": "gzip",
                    "size": 118,
                    "elapsed": 0.012,
                    "options": {"comments": "some", "compress": {"passes": 2}},
                    "code": "var a=1;",
                },
                "results": [],
                "failures": [],
                "elapsed": 0.031,
            }
        }
    )


class EnginesResponse(BaseModel):
    minifiers: List[str]
    measurements: List[str]


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    message: str
    error_code: Optional[ErrorCode] = None
    failures: Optional[List[FailureItem]] = None
    timestamp: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "NoRuns",
                "message": "runs must be an array with at least one entry!",
                "error_code": "NO_RUNS",
                "timestamp": "2024-01-01T12:00:00Z",
            }
        }
    )
