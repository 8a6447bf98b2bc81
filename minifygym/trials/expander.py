"""Trial expansion: turn an intent into independent trial descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from minifygym.core import TrialDescriptor, merge_options
from minifygym.engines import EngineRegistry, default_registry
from minifygym.errors import InvalidIntent

from .source import load_descriptor_source

logger = logging.getLogger("minifygym.expander")


@dataclass(frozen=True)
class ExplicitRuns:
    """Caller-supplied run records (mappings or ``TrialDescriptor``)."""

    runs: Sequence[Any]


@dataclass(frozen=True)
class ExternalRuns:
    """Run records loaded from a descriptor source file."""

    path: Union[str, Path]


@dataclass(frozen=True)
class GeneratedRuns:
    """Every minifier crossed with pass counts ``1..passes``."""

    minifiers: Sequence[str]
    measurements: Sequence[str]
    passes: int
    shared: Mapping[str, Any] = field(default_factory=dict)
    overrides: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)


Intent = Union[ExplicitRuns, ExternalRuns, GeneratedRuns]


def _coerce_descriptor(run: Any) -> TrialDescriptor:
    if isinstance(run, TrialDescriptor):
        return run
    return TrialDescriptor.from_dict(run)


def _unique_names(names: Sequence[Any], label: str) -> Tuple[str, ...]:
    if isinstance(names, str) or not isinstance(names, Sequence):
        raise InvalidIntent(f"{label} must be a list of names")
    cleaned = []
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise InvalidIntent(f"{label} contains an invalid name: {name!r}")
        cleaned.append(name.strip().lower())
    return tuple(dict.fromkeys(cleaned))


def _check_known(names: Sequence[str], known: Sequence[str], label: str) -> None:
    unknown = [name for name in names if name not in known]
    if unknown:
        raise InvalidIntent(
            f"Unknown {label}: {', '.join(unknown)}. Valid {label} are: {', '.join(known)}"
        )


def _expand_generated(intent: GeneratedRuns, registry: EngineRegistry) -> List[TrialDescriptor]:
    minifiers = _unique_names(intent.minifiers, "minifiers")
    measurements = _unique_names(intent.measurements, "measurements")
    if not minifiers:
        raise InvalidIntent("At least one minifier is required to generate runs")
    if not measurements:
        raise InvalidIntent("At least one measurement is required to generate runs")
    _check_known(minifiers, registry.minifier_names(), "minifiers")
    _check_known(measurements, registry.measurement_names(), "measurements")

    passes = intent.passes
    if isinstance(passes, bool) or not isinstance(passes, int) or passes < 0:
        raise InvalidIntent(f"passes must be a non-negative integer, got {passes!r}")

    overrides: Dict[str, Mapping[str, Any]] = {
        str(name).strip().lower(): value for name, value in (intent.overrides or {}).items()
    }
    for name in overrides:
        if name not in minifiers:
            logger.debug(f"Ignoring overrides for minifier '{name}' not selected for this run")

    descriptors = []
    for minifier in minifiers:
        base = merge_options(intent.shared, overrides.get(minifier))
        for pass_number in range(1, passes + 1):
            descriptors.append(
                TrialDescriptor(
                    minifier=minifier,
                    measurements=measurements,
                    options=base,
                    passes=pass_number,
                )
            )
    return descriptors


def expand(intent: Intent, registry: Optional[EngineRegistry] = None) -> List[TrialDescriptor]:
    """Expand ``intent`` into an ordered list of independent descriptors.

    Generated intents are validated as a whole and raise ``InvalidIntent``.
    Explicit and external runs are passed through; a bad record fails only
    its own trial when executed.
    """
    registry = registry or default_registry()

    if isinstance(intent, GeneratedRuns):
        descriptors = _expand_generated(intent, registry)
        shape = "generated"
    elif isinstance(intent, ExplicitRuns):
        if isinstance(intent.runs, (str, bytes)) or not isinstance(intent.runs, Sequence):
            raise InvalidIntent("runs must be a list of run records")
        descriptors = [_coerce_descriptor(run) for run in intent.runs]
        shape = "explicit"
    elif isinstance(intent, ExternalRuns):
        descriptors = [_coerce_descriptor(run) for run in load_descriptor_source(intent.path)]
        shape = "external"
    else:
        raise InvalidIntent(f"Unsupported intent type: {type(intent).__name__}")

    logger.info(f"Expanded {shape} intent into {len(descriptors)} trial(s)")
    return descriptors
