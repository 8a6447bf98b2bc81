"""Loading run descriptors from an external file."""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, List, Union

import yaml

from minifygym.errors import InvalidIntent

logger = logging.getLogger("minifygym.source")

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml", ".py")


def _load_python_runs(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"minifygym_runs_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise InvalidIntent(f"Cannot import descriptor source {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise InvalidIntent(f"Failed to import descriptor source {path}: {type(exc).__name__}: {exc}") from exc
    for attr in ("RUNS", "runs"):
        if hasattr(module, attr):
            return getattr(module, attr)
    raise InvalidIntent(f"Descriptor source {path} must define RUNS or runs")


def load_descriptor_source(path: Union[str, Path]) -> List[Any]:
    """Read raw run records from a JSON, YAML or Python file.

    The document is a list of run records or a mapping with a ``runs`` key.
    Records are returned verbatim; validation happens per trial.
    """
    source_path = Path(path).expanduser()
    if not source_path.is_file():
        raise InvalidIntent(f"Descriptor source not found: {source_path}")

    suffix = source_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise InvalidIntent(
            f"Unsupported descriptor source format '{suffix}'. Supported: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        if suffix == ".py":
            document = _load_python_runs(source_path)
        else:
            with open(source_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    document = json.load(f)
                else:
                    document = yaml.safe_load(f)
    except InvalidIntent:
        raise
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise InvalidIntent(f"Failed to load descriptor source {source_path}: {exc}") from exc

    if isinstance(document, dict):
        document = document.get("runs")
    if not isinstance(document, (list, tuple)):
        raise InvalidIntent(f"Descriptor source {source_path} must contain a list of runs")

    logger.debug(f"Loaded {len(document)} run(s) from {source_path}")
    return list(document)
