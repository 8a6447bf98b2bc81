"""Human-readable and JSON rendering of ranked results."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict

from minifygym.core import RankedResults, ResultRecord
from minifygym.schema import make_json_safe


def format_time(seconds: float) -> str:
    return f"{round(seconds, 3):g}"


def format_result_line(record: ResultRecord, winner: bool = False) -> str:
    larrow = "->" if winner else "  "
    rarrow = "<-" if winner else ""
    options = json.dumps(make_json_safe(record.options), sort_keys=True)
    return (
        f"{larrow} {record.minifier}: {record.size}b {record.measurement} "
        f"{format_time(record.elapsed)}s {options} {rarrow}"
    ).rstrip()


def print_results(log_fn: Callable[[str], Any], results: RankedResults) -> None:
    for i, record in enumerate(results.records):
        log_fn(format_result_line(record, winner=i == 0))
    for failure in results.failures:
        log_fn(f"!! {failure.describe()}")


def results_to_dict(results: RankedResults, include_code: bool = False) -> Dict[str, Any]:
    winner = results.winner
    return {
        "winner": winner.to_dict(include_code=True) if winner else None,
        "results": [record.to_dict(include_code=include_code) for record in results.records],
        "failures": [failure.to_dict() for failure in results.failures],
    }
