"""Trial expansion, execution and ranking."""

from .executor import TrialExecutor
from .expander import ExplicitRuns, ExternalRuns, GeneratedRuns, Intent, expand
from .ranker import rank, rank_key, rank_results
from .source import load_descriptor_source

__all__ = [
    "ExplicitRuns",
    "ExternalRuns",
    "GeneratedRuns",
    "Intent",
    "TrialExecutor",
    "expand",
    "load_descriptor_source",
    "rank",
    "rank_key",
    "rank_results",
]
