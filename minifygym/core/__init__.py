"""MinifyGym core primitives."""

from .options import copy_options, fold_passes, freeze_options, get_passes, merge_options
from .registry import Registry
from .types import RankedResults, ResultRecord, TrialDescriptor, TrialFailure

__all__ = [
    "Registry",
    "RankedResults",
    "ResultRecord",
    "TrialDescriptor",
    "TrialFailure",
    "copy_options",
    "fold_passes",
    "freeze_options",
    "get_passes",
    "merge_options",
]
