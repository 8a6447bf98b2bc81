"""Ranking of result records: smaller size wins, then faster time."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from minifygym.core import RankedResults, ResultRecord, TrialFailure


def rank_key(record: ResultRecord) -> Tuple[float, float]:
    return (record.size, record.elapsed)


def rank(records: Iterable[ResultRecord]) -> List[ResultRecord]:
    """Return ``records`` in rank order without mutating them.

    ``sorted`` is stable, so records with equal size and time keep their
    input order, and ranking a ranked list is a no-op.
    """
    return sorted(records, key=rank_key)


def rank_results(records: Iterable[ResultRecord], failures: Iterable[TrialFailure] = ()) -> RankedResults:
    return RankedResults(records=tuple(rank(records)), failures=tuple(failures))
