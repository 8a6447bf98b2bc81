"""Optimal-minify workflow: expand, execute, rank, apply the failure policy."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from minifygym.common import FailurePolicy
from minifygym.config import settings
from minifygym.core import RankedResults, ResultRecord, TrialFailure, merge_options
from minifygym.engines import EngineRegistry, default_registry
from minifygym.errors import MissingCode, NoRuns, TrialsFailed
from minifygym.schema import MinifyRequest, coerce_failure_policy
from minifygym.trials import (
    ExplicitRuns,
    ExternalRuns,
    GeneratedRuns,
    Intent,
    TrialExecutor,
    expand,
    rank_results,
)

logger = logging.getLogger("minifygym.workflow")

RequestLike = Union[MinifyRequest, Mapping[str, Any]]


def _as_request(request: RequestLike) -> MinifyRequest:
    if isinstance(request, MinifyRequest):
        return request
    return MinifyRequest.from_dict(dict(request))


class OptimalMinifyWorkflow:
    """Runs every trial a request describes and picks the best result."""

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        failure_policy: Optional[FailurePolicy] = None,
    ):
        self.registry = registry or default_registry()
        self.failure_policy = coerce_failure_policy(failure_policy)

    def validate_request(self, request: MinifyRequest) -> None:
        if not isinstance(request.code, str) or not request.code:
            raise MissingCode("code must be passed to optimal minify!")

    def build_intent(self, request: MinifyRequest) -> Intent:
        if request.runs is not None:
            if not request.runs:
                raise NoRuns("runs must be an array with at least one entry!")
            return ExplicitRuns(runs=request.runs)

        if request.runs_file:
            return ExternalRuns(path=request.runs_file)

        minifiers = request.minifiers if request.minifiers is not None else settings.default_minifiers
        if not minifiers:
            raise NoRuns("no runs: pass runs, a runs file or at least one minifier")
        measurements = (
            request.measurements if request.measurements is not None else settings.default_measurements
        )
        passes = request.passes if request.passes is not None else settings.default_passes

        shared = merge_options(
            {"comments": settings.default_comments},
            request.shared,
            {"comments": request.comments} if request.comments is not None else None,
        )
        return GeneratedRuns(
            minifiers=list(minifiers),
            measurements=list(measurements),
            passes=passes,
            shared=shared,
            overrides=request.overrides or {},
        )

    def resolve_policy(self, request: MinifyRequest) -> FailurePolicy:
        return request.failure_policy or self.failure_policy or settings.failure_policy

    def aggregate(
        self,
        records: Sequence[ResultRecord],
        failures: Sequence[TrialFailure],
        policy: FailurePolicy,
    ) -> RankedResults:
        ranked = rank_results(records, failures)
        if failures and (policy is FailurePolicy.FAIL_FAST or not ranked.records):
            raise TrialsFailed(ranked.failures, ranked.records)
        return ranked

    async def handle_request(self, request: RequestLike) -> RankedResults:
        request = _as_request(request)
        self.validate_request(request)

        descriptors = expand(self.build_intent(request), self.registry)
        if not descriptors:
            raise NoRuns("no runs: the request did not yield any trial")

        measurement_options: Dict[str, Any] = merge_options(
            settings.measurement_options(), request.measurement_options
        )
        executor = TrialExecutor(self.registry, measurement_options)
        records, failures = await executor.execute_all(request.code, descriptors)

        ranked = self.aggregate(records, failures, self.resolve_policy(request))
        winner = ranked.winner
        logger.info(
            f"Ran {len(descriptors)} trial(s), {len(ranked.records)} result(s), "
            f"{len(ranked.failures)} failure(s); best: {winner.minifier} {winner.size}b {winner.measurement}"
        )
        return ranked


async def optimal_minify(
    request: RequestLike,
    registry: Optional[EngineRegistry] = None,
    failure_policy: Optional[FailurePolicy] = None,
) -> RankedResults:
    """Run an optimal-minify request and return the ranked results."""
    workflow = OptimalMinifyWorkflow(registry=registry, failure_policy=failure_policy)
    return await workflow.handle_request(request)


def run_optimal_minify(
    request: RequestLike,
    registry: Optional[EngineRegistry] = None,
    failure_policy: Optional[FailurePolicy] = None,
) -> RankedResults:
    """Blocking wrapper around ``optimal_minify`` for synchronous callers."""
    return asyncio.run(optimal_minify(request, registry=registry, failure_policy=failure_policy))
