"""Trial executor: minify, measure and package result records.

Trials run as independent coroutines on one event loop. Engines are
usually synchronous and simply run to completion inside their coroutine;
an engine returning an awaitable is awaited. Every trial works on its own
deep copy of the descriptor options.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import numbers
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from minifygym.core import ResultRecord, TrialDescriptor, TrialFailure, copy_options
from minifygym.engines import EngineRegistry, Measurer, Minifier, MinifyOutput, default_registry
from minifygym.errors import (
    InvalidDescriptor,
    MeasurementError,
    MinifierError,
    UnknownMeasurement,
    UnknownMinifier,
)

logger = logging.getLogger("minifygym.executor")


class TrialExecutor:
    """Runs trial descriptors against an ``EngineRegistry``."""

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        measurement_options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ):
        self.registry = registry or default_registry()
        self._measurement_options: Dict[str, Dict[str, Any]] = {
            str(name).strip().lower(): copy_options(value)
            for name, value in (measurement_options or {}).items()
        }

    def measurement_options_for(self, name: str) -> Dict[str, Any]:
        return copy_options(self._measurement_options.get(name.strip().lower()))

    def _resolve_measurers(self, descriptor: TrialDescriptor, index: Optional[int]) -> List[Tuple[str, Measurer]]:
        if not descriptor.measurements:
            raise InvalidDescriptor(
                "at least one measurement is required",
                minifier=descriptor.minifier,
                index=index,
            )
        measurers = []
        for name in descriptor.measurements:
            measurer = self.registry.measurer(name)
            if measurer is None:
                raise UnknownMeasurement(
                    f"unknown measurement '{name}'. "
                    f"Valid measurements are: {', '.join(self.registry.measurement_names())}",
                    minifier=descriptor.minifier,
                    index=index,
                    measurement=name,
                )
            measurers.append((name, measurer))
        return measurers

    def _resolve_minifier(self, descriptor: TrialDescriptor, index: Optional[int]) -> Minifier:
        minifier = self.registry.minifier(descriptor.minifier)
        if minifier is None:
            raise UnknownMinifier(
                "is missing or using an invalid minifier key! "
                f"Valid minifiers are: {', '.join(self.registry.minifier_names())}",
                minifier=descriptor.minifier,
                index=index,
            )
        return minifier

    async def _minify(
        self, source: str, descriptor: TrialDescriptor, minifier: Minifier, index: Optional[int]
    ) -> str:
        try:
            output = minifier.transform(source, descriptor.snapshot_options())
            if inspect.isawaitable(output):
                output = await output
        except Exception as exc:
            raise MinifierError(
                f"{type(exc).__name__}: {exc}", minifier=descriptor.minifier, index=index
            ) from exc

        if isinstance(output, str):
            output = MinifyOutput.ok(output)
        if not isinstance(output, MinifyOutput) or not output.succeeded:
            message = output.error if isinstance(output, MinifyOutput) else f"unexpected output {output!r}"
            raise MinifierError(message, minifier=descriptor.minifier, index=index)
        return output.code

    async def execute(
        self, source: str, descriptor: TrialDescriptor, index: Optional[int] = None
    ) -> List[ResultRecord]:
        """Run one trial and return one record per measurement step, in order.

        Raises a ``TrialError`` subclass when the trial fails; no partial
        records are returned in that case.
        """
        if descriptor.error:
            raise InvalidDescriptor(descriptor.error, minifier=descriptor.minifier, index=index)
        minifier = self._resolve_minifier(descriptor, index)
        measurers = self._resolve_measurers(descriptor, index)

        min_start = time.perf_counter()
        code = await self._minify(source, descriptor, minifier, index)
        min_time = time.perf_counter() - min_start

        records = []
        for name, measurer in measurers:
            comp_start = time.perf_counter()
            try:
                size = measurer.measure(code, self.measurement_options_for(name))
                if inspect.isawaitable(size):
                    size = await size
            except Exception as exc:
                raise MeasurementError(
                    f"{type(exc).__name__}: {exc}",
                    minifier=descriptor.minifier,
                    index=index,
                    measurement=name,
                ) from exc
            if isinstance(size, bool) or not isinstance(size, numbers.Real):
                raise MeasurementError(
                    f"measurement returned a non-numeric size {size!r}",
                    minifier=descriptor.minifier,
                    index=index,
                    measurement=name,
                )
            comp_time = time.perf_counter() - comp_start

            records.append(
                ResultRecord(
                    code=code,
                    size=size,
                    elapsed=min_time + comp_time,
                    minifier=descriptor.minifier,
                    measurement=name,
                    options=descriptor.snapshot_options(),
                )
            )

        logger.debug(
            f"Trial {index} {descriptor.minifier} completed: "
            f"minify={min_time:.4f}s, measurements={len(records)}"
        )
        return records

    async def execute_all(
        self, source: str, descriptors: Sequence[TrialDescriptor]
    ) -> Tuple[List[ResultRecord], List[TrialFailure]]:
        """Run all descriptors concurrently; failures never affect siblings."""
        outcomes = await asyncio.gather(
            *(self.execute(source, descriptor, index=i) for i, descriptor in enumerate(descriptors)),
            return_exceptions=True,
        )

        records: List[ResultRecord] = []
        failures: List[TrialFailure] = []
        for i, outcome in enumerate(outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                failure = TrialFailure.from_error(i, outcome)
                logger.warning(f"Trial failed: {failure.describe()}")
                failures.append(failure)
            else:
                records.extend(outcome)
        return records, failures
