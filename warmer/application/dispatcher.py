"""Wave-barrier dispatch of independent warm operations."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeAlias

from warmer.core.async_utils import elapsed_ms, raise_if_cancelled
from warmer.core.logging_utils import decode_exception, get_logger
from warmer.domain.models import WarmOutcome, WorkKey

logger = get_logger(__name__)

WarmOperation: TypeAlias = tuple[WorkKey, Callable[[], Awaitable[WarmOutcome]]]


class ConcurrencyDispatcher:
    """Run warm operations in waves of at most ``max_concurrency`` tasks.

    A wave is launched, then awaited in full before the next one starts, so
    no more than ``max_concurrency`` operations are ever in flight. Each
    operation fails on its own; an exception becomes a failed outcome for
    that key only.
    """

    def __init__(self, max_concurrency: int, *, post_batch_delay: float = 0.0) -> None:
        # One at a time when misconfigured.
        self.max_concurrency = max(1, int(max_concurrency))
        self.post_batch_delay = max(0.0, float(post_batch_delay))
        self.in_flight = 0
        self.peak_in_flight = 0
        self.waves_run = 0

    async def run(self, operations: Iterable[WarmOperation]) -> list[WarmOutcome]:
        """Run every operation and return one outcome per operation, in input order."""
        outcomes: list[WarmOutcome] = []
        wave: list[WarmOperation] = []

        for operation in operations:
            wave.append(operation)
            if len(wave) >= self.max_concurrency:
                outcomes.extend(await self._run_wave(wave))
                wave = []

        if wave:
            outcomes.extend(await self._run_wave(wave))

        if outcomes and self.post_batch_delay > 0:
            logger.debug("dispatcher_post_batch_sleep", extra={"sleep_sec": self.post_batch_delay})
            await asyncio.sleep(self.post_batch_delay)

        return outcomes

    async def _run_wave(self, wave: list[WarmOperation]) -> list[WarmOutcome]:
        started = time.perf_counter()
        tasks = [asyncio.create_task(self._tracked(operation)) for _, operation in wave]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        self.waves_run += 1

        outcomes: list[WarmOutcome] = []
        for (key, _), result in zip(wave, results, strict=True):
            if isinstance(result, BaseException):
                raise_if_cancelled(result)
                error = decode_exception(result)
                logger.error(
                    "warm_operation_crashed",
                    extra={"item_id": key.item_id, "key": key.token, "error": error},
                )
                outcomes.append(WarmOutcome.failed(key, error=error))
            else:
                outcomes.append(result)

        logger.debug(
            "dispatcher_wave_complete",
            extra={
                "wave": self.waves_run,
                "size": len(wave),
                "succeeded": sum(1 for outcome in outcomes if outcome.success),
                "latency_ms": elapsed_ms(started),
                "peak_in_flight": self.peak_in_flight,
            },
        )
        return outcomes

    async def _tracked(self, operation: Callable[[], Awaitable[WarmOutcome]]) -> WarmOutcome:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            return await operation()
        finally:
            self.in_flight -= 1
