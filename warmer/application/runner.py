"""In-process driver that pages through a warmer until it runs dry."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any

from warmer.application.base_warmer import BaseWarmer
from warmer.application.work_set import Cursor
from warmer.core.async_utils import elapsed_ms
from warmer.core.logging_utils import get_logger
from warmer.domain.models import WorkKey

logger = get_logger(__name__)


@dataclass
class RunReport:
    warmer_id: str
    batches: int = 0
    keys: int = 0
    loaded: int = 0
    succeeded: int = 0
    last_cursor: str | None = None
    exhausted: bool = False
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class WarmRunner:
    """Calls ``next_batch`` / ``load_batch`` / ``warm_batch`` in a loop.

    The cursor fed back each time is the last key of the previous batch.
    The loop ends on an empty batch (done, or stale cursor) or after
    ``max_batches``; nothing is persisted between runs.
    """

    def __init__(self, warmer: BaseWarmer, *, max_batches: int | None = None) -> None:
        if max_batches is not None and max_batches < 1:
            msg = "max_batches must be positive when set"
            raise ValueError(msg)
        self._warmer = warmer
        self._max_batches = max_batches

    async def run(self, cursor: Cursor = None) -> RunReport:
        report = RunReport(warmer_id=self._warmer.warmer_id)
        if cursor is not None:
            report.last_cursor = cursor.token if isinstance(cursor, WorkKey) else str(cursor)
        started = time.perf_counter()

        while self._max_batches is None or report.batches < self._max_batches:
            keys = await self._warmer.next_batch(cursor)
            if not keys:
                report.exhausted = True
                break

            items = await self._warmer.load_batch(keys)
            succeeded = await self._warmer.warm_batch(items)

            report.batches += 1
            report.keys += len(keys)
            report.loaded += len(items)
            report.succeeded += succeeded
            cursor = keys[-1]
            report.last_cursor = cursor.token

            logger.info(
                "warm_batch_processed",
                extra={
                    "warmer": self._warmer.warmer_id,
                    "batch": report.batches,
                    "keys": len(keys),
                    "loaded": len(items),
                    "succeeded": succeeded,
                    "cursor": report.last_cursor,
                },
            )

        report.duration_ms = elapsed_ms(started)
        logger.info("warm_run_complete", extra=report.to_dict())
        return report
