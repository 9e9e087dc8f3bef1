"""Run-scoped work set snapshot and cursor pagination."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum

from warmer.core.logging_utils import get_logger
from warmer.domain.exceptions import StaleCursorError
from warmer.domain.models import WorkKey

logger = get_logger(__name__)

Cursor = WorkKey | str | None


class SnapshotState(str, Enum):
    NOT_COMPUTED = "not_computed"
    COMPUTED = "computed"


class WorkSet:
    """Ordered work keys for one run, built on first access and then frozen.

    The snapshot is never rebuilt, so cursors handed out earlier in the run
    keep pointing at the same positions even if the catalog changes.
    """

    def __init__(self, builder: Callable[[], Awaitable[Sequence[WorkKey]]]) -> None:
        self._builder = builder
        self._state = SnapshotState.NOT_COMPUTED
        self._keys: tuple[WorkKey, ...] = ()
        self._positions: dict[WorkKey, int] = {}
        self._token_positions: dict[str, int] = {}
        self._build_lock: asyncio.Lock | None = None

    @property
    def state(self) -> SnapshotState:
        return self._state

    async def keys(self) -> tuple[WorkKey, ...]:
        if self._state is SnapshotState.COMPUTED:
            return self._keys

        if self._build_lock is None:
            self._build_lock = asyncio.Lock()
        async with self._build_lock:
            if self._state is SnapshotState.NOT_COMPUTED:
                keys = tuple(await self._builder())
                positions: dict[WorkKey, int] = {}
                for key in keys:
                    # First occurrence wins; duplicates would break cursor lookups.
                    positions.setdefault(key, len(positions))
                if len(positions) != len(keys):
                    logger.debug(
                        "work_set_duplicates_dropped",
                        extra={"count": len(keys) - len(positions)},
                    )
                    keys = tuple(positions)
                self._keys = keys
                self._positions = positions
                self._token_positions = {key.token: index for key, index in positions.items()}
                self._state = SnapshotState.COMPUTED
                logger.info("work_set_built", extra={"size": len(keys)})
        return self._keys

    async def position_of(self, cursor: WorkKey | str) -> int:
        """Index of ``cursor`` in the snapshot.

        Raises:
            StaleCursorError: If the cursor is not part of this snapshot.

        """
        await self.keys()
        if isinstance(cursor, WorkKey):
            token = cursor.token
            position = self._positions.get(cursor)
        else:
            token = str(cursor)
            position = self._token_positions.get(token)
        if position is None:
            msg = f"Cursor {token!r} is not part of the current work set"
            raise StaleCursorError(msg, details={"cursor": token, "size": len(self._keys)})
        return position

    async def next_batch(self, cursor: Cursor, page_size: int) -> list[WorkKey]:
        """Return up to ``page_size`` keys strictly after ``cursor``.

        ``None`` starts from the beginning. An unknown cursor yields an empty
        list so the driver stops instead of starting over.
        """
        if page_size < 1:
            msg = f"Page size must be at least 1, got {page_size}"
            raise ValueError(msg)

        keys = await self.keys()
        if cursor is None:
            start = 0
        else:
            try:
                start = await self.position_of(cursor) + 1
            except StaleCursorError as exc:
                logger.warning("stale_cursor", extra=exc.details)
                return []

        return list(keys[start : start + page_size])
