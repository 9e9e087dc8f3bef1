"""The batch contract every warmer exposes to its driver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from warmer.application.work_set import Cursor, WorkSet
from warmer.domain.models import WorkKey


class BaseWarmer(ABC):
    """Common pagination for warmers.

    A driver calls ``next_batch`` with the last key it saw, ``load_batch`` on
    the result and ``warm_batch`` on the loaded items, until ``next_batch``
    returns nothing. The work set is built once per warmer instance, so a new
    run needs a new instance.
    """

    warmer_id: ClassVar[str]
    label: ClassVar[str]
    description: ClassVar[str]

    def __init__(self) -> None:
        self._work_set = WorkSet(self.build_work_keys)

    @property
    @abstractmethod
    def batch_size(self) -> int: ...

    @abstractmethod
    async def build_work_keys(self) -> Sequence[WorkKey]:
        """Enumerate every key this run should warm, in a stable order."""

    @abstractmethod
    async def load_batch(self, keys: Sequence[WorkKey]) -> Mapping[WorkKey, Any]:
        """Resolve keys into work items, dropping those that cannot be warmed."""

    @abstractmethod
    async def warm_batch(self, items: Mapping[WorkKey, Any]) -> int:
        """Warm loaded items and return how many succeeded."""

    @property
    def work_set(self) -> WorkSet:
        return self._work_set

    async def next_batch(self, cursor: Cursor = None) -> list[WorkKey]:
        return await self._work_set.next_batch(cursor, self.batch_size)

    async def aclose(self) -> None:
        """Release resources owned by the warmer."""
        return None
