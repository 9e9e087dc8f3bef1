"""Scoped ownership of the process-wide impersonation state."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from warmer.core.logging_utils import get_logger

if TYPE_CHECKING:
    from warmer.protocols import Impersonator

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImpersonationScope:
    """Proof that ``account`` is the active viewer until the scope exits."""

    account: Any


class ImpersonationGuard:
    """Serializes access to an :class:`~warmer.protocols.Impersonator`.

    Only one scope can be open at a time per guard, and the previous account
    is always restored on exit, including when the body raises.
    Warmers that share an impersonator must share its guard.

    Scopes do not nest: calling ``acting_as`` again on the same guard from
    inside an open scope waits on the guard's lock forever. Code that needs
    nested switches must call the impersonator directly.
    """

    def __init__(self, impersonator: Impersonator) -> None:
        self._impersonator = impersonator
        self._lock: asyncio.Lock | None = None

    @property
    def active(self) -> bool:
        return self._lock is not None and self._lock.locked()

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @asynccontextmanager
    async def acting_as(self, account: Any) -> AsyncIterator[ImpersonationScope]:
        async with self._get_lock():
            self._impersonator.switch_to(account)
            try:
                yield ImpersonationScope(account=account)
            finally:
                self._impersonator.switch_back()
                logger.debug("impersonation_released")
