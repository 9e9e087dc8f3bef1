"""Warm the render cache by rendering each item once per viewer variant."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from warmer.adapters.enumerators import RenderItemEnumerator
from warmer.application.aggregator import ResultAggregator
from warmer.application.base_warmer import BaseWarmer
from warmer.config import RenderWarmerConfig
from warmer.core.async_utils import elapsed_ms
from warmer.core.logging_utils import decode_exception, get_logger
from warmer.domain.exceptions import NoEligibleViewer, RenderFailure, ResolutionMiss
from warmer.domain.models import RenderWorkItem, WarmOutcome, WorkKey
from warmer.protocols import ItemFilter

if TYPE_CHECKING:
    from warmer.adapters.impersonation import ImpersonationGuard
    from warmer.protocols import (
        ItemStore,
        Renderer,
        RepresentativeAccountSelector,
        ViewerVariantSource,
    )

logger = get_logger(__name__)


class RenderWarmer(BaseWarmer):
    """Pre-renders items as a representative account of each viewer variant.

    Items are rendered one after another: impersonation is process-wide, so
    two overlapping renders would see each other's account.
    """

    warmer_id = "wiki_node"
    label = "Wiki pages"
    description = (
        "Warms the wiki page render cache by pre-rendering wiki pages for each set of "
        "permission hashes."
    )

    def __init__(
        self,
        store: ItemStore,
        variant_source: ViewerVariantSource,
        selector: RepresentativeAccountSelector,
        renderer: Renderer,
        guard: ImpersonationGuard,
        *,
        config: RenderWarmerConfig | None = None,
    ) -> None:
        super().__init__()
        self.config = config or self.default_configuration()
        self._store = store
        self._selector = selector
        self._renderer = renderer
        self._guard = guard
        self._enumerator = RenderItemEnumerator(
            store, variant_source, ItemFilter(item_type=self.config.item_type)
        )

    @classmethod
    def default_configuration(cls) -> RenderWarmerConfig:
        return RenderWarmerConfig()

    @property
    def batch_size(self) -> int:
        return self.config.batch_size

    async def build_work_keys(self) -> list[WorkKey]:
        return await self._enumerator.enumerate()

    async def load_batch(self, keys: Sequence[WorkKey]) -> dict[WorkKey, RenderWorkItem]:
        items: dict[WorkKey, RenderWorkItem] = {}
        for key in keys:
            try:
                items[key] = await self._load_one(key)
            except (ResolutionMiss, NoEligibleViewer) as exc:
                logger.debug(
                    "render_item_dropped",
                    extra={"key": key.token, "reason": type(exc).__name__, **exc.details},
                )
        return items

    async def _load_one(self, key: WorkKey) -> RenderWorkItem:
        if key.variant_hash is None:
            msg = f"Key {key.token} has no viewer variant"
            raise ResolutionMiss(msg)

        item = await self._store.resolve(key.item_id)
        if item is None:
            msg = f"Item {key.item_id} no longer exists"
            raise ResolutionMiss(msg)

        account = await self._selector.select(key.roles, item.is_viewable_by)
        if account is None:
            msg = f"No account with roles {key.roles} can view item {key.item_id}"
            raise NoEligibleViewer(msg, details={"variant_hash": key.variant_hash})

        return RenderWorkItem(key=key, item=item, account=account)

    async def warm_batch(self, items: Mapping[WorkKey, RenderWorkItem]) -> int:
        started = time.perf_counter()
        aggregator = ResultAggregator()
        for work in items.values():
            aggregator.add(await self._warm_one(work))

        logger.info(
            "render_warm_batch_complete",
            extra={**aggregator.summary(), "duration_ms": elapsed_ms(started)},
        )

        if items and self.config.sleep_between_batches > 0:
            await asyncio.sleep(self.config.sleep_between_batches)
        return aggregator.success_count

    async def _warm_one(self, work: RenderWorkItem) -> WarmOutcome:
        try:
            output = await self._render(work)
        except RenderFailure as exc:
            error = decode_exception(exc.__cause__ or exc)
            logger.error(
                "render_warm_failed",
                extra={
                    "item_id": work.item_id,
                    "variant_hash": work.variant_hash,
                    "roles": list(work.key.roles),
                    "error": error,
                },
            )
            return WarmOutcome.failed(work.key, error=error)

        if not output:
            logger.debug("render_warm_empty", extra={"key": work.key.token})
            return WarmOutcome.failed(work.key)
        return WarmOutcome.succeeded(work.key)

    async def _render(self, work: RenderWorkItem) -> Any:
        """Render as the work item's account; the pipeline caches the output.

        Raises:
            RenderFailure: If the render pipeline raised.

        """
        async with self._guard.acting_as(work.account) as scope:
            try:
                return await self._renderer.render_full(work.item, scope=scope)
            except Exception as exc:
                msg = f"Rendering item {work.item_id} failed: {exc}"
                raise RenderFailure(
                    msg, details={"item_id": work.item_id, "variant_hash": work.variant_hash}
                ) from exc
