"""Enumerate the keys a warm run should cover."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from warmer.core.logging_utils import get_logger
from warmer.domain.models import ViewerVariant, WorkKey

if TYPE_CHECKING:
    from warmer.adapters.impersonation import ImpersonationGuard
    from warmer.protocols import ItemFilter, ItemStore, ViewerVariantSource

logger = get_logger(__name__)


class CdnItemEnumerator:
    """One key per item an anonymous visitor can see.

    The query runs access-checked while impersonating the anonymous account,
    so only pages the edge cache would actually serve are warmed.
    """

    def __init__(
        self,
        store: ItemStore,
        item_filter: ItemFilter,
        *,
        guard: ImpersonationGuard | None = None,
        anonymous_account: Any | None = None,
    ) -> None:
        self._store = store
        self._filter = item_filter
        self._guard = guard
        self._anonymous_account = anonymous_account

    async def enumerate(self) -> list[WorkKey]:
        if self._guard is not None and self._anonymous_account is not None:
            async with self._guard.acting_as(self._anonymous_account):
                item_ids = await self._store.query(self._filter, access_check=True)
        else:
            item_ids = await self._store.query(self._filter, access_check=True)

        keys = [WorkKey.for_item(item_id) for item_id in item_ids]
        logger.info(
            "cdn_items_enumerated",
            extra={"item_type": self._filter.item_type, "items": len(keys)},
        )
        return keys


class RenderItemEnumerator:
    """Every eligible item crossed with every viewer variant, item-major.

    The item query skips access checks: an automation caller is usually seen
    as anonymous and would otherwise miss content. The loader re-checks
    access per representative account instead.
    """

    def __init__(
        self,
        store: ItemStore,
        variant_source: ViewerVariantSource,
        item_filter: ItemFilter,
    ) -> None:
        self._store = store
        self._variant_source = variant_source
        self._filter = item_filter

    async def list_variants(self) -> list[ViewerVariant]:
        variants: dict[str, ViewerVariant] = {}
        for variant in await self._variant_source.list_variants():
            variants.setdefault(variant.hash, variant)
        return list(variants.values())

    async def enumerate(self) -> list[WorkKey]:
        variants = await self.list_variants()
        if not variants:
            logger.info("render_no_viewer_variants", extra={"item_type": self._filter.item_type})
            return []

        item_ids = await self._store.query(self._filter, access_check=False)
        keys = [
            WorkKey.for_variant(item_id, variant) for item_id in item_ids for variant in variants
        ]
        logger.info(
            "render_items_enumerated",
            extra={
                "item_type": self._filter.item_type,
                "items": len(item_ids),
                "variants": len(variants),
                "keys": len(keys),
            },
        )
        return keys
