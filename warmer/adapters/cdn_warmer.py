"""Warm the edge cache by requesting each item's canonical URL."""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

import httpx

from warmer.adapters.enumerators import CdnItemEnumerator
from warmer.application.aggregator import ResultAggregator
from warmer.application.base_warmer import BaseWarmer
from warmer.application.dispatcher import ConcurrencyDispatcher
from warmer.config import CdnWarmerConfig
from warmer.core.async_utils import elapsed_ms
from warmer.core.logging_utils import decode_exception, get_logger
from warmer.core.url_utils import resolve_warm_url
from warmer.domain.exceptions import ResolutionMiss, TransportFailure
from warmer.domain.models import CdnWorkItem, WarmOutcome, WorkKey
from warmer.protocols import ItemFilter

if TYPE_CHECKING:
    from warmer.adapters.impersonation import ImpersonationGuard
    from warmer.protocols import ItemStore

logger = get_logger(__name__)


class CdnWarmer(BaseWarmer):
    """Sends one GET per item, a bounded number at a time.

    2xx and 3xx responses count as warmed. Redirects are not followed: the
    redirect response itself is what the edge caches.
    """

    warmer_id = "wiki_node_cdn"
    label = "Wiki pages (CDN)"
    description = "Executes HTTP requests to warm edge caches for anonymous users."

    def __init__(
        self,
        store: ItemStore,
        *,
        config: CdnWarmerConfig | None = None,
        client: httpx.AsyncClient | None = None,
        guard: ImpersonationGuard | None = None,
        anonymous_account: Any | None = None,
    ) -> None:
        super().__init__()
        self.config = config or self.default_configuration()
        self._store = store
        self._anonymous_account = anonymous_account
        self._enumerator = CdnItemEnumerator(
            store,
            ItemFilter(item_type=self.config.item_type),
            guard=guard,
            anonymous_account=anonymous_account,
        )
        self._timeout = httpx.Timeout(
            self.config.request_timeout_sec, connect=self.config.connect_timeout_sec
        )
        self._client = client
        self._owns_client = client is None

    @classmethod
    def default_configuration(cls) -> CdnWarmerConfig:
        return CdnWarmerConfig()

    @property
    def batch_size(self) -> int:
        return self.config.batch_size

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=self.config.verify_tls,
                timeout=self._timeout,
                follow_redirects=False,
            )
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def build_work_keys(self) -> list[WorkKey]:
        return await self._enumerator.enumerate()

    async def load_batch(self, keys: Sequence[WorkKey]) -> dict[WorkKey, CdnWorkItem]:
        items: dict[WorkKey, CdnWorkItem] = {}
        for key in keys:
            try:
                items[key] = await self._load_one(key)
            except ResolutionMiss as exc:
                logger.debug("cdn_item_dropped", extra={"key": key.token, **exc.details})
        return items

    async def _load_one(self, key: WorkKey) -> CdnWorkItem:
        item = await self._store.resolve(key.item_id)
        if item is None:
            msg = f"Item {key.item_id} no longer exists"
            raise ResolutionMiss(msg, details={"reason": "not_found"})

        # Access may have changed since the work set was built.
        if self._anonymous_account is not None and not item.is_viewable_by(
            self._anonymous_account
        ):
            msg = f"Item {key.item_id} is no longer publicly viewable"
            raise ResolutionMiss(msg, details={"reason": "access_denied"})

        url = item.canonical_url()
        try:
            warm_url = resolve_warm_url(url, self.config.canonical_host)
        except ValueError as exc:
            logger.warning(
                "cdn_invalid_url",
                extra={"item_id": key.item_id, "url": str(url)[:200], "error": str(exc)},
            )
            raise ResolutionMiss(str(exc), details={"reason": "invalid_url"}) from exc

        return CdnWorkItem(key=key, canonical_url=warm_url)

    async def warm_batch(self, items: Mapping[WorkKey, CdnWorkItem]) -> int:
        started = time.perf_counter()
        dispatcher = ConcurrencyDispatcher(
            self.config.max_concurrent_requests,
            post_batch_delay=self.config.sleep_between_batches,
        )

        operations = [(key, partial(self._warm_one, item)) for key, item in items.items()]
        aggregator = ResultAggregator()
        aggregator.extend(await dispatcher.run(operations))

        logger.info(
            "cdn_warm_batch_complete",
            extra={
                **aggregator.summary(),
                "max_concurrent_requests": dispatcher.max_concurrency,
                "peak_in_flight": dispatcher.peak_in_flight,
                "duration_ms": elapsed_ms(started),
            },
        )
        return aggregator.success_count

    async def _warm_one(self, item: CdnWorkItem) -> WarmOutcome:
        try:
            status_code = await self._request(item.canonical_url)
        except TransportFailure as exc:
            error = decode_exception(exc.__cause__ or exc)
            logger.error(
                "cdn_warm_failed",
                extra={
                    "item_id": item.item_id,
                    "url": item.canonical_url,
                    "status_code": exc.status_code,
                    "error": error,
                },
            )
            return WarmOutcome.failed(item.key, error=error, status_code=exc.status_code)
        return WarmOutcome.succeeded(item.key, status_code=status_code)

    async def _request(self, url: str) -> int:
        """GET ``url`` and return the status code.

        Raises:
            TransportFailure: On transport errors, timeouts and HTTP status >= 400.

        """
        try:
            resp = await self._get_client().get(
                url, headers=self.config.request_headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            msg = f"Warm request failed: {exc.__class__.__name__}: {exc}"
            raise TransportFailure(msg, url=url) from exc

        if resp.status_code >= 400:
            msg = f"Warm request returned HTTP {resp.status_code}"
            raise TransportFailure(msg, url=url, status_code=resp.status_code)
        return resp.status_code
