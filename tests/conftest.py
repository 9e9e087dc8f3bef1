"""Pytest configuration and shared fakes for the warmer collaborators."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from warmer.adapters.impersonation import ImpersonationGuard
from warmer.domain.models import ViewerVariant
from warmer.protocols import ItemFilter


@dataclass(frozen=True)
class FakeAccount:
    name: str
    roles: tuple[str, ...] = ()


ANONYMOUS = FakeAccount("anonymous", ("anonymous",))


@dataclass
class FakeItem:
    id: int | str
    url: str = ""
    type: str = "wiki"
    published: bool = True
    # None means every account may view the item.
    viewers: set[str] | None = None

    def __post_init__(self) -> None:
        if not self.url:
            self.url = f"http://10.0.0.5/wiki/page-{self.id}"

    def canonical_url(self) -> str:
        return self.url

    def is_viewable_by(self, account: Any) -> bool:
        if not self.published and account.name == ANONYMOUS.name:
            return False
        return self.viewers is None or account.name in self.viewers


class FakeItemStore:
    def __init__(self, items: Sequence[FakeItem]) -> None:
        self.items = {item.id: item for item in items}
        self.queries: list[tuple[ItemFilter, bool]] = []
        self.resolved: list[int | str] = []

    async def query(self, item_filter: ItemFilter, *, access_check: bool) -> list[int | str]:
        self.queries.append((item_filter, access_check))
        return [
            item.id
            for item in self.items.values()
            if item.type == item_filter.item_type and (item.published or not access_check)
        ]

    async def resolve(self, item_id: int | str) -> FakeItem | None:
        self.resolved.append(item_id)
        return self.items.get(item_id)

    def delete(self, item_id: int | str) -> None:
        self.items.pop(item_id, None)


class FakeVariantSource:
    def __init__(self, variants: Sequence[ViewerVariant]) -> None:
        self.variants = list(variants)
        self.calls = 0

    async def list_variants(self) -> list[ViewerVariant]:
        self.calls += 1
        return list(self.variants)


class FakeSelector:
    def __init__(self, accounts: Sequence[FakeAccount]) -> None:
        self.accounts = list(accounts)
        self.calls: list[tuple[str, ...]] = []

    async def select(
        self, roles: Sequence[str], predicate: Callable[[Any], bool]
    ) -> FakeAccount | None:
        self.calls.append(tuple(roles))
        for account in self.accounts:
            if account.roles == tuple(roles) and predicate(account):
                return account
        return None


class RecordingImpersonator:
    """Process-wide "current account" stand-in that records every switch."""

    def __init__(self, initial: Any = "cli-user") -> None:
        self.stack: list[Any] = [initial]
        self.history: list[tuple[str, Any]] = []

    @property
    def current(self) -> Any:
        return self.stack[-1]

    def switch_to(self, account: Any) -> None:
        self.stack.append(account)
        self.history.append(("to", account))

    def switch_back(self) -> None:
        if len(self.stack) == 1:
            raise RuntimeError("switch_back without a matching switch_to")
        self.history.append(("back", self.stack.pop()))


@dataclass
class FakeRenderer:
    impersonator: RecordingImpersonator
    failing: set[int | str] = field(default_factory=set)
    empty: set[int | str] = field(default_factory=set)
    delay: float = 0.0
    rendered: list[tuple[int | str, Any]] = field(default_factory=list)
    active: int = 0
    peak_active: int = 0

    async def render_full(self, item: FakeItem, *, scope: Any) -> Any:
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            self.rendered.append((item.id, self.impersonator.current))
            assert scope.account is self.impersonator.current
            if item.id in self.failing:
                raise RuntimeError(f"template error in item {item.id}")
            if item.id in self.empty:
                return ""
            return f"<article>{item.id}</article>"
        finally:
            self.active -= 1


@pytest.fixture
def impersonator() -> RecordingImpersonator:
    return RecordingImpersonator()


@pytest.fixture
def guard(impersonator: RecordingImpersonator) -> ImpersonationGuard:
    return ImpersonationGuard(impersonator)


@pytest.fixture
def anon_variant() -> ViewerVariant:
    return ViewerVariant(roles=("anon",), hash="h1")


@pytest.fixture
def editor_variant() -> ViewerVariant:
    return ViewerVariant(roles=("editor",), hash="h2")


@pytest.fixture(autouse=True)
def _clean_warmer_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of config tests."""
    import os

    for name in list(os.environ):
        if name.startswith(("CDN_WARMER_", "RENDER_WARMER_", "LOG_")):
            monkeypatch.delenv(name, raising=False)
