"""Protocol definitions for the collaborators a warmer depends on.

Content storage, account selection, impersonation and rendering live outside
this package; these protocols are the contract it relies on.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from warmer.domain.models.work import ItemId, ViewerVariant


@dataclass(frozen=True)
class ItemFilter:
    """Conditions for an item eligibility query."""

    item_type: str
    published_only: bool = False


@runtime_checkable
class Item(Protocol):
    """A loaded content item."""

    def canonical_url(self) -> str:
        """Absolute URL of the item's canonical page."""
        ...

    def is_viewable_by(self, account: Any) -> bool:
        """Whether ``account`` may view the item."""
        ...


class ItemStore(Protocol):
    """Protocol for content item queries."""

    async def query(self, item_filter: ItemFilter, *, access_check: bool) -> Sequence[ItemId]:
        """Return the ids of eligible items in a stable order.

        With ``access_check`` the result is limited to items the current
        (possibly impersonated) account may view.

        """
        ...

    async def resolve(self, item_id: ItemId) -> Item | None:
        """Load an item, or None if it no longer exists."""
        ...


class ViewerVariantSource(Protocol):
    """Protocol for listing distinct role combinations."""

    async def list_variants(self) -> Sequence[ViewerVariant]:
        """Return every distinct viewer variant, each with its stable hash."""
        ...


class RepresentativeAccountSelector(Protocol):
    """Protocol for picking one account to stand in for a role set."""

    async def select(
        self, roles: Sequence[str], predicate: Callable[[Any], bool]
    ) -> Any | None:
        """Return an account with exactly ``roles`` that satisfies ``predicate``.

        Returns:
            The account, or None if no account qualifies.

        """
        ...


class Impersonator(Protocol):
    """Protocol for the process-wide "current account" switch.

    Calls must nest: every ``switch_to`` is undone by one ``switch_back``.
    """

    def switch_to(self, account: Any) -> None: ...

    def switch_back(self) -> None: ...


class Renderer(Protocol):
    """Protocol for the render pipeline."""

    async def render_full(self, item: Item, *, scope: Any) -> Any:
        """Render ``item`` in full view mode as the account held by ``scope``.

        The pipeline caches its own output; the return value is only used to
        tell an empty render from a real one.

        """
        ...
