"""Units of warming work.

A ``WorkKey`` is what gets paginated and what the driver keeps as its cursor;
a work item is a key resolved into something that can actually be warmed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

ItemId = int | str


def normalize_roles(roles: Iterable[str]) -> tuple[str, ...]:
    """Return a role set as a sorted tuple without duplicates or blanks."""
    return tuple(sorted({str(role).strip() for role in roles if str(role).strip()}))


@dataclass(frozen=True)
class ViewerVariant:
    """A set of roles that all render an item identically."""

    roles: tuple[str, ...]
    hash: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", normalize_roles(self.roles))
        if not self.hash:
            raise ValueError("Viewer variant hash cannot be empty")

    @property
    def roles_key(self) -> str:
        return ",".join(self.roles)


@dataclass(frozen=True)
class WorkKey:
    """One entry of a work set.

    Equality only looks at the item and the variant hash; ``roles`` rides
    along so the loader knows who to render as.
    """

    item_id: ItemId
    variant_hash: str | None = None
    roles: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def for_item(cls, item_id: ItemId) -> WorkKey:
        return cls(item_id=item_id)

    @classmethod
    def for_variant(cls, item_id: ItemId, variant: ViewerVariant) -> WorkKey:
        return cls(item_id=item_id, variant_hash=variant.hash, roles=variant.roles)

    @property
    def token(self) -> str:
        """Cursor string, one per distinct key.

        Integer ids print bare and string ids JSON-quoted, so ``1`` and ``"1"``
        never share a token. Render keys append ``:<variant hash>``.
        """
        item = str(self.item_id) if isinstance(self.item_id, int) else json.dumps(self.item_id)
        if self.variant_hash is None:
            return item
        return f"{item}:{self.variant_hash}"

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class CdnWorkItem:
    key: WorkKey
    canonical_url: str

    @property
    def item_id(self) -> ItemId:
        return self.key.item_id


@dataclass(frozen=True)
class RenderWorkItem:
    key: WorkKey
    item: Any
    account: Any

    @property
    def item_id(self) -> ItemId:
        return self.key.item_id

    @property
    def variant_hash(self) -> str | None:
        return self.key.variant_hash


@dataclass(frozen=True)
class WarmOutcome:
    """Result of warming a single work item."""

    key: WorkKey
    success: bool
    status_code: int | None = None
    error: dict[str, Any] | None = None

    @classmethod
    def succeeded(cls, key: WorkKey, *, status_code: int | None = None) -> WarmOutcome:
        return cls(key=key, success=True, status_code=status_code)

    @classmethod
    def failed(
        cls,
        key: WorkKey,
        *,
        error: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> WarmOutcome:
        return cls(key=key, success=False, status_code=status_code, error=error)
