"""Viewer variant sources backed by in-memory role data."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping

from warmer.domain.models import ViewerVariant
from warmer.domain.services import variant_for_roles, variants_from_hashes


class RoleSetVariantSource:
    """Variants for a fixed list of role combinations, hashed locally."""

    def __init__(self, role_sets: Iterable[Iterable[str]]) -> None:
        variants: dict[str, ViewerVariant] = {}
        for roles in role_sets:
            variant = variant_for_roles(roles)
            variants.setdefault(variant.hash, variant)
        self._variants = list(variants.values())

    async def list_variants(self) -> list[ViewerVariant]:
        return list(self._variants)


class PermissionHashVariantSource:
    """Variants from a ``{"role1,role2": hash}`` mapping fetched on demand.

    ``fetch`` is called on every listing; a warmer only lists once per run.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Mapping[str, str]]]) -> None:
        self._fetch = fetch

    async def list_variants(self) -> list[ViewerVariant]:
        return variants_from_hashes(await self._fetch())
