"""Stable identifiers for viewer variants."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping

from warmer.domain.models.work import ViewerVariant, normalize_roles


def permission_hash(roles: Iterable[str]) -> str:
    """SHA-256 of the sorted, de-duplicated role set.

    Role order and duplicates never change the result.
    """
    normalized = normalize_roles(roles)
    if not normalized:
        msg = "A viewer variant needs at least one role"
        raise ValueError(msg)
    return hashlib.sha256(",".join(normalized).encode("utf-8")).hexdigest()


def variant_for_roles(roles: Iterable[str]) -> ViewerVariant:
    normalized = normalize_roles(roles)
    return ViewerVariant(roles=normalized, hash=permission_hash(normalized))


def variants_from_hashes(hashes: Mapping[str, str]) -> list[ViewerVariant]:
    """Build variants from a ``{"role1,role2": hash}`` mapping.

    Role combinations that normalize to the same set are collapsed; the
    first hash seen wins.
    """
    variants: dict[tuple[str, ...], ViewerVariant] = {}
    for roles_key, variant_hash in hashes.items():
        roles = normalize_roles(roles_key.split(","))
        if not roles or roles in variants:
            continue
        variants[roles] = ViewerVariant(roles=roles, hash=variant_hash)
    return list(variants.values())
