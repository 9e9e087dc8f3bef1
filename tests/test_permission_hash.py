"""Tests for viewer variant hashing and in-memory variant sources."""

import pytest

from warmer.adapters import PermissionHashVariantSource, RoleSetVariantSource
from warmer.domain.models import ViewerVariant
from warmer.domain.services import permission_hash, variant_for_roles, variants_from_hashes


class TestPermissionHash:
    def test_order_and_duplicates_do_not_matter(self):
        assert permission_hash(["editor", "anon"]) == permission_hash(["anon", "editor", "anon"])

    def test_different_role_sets_differ(self):
        assert permission_hash(["anon"]) != permission_hash(["editor"])

    def test_empty_role_set_rejected(self):
        with pytest.raises(ValueError):
            permission_hash([" ", ""])

    def test_variant_for_roles_normalizes(self):
        variant = variant_for_roles(["editor", "anon"])
        assert variant.roles == ("anon", "editor")
        assert variant.hash == permission_hash(["anon", "editor"])

    def test_variants_from_hashes_collapses_equivalent_role_keys(self):
        variants = variants_from_hashes({"anon": "h1", "editor,anon": "h2", "anon,editor": "h3"})
        assert variants == [
            ViewerVariant(roles=("anon",), hash="h1"),
            ViewerVariant(roles=("anon", "editor"), hash="h2"),
        ]

    def test_variant_requires_hash(self):
        with pytest.raises(ValueError):
            ViewerVariant(roles=("anon",), hash="")


class TestVariantSources:
    @pytest.mark.asyncio
    async def test_role_set_source_dedupes(self):
        source = RoleSetVariantSource([["anon"], ["editor"], ["anon"]])
        variants = await source.list_variants()
        assert [variant.roles for variant in variants] == [("anon",), ("editor",)]

    @pytest.mark.asyncio
    async def test_permission_hash_source_fetches(self):
        async def fetch():
            return {"anon": "h1", "editor": "h2"}

        variants = await PermissionHashVariantSource(fetch).list_variants()
        assert [variant.hash for variant in variants] == ["h1", "h2"]
