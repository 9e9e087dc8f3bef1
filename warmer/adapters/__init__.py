from __future__ import annotations

from .cdn_warmer import CdnWarmer
from .impersonation import ImpersonationGuard, ImpersonationScope
from .json_catalog import JsonCatalogStore
from .render_warmer import RenderWarmer
from .variant_sources import PermissionHashVariantSource, RoleSetVariantSource

WARMERS: dict[str, type[CdnWarmer] | type[RenderWarmer]] = {
    CdnWarmer.warmer_id: CdnWarmer,
    RenderWarmer.warmer_id: RenderWarmer,
}

__all__ = [
    "WARMERS",
    "CdnWarmer",
    "ImpersonationGuard",
    "ImpersonationScope",
    "JsonCatalogStore",
    "PermissionHashVariantSource",
    "RenderWarmer",
    "RoleSetVariantSource",
]
