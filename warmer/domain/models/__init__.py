from .work import (
    CdnWorkItem,
    ItemId,
    RenderWorkItem,
    ViewerVariant,
    WarmOutcome,
    WorkKey,
    normalize_roles,
)

__all__ = [
    "CdnWorkItem",
    "ItemId",
    "RenderWorkItem",
    "ViewerVariant",
    "WarmOutcome",
    "WorkKey",
    "normalize_roles",
]
