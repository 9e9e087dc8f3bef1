from __future__ import annotations

from .settings import AppConfig, RuntimeConfig, Settings, load_config
from .warmers import (
    MAX_BATCH_SIZE,
    MAX_CONCURRENT_REQUESTS,
    CdnWarmerConfig,
    RenderWarmerConfig,
)

__all__ = [
    "MAX_BATCH_SIZE",
    "MAX_CONCURRENT_REQUESTS",
    "AppConfig",
    "CdnWarmerConfig",
    "RenderWarmerConfig",
    "RuntimeConfig",
    "Settings",
    "load_config",
]
