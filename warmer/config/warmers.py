from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ._validators import (
    _normalize_canonical_host,
    _parse_int,
    _parse_request_headers,
    _parse_seconds,
)

MAX_BATCH_SIZE = 1_000
MAX_CONCURRENT_REQUESTS = 100


class CdnWarmerConfig(BaseModel):
    """Settings for warming the edge cache over HTTP."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Some wiki pages take a few seconds to build on a cold origin.
    batch_size: int = Field(default=5, validation_alias="CDN_WARMER_BATCH_SIZE")
    max_concurrent_requests: int = Field(
        default=10,
        validation_alias="CDN_WARMER_MAX_CONCURRENT_REQUESTS",
        description=(
            "Requests sent in parallel. Setting this too high may trip denial-of-service "
            "protection at the host or reverse proxy."
        ),
    )
    sleep_between_batches: float = Field(
        default=0.0, validation_alias="CDN_WARMER_SLEEP_BETWEEN_BATCHES"
    )
    verify_tls: bool = Field(
        default=True,
        validation_alias="CDN_WARMER_VERIFY_TLS",
        description="Only disable for local testing with self-signed certificates.",
    )
    canonical_host: str | None = Field(default=None, validation_alias="CDN_WARMER_CANONICAL_HOST")
    connect_timeout_sec: float = Field(
        default=10.0, validation_alias="CDN_WARMER_CONNECT_TIMEOUT_SEC"
    )
    request_timeout_sec: float = Field(
        default=60.0, validation_alias="CDN_WARMER_REQUEST_TIMEOUT_SEC"
    )
    request_headers: dict[str, str] = Field(
        default_factory=dict, validation_alias="CDN_WARMER_REQUEST_HEADERS"
    )
    item_type: str = Field(default="wiki", validation_alias="CDN_WARMER_ITEM_TYPE")

    @field_validator("batch_size", mode="before")
    @classmethod
    def _validate_batch_size(cls, value: Any) -> int:
        parsed = _parse_int(value, default=5, name="Batch size")
        if parsed < 1 or parsed > MAX_BATCH_SIZE:
            msg = f"Batch size must be between 1 and {MAX_BATCH_SIZE}"
            raise ValueError(msg)
        return parsed

    @field_validator("max_concurrent_requests", mode="before")
    @classmethod
    def _clamp_concurrency(cls, value: Any) -> int:
        parsed = _parse_int(value, default=10, name="Max concurrent requests")
        # Non-positive values mean one request at a time.
        if parsed <= 0:
            return 1
        if parsed > MAX_CONCURRENT_REQUESTS:
            msg = f"Max concurrent requests must be {MAX_CONCURRENT_REQUESTS} or fewer"
            raise ValueError(msg)
        return parsed

    @field_validator("sleep_between_batches", mode="before")
    @classmethod
    def _validate_sleep(cls, value: Any) -> float:
        parsed = _parse_seconds(value, default=0.0, name="Sleep between batches")
        if parsed < 0 or parsed > 3600:
            msg = "Sleep between batches must be between 0 and 3600 seconds"
            raise ValueError(msg)
        return parsed

    @field_validator("connect_timeout_sec", "request_timeout_sec", mode="before")
    @classmethod
    def _validate_timeouts(cls, value: Any, info: ValidationInfo) -> float:
        default = cls.model_fields[info.field_name].default
        label = info.field_name.replace("_sec", "").replace("_", " ").capitalize()
        parsed = _parse_seconds(value, default=default, name=label)
        if parsed <= 0:
            msg = f"{label} must be positive"
            raise ValueError(msg)
        if parsed > 600:
            msg = f"{label} too large (max 600 seconds)"
            raise ValueError(msg)
        return parsed

    @field_validator("canonical_host", mode="before")
    @classmethod
    def _validate_canonical_host(cls, value: Any) -> str | None:
        return _normalize_canonical_host(value)

    @field_validator("request_headers", mode="before")
    @classmethod
    def _validate_headers(cls, value: Any) -> dict[str, str]:
        return _parse_request_headers(value)

    @field_validator("item_type", mode="before")
    @classmethod
    def _validate_item_type(cls, value: Any) -> str:
        item_type = str(value or "wiki").strip()
        if not item_type:
            msg = "Item type cannot be empty"
            raise ValueError(msg)
        return item_type


class RenderWarmerConfig(BaseModel):
    """Settings for pre-rendering items once per viewer variant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    batch_size: int = Field(default=10, validation_alias="RENDER_WARMER_BATCH_SIZE")
    sleep_between_batches: float = Field(
        default=0.0, validation_alias="RENDER_WARMER_SLEEP_BETWEEN_BATCHES"
    )
    item_type: str = Field(default="wiki", validation_alias="RENDER_WARMER_ITEM_TYPE")

    @field_validator("batch_size", mode="before")
    @classmethod
    def _validate_batch_size(cls, value: Any) -> int:
        parsed = _parse_int(value, default=10, name="Batch size")
        if parsed < 1 or parsed > MAX_BATCH_SIZE:
            msg = f"Batch size must be between 1 and {MAX_BATCH_SIZE}"
            raise ValueError(msg)
        return parsed

    @field_validator("sleep_between_batches", mode="before")
    @classmethod
    def _validate_sleep(cls, value: Any) -> float:
        parsed = _parse_seconds(value, default=0.0, name="Sleep between batches")
        if parsed < 0 or parsed > 3600:
            msg = "Sleep between batches must be between 0 and 3600 seconds"
            raise ValueError(msg)
        return parsed

    @field_validator("item_type", mode="before")
    @classmethod
    def _validate_item_type(cls, value: Any) -> str:
        item_type = str(value or "wiki").strip()
        if not item_type:
            msg = "Item type cannot be empty"
            raise ValueError(msg)
        return item_type
