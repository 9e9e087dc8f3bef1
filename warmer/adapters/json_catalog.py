"""A file-backed item store, so the CDN warmer can run without a CMS."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from warmer.core.logging_utils import get_logger
from warmer.protocols import ItemFilter

logger = get_logger(__name__)


class CatalogItem(BaseModel):
    """One catalog entry: ``{"id": 1, "url": "https://...", "type": "wiki"}``."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    url: str
    type: str = "wiki"
    published: bool = True

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        url = value.strip()
        if not url.lower().startswith(("http://", "https://")):
            msg = f"Catalog URL must be absolute http(s): {value!r}"
            raise ValueError(msg)
        return url

    def canonical_url(self) -> str:
        return self.url

    def is_viewable_by(self, account: Any) -> bool:
        # Catalog entries carry no per-role access rules.
        return self.published


class Catalog(BaseModel):
    items: list[CatalogItem] = Field(default_factory=list)


class JsonCatalogStore:
    """Item store over a JSON document of catalog entries, in file order."""

    def __init__(self, items: Sequence[CatalogItem]) -> None:
        self._items: dict[int | str, CatalogItem] = {}
        for item in items:
            self._items.setdefault(item.id, item)

    @classmethod
    def from_path(cls, path: str | Path) -> JsonCatalogStore:
        """Load a catalog file: ``{"items": [...]}`` or a bare list.

        Raises:
            ValueError: If the file is missing, not JSON, or has invalid entries.

        """
        catalog_path = Path(path)
        try:
            raw = json.loads(catalog_path.read_text(encoding="utf-8"))
        except OSError as exc:
            msg = f"Cannot read catalog {catalog_path}: {exc}"
            raise ValueError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = f"Catalog {catalog_path} is not valid JSON: {exc}"
            raise ValueError(msg) from exc

        if isinstance(raw, list):
            raw = {"items": raw}
        try:
            catalog = Catalog.model_validate(raw)
        except ValidationError as exc:
            msg = f"Catalog {catalog_path} has invalid entries: {exc}"
            raise ValueError(msg) from exc

        logger.info(
            "catalog_loaded", extra={"path": str(catalog_path), "items": len(catalog.items)}
        )
        return cls(catalog.items)

    async def query(self, item_filter: ItemFilter, *, access_check: bool) -> list[int | str]:
        return [
            item.id
            for item in self._items.values()
            if item.type == item_filter.item_type
            and (item.published or not (access_check or item_filter.published_only))
        ]

    async def resolve(self, item_id: int | str) -> CatalogItem | None:
        return self._items.get(item_id)
