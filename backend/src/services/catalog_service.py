"""Production catalog lookup and draft expansion.

The generator may answer with short set codes ("CAM_SET_A", "DIR_SET_B")
instead of spelling out gear or crew profiles. When expansion is enabled,
known codes are replaced by their full catalog records; anything else passes
through untouched.

Configuration (env vars):
- ENABLE_CATALOG_EXPANSION: "true"/"1"/"yes" turns expansion on (default: off)
- CATALOG_PATH: Alternative catalog JSON file (default: bundled catalog)
"""

import copy
import json
import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "production_catalog.json"

EQUIPMENT_RECORD_FIELDS = ("name", "description", "items", "reason", "alternatives")
CREW_RECORD_FIELDS = ("name", "description", "experience", "specialty", "rate")

_TRUTHY = {"true", "1", "yes", "on"}


class CatalogEntry(BaseModel):
    """Immutable catalog record for one set code."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str = Field(..., min_length=1)
    kind: Literal["equipment", "crew"]
    name: str
    description: str = ""
    reason: str = ""
    items: tuple[str, ...] = ()
    alternatives: tuple[str, ...] = Field(default=(), description="Alternative kits or set codes")
    experience: str = ""
    specialty: tuple[str, ...] = ()
    rate: str = ""

    def as_record(self) -> dict[str, Any]:
        """Descriptive fields merged into an expanded draft value."""
        names = EQUIPMENT_RECORD_FIELDS if self.kind == "equipment" else CREW_RECORD_FIELDS
        record: dict[str, Any] = {}
        for name in names:
            value = getattr(self, name)
            record[name] = list(value) if isinstance(value, tuple) else value
        return record


class Catalog(Protocol):
    """Lookup interface the expander depends on."""

    def lookup(self, code: str) -> CatalogEntry | None: ...


class ProductionCatalog:
    """Read-only catalog keyed by exact set code."""

    def __init__(self, entries: Mapping[str, CatalogEntry], version: int | None = None):
        self._entries = MappingProxyType(dict(entries))
        self.version = version

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def lookup(self, code: str) -> CatalogEntry | None:
        return self._entries.get(code)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductionCatalog":
        """Build a catalog from `{"equipment": {...}, "crew": {...}}`."""
        entries: dict[str, CatalogEntry] = {}
        for kind in ("equipment", "crew"):
            for code, fields in (data.get(kind) or {}).items():
                if code in entries:
                    raise ValueError(f"Duplicate catalog code: {code}")
                entries[code] = CatalogEntry(code=code, kind=kind, **fields)
        return cls(entries, version=data.get("version"))

    @classmethod
    def from_file(cls, path: str | Path) -> "ProductionCatalog":
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


@lru_cache(maxsize=None)
def load_catalog(path: str | None = None) -> ProductionCatalog:
    """Load and cache the catalog.

    Args:
        path: Catalog file. Defaults to CATALOG_PATH env var, then the bundled file.
    """
    catalog_path = path or os.environ.get("CATALOG_PATH") or str(DEFAULT_CATALOG_PATH)
    catalog = ProductionCatalog.from_file(catalog_path)
    logger.info(
        "Loaded production catalog",
        extra={"catalog_path": catalog_path, "entries": len(catalog), "version": catalog.version},
    )
    return catalog


def is_catalog_expansion_enabled() -> bool:
    """Read the ENABLE_CATALOG_EXPANSION flag."""
    return os.environ.get("ENABLE_CATALOG_EXPANSION", "").strip().lower() in _TRUTHY


def expand_equipment_item(item: Any, catalog: Catalog) -> Any:
    """Replace a known equipment code with `{"id": code, ...record}`."""
    if not isinstance(item, str):
        return item
    entry = catalog.lookup(item)
    if entry is None or entry.kind != "equipment":
        return item
    return {"id": item, **entry.as_record()}


def expand_crew_member(member: Any, catalog: Catalog) -> Any:
    """Merge the catalog record into a crew assignment whose role is a known code."""
    if isinstance(member, str):
        role, base = member, {"role": member}
    elif isinstance(member, dict) and isinstance(member.get("role"), str):
        role, base = member["role"], member
    else:
        return member

    entry = catalog.lookup(role)
    if entry is None or entry.kind != "crew":
        return member
    return {**base, "id": role, **entry.as_record()}


def _expand_tree(node: Any, expand_item: Any, catalog: Catalog) -> Any:
    if isinstance(node, list):
        return [expand_item(element, catalog) for element in node]
    if isinstance(node, dict):
        return {key: _expand_tree(value, expand_item, catalog) for key, value in node.items()}
    return node


def expand_draft(
    draft: dict[str, Any],
    catalog: Catalog | None = None,
    enabled: bool | None = None,
) -> dict[str, Any]:
    """Expand catalog codes in a normalized draft.

    Args:
        draft: Normalized scene or cut draft.
        catalog: Lookup table. Defaults to the cached production catalog.
        enabled: Expansion switch. Defaults to ENABLE_CATALOG_EXPANSION.

    Returns:
        The same object when disabled, otherwise an expanded copy.
    """
    if enabled is None:
        enabled = is_catalog_expansion_enabled()
    if not enabled:
        return draft

    if catalog is None:
        catalog = load_catalog()
    expanded = copy.deepcopy(draft)
    if isinstance(expanded.get("equipment"), dict):
        expanded["equipment"] = _expand_tree(expanded["equipment"], expand_equipment_item, catalog)
    if isinstance(expanded.get("crew"), dict):
        expanded["crew"] = _expand_tree(expanded["crew"], expand_crew_member, catalog)
    return expanded
