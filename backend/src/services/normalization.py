"""Normalization of parsed draft items into the canonical draft shape.

A single walker consumes the schema tables in draft_schema.py:

1. Legacy values are promoted to their canonical paths (canonical wins).
2. Every declared path is visited in table order; missing containers are
   created and each value is coerced to its shape or replaced by its default.
3. Undeclared keys of closed records (and of the item root) are dropped, which
   also removes consumed legacy keys.

Normalization is pure and idempotent: the input is deep-copied and a value
already in canonical shape is left as is.
"""

import copy
import logging
import math
import re
from typing import Any

from src.services.draft_schema import (
    CUT_SCHEMA,
    SCENE_SCHEMA,
    DraftSchema,
    FieldSpec,
    Path,
    PromotionRule,
    Shape,
)

logger = logging.getLogger(__name__)

_SECONDS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*초")
_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*$")

_MISSING = object()


def _is_populated(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict)) and not value:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _is_set(value: Any) -> bool:
    """A canonical slot is taken by any value except None and blank text.

    An explicit empty list or mapping counts as an answer and is kept.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _lookup(tree: dict[str, Any], path: Path) -> Any:
    node: Any = tree
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return _MISSING
        node = node[key]
    return node


def _assign(tree: dict[str, Any], path: Path, value: Any) -> bool:
    node = tree
    for key in path[:-1]:
        child = node.get(key)
        if child is None:
            child = {}
            node[key] = child
        if not isinstance(child, dict):
            return False
        node = child
    node[path[-1]] = value
    return True


def apply_promotions(draft: dict[str, Any], rules: tuple[PromotionRule, ...]) -> list[PromotionRule]:
    """Copy legacy values to their canonical paths in place.

    Args:
        draft: Draft tree to update.
        rules: Promotion rules in priority order.

    Returns:
        The rules that were applied.
    """
    applied = []
    for rule in rules:
        value = _lookup(draft, rule.source)
        if value is _MISSING or not _is_populated(value):
            continue
        current = _lookup(draft, rule.target)
        if current is not _MISSING and _is_set(current) and not rule.overwrite:
            continue
        if _assign(draft, rule.target, copy.deepcopy(value)):
            applied.append(rule)
    return applied


# ==============================================================================
# Leaf coercion
# ==============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _clean_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if _is_number(value) and _to_number(value) is not None:
        return str(value)
    return None


def _clean_enum(spec: FieldSpec, value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text in spec.choices:
        return text
    lowered = text.lower()
    for alias, target in spec.aliases:
        if alias.lower() == lowered:
            return target
    for choice in spec.choices:
        if choice.lower() == lowered:
            return choice
    return None


def _clean_flag(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "y", "1"):
            return True
        if lowered in ("false", "no", "n", "0"):
            return False
        return None
    if _is_number(value):
        return bool(value)
    return None


def _finite(number: float) -> float | None:
    return number if math.isfinite(number) else None


def _to_number(value: Any) -> float | None:
    """Read a number or numeric string. Non-finite and overflowing values are None."""
    try:
        if _is_number(value):
            return _finite(float(value))
        if isinstance(value, str):
            match = _NUMBER_RE.match(value)
            if match:
                return _finite(float(match.group(1)))
    except OverflowError:
        return None
    return None


def _clean_order(value: Any) -> int | None:
    number = _to_number(value)
    if number is None or number < 1 or number != int(number):
        return None
    return int(number)


def _clean_seconds(value: Any) -> int | None:
    number = None
    if isinstance(value, str):
        match = _SECONDS_RE.search(value)
        if match:
            number = _to_number(match.group(1))
    if number is None:
        number = _to_number(value)
    if number is None or number <= 0:
        return None
    return max(1, round(number))


def _clean_count(value: Any) -> int | None:
    number = _to_number(value)
    if number is None or number < 0:
        return None
    return int(number)


def _clean_strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        value = [value]
    cleaned = []
    for element in value:
        text = _clean_text(element)
        if text is not None:
            cleaned.append(text)
    return cleaned


def _crew_member(member: dict[str, Any]) -> dict[str, Any]:
    role = member.get("role")
    if isinstance(role, str):
        role = role.strip()
    elif _is_number(role):
        role = str(role)
    else:
        role = ""
    if member.get("role") == role:
        return member
    return {**member, "role": role}


def coerce_crew_leaf(value: Any) -> list[dict[str, Any]]:
    """Coerce a crew leaf to a list of crew assignments.

    A bare role string becomes `[{"role": s}]`, a bare assignment object is
    wrapped, and list elements get the same treatment. Anything else is empty.
    """
    if not isinstance(value, list):
        value = [value]
    members = []
    for element in value:
        if isinstance(element, dict):
            members.append(_crew_member(element))
            continue
        text = _clean_text(element)
        if text is not None:
            members.append({"role": text})
    return members


def coerce_equipment_leaf(value: Any) -> list[Any]:
    """Coerce an equipment leaf to a list of item strings or item records."""
    if not isinstance(value, list):
        value = [value]
    items = []
    for element in value:
        if isinstance(element, dict):
            items.append(element)
            continue
        text = _clean_text(element)
        if text is not None:
            items.append(text)
    return items


def _coerce_records(spec: FieldSpec, value: Any, index: int) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        value = [value]
    records = []
    for element in value:
        if isinstance(element, str) and element.strip() and spec.text_field:
            element = {spec.text_field: element}
        if isinstance(element, dict) and spec.item_schema is not None:
            records.append(_walk(element, spec.item_schema, index))
    return records


def _coerce_group(value: Any, declared: frozenset[str], coerce_leaf: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    for key in list(value):
        if key not in declared:
            value[key] = coerce_leaf(value[key])
    return value


def _coerce(spec: FieldSpec, value: Any, index: int, schema: DraftSchema) -> Any:
    """Coerce one value to its shape. Returns _MISSING when it must be defaulted."""
    shape = spec.shape
    if value is _MISSING or value is None:
        if shape in (Shape.RECORD, Shape.CREW_GROUP, Shape.EQUIPMENT_GROUP):
            return {}
        if shape in (Shape.STRINGS, Shape.RECORDS, Shape.CREW, Shape.EQUIPMENT):
            return []
        return _MISSING

    if shape is Shape.TEXT:
        cleaned = _clean_text(value)
    elif shape is Shape.ENUM:
        cleaned = _clean_enum(spec, value)
    elif shape is Shape.FLAG:
        cleaned = _clean_flag(value)
    elif shape is Shape.ORDER:
        cleaned = _clean_order(value)
    elif shape is Shape.SECONDS:
        cleaned = _clean_seconds(value)
    elif shape is Shape.COUNT:
        cleaned = _clean_count(value)
    elif shape is Shape.STRINGS:
        cleaned = _clean_strings(value)
    elif shape is Shape.RECORDS:
        cleaned = _coerce_records(spec, value, index)
    elif shape is Shape.CREW:
        cleaned = coerce_crew_leaf(value)
    elif shape is Shape.EQUIPMENT:
        cleaned = coerce_equipment_leaf(value)
    elif shape is Shape.CREW_GROUP:
        cleaned = _coerce_group(value, schema.declared_children.get(spec.path, frozenset()), coerce_crew_leaf)
    elif shape is Shape.EQUIPMENT_GROUP:
        cleaned = _coerce_group(
            value, schema.declared_children.get(spec.path, frozenset()), coerce_equipment_leaf
        )
    else:
        cleaned = value if isinstance(value, dict) else {}

    return _MISSING if cleaned is None else cleaned


def _default(spec: FieldSpec, draft: dict[str, Any], index: int) -> Any:
    if spec.default_factory is not None:
        return spec.default_factory(draft, index)
    return copy.deepcopy(spec.default)


def _container(draft: dict[str, Any], path: Path) -> dict[str, Any]:
    node = draft
    for key in path:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    return node


def _close(draft: dict[str, Any], schema: DraftSchema) -> list[str]:
    dropped = []
    for path in schema.closed_paths:
        node = _lookup(draft, path)
        if not isinstance(node, dict):
            continue
        declared = schema.declared_children.get(path, frozenset())
        for key in [k for k in node if k not in declared]:
            del node[key]
            dropped.append(".".join(path + (key,)))
    return dropped


def _walk(draft: dict[str, Any], schema: DraftSchema, index: int) -> dict[str, Any]:
    defaulted = []
    for spec in schema.fields:
        parent = _container(draft, spec.path[:-1])
        key = spec.path[-1]
        value = _coerce(spec, parent.get(key, _MISSING), index, schema)
        if value is _MISSING:
            value = _default(spec, draft, index)
            defaulted.append(".".join(spec.path))
        parent[key] = value

    dropped = _close(draft, schema)
    if defaulted or dropped:
        logger.debug(
            "Normalized %s item %d",
            schema.name,
            index,
            extra={"defaulted": defaulted, "dropped": dropped},
        )
    return draft


def normalize_draft(raw: Any, schema: DraftSchema, index: int = 0) -> dict[str, Any]:
    """Normalize one parsed item to the canonical shape of a schema.

    Args:
        raw: Parsed item. Anything other than a dict is treated as empty.
        schema: Draft schema table.
        index: 0-based position of the item in its batch; used for
            position-derived defaults such as "Shot 3".

    Returns:
        A new dict with every declared path present and well-shaped.
    """
    draft = copy.deepcopy(raw) if isinstance(raw, dict) else {}

    applied = apply_promotions(draft, schema.promotions)
    if applied:
        logger.info(
            "Promoted %d legacy field(s) on %s item %d",
            len(applied),
            schema.name,
            index,
            extra={"promotions": [".".join(rule.source) for rule in applied]},
        )

    return _walk(draft, schema, index)


def normalize_scene_draft(raw: Any, index: int = 0) -> dict[str, Any]:
    """Normalize a parsed scene item."""
    return normalize_draft(raw, SCENE_SCHEMA, index)


def normalize_cut_draft(raw: Any, index: int = 0) -> dict[str, Any]:
    """Normalize a parsed cut item."""
    return normalize_draft(raw, CUT_SCHEMA, index)
