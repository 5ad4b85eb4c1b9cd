"""Recovery parser for generated draft responses.

The generator is asked for bare JSON but routinely wraps it in markdown fences
or commentary, leaves trailing commas, emits JavaScript literals, or stops
mid-list when it runs out of tokens. Parsing runs an ordered chain of
strategies and the first success wins:

1. Inner content of a ```json fence, else of any fence.
2. Substring between the first '{' and the last '}' (or the array span).
3. Strict JSON parse.
4. Textual repairs (trailing commas, undefined/null/NaN literals), re-parse.
5. Optional list salvage: keep the complete elements of the expected list.
6. Deterministic fallback: an empty top-level container.

A tree is only useful if the expected list key can be located in it;
extract_draft_items raises ParseFailure when it cannot.
"""

import json
import logging
import re
from typing import Any

from src.services.draft_errors import ParseFailure

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json[ \t]*\n?([\s\S]*?)\n?```", re.IGNORECASE)
_ANY_FENCE_RE = re.compile(r"```[\w-]*[ \t]*\n?([\s\S]*?)\n?```")
_OPEN_FENCE_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n?")

# String literals are matched first and left as they are
_REPAIR_RE = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")'
    r"|,\s*(?P<closer>[}\]])"
    r"|(?<=[:\[,])(?P<empty>\s*)(?:undefined|null)\b"
    r"|(?<=[:\[,])(?P<nan>\s*)-?NaN\b"
)

_MAX_LOG_PREVIEW = 500


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {token}")


def _loads(text: str) -> Any:
    """Strict JSON parse. NaN and Infinity are rejected."""
    return json.loads(text, parse_constant=_reject_constant)


def extract_json_text(raw: str) -> str:
    """Cut the JSON-looking part out of a raw response.

    Args:
        raw: Untrusted generator output.

    Returns:
        The candidate JSON text. May still be invalid.
    """
    text = raw or ""

    match = _JSON_FENCE_RE.search(text)
    if match is None:
        match = _ANY_FENCE_RE.search(text)
    if match is not None:
        text = match.group(1)
    else:
        # Unterminated fence from a truncated response
        text = _OPEN_FENCE_RE.sub("", text, count=1)

    text = text.strip()
    first_brace = text.find("{")
    first_bracket = text.find("[")
    last_brace = text.rfind("}")

    # Array span only when it encloses every object, so "[3] scenes: {...}"
    # still yields the object span
    if first_bracket != -1 and (first_brace == -1 or first_bracket < first_brace):
        last_bracket = text.rfind("]")
        if last_bracket > first_bracket and last_bracket > last_brace:
            return text[first_bracket:last_bracket + 1]

    if first_brace != -1:
        if last_brace > first_brace:
            return text[first_brace:last_brace + 1]
        return text[first_brace:]

    return text


def repair_json_text(text: str) -> str:
    """Apply the bounded set of textual repairs.

    Trailing commas are removed, `undefined` and `null` become empty strings
    and `NaN` becomes 0. Literals are only replaced in value positions, and
    the contents of string literals are never touched.
    """
    return _REPAIR_RE.sub(_repair_token, text)


def _repair_token(match: re.Match[str]) -> str:
    if match.group("string") is not None:
        return match.group("string")
    if match.group("closer") is not None:
        return match.group("closer")
    if match.group("empty") is not None:
        return match.group("empty") + '""'
    return match.group("nan") + "0"


def _loads_with_repairs(text: str) -> Any:
    try:
        return _loads(text)
    except ValueError:
        return _loads(repair_json_text(text))


def _split_list_elements(text: str, start: int) -> tuple[list[str], bool]:
    """Split a JSON array body into raw element texts.

    Args:
        text: JSON text.
        start: Index just after the opening '['.

    Returns:
        (complete element texts, whether the array was closed). An element cut
        off by the end of the text is not returned.
    """
    elements: list[str] = []
    depth = 0
    in_string = False
    escaped = False
    element_start = start

    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in "{[":
            depth += 1
        elif char in "}]":
            if depth == 0:
                tail = text[element_start:pos].strip()
                if tail:
                    elements.append(tail)
                return elements, True
            depth -= 1
        elif char == "," and depth == 0:
            elements.append(text[element_start:pos].strip())
            element_start = pos + 1

    # The extracted text may end right after a complete element
    tail = text[element_start:].strip()
    if tail and depth == 0 and not in_string and tail[-1] in "}]":
        elements.append(tail)
    return elements, False


def salvage_list(text: str, list_key: str) -> dict[str, list[Any]] | None:
    """Rebuild `{list_key: [...]}` from the complete elements of a broken list.

    A list that was cut off mid-element is truncated to its complete prefix,
    which may be empty. Elements that still fail to parse are dropped.

    Returns:
        The rebuilt container, or None if the key does not appear in the text.
    """
    match = re.search(r'"' + re.escape(list_key) + r'"\s*:\s*\[', text)
    if match is None:
        return None

    raw_elements, closed = _split_list_elements(text, match.end())
    items = []
    for raw_element in raw_elements:
        if not raw_element:
            continue
        try:
            items.append(_loads_with_repairs(raw_element))
        except ValueError:
            logger.debug("Dropping unparseable %s element", list_key)

    logger.warning(
        "Salvaged %d %s element(s) from malformed response",
        len(items),
        list_key,
        extra={"list_key": list_key, "list_closed": closed, "element_count": len(raw_elements)},
    )
    return {list_key: items}


def parse_draft_tree(raw: str, list_key: str, repair_truncated_lists: bool = False) -> Any:
    """Parse raw generator output into a generic tree.

    Args:
        raw: Untrusted generator output.
        list_key: Top-level key expected to hold the draft list.
        repair_truncated_lists: Whether to salvage a dangling `list_key` array
            before giving up.

    Returns:
        Parsed tree. Never raises; unrecoverable text yields `{list_key: []}`.
    """
    candidate = extract_json_text(raw)

    try:
        return _loads(candidate)
    except ValueError:
        pass

    repaired = repair_json_text(candidate)
    try:
        tree = _loads(repaired)
        logger.info("Recovered malformed JSON with textual repairs", extra={"list_key": list_key})
        return tree
    except ValueError as e:
        logger.warning(
            "JSON parse failed after repairs: %s",
            e,
            extra={"list_key": list_key},
        )

    if repair_truncated_lists:
        salvaged = salvage_list(repaired, list_key)
        if salvaged is not None:
            return salvaged

    logger.warning(
        "Falling back to empty %s container. Response preview: %s",
        list_key,
        (raw or "")[:_MAX_LOG_PREVIEW],
    )
    return {list_key: []}


def extract_draft_items(tree: Any, list_key: str) -> list[dict[str, Any]]:
    """Locate the draft list inside a parsed tree.

    Accepts `{list_key: [...]}`, a bare top-level list, or a single item that
    carries both `order` and `title`. Non-object elements are dropped.

    Raises:
        ParseFailure: If no non-empty list of objects can be found.
    """
    items: Any = None
    if isinstance(tree, dict):
        items = tree.get(list_key)
        if not isinstance(items, list) and "order" in tree and "title" in tree:
            items = [tree]
    elif isinstance(tree, list):
        items = tree

    if not isinstance(items, list) or not items:
        raise ParseFailure("unparseable response")

    objects = [item for item in items if isinstance(item, dict)]
    if len(objects) < len(items):
        logger.warning(
            "Dropped %d non-object %s element(s)",
            len(items) - len(objects),
            list_key,
        )
    if not objects:
        raise ParseFailure("unparseable response")

    return objects


def parse_draft_items(
    raw: str,
    list_key: str,
    repair_truncated_lists: bool = False,
) -> list[dict[str, Any]]:
    """Parse raw generator output and return the draft items.

    Raises:
        ParseFailure: If no draft list can be recovered.
    """
    tree = parse_draft_tree(raw, list_key, repair_truncated_lists=repair_truncated_lists)
    return extract_draft_items(tree, list_key)
