"""Draft generation service for scenes and cuts.

Orchestrates one generation request:
1. Build the prompt for the requested kind
2. Call the text completion backend once, under a deadline
3. Recover the draft list from the response text
4. Normalize each item, then expand catalog codes

Everything after the response arrives is synchronous and pure. Either the
whole list is returned or an error is raised; there are no partial results.

Configuration (env vars):
- DRAFT_MODEL: Model requested for drafts (default: "gpt-4o")
- DRAFT_TIMEOUT_SECONDS: Deadline for the completion call (default: 120)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.llm import ChatMessage, LLMClient, LLMError, LLMRequest, ResponseFormat
from src.models import ProjectContext, SceneContext

from .catalog_service import Catalog, expand_draft
from .draft_errors import GenerationUnavailableError, ParseFailure
from .draft_schema import CUT_SCHEMA, SCENE_SCHEMA, DraftSchema
from .normalization import normalize_draft
from .prompts import (
    CUT_LIST_KEY,
    SCENE_LIST_KEY,
    build_cut_prompt,
    build_scene_prompt,
    cut_system_prompt,
    scene_system_prompt,
)
from .response_parser import parse_draft_items

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_MODEL = "gpt-4o"
DEFAULT_DRAFT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class DraftPipeline:
    """Per-kind generation settings."""

    kind: str
    list_key: str
    schema: DraftSchema
    system_prompt: Callable[[int], str]
    max_tokens: int
    temperature: float
    repair_truncated_lists: bool = False


SCENE_PIPELINE = DraftPipeline(
    kind="scene",
    list_key=SCENE_LIST_KEY,
    schema=SCENE_SCHEMA,
    system_prompt=scene_system_prompt,
    max_tokens=12000,
    temperature=0.7,
)

# Cut lists are long and get cut off at the token limit more often
CUT_PIPELINE = DraftPipeline(
    kind="cut",
    list_key=CUT_LIST_KEY,
    schema=CUT_SCHEMA,
    system_prompt=cut_system_prompt,
    max_tokens=4000,
    temperature=0.3,
    repair_truncated_lists=True,
)


def get_draft_model() -> str:
    return os.environ.get("DRAFT_MODEL", DEFAULT_DRAFT_MODEL)


def get_draft_timeout() -> float:
    return float(os.environ.get("DRAFT_TIMEOUT_SECONDS", DEFAULT_DRAFT_TIMEOUT_SECONDS))


def renumber_orders(drafts: list[dict[str, Any]]) -> bool:
    """Assign 1..N to `order` in list position when orders collide.

    Returns:
        True if the drafts were renumbered.
    """
    orders = [draft.get("order") for draft in drafts]
    if len(set(orders)) == len(orders):
        return False
    for position, draft in enumerate(drafts, start=1):
        draft["order"] = position
    return True


async def _complete(
    pipeline: DraftPipeline,
    count: int,
    prompt: str,
    llm_client: LLMClient,
) -> str:
    """Run the single completion call and return its text."""
    request = LLMRequest(
        messages=[
            ChatMessage(role="system", content=pipeline.system_prompt(count)),
            ChatMessage(role="user", content=prompt),
        ],
        model=get_draft_model(),
        temperature=pipeline.temperature,
        max_tokens=pipeline.max_tokens,
        response_format=ResponseFormat(type="json_object"),
        metadata={"kind": pipeline.kind, "count": count},
    )
    timeout = get_draft_timeout()

    try:
        response = await asyncio.wait_for(llm_client.generate(request), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(
            "Draft generation timed out after %ss",
            timeout,
            extra={"kind": pipeline.kind, "count": count},
        )
        raise GenerationUnavailableError(
            f"generation timed out after {timeout}s", kind=pipeline.kind
        ) from e
    except LLMError as e:
        logger.error(
            "Draft generation failed: %s",
            e,
            extra={"kind": pipeline.kind, "count": count, "error_type": type(e).__name__},
        )
        raise GenerationUnavailableError("generation unavailable", kind=pipeline.kind) from e

    if response.truncated:
        logger.warning(
            "Draft response hit the token limit",
            extra={"kind": pipeline.kind, "max_tokens": pipeline.max_tokens},
        )

    return response.text or ""


async def generate_drafts(
    pipeline: DraftPipeline,
    count: int,
    prompt: str,
    llm_client: LLMClient | None = None,
    catalog: Catalog | None = None,
    expand: bool | None = None,
) -> list[dict[str, Any]]:
    """Generate, parse, normalize and expand up to `count` drafts.

    Args:
        pipeline: Per-kind settings (SCENE_PIPELINE or CUT_PIPELINE).
        count: Maximum number of drafts to return.
        prompt: User prompt built for the pipeline's kind.
        llm_client: Completion client. Defaults to a new LLMClient.
        catalog: Catalog for code expansion. Defaults to the bundled catalog.
        expand: Expansion switch. Defaults to ENABLE_CATALOG_EXPANSION.

    Returns:
        Canonical drafts in response order.

    Raises:
        GenerationUnavailableError: Completion failed or timed out.
        ParseFailure: No draft list could be recovered.
    """
    if llm_client is None:
        llm_client = LLMClient()

    text = await _complete(pipeline, count, prompt, llm_client)

    try:
        items = parse_draft_items(
            text,
            pipeline.list_key,
            repair_truncated_lists=pipeline.repair_truncated_lists,
        )
    except ParseFailure as e:
        e.kind = pipeline.kind
        logger.error(
            "No %s list recovered from response",
            pipeline.list_key,
            extra={"kind": pipeline.kind, "response_chars": len(text)},
        )
        raise

    if len(items) > count:
        logger.info(
            "Truncating %d %s drafts to %d",
            len(items),
            pipeline.kind,
            count,
        )
        items = items[:count]

    drafts = [
        expand_draft(normalize_draft(item, pipeline.schema, index), catalog=catalog, enabled=expand)
        for index, item in enumerate(items)
    ]

    if renumber_orders(drafts):
        logger.info("Renumbered duplicate %s orders", pipeline.kind)

    logger.info(
        "Generated %d %s draft(s)",
        len(drafts),
        pipeline.kind,
        extra={"kind": pipeline.kind, "requested": count, "returned": len(drafts)},
    )
    return drafts


async def generate_scene_drafts(
    count: int,
    project: ProjectContext,
    llm_client: LLMClient | None = None,
    catalog: Catalog | None = None,
    expand: bool | None = None,
) -> list[dict[str, Any]]:
    """Generate scene drafts for a project."""
    prompt = build_scene_prompt(count, project)
    return await generate_drafts(
        SCENE_PIPELINE, count, prompt, llm_client=llm_client, catalog=catalog, expand=expand
    )


async def generate_cut_drafts(
    count: int,
    scene: SceneContext,
    genre: list[str],
    llm_client: LLMClient | None = None,
    catalog: Catalog | None = None,
    expand: bool | None = None,
) -> list[dict[str, Any]]:
    """Generate cut drafts for one scene."""
    prompt = build_cut_prompt(count, scene, genre)
    return await generate_drafts(
        CUT_PIPELINE, count, prompt, llm_client=llm_client, catalog=catalog, expand=expand
    )
