"""AI draft generation endpoints.

Provides endpoints for:
- POST /drafts/scenes: Generate scene drafts for a project
- POST /drafts/cuts: Generate cut drafts for one scene

Drafts are returned for review only; nothing is persisted here.
"""

from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src.api.response import ApiResponse, success_response
from src.models import CutDraft, ProjectContext, SceneContext, SceneDraft
from src.services import draft_service

router = APIRouter(prefix="/drafts", tags=["Drafts"])

MAX_DRAFTS_PER_REQUEST = 20


class SceneDraftRequest(BaseModel):
    """Request body for scene draft generation."""

    maxScenes: Annotated[int, Field(ge=1, le=MAX_DRAFTS_PER_REQUEST)] = 5
    project: ProjectContext


class CutDraftRequest(BaseModel):
    """Request body for cut draft generation."""

    maxCuts: Annotated[int, Field(ge=1, le=MAX_DRAFTS_PER_REQUEST)] = 3
    genre: list[str] = Field(default_factory=list)
    scene: SceneContext


@router.post("/scenes", response_model=ApiResponse[list[SceneDraft]])
async def generate_scenes(request: SceneDraftRequest) -> dict:
    """Generate up to maxScenes scene drafts.

    Every returned draft is in create-scene shape, with all departments
    present in crew and equipment.
    """
    drafts = await draft_service.generate_scene_drafts(request.maxScenes, request.project)
    return success_response(drafts)


@router.post("/cuts", response_model=ApiResponse[list[CutDraft]])
async def generate_cuts(request: CutDraftRequest) -> dict:
    """Generate up to maxCuts cut drafts for a scene."""
    drafts = await draft_service.generate_cut_drafts(
        request.maxCuts, request.scene, request.genre
    )
    return success_response(drafts)
