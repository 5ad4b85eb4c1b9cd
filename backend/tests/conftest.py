"""Pytest fixtures for testing."""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import pytest

from src.llm import LLMResponse, Usage
from src.models import ProjectContext, SceneContext
from src.services.catalog_service import ProductionCatalog


@pytest.fixture(autouse=True)
def catalog_expansion_off() -> Generator[None, None, None]:
    """Keep catalog expansion off unless a test turns it on."""
    with patch.dict(os.environ, {"ENABLE_CATALOG_EXPANSION": ""}):
        yield


@pytest.fixture
def make_llm_response() -> Callable[..., LLMResponse]:
    """Factory for LLMResponse objects carrying a raw draft payload."""

    def _make(text: str, finish_reason: str = "stop") -> LLMResponse:
        return LLMResponse(
            text=text,
            finish_reason=finish_reason,
            usage=Usage(prompt_tokens=1200, completion_tokens=800, total_tokens=2000),
            model="gpt-4o",
            provider="openai",
            latency_ms=1500,
        )

    return _make


@pytest.fixture
def sample_project() -> ProjectContext:
    """Sample project context for scene generation."""
    return ProjectContext(
        title="마지막 정류장",
        synopsis="막차를 놓친 두 사람이 밤새 도시를 걸으며 서로의 비밀을 알게 된다.",
        genre=["드라마", "로맨스"],
        estimatedDuration=90,
        story="비 오는 금요일 밤, 버스 정류장에서 처음 만난 지수와 민호...",
    )


@pytest.fixture
def sample_scene() -> SceneContext:
    """Sample scene context for cut generation."""
    return SceneContext(
        title="정류장의 첫 만남",
        description="비를 피하던 두 사람이 막차가 끊긴 것을 알게 된다.",
        dialogues=[
            {"character": "지수", "text": "방금 그게 막차였어요?"},
            {"character": "민호", "text": "그런 것 같네요..."},
        ],
        timeOfDay="밤",
        weather="비",
        lighting={"description": "가로등 아래 젖은 노란 빛"},
        scenePlace="버스 정류장",
        cast=[{"role": "지수", "name": "김하늘"}, {"role": "민호", "name": "이준"}],
        visualDescription="빗물에 번지는 네온사인",
    )


@pytest.fixture
def sample_catalog_data() -> dict[str, Any]:
    """Small catalog with one equipment and one crew code."""
    return {
        "version": 1,
        "equipment": {
            "CAM_SET_A": {
                "name": "카메라 세트 A",
                "description": "시네마 카메라 기본 패키지",
                "items": ["ARRI Alexa Mini", "SmallHD 7\" Monitor"],
                "reason": "영화적 색감",
                "alternatives": ["CAM_SET_B"],
            },
        },
        "crew": {
            "DIR_SET_A": {
                "name": "연출팀 A",
                "description": "장편 경험이 많은 연출팀",
                "experience": "10년",
                "specialty": ["드라마", "멜로"],
                "rate": "협의",
            },
        },
    }


@pytest.fixture
def sample_catalog(sample_catalog_data: dict[str, Any]) -> ProductionCatalog:
    return ProductionCatalog.from_dict(sample_catalog_data)
