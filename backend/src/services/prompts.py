"""Prompt templates for AI draft generation.

Contains system and user prompts for:
1. Scene drafts - full scenes with department crew and equipment
2. Cut drafts - shot lists for a single scene

Prompts are written in Korean because every free-text value and several
enumerated values (time of day, durations) are Korean. The department sections
of the JSON templates are rendered from the tables in draft_schema.py.
"""

from __future__ import annotations

import json
from typing import Any

from src.models import ProjectContext, SceneContext
from src.services.draft_schema import (
    ANGLE_DIRECTIONS,
    CAMERA_MOVEMENTS,
    CAMERA_SETUP_DEFAULTS,
    CREW_ROLES,
    DEPARTMENTS,
    EQUIPMENT_CATEGORIES,
    EQUIPMENT_COMPOSITES,
    GRIP_MODIFIER_PARTS,
    LIGHT_INSTRUMENTS,
    MAX_CUT_SECONDS,
    MIN_CUT_SECONDS,
    PRODUCTION_METHODS,
    SHOT_SIZES,
    SPECIAL_REQUIREMENT_FLAGS,
    SUBJECT_TYPES,
    TIME_OF_DAY_CHOICES,
)
from src.services.duration import render_duration_rules

SCENE_LIST_KEY = "scenes"
CUT_LIST_KEY = "cutList"

DEPARTMENT_LABELS = {
    "direction": "연출부",
    "production": "제작부",
    "cinematography": "촬영부",
    "lighting": "조명부",
    "sound": "음향부",
    "art": "미술부",
}

# One midday band (점심 is an alias of 낮); 오후 stays a valid answer inside it
TIME_OF_DAY_BANDS = {
    "새벽": "오전 0시 ~ 6시",
    "아침": "오전 6시 ~ 11시",
    "낮": "오전 11시 ~ 오후 4시 (점심, 오후)",
    "저녁": "오후 4시 ~ 8시",
    "밤": "오후 8시 ~ 오전 12시",
}

LIGHT_INSTRUMENT_LABELS = {
    "keyLight": "키 라이트",
    "fillLight": "필 라이트",
    "backLight": "백 라이트",
    "backgroundLight": "배경 조명",
    "specialEffects": "특수 조명",
    "softLight": "소프트 라이트",
}

EQUIPMENT_SELECTION_GUIDE = """**카메라 선택 기준:**
- 액션/빠른 움직임: RED Komodo 6K (고프레임레이트), Sony FX6 (안정화)
- 정적인 대화: Canon C300 Mark III (고품질), ARRI Alexa Mini (영화감)
- 야외 촬영: Sony FX6 (가벼움), Canon C300 Mark III (내구성)
- 실내 촬영: RED Komodo 6K (고해상도), ARRI Alexa Mini (색감)

**렌즈 선택 기준:**
- 와이드 쇼트 (풍경, 실내): Zeiss CP.3 24mm T2.1, Canon CN-E 16-35mm T2.8
- 미디엄 쇼트 (대화, 중간거리): Zeiss CP.3 50mm T2.1, Canon CN-E 24-70mm T2.8
- 클로즈업 (감정표현): Sigma Cine 85mm T1.5, Zeiss CP.3 100mm T2.1
- 액션/움직임: Canon CN-E 24-70mm T2.8 (줌), Sigma Cine 50mm T1.5 (빠른 조리개)

**지지대 선택 기준:**
- 정적 촬영: Manfrotto 504HD (안정성), Sachtler Video 18 (부드러움)
- 움직임 촬영: DJI RS 3 Pro (짐벌), Steadicam (손촬영)

**필터 선택 기준:**
- 야외 촬영: Tiffen Variable ND (노출 조절), Polarizing Filter (반사 제거)
- 인물 촬영: Black Pro-Mist 1/4 (부드러운 피부), Tiffen Soft/FX (미스트)
- 분위기 촬영: Black Pro-Mist 1/4 (로맨틱), Tiffen Warm Pro-Mist (따뜻함)

**액세서리 선택 기준:**
- 액션/야외 촬영: Teradek Bolt 4K (무선 모니터링), DJI Focus Motor (자동 포커스)
- 정적/실내 촬영: SmallHD 7" Monitor (정밀 모니터링), DJI Focus Motor (정밀도)

**조명 장비 선택 기준:**
- 야외 촬영: HMI 조명 (자연광 보조), LED 패널 (휴대성)
- 실내 촬영: Tungsten 조명 (따뜻한 색감), LED 조명 (에너지 효율)
- 액션 촬영: LED 조명 (빠른 설정), HMI 조명 (강한 빛)
- 인물 촬영: Softbox (부드러운 빛), Ring Light (균등한 조명)

**음향 장비 선택 기준:**
- 대화 촬영: Sennheiser MKH416 (클로즈업 마이크), Shure SM7B (보이스)
- 액션 촬영: 무선 마이크 (움직임), Boom 마이크 (자유도)
- 야외 촬영: Wind Shield (바람 차단), 무선 마이크 (거리)

**미술 장비 선택 기준:**
- 실내 세트: Set Construction 도구, Set Dressing 소품
- 야외 촬영: Portable Set Dressing, Weather Protection
- 액션 촬영: Safety Equipment, Stunt Props
- 인물 촬영: Makeup Station, Costume Dressing Room

씬의 내용, 분위기, 촬영 환경을 분석하고 예산과 시간을 고려해 현실적인 장비 조합을 제시하세요."""


def _json_block(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# ==============================================================================
# Department templates
# ==============================================================================


def crew_template() -> dict[str, dict[str, list[dict[str, str]]]]:
    """Crew section of the JSON template: every department and declared role."""
    return {
        department: {role: [{"role": "역할"}] for role in CREW_ROLES[department]}
        for department in DEPARTMENTS
    }


def equipment_template() -> dict[str, dict[str, Any]]:
    """Equipment section of the JSON template, composites included."""
    template: dict[str, dict[str, Any]] = {}
    for department in DEPARTMENTS:
        categories: dict[str, Any] = {
            category: ["장비 이름"] for category in EQUIPMENT_CATEGORIES[department]
        }
        for composite, parts in EQUIPMENT_COMPOSITES.get(department, {}).items():
            categories[composite] = {part: ["장비 이름"] for part in parts}
        template[department] = categories
    return template


def _department_roster() -> str:
    lines = []
    for department in DEPARTMENTS:
        roles = ", ".join(CREW_ROLES[department])
        lines.append(f"    - {department}: {DEPARTMENT_LABELS[department]} ({roles})")
    return "\n".join(lines)


# ==============================================================================
# Scene Draft Prompts
# ==============================================================================


def scene_system_prompt(count: int) -> str:
    """System prompt for scene draft generation."""
    return (
        f"당신은 영화 씬 생성기입니다. 프로젝트 정보에 따라 최대 {count}개의 완성된 씬을 생성하고, "
        "각 씬에 부서별 crew와 equipment를 포함하세요. 유효한 JSON으로만 응답하세요."
    )


def scene_json_template() -> dict[str, Any]:
    """Literal JSON template the generator fills for scene drafts."""
    setup: dict[str, Any] = {
        instrument: {
            "type": LIGHT_INSTRUMENT_LABELS[instrument],
            "equipment": "조명 장비",
            "intensity": "강도",
        }
        for instrument in LIGHT_INSTRUMENTS
    }
    setup["gripModifier"] = {part: ["장비 이름"] for part in GRIP_MODIFIER_PARTS}
    setup["overall"] = {"colorTemperature": "컬러 온도", "mood": "분위기"}

    scene = {
        "order": 1,
        "title": "씬 제목",
        "description": "씬 설명 (1000자 이내)",
        "dialogues": [{"character": "캐릭터명", "text": "대사 내용"}],
        "weather": "날씨",
        "lighting": {"description": "조명 설명", "setup": setup},
        "visualDescription": "시각적 설명",
        "scenePlace": "스토리 장소",
        "sceneDateTime": "스토리 시간",
        "vfxRequired": False,
        "sfxRequired": False,
        "estimatedDuration": "예상 지속 시간 (예: 3분 30초)",
        "location": {"address": "실제 장소 주소", "name": "장소 이름", "group_name": "그룹 이름"},
        "timeOfDay": " / ".join(TIME_OF_DAY_CHOICES) + " 중 하나",
        "crew": crew_template(),
        "equipment": equipment_template(),
        "cast": [{"role": "역할", "name": "역할이름"}],
        "extra": [{"role": "역할", "number": 1}],
        "specialRequirements": ["특별 요구사항"],
    }
    return {SCENE_LIST_KEY: [scene]}


def build_scene_prompt(count: int, project: ProjectContext) -> str:
    """Build user prompt for scene draft generation.

    Args:
        count: Maximum number of scenes to generate.
        project: Project synopsis, genre, duration and story.

    Returns:
        Formatted user prompt string.
    """
    time_bands = "\n".join(f"- {name}: {band}" for name, band in TIME_OF_DAY_BANDS.items())
    project_input = {
        "title": project.title,
        "synopsis": project.synopsis,
        "genre": project.genre,
        "estimatedDuration": project.estimatedDuration,
        "story": project.story,
    }

    parts = [
        f"다음 스토리를 바탕으로 영화 씬을 최대 {count}개 생성해주세요.",
        "",
        "**기본 정보:**",
        "1. order: 씬 번호 (1부터 시작하는 정수, 중복 금지)",
        "2. title: 씬 제목",
        "3. description: 인물들의 상황, 감정, 배경 설명 (1000자 이내)",
        "",
        "**대화 및 환경:**",
        "4. dialogues: 씬 전체 대사 배열 (character, text; 대사당 500자 이내)",
        "5. weather: 날씨 조건",
        "6. visualDescription: 시각적 묘사 (500자 이내)",
        "",
        "**조명 설정:**",
        "7. lighting: description(200자 이내)과 setup",
        "   - " + ", ".join(LIGHT_INSTRUMENTS) + ": 각각 type, equipment, intensity",
        "   - gripModifier: " + ", ".join(GRIP_MODIFIER_PARTS) + " (문자열 배열)",
        "   - overall: colorTemperature, mood",
        "",
        "**스케줄링 정보:**",
        "8. location: 실제 촬영 장소 (address, name, group_name). group_name은 가까운 촬영지 묶음 이름",
        f"9. timeOfDay: 촬영 시간대 ({', '.join(TIME_OF_DAY_CHOICES)} 중 하나)",
        '10. estimatedDuration: 예상 지속시간 (문자열, 예: "3분 30초")',
        "",
        "**인력 구성:**",
        "11. crew: 부서별, 역할별 배열. 각 원소는 {\"role\": \"역할\"} 객체입니다.",
        _department_roster(),
        "",
        "**장비 구성:**",
        "12. equipment: 부서별, 카테고리별 장비 이름 배열. 값은 항상 배열이어야 합니다.",
        "",
        EQUIPMENT_SELECTION_GUIDE,
        "",
        "**출연진:**",
        "13. cast: 역할마다 하나의 객체 (role, name)",
        "14. extra: 보조 출연진 (role, number)",
        "",
        "**특별 요구사항:**",
        "15. specialRequirements: 문자열 배열",
        "16. vfxRequired / sfxRequired: boolean",
        "",
        "**예상 시간 계산 기준:**",
        render_duration_rules(),
        "",
        "**대사 생성 지침:**",
        "- 각 장면의 예상 시간에 맞는 충분한 대사량을 생성해주세요 (1분당 약 150-200자)",
        "- 대사는 자연스러운 대화 흐름을 따라야 합니다",
        "- 내레이션, 음성 효과, 배경 음성도 포함해주세요",
        "",
        "**시간대 구분:**",
        time_bands,
        "",
        "**중요:**",
        "- 반드시 timeOfDay를 명확히 설정해야 합니다",
        "- 이전 씬과의 연속성을 고려하여 자연스러운 흐름을 만들어주세요",
        "- 모든 부서와 역할, 카테고리 키를 빠짐없이 포함하고 비어 있으면 빈 배열([])을 사용하세요",
        "",
        "input:",
        json.dumps(project_input, ensure_ascii=False),
        "",
        "반드시 다음 JSON 형식으로만 응답해주세요. 다른 텍스트는 포함하지 마세요:",
        "",
        _json_block(scene_json_template()),
    ]
    return "\n".join(parts)


# ==============================================================================
# Cut Draft Prompts
# ==============================================================================


def cut_system_prompt(count: int) -> str:
    """System prompt for cut draft generation."""
    return (
        f"당신은 영화 촬영 전문가입니다. 최대 {count}개의 컷만 생성하고 "
        "유효한 JSON 형식으로만 응답하세요. 간결하게 작성해주세요."
    )


def cut_json_template() -> dict[str, Any]:
    """Literal JSON template the generator fills for cut drafts."""
    cut = {
        "order": 1,
        "title": "컷 제목",
        "description": "촬영 설명",
        "cameraSetup": CAMERA_SETUP_DEFAULTS,
        "vfxEffects": "특수 효과 없음",
        "soundEffects": "배경음",
        "directorNotes": "연출 메모",
        "dialogue": "대사 내용",
        "narration": "내레이션 내용",
        "subjectMovement": [
            {
                "name": "주인공",
                "type": "character",
                "position": "화면 중앙",
                "action": "천천히 걷기",
                "emotion": "차분함",
                "description": "주인공이 천천히 걷는 모습",
            }
        ],
        "productionMethod": "live_action",
        "productionMethodReason": "실사 촬영으로 자연스러운 분위기 연출",
        "estimatedDuration": 8,
        "specialRequirements": {
            group: {flag: False for flag in flags}
            for group, flags in SPECIAL_REQUIREMENT_FLAGS.items()
        },
        "crew": crew_template(),
        "equipment": equipment_template(),
    }
    return {CUT_LIST_KEY: [cut]}


def build_cut_prompt(count: int, scene: SceneContext, genre: list[str]) -> str:
    """Build user prompt for cut draft generation.

    Args:
        count: Maximum number of cuts to generate.
        scene: The scene being broken into cuts.
        genre: Project genres.

    Returns:
        Formatted user prompt string.
    """
    dialogues = [line.model_dump() for line in scene.dialogues]
    cast = [member.model_dump() for member in scene.cast]

    parts = [
        f"title - {scene.title}",
        f"description - {scene.description}",
        f"dialogues - {json.dumps(dialogues, ensure_ascii=False)}",
        f"timeOfDay - {scene.timeOfDay}",
        f"weather - {scene.weather}",
        f"lighting - {json.dumps(scene.lighting, ensure_ascii=False)}",
        f"place - {scene.scenePlace}",
        f"cast - {json.dumps(cast, ensure_ascii=False)}",
        f"visualDescription - {scene.visualDescription}",
        f"vfxRequired - {str(scene.vfxRequired).lower()}",
        f"sfxRequired - {str(scene.sfxRequired).lower()}",
        f"genre - {', '.join(genre)}",
        "",
        f"최대 {count}개 컷을 다음 형식으로 생성:",
        _json_block(cut_json_template()),
        "",
        "각 컷은 다음을 고려하여 생성:",
        f"- shotSize: {', '.join(SHOT_SIZES)} 중 선택",
        f"- angleDirection: {', '.join(ANGLE_DIRECTIONS)} 중 선택",
        f"- cameraMovement: {', '.join(CAMERA_MOVEMENTS)} 중 선택",
        f"- subjectMovement.type: {', '.join(SUBJECT_TYPES)} 중 선택",
        f"- estimatedDuration: {MIN_CUT_SECONDS}-{MAX_CUT_SECONDS}초 사이의 정수 (초 단위)",
        f"- productionMethod: {' 또는 '.join(PRODUCTION_METHODS)} 중 선택",
        "- order는 1부터 시작하는 정수이며 컷마다 달라야 합니다",
        "- crew와 equipment는 씬에 필요한 부서만 채우고 나머지는 빈 배열([])로 두세요",
        "",
        "유효한 JSON 형식으로만 응답하세요.",
    ]
    return "\n".join(parts)
