"""Unit tests for draft prompt templates."""

import json

from src.services.draft_schema import (
    ANGLE_DIRECTIONS,
    CAMERA_MOVEMENTS,
    CREW_ROLES,
    CUT_SCHEMA,
    DEPARTMENTS,
    EQUIPMENT_CATEGORIES,
    SCENE_SCHEMA,
    SHOT_SIZES,
    TIME_OF_DAY_CHOICES,
)
from src.services.normalization import normalize_cut_draft, normalize_scene_draft
from src.services.prompts import (
    CUT_LIST_KEY,
    SCENE_LIST_KEY,
    build_cut_prompt,
    build_scene_prompt,
    crew_template,
    cut_json_template,
    cut_system_prompt,
    equipment_template,
    scene_json_template,
    scene_system_prompt,
)


class TestDepartmentTemplates:
    """Tests for the crew and equipment template sections."""

    def test_crew_template_covers_every_role(self):
        template = crew_template()
        assert list(template) == list(DEPARTMENTS)
        for department in DEPARTMENTS:
            assert set(template[department]) == set(CREW_ROLES[department])

    def test_equipment_template_covers_every_category(self):
        template = equipment_template()
        for department in DEPARTMENTS:
            assert set(EQUIPMENT_CATEGORIES[department]) <= set(template[department])
        assert set(template["lighting"]["gripModifiers"]) == {"flags", "diffusion", "reflectors", "colorGels"}
        assert set(template["art"]["props"]) == {"characterProps", "setProps"}


class TestJsonTemplates:
    """The literal templates are themselves canonical drafts."""

    def test_scene_template_is_canonical(self):
        scene = scene_json_template()[SCENE_LIST_KEY][0]
        normalized = normalize_scene_draft(scene)
        assert set(scene) == set(SCENE_SCHEMA.declared_children[()])
        assert normalized["crew"] == scene["crew"]

    def test_cut_template_is_canonical(self):
        cut = cut_json_template()[CUT_LIST_KEY][0]
        normalized = normalize_cut_draft(cut)
        assert set(cut) <= set(CUT_SCHEMA.declared_children[()])
        assert normalized["cameraSetup"] == cut["cameraSetup"]
        assert normalized["specialRequirements"] == cut["specialRequirements"]


class TestScenePrompt:
    """Tests for scene prompt building."""

    def test_system_prompt_mentions_count(self):
        assert "최대 4개" in scene_system_prompt(4)

    def test_includes_project_input(self, sample_project):
        prompt = build_scene_prompt(3, sample_project)

        assert "최대 3개" in prompt
        assert json.dumps(sample_project.title, ensure_ascii=False) in prompt
        assert sample_project.synopsis in prompt
        assert '"genre": ["드라마", "로맨스"]' in prompt

    def test_includes_enums_and_rules(self, sample_project):
        prompt = build_scene_prompt(3, sample_project)

        for choice in TIME_OF_DAY_CHOICES:
            assert choice in prompt
        assert "기본 시간: 2분" in prompt
        assert "최소 1분, 최대 8분" in prompt
        for department in DEPARTMENTS:
            assert department in prompt

    def test_time_of_day_bands(self, sample_project):
        prompt = build_scene_prompt(3, sample_project)

        assert "- 낮: 오전 11시 ~ 오후 4시" in prompt
        assert "- 저녁: 오후 4시 ~ 8시" in prompt
        assert "오후 1시" not in prompt

    def test_ends_with_json_template(self, sample_project):
        prompt = build_scene_prompt(1, sample_project)
        template = prompt[prompt.index('{\n  "scenes"'):]
        assert json.loads(template) == scene_json_template()


class TestCutPrompt:
    """Tests for cut prompt building."""

    def test_system_prompt_mentions_count(self):
        assert "최대 6개" in cut_system_prompt(6)

    def test_includes_scene_fields(self, sample_scene):
        prompt = build_cut_prompt(5, sample_scene, ["드라마", "스릴러"])

        assert f"title - {sample_scene.title}" in prompt
        assert "timeOfDay - 밤" in prompt
        assert "vfxRequired - false" in prompt
        assert "genre - 드라마, 스릴러" in prompt
        assert "방금 그게 막차였어요?" in prompt
        assert "최대 5개" in prompt

    def test_includes_enums_and_duration_range(self, sample_scene):
        prompt = build_cut_prompt(5, sample_scene, [])

        assert ", ".join(SHOT_SIZES) in prompt
        assert ", ".join(ANGLE_DIRECTIONS) in prompt
        assert ", ".join(CAMERA_MOVEMENTS) in prompt
        assert "1-30초" in prompt
        assert "live_action 또는 ai_generated" in prompt

    def test_contains_json_template(self, sample_scene):
        prompt = build_cut_prompt(2, sample_scene, [])
        assert '"cutList"' in prompt
        assert '"shotSize": "MS"' in prompt
