"""Unit tests for the scene duration heuristic."""

import pytest

from src.services.duration import (
    BASE_MINUTES,
    MAX_MINUTES,
    MIN_MINUTES,
    DurationRule,
    SceneSignals,
    clamp_minutes,
    estimate_draft_duration,
    estimate_scene_minutes,
    format_minutes,
    render_duration_rules,
    signals_from_draft,
)


class TestEstimateSceneMinutes:
    """Tests for the additive rule table."""

    def test_empty_scene_is_base(self):
        assert estimate_scene_minutes(SceneSignals()) == BASE_MINUTES

    def test_short_dialogue(self):
        assert estimate_scene_minutes(SceneSignals(dialogue="안녕")) == 2.5

    def test_dialogue_length_tiers_are_exclusive(self):
        """Only the long-dialogue increment applies to a 120-char line."""
        assert estimate_scene_minutes(SceneSignals(dialogue="가" * 120)) == 3.5

    def test_medium_dialogue(self):
        assert estimate_scene_minutes(SceneSignals(dialogue="가" * 60)) == 3.0

    def test_word_count_tier(self):
        dialogue = " ".join(["말"] * 21)
        assert estimate_scene_minutes(SceneSignals(dialogue=dialogue)) == 3.0

    def test_medium_word_count(self):
        dialogue = " ".join(["말"] * 11)
        assert estimate_scene_minutes(SceneSignals(dialogue=dialogue)) == 2.75

    def test_long_emotional_dialogue(self):
        dialogue = " ".join(["정말이야?"] * 25)
        # dialogue 0.5 + long 1.0 + words 0.5 + emotional 0.25
        assert estimate_scene_minutes(SceneSignals(dialogue=dialogue)) == 4.25

    def test_content_rules(self):
        signals = SceneSignals(
            description="옥상 위 추격 끝에 눈물의 고백",
            visual_effects="CG 번개",
        )
        # vfx 1.0 + action 1.0 + emotion 1.0
        assert estimate_scene_minutes(signals) == 5.0

    def test_vfx_required_flag(self):
        assert estimate_scene_minutes(SceneSignals(vfx_required=True)) == 3.0

    def test_establishing_shot_subtracts(self):
        assert estimate_scene_minutes(SceneSignals(visual_description="붉게 물든 하늘")) == 1.0

    def test_clamped_to_ceiling(self):
        rules = (DurationRule("big", 10.0, lambda s: True),)
        assert estimate_scene_minutes(SceneSignals(), rules) == MAX_MINUTES

    def test_clamped_to_floor(self):
        rules = (DurationRule("negative", -5.0, lambda s: True),)
        assert estimate_scene_minutes(SceneSignals(), rules) == MIN_MINUTES


class TestClampAndFormat:
    """Tests for clamping and the minutes label."""

    @pytest.mark.parametrize("minutes,expected", [(0.2, 1.0), (4.5, 4.5), (12.0, 8.0)])
    def test_clamp(self, minutes, expected):
        assert clamp_minutes(minutes) == expected

    @pytest.mark.parametrize(
        "minutes,expected",
        [(2.0, "2분"), (2.5, "2분 30초"), (4.25, "4분 15초"), (3.999, "4분")],
    )
    def test_format(self, minutes, expected):
        assert format_minutes(minutes) == expected


class TestDraftSignals:
    """Tests for reading signals off a partial draft."""

    def test_signals_from_draft(self):
        draft = {
            "dialogues": [{"character": "지수", "text": "안녕"}, "잘 가", {"character": "민호"}],
            "description": "추격",
            "visualDescription": "바다",
            "vfxRequired": "true",
        }
        signals = signals_from_draft(draft)
        assert signals.dialogue == "안녕 잘 가"
        assert signals.description == "추격"
        assert signals.visual_description == "바다"
        assert signals.vfx_required is False

    def test_malformed_fields_ignored(self):
        signals = signals_from_draft({"dialogues": "not a list", "description": 12})
        assert signals == SceneSignals()

    def test_estimate_draft_duration(self):
        assert estimate_draft_duration({"dialogues": [{"text": "안녕"}]}) == "2분 30초"


class TestRenderDurationRules:
    def test_render_contains_table(self):
        rendered = render_duration_rules()
        assert "- 기본 시간: 2분" in rendered
        assert "- 단순 자연 풍경: -1분" in rendered
        assert "- 긴 대사 (100자 초과): +1분" in rendered
        assert rendered.endswith("최소 1분, 최대 8분으로 제한")
