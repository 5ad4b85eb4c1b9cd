"""Scene duration heuristic.

Estimated screen time of a scene, in minutes, is a base value plus fixed
increments from an additive rule table, clamped to [MIN_MINUTES, MAX_MINUTES].
The same table is rendered into the scene prompt so the generator and the
normalizer agree on the arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

BASE_MINUTES = 2.0
MIN_MINUTES = 1.0
MAX_MINUTES = 8.0

EMOTIONAL_MARKERS = ("!", "?", "...", "ㅠ", "ㅜ")
VFX_KEYWORDS = ("CG", "특수효과", "AI")
ACTION_KEYWORDS = ("액션", "싸움", "추격", "달리기")
EMOTION_KEYWORDS = ("감정", "눈물", "고백", "이별")
ESTABLISHING_KEYWORDS = ("하늘", "바다", "구름")


@dataclass(frozen=True)
class SceneSignals:
    """Text features of a scene the duration rules look at."""

    dialogue: str = ""
    description: str = ""
    visual_description: str = ""
    visual_effects: str = ""
    vfx_required: bool = False

    @property
    def word_count(self) -> int:
        return len(self.dialogue.split())


@dataclass(frozen=True)
class DurationRule:
    """One additive row of the duration table.

    Rules sharing a `tier` are exclusive: only the first matching row of a
    tier applies.
    """

    label: str
    minutes: float
    applies: Callable[[SceneSignals], bool]
    tier: str | None = None


DURATION_RULES: tuple[DurationRule, ...] = (
    DurationRule("대사가 있는 장면", 0.5, lambda s: len(s.dialogue) > 0),
    DurationRule("긴 대사 (100자 초과)", 1.0, lambda s: len(s.dialogue) > 100, tier="dialogue_length"),
    DurationRule("중간 길이 대사 (50자 초과)", 0.5, lambda s: len(s.dialogue) > 50, tier="dialogue_length"),
    DurationRule("많은 단어 (20개 초과)", 0.5, lambda s: s.word_count > 20, tier="word_count"),
    DurationRule("중간 단어 수 (10개 초과)", 0.25, lambda s: s.word_count > 10, tier="word_count"),
    DurationRule(
        "감정적 대사 (!, ?, ..., ㅠ, ㅜ)",
        0.25,
        lambda s: any(marker in s.dialogue for marker in EMOTIONAL_MARKERS),
    ),
    DurationRule(
        "특수효과/CG 장면",
        1.0,
        lambda s: s.vfx_required or any(k in s.visual_effects for k in VFX_KEYWORDS),
    ),
    DurationRule("액션 장면", 1.0, lambda s: any(k in s.description for k in ACTION_KEYWORDS)),
    DurationRule("감정적 장면", 1.0, lambda s: any(k in s.description for k in EMOTION_KEYWORDS)),
    DurationRule(
        "단순 자연 풍경",
        -1.0,
        lambda s: any(k in s.visual_description for k in ESTABLISHING_KEYWORDS),
    ),
)


def clamp_minutes(minutes: float) -> float:
    return max(MIN_MINUTES, min(MAX_MINUTES, minutes))


def estimate_scene_minutes(
    signals: SceneSignals,
    rules: tuple[DurationRule, ...] = DURATION_RULES,
) -> float:
    """Apply the rule table to a scene and clamp the result."""
    minutes = BASE_MINUTES
    used_tiers: set[str] = set()

    for rule in rules:
        if rule.tier is not None and rule.tier in used_tiers:
            continue
        if rule.applies(signals):
            minutes += rule.minutes
            if rule.tier is not None:
                used_tiers.add(rule.tier)

    return clamp_minutes(minutes)


def format_minutes(minutes: float) -> str:
    """Format fractional minutes as "N분" or "N분 M초"."""
    whole = int(minutes)
    seconds = round((minutes - whole) * 60)
    if seconds == 60:
        whole, seconds = whole + 1, 0
    if seconds:
        return f"{whole}분 {seconds}초"
    return f"{whole}분"


def signals_from_draft(draft: dict[str, Any]) -> SceneSignals:
    """Collect duration signals from a (possibly partial) scene draft."""
    dialogue_lines = []
    lines = draft.get("dialogues")
    for line in lines if isinstance(lines, list) else []:
        if isinstance(line, dict) and isinstance(line.get("text"), str):
            dialogue_lines.append(line["text"])
        elif isinstance(line, str):
            dialogue_lines.append(line)

    def text(key: str) -> str:
        value = draft.get(key)
        return value if isinstance(value, str) else ""

    return SceneSignals(
        dialogue=" ".join(dialogue_lines),
        description=text("description"),
        visual_description=text("visualDescription"),
        visual_effects=text("visualEffects"),
        vfx_required=draft.get("vfxRequired") is True,
    )


def estimate_draft_duration(draft: dict[str, Any]) -> str:
    """Estimated duration label for a scene draft."""
    return format_minutes(estimate_scene_minutes(signals_from_draft(draft)))


def render_duration_rules(rules: tuple[DurationRule, ...] = DURATION_RULES) -> str:
    """Render the rule table as prompt bullet lines."""
    lines = [f"- 기본 시간: {BASE_MINUTES:g}분"]
    for rule in rules:
        sign = "+" if rule.minutes >= 0 else "-"
        lines.append(f"- {rule.label}: {sign}{abs(rule.minutes):g}분")
    lines.append(f"- 최소 {MIN_MINUTES:g}분, 최대 {MAX_MINUTES:g}분으로 제한")
    return "\n".join(lines)
