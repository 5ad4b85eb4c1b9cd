"""Canonical draft schemas as static tables.

Every field of a scene or cut draft is one FieldSpec row: a path, the shape the
value must have, and the default used when it is missing or malformed. Legacy
generation shapes are described by PromotionRule rows. The generic walker in
normalization.py consumes these tables; prompts.py renders the department
sections of its JSON templates from the same department tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, Callable

from src.services.duration import estimate_draft_duration

Path = tuple[str, ...]
DefaultFactory = Callable[[dict[str, Any], int], Any]


class Shape(str, Enum):
    """Expected shape of a value at a schema path."""

    TEXT = "text"  # trimmed string
    ENUM = "enum"  # one of FieldSpec.choices
    FLAG = "flag"  # bool
    ORDER = "order"  # positive integer
    SECONDS = "seconds"  # positive integer seconds, accepts "<n>초"
    COUNT = "count"  # non-negative integer
    STRINGS = "strings"  # list of strings
    RECORDS = "records"  # list of small closed records (item_schema)
    CREW = "crew"  # list of crew assignments
    EQUIPMENT = "equipment"  # list of equipment items
    CREW_GROUP = "crew_group"  # open mapping, undeclared children coerced to CREW
    EQUIPMENT_GROUP = "equipment_group"  # open mapping, undeclared children coerced to EQUIPMENT
    RECORD = "record"  # closed mapping, undeclared children dropped


@dataclass(frozen=True)
class FieldSpec:
    """One row of a draft schema table."""

    path: Path
    shape: Shape
    default: Any = None
    choices: tuple[str, ...] = ()
    aliases: tuple[tuple[str, str], ...] = ()
    default_factory: DefaultFactory | None = None
    item_schema: DraftSchema | None = None
    text_field: str | None = None


@dataclass(frozen=True)
class PromotionRule:
    """Move a legacy value to its canonical location.

    With overwrite False the canonical value wins whenever it is populated.
    """

    source: Path
    target: Path
    overwrite: bool = False


@dataclass(frozen=True)
class DraftSchema:
    """A named set of field rows plus the legacy promotions applied first."""

    name: str
    fields: tuple[FieldSpec, ...]
    promotions: tuple[PromotionRule, ...] = ()

    @cached_property
    def declared_children(self) -> dict[Path, frozenset[str]]:
        """Map every declared container path to its declared child keys."""
        children: dict[Path, set[str]] = {}
        for spec in self.fields:
            for depth in range(len(spec.path)):
                children.setdefault(spec.path[:depth], set()).add(spec.path[depth])
        return {path: frozenset(keys) for path, keys in children.items()}

    @cached_property
    def closed_paths(self) -> tuple[Path, ...]:
        """Containers whose undeclared keys are dropped. Includes the root."""
        closed = [()] + [spec.path for spec in self.fields if spec.shape is Shape.RECORD]
        return tuple(closed)


def field(path: str, shape: Shape, default: Any = None, **options: Any) -> FieldSpec:
    """Build a FieldSpec from a dotted path."""
    return FieldSpec(path=tuple(path.split(".")), shape=shape, default=default, **options)


def promote(source: str, target: str, overwrite: bool = False) -> PromotionRule:
    """Build a PromotionRule from dotted paths."""
    return PromotionRule(tuple(source.split(".")), tuple(target.split(".")), overwrite)


# ==============================================================================
# Departments
# ==============================================================================

DEPARTMENTS: tuple[str, ...] = (
    "direction",
    "production",
    "cinematography",
    "lighting",
    "sound",
    "art",
)

CREW_ROLES: dict[str, tuple[str, ...]] = {
    "direction": ("director", "assistantDirector", "scriptSupervisor", "continuity"),
    "production": ("producer", "lineProducer", "productionManager", "productionAssistant"),
    "cinematography": (
        "cinematographer",
        "cameraOperator",
        "firstAssistant",
        "secondAssistant",
        "dollyGrip",
    ),
    "lighting": ("gaffer", "bestBoy", "electrician", "generatorOperator"),
    "sound": ("soundMixer", "boomOperator", "soundAssistant", "utility"),
    "art": (
        "productionDesigner",
        "artDirector",
        "setDecorator",
        "propMaster",
        "makeupArtist",
        "costumeDesigner",
        "hairStylist",
    ),
}

EQUIPMENT_CATEGORIES: dict[str, tuple[str, ...]] = {
    "direction": ("monitors", "communication", "scriptBoards"),
    "production": ("scheduling", "safety", "transportation"),
    "cinematography": ("cameras", "lenses", "supports", "filters", "accessories"),
    "lighting": (
        "keyLights",
        "fillLights",
        "backLights",
        "backgroundLights",
        "specialEffectsLights",
        "softLights",
        "power",
    ),
    "sound": ("microphones", "recorders", "wireless", "monitoring"),
    "art": ("setConstruction", "setDressing", "costumes", "specialEffects"),
}

# Categories that are fixed records of lists rather than lists
EQUIPMENT_COMPOSITES: dict[str, dict[str, tuple[str, ...]]] = {
    "lighting": {"gripModifiers": ("flags", "diffusion", "reflectors", "colorGels")},
    "art": {"props": ("characterProps", "setProps")},
}


def department_fields() -> tuple[FieldSpec, ...]:
    """Field rows for the crew and equipment department trees."""
    rows = [field("crew", Shape.RECORD)]
    for department in DEPARTMENTS:
        rows.append(field(f"crew.{department}", Shape.CREW_GROUP))
        for role in CREW_ROLES[department]:
            rows.append(field(f"crew.{department}.{role}", Shape.CREW))

    rows.append(field("equipment", Shape.RECORD))
    for department in DEPARTMENTS:
        rows.append(field(f"equipment.{department}", Shape.EQUIPMENT_GROUP))
        for category in EQUIPMENT_CATEGORIES[department]:
            rows.append(field(f"equipment.{department}.{category}", Shape.EQUIPMENT))
        for composite, parts in EQUIPMENT_COMPOSITES.get(department, {}).items():
            rows.append(field(f"equipment.{department}.{composite}", Shape.RECORD))
            for part in parts:
                rows.append(field(f"equipment.{department}.{composite}.{part}", Shape.EQUIPMENT))
    return tuple(rows)


# Flat equipment keys from older generation shapes, keyed by department
_LEGACY_EQUIPMENT_KEYS: dict[str, tuple[tuple[str, str], ...]] = {
    "cinematography": (
        ("camera", "cameras"),
        ("cameras", "cameras"),
        ("lenses", "lenses"),
        ("supports", "supports"),
        ("filters", "filters"),
        ("accessories", "accessories"),
    ),
    "lighting": tuple((key, key) for key in EQUIPMENT_CATEGORIES["lighting"]),
    "sound": tuple((key, key) for key in EQUIPMENT_CATEGORIES["sound"]),
    "direction": tuple((key, key) for key in EQUIPMENT_CATEGORIES["direction"]),
    "production": tuple((key, key) for key in EQUIPMENT_CATEGORIES["production"]),
    "art": tuple((key, key) for key in EQUIPMENT_CATEGORIES["art"]),
}


def legacy_equipment_promotions() -> tuple[PromotionRule, ...]:
    """Rules moving flat top-level equipment keys into their departments."""
    rules = []
    for department, pairs in _LEGACY_EQUIPMENT_KEYS.items():
        for legacy_key, category in pairs:
            rules.append(promote(f"equipment.{legacy_key}", f"equipment.{department}.{category}"))
        for composite, parts in EQUIPMENT_COMPOSITES.get(department, {}).items():
            for part in parts:
                rules.append(
                    promote(
                        f"equipment.{composite}.{part}",
                        f"equipment.{department}.{composite}.{part}",
                    )
                )
    return tuple(rules)


LEGACY_EQUIPMENT_PROMOTIONS = legacy_equipment_promotions()


def _position_order(draft: dict[str, Any], index: int) -> int:
    return index + 1


# ==============================================================================
# Scene drafts
# ==============================================================================

TIME_OF_DAY_CHOICES = ("새벽", "아침", "오후", "저녁", "밤", "낮")

TIME_OF_DAY_ALIASES = (
    ("점심", "낮"),
    ("정오", "낮"),
    ("오전", "아침"),
    ("dawn", "새벽"),
    ("morning", "아침"),
    ("afternoon", "오후"),
    ("evening", "저녁"),
    ("night", "밤"),
    ("day", "낮"),
    ("noon", "낮"),
)

LIGHT_INSTRUMENTS = (
    "keyLight",
    "fillLight",
    "backLight",
    "backgroundLight",
    "specialEffects",
    "softLight",
)

GRIP_MODIFIER_PARTS = ("flags", "diffusion", "reflectors", "colorGels")

DIALOGUE_SCHEMA = DraftSchema(
    name="dialogue",
    fields=(
        field("character", Shape.TEXT, ""),
        field("text", Shape.TEXT, ""),
    ),
)

CAST_SCHEMA = DraftSchema(
    name="cast",
    fields=(
        field("role", Shape.TEXT, ""),
        field("name", Shape.TEXT, ""),
    ),
)

EXTRA_SCHEMA = DraftSchema(
    name="extra",
    fields=(
        field("role", Shape.TEXT, ""),
        field("number", Shape.COUNT, 1),
    ),
)


def _scene_title(draft: dict[str, Any], index: int) -> str:
    return f"Scene {index + 1}"


def _lighting_fields() -> tuple[FieldSpec, ...]:
    rows = [
        field("lighting", Shape.RECORD),
        field("lighting.description", Shape.TEXT, ""),
        field("lighting.setup", Shape.RECORD),
    ]
    for instrument in LIGHT_INSTRUMENTS:
        rows.append(field(f"lighting.setup.{instrument}", Shape.RECORD))
        for part in ("type", "equipment", "intensity"):
            rows.append(field(f"lighting.setup.{instrument}.{part}", Shape.TEXT, ""))
    rows.append(field("lighting.setup.gripModifier", Shape.RECORD))
    for part in GRIP_MODIFIER_PARTS:
        rows.append(field(f"lighting.setup.gripModifier.{part}", Shape.STRINGS))
    rows.extend([
        field("lighting.setup.overall", Shape.RECORD),
        field("lighting.setup.overall.colorTemperature", Shape.TEXT, ""),
        field("lighting.setup.overall.mood", Shape.TEXT, ""),
    ])
    return tuple(rows)


SCENE_SCHEMA = DraftSchema(
    name="scene",
    fields=(
        field("order", Shape.ORDER, default_factory=_position_order),
        field("title", Shape.TEXT, default_factory=_scene_title),
        field("description", Shape.TEXT, ""),
        field("dialogues", Shape.RECORDS, item_schema=DIALOGUE_SCHEMA, text_field="text"),
        field("weather", Shape.TEXT, ""),
        *_lighting_fields(),
        field("visualDescription", Shape.TEXT, ""),
        field("scenePlace", Shape.TEXT, ""),
        field("sceneDateTime", Shape.TEXT, ""),
        field("vfxRequired", Shape.FLAG, False),
        field("sfxRequired", Shape.FLAG, False),
        field("estimatedDuration", Shape.TEXT, default_factory=lambda draft, index: estimate_draft_duration(draft)),
        field("location", Shape.RECORD),
        field("location.name", Shape.TEXT, ""),
        field("location.address", Shape.TEXT, ""),
        field("location.group_name", Shape.TEXT, ""),
        field("timeOfDay", Shape.ENUM, "오후", choices=TIME_OF_DAY_CHOICES, aliases=TIME_OF_DAY_ALIASES),
        *department_fields(),
        field("cast", Shape.RECORDS, item_schema=CAST_SCHEMA, text_field="role"),
        field("extra", Shape.RECORDS, item_schema=EXTRA_SCHEMA, text_field="role"),
        field("specialRequirements", Shape.STRINGS),
    ),
    promotions=(
        promote("scene", "order"),
        *LEGACY_EQUIPMENT_PROMOTIONS,
    ),
)


# ==============================================================================
# Cut drafts
# ==============================================================================

SHOT_SIZES = (
    "EWS", "VWS", "WS", "FS", "LS", "MLS", "MS", "MCS", "CU", "MCU",
    "BCU", "ECU", "TCU", "OTS", "POV", "TS", "GS", "AS", "PS", "BS",
)

ANGLE_DIRECTIONS = (
    "Eye-level", "High", "Low", "Dutch", "Bird_eye", "Worm_eye", "Canted",
    "Oblique", "Aerial", "Ground", "Overhead", "Under", "Side", "Front", "Back",
    "Three_quarter", "Profile", "Reverse", "POV", "Subjective",
)

CAMERA_MOVEMENTS = (
    "Static", "Pan", "Tilt", "Dolly", "Zoom", "Handheld", "Tracking", "Crane",
    "Steadicam", "Gimbal", "Drone", "Jib", "Slider", "Dolly_zoom", "Arc",
    "Circle", "Spiral", "Vertigo", "Whip_pan", "Crash_zoom", "Push_in",
    "Pull_out", "Follow", "Lead", "Reveal", "Conceal", "Parallax", "Time_lapse",
    "Slow_motion", "Fast_motion", "Bullet_time", "Matrix_style", "360_degree",
    "VR_style",
)

SUBJECT_TYPES = ("character", "object", "animal", "background")

PRODUCTION_METHODS = ("live_action", "ai_generated")

DEFAULT_CUT_SECONDS = 5
MIN_CUT_SECONDS = 1
MAX_CUT_SECONDS = 30

CAMERA_SETUP_DEFAULTS = {
    "shotSize": "MS",
    "angleDirection": "Eye-level",
    "cameraMovement": "Static",
    "lensSpecs": "50mm f/1.8",
    "cameraSettings": {
        "aperture": "f/2.8",
        "shutterSpeed": "1/60",
        "iso": "800",
    },
}

SPECIAL_REQUIREMENT_FLAGS: dict[str, tuple[str, ...]] = {
    "specialCinematography": ("drone", "crane", "jib", "underwater", "aerial"),
    "specialEffects": (
        "vfx",
        "pyrotechnics",
        "smoke",
        "fog",
        "wind",
        "rain",
        "snow",
        "fire",
        "explosion",
        "stunt",
    ),
    "specialLighting": ("laser", "strobe", "blackLight", "uvLight", "movingLight", "colorChanger"),
    "safety": ("requiresMedic", "requiresFireSafety", "requiresSafetyOfficer"),
}

SUBJECT_SCHEMA = DraftSchema(
    name="subject",
    fields=(
        field("name", Shape.TEXT, ""),
        field("type", Shape.ENUM, "character", choices=SUBJECT_TYPES),
        field("position", Shape.TEXT, ""),
        field("action", Shape.TEXT, ""),
        field("emotion", Shape.TEXT, ""),
        field("description", Shape.TEXT, ""),
    ),
)


def _shot_title(draft: dict[str, Any], index: int) -> str:
    return f"Shot {index + 1}"


def _cut_description(draft: dict[str, Any], index: int) -> str:
    title = draft.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return _shot_title(draft, index)


def _camera_setup_fields() -> tuple[FieldSpec, ...]:
    settings = CAMERA_SETUP_DEFAULTS["cameraSettings"]
    return (
        field("cameraSetup", Shape.RECORD),
        field("cameraSetup.shotSize", Shape.ENUM, CAMERA_SETUP_DEFAULTS["shotSize"], choices=SHOT_SIZES),
        field(
            "cameraSetup.angleDirection",
            Shape.ENUM,
            CAMERA_SETUP_DEFAULTS["angleDirection"],
            choices=ANGLE_DIRECTIONS,
            aliases=(("Eye level", "Eye-level"), ("Eye_level", "Eye-level")),
        ),
        field(
            "cameraSetup.cameraMovement",
            Shape.ENUM,
            CAMERA_SETUP_DEFAULTS["cameraMovement"],
            choices=CAMERA_MOVEMENTS,
        ),
        field("cameraSetup.lensSpecs", Shape.TEXT, CAMERA_SETUP_DEFAULTS["lensSpecs"]),
        field("cameraSetup.cameraSettings", Shape.RECORD),
        field("cameraSetup.cameraSettings.aperture", Shape.TEXT, settings["aperture"]),
        field("cameraSetup.cameraSettings.shutterSpeed", Shape.TEXT, settings["shutterSpeed"]),
        field("cameraSetup.cameraSettings.iso", Shape.TEXT, settings["iso"]),
    )


def _special_requirement_fields() -> tuple[FieldSpec, ...]:
    rows = [field("specialRequirements", Shape.RECORD)]
    for group, flags in SPECIAL_REQUIREMENT_FLAGS.items():
        rows.append(field(f"specialRequirements.{group}", Shape.RECORD))
        for flag in flags:
            rows.append(field(f"specialRequirements.{group}.{flag}", Shape.FLAG, False))
    return tuple(rows)


CUT_SCHEMA = DraftSchema(
    name="cut",
    fields=(
        field("order", Shape.ORDER, default_factory=_position_order),
        field("title", Shape.TEXT, default_factory=_shot_title),
        field("description", Shape.TEXT, default_factory=_cut_description),
        *_camera_setup_fields(),
        field("vfxEffects", Shape.TEXT, "특수 효과 없음"),
        field("soundEffects", Shape.TEXT, "배경음"),
        field("directorNotes", Shape.TEXT, ""),
        field("dialogue", Shape.TEXT, ""),
        field("narration", Shape.TEXT, ""),
        field("subjectMovement", Shape.RECORDS, item_schema=SUBJECT_SCHEMA, text_field="description"),
        field("productionMethod", Shape.ENUM, "live_action", choices=PRODUCTION_METHODS),
        field("productionMethodReason", Shape.TEXT, "실사 촬영으로 자연스러운 분위기 연출"),
        field("estimatedDuration", Shape.SECONDS, DEFAULT_CUT_SECONDS),
        *_special_requirement_fields(),
        *department_fields(),
        field("imageUrl", Shape.TEXT, ""),
    ),
    promotions=(
        promote("shotNumber", "order"),
        *LEGACY_EQUIPMENT_PROMOTIONS,
    ),
)
