"""Draft models for AI scene and cut generation.

Two groups:
- Generation contexts: what the prompt builders read (project for scenes,
  one scene plus the project genre for cuts).
- Draft documents: the canonical shape the pipeline returns. Every field is
  required, so validating a normalized draft against these models proves it is
  structurally complete. Department containers allow extra roles/categories;
  every other record forbids unknown keys.

Pydantic v2.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

from src.services.draft_schema import (
    CREW_ROLES,
    DEPARTMENTS,
    EQUIPMENT_CATEGORIES,
    EQUIPMENT_COMPOSITES,
    SPECIAL_REQUIREMENT_FLAGS,
)


# ==============================================================================
# Shared records
# ==============================================================================


class Dialogue(BaseModel):
    """One line of dialogue."""
    model_config = ConfigDict(extra="forbid")

    character: str = ""
    text: str = ""


class CastMember(BaseModel):
    """A named role in a scene."""
    model_config = ConfigDict(extra="forbid")

    role: str = ""
    name: str = ""


class ExtraMember(BaseModel):
    """A group of extras."""
    model_config = ConfigDict(extra="forbid")

    role: str = ""
    number: int = Field(default=1, ge=0)


class CrewAssignment(BaseModel):
    """A crew slot. Catalog expansion adds id/name/experience/... as extras."""
    model_config = ConfigDict(extra="allow")

    role: str = ""


EquipmentItem = str | dict[str, Any]


# ==============================================================================
# Generation contexts
# ==============================================================================


class ProjectContext(BaseModel):
    """Project fields used to generate scene drafts."""

    title: str = Field(min_length=1, max_length=200)
    synopsis: str = ""
    genre: list[str] = Field(default_factory=list)
    estimatedDuration: int | str | None = Field(default=None, description="Planned running time")
    story: str = ""


class SceneContext(BaseModel):
    """Scene fields used to generate cut drafts."""

    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    dialogues: list[Dialogue] = Field(default_factory=list)
    timeOfDay: str = ""
    weather: str = ""
    lighting: dict[str, Any] = Field(default_factory=dict)
    scenePlace: str = ""
    cast: list[CastMember] = Field(default_factory=list)
    visualDescription: str = ""
    vfxRequired: bool = False
    sfxRequired: bool = False


# ==============================================================================
# Department trees (built from the department tables)
# ==============================================================================


def _camel(name: str) -> str:
    return name[0].upper() + name[1:]


def _department_model(prefix: str, department: str, keys: tuple[str, ...], leaf: Any) -> type[BaseModel]:
    fields: dict[str, Any] = {key: (list[leaf], ...) for key in keys}
    if leaf is EquipmentItem:
        for composite, parts in EQUIPMENT_COMPOSITES.get(department, {}).items():
            composite_model = create_model(
                f"{_camel(department)}{_camel(composite)}",
                __config__=ConfigDict(extra="forbid"),
                **{part: (list[leaf], ...) for part in parts},
            )
            fields[composite] = (composite_model, ...)
    return create_model(
        f"{_camel(department)}{prefix}",
        __config__=ConfigDict(extra="allow"),
        **fields,
    )


DepartmentCrew = create_model(
    "DepartmentCrew",
    __config__=ConfigDict(extra="forbid"),
    **{
        department: (_department_model("Crew", department, CREW_ROLES[department], CrewAssignment), ...)
        for department in DEPARTMENTS
    },
)

DepartmentEquipment = create_model(
    "DepartmentEquipment",
    __config__=ConfigDict(extra="forbid"),
    **{
        department: (
            _department_model("Equipment", department, EQUIPMENT_CATEGORIES[department], EquipmentItem),
            ...,
        )
        for department in DEPARTMENTS
    },
)


# ==============================================================================
# Scene drafts
# ==============================================================================


class LightInstrument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    equipment: str
    intensity: str


class GripModifier(BaseModel):
    model_config = ConfigDict(extra="forbid")

    flags: list[str]
    diffusion: list[str]
    reflectors: list[str]
    colorGels: list[str]


class LightingOverall(BaseModel):
    model_config = ConfigDict(extra="forbid")

    colorTemperature: str
    mood: str


class LightingSetup(BaseModel):
    """Six named instruments plus grip modifiers and overall mood."""
    model_config = ConfigDict(extra="forbid")

    keyLight: LightInstrument
    fillLight: LightInstrument
    backLight: LightInstrument
    backgroundLight: LightInstrument
    specialEffects: LightInstrument
    softLight: LightInstrument
    gripModifier: GripModifier
    overall: LightingOverall


class Lighting(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str
    setup: LightingSetup


class Location(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    address: str
    group_name: str


class SceneDraft(BaseModel):
    """A generated scene awaiting review, in create-scene shape."""
    model_config = ConfigDict(extra="forbid")

    order: int = Field(ge=1)
    title: str
    description: str
    dialogues: list[Dialogue]
    weather: str
    lighting: Lighting
    visualDescription: str
    scenePlace: str
    sceneDateTime: str
    vfxRequired: bool
    sfxRequired: bool
    estimatedDuration: str
    location: Location
    timeOfDay: str
    crew: DepartmentCrew
    equipment: DepartmentEquipment
    cast: list[CastMember]
    extra: list[ExtraMember]
    specialRequirements: list[str]


# ==============================================================================
# Cut drafts
# ==============================================================================


class CameraSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    aperture: str
    shutterSpeed: str
    iso: str


class CameraSetup(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shotSize: str
    angleDirection: str
    cameraMovement: str
    lensSpecs: str
    cameraSettings: CameraSettings


class SubjectMovement(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    position: str
    action: str
    emotion: str
    description: str


CutSpecialRequirements = create_model(
    "CutSpecialRequirements",
    __config__=ConfigDict(extra="forbid"),
    **{
        group: (
            create_model(
                _camel(group),
                __config__=ConfigDict(extra="forbid"),
                **{flag: (bool, ...) for flag in flags},
            ),
            ...,
        )
        for group, flags in SPECIAL_REQUIREMENT_FLAGS.items()
    },
)


class CutDraft(BaseModel):
    """A generated cut (shot) awaiting review, in create-cut shape."""
    model_config = ConfigDict(extra="forbid")

    order: int = Field(ge=1)
    title: str
    description: str
    cameraSetup: CameraSetup
    vfxEffects: str
    soundEffects: str
    directorNotes: str
    dialogue: str
    narration: str
    subjectMovement: list[SubjectMovement]
    productionMethod: str
    productionMethodReason: str
    estimatedDuration: int = Field(ge=1, description="Seconds")
    specialRequirements: CutSpecialRequirements
    crew: DepartmentCrew
    equipment: DepartmentEquipment
    imageUrl: str
