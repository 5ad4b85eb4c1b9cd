"""Backend models package.

Note: keep backend models as the source-of-truth schemas for OpenAPI + frontend types.
"""

from .drafts import (
    CameraSettings,
    CameraSetup,
    CastMember,
    CrewAssignment,
    CutDraft,
    CutSpecialRequirements,
    DepartmentCrew,
    DepartmentEquipment,
    Dialogue,
    ExtraMember,
    Lighting,
    LightingSetup,
    Location,
    ProjectContext,
    SceneContext,
    SceneDraft,
    SubjectMovement,
)

__all__ = [
    "CameraSettings",
    "CameraSetup",
    "CastMember",
    "CrewAssignment",
    "CutDraft",
    "CutSpecialRequirements",
    "DepartmentCrew",
    "DepartmentEquipment",
    "Dialogue",
    "ExtraMember",
    "Lighting",
    "LightingSetup",
    "Location",
    "ProjectContext",
    "SceneContext",
    "SceneDraft",
    "SubjectMovement",
]
