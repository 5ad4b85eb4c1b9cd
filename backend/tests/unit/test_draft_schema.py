"""Unit tests for the draft schema tables."""

import pytest

from src.services.draft_schema import (
    CREW_ROLES,
    CUT_SCHEMA,
    DEPARTMENTS,
    EQUIPMENT_CATEGORIES,
    LEGACY_EQUIPMENT_PROMOTIONS,
    SCENE_SCHEMA,
    DraftSchema,
    PromotionRule,
    Shape,
    department_fields,
    field,
    promote,
)


class TestHelpers:
    def test_field_splits_dotted_path(self):
        spec = field("cameraSetup.cameraSettings.iso", Shape.TEXT, "800")
        assert spec.path == ("cameraSetup", "cameraSettings", "iso")
        assert spec.default == "800"

    def test_promote(self):
        assert promote("scene", "order") == PromotionRule(("scene",), ("order",), False)


class TestDraftSchema:
    """Tests for derived schema views."""

    def test_declared_children(self):
        schema = DraftSchema(
            name="t",
            fields=(field("a", Shape.RECORD), field("a.b", Shape.TEXT), field("c", Shape.FLAG)),
        )
        assert schema.declared_children == {(): frozenset({"a", "c"}), ("a",): frozenset({"b"})}

    def test_closed_paths_include_root_and_records(self):
        schema = DraftSchema(
            name="t",
            fields=(field("a", Shape.RECORD), field("g", Shape.CREW_GROUP), field("g.x", Shape.CREW)),
        )
        assert schema.closed_paths == ((), ("a",))

    @pytest.mark.parametrize("schema", [SCENE_SCHEMA, CUT_SCHEMA])
    def test_parents_declared_before_children(self, schema):
        """The walker relies on containers being visited first."""
        seen = {()}
        for spec in schema.fields:
            assert spec.path[:-1] in seen, spec.path
            if spec.shape in (Shape.RECORD, Shape.CREW_GROUP, Shape.EQUIPMENT_GROUP):
                seen.add(spec.path)

    @pytest.mark.parametrize("schema", [SCENE_SCHEMA, CUT_SCHEMA])
    def test_paths_unique(self, schema):
        paths = [spec.path for spec in schema.fields]
        assert len(paths) == len(set(paths))


class TestDepartmentTables:
    def test_every_department_has_roles_and_categories(self):
        for department in DEPARTMENTS:
            assert CREW_ROLES[department]
            assert EQUIPMENT_CATEGORIES[department]

    def test_department_fields_cover_tables(self):
        paths = {spec.path for spec in department_fields()}
        for department in DEPARTMENTS:
            for role in CREW_ROLES[department]:
                assert ("crew", department, role) in paths
            for category in EQUIPMENT_CATEGORIES[department]:
                assert ("equipment", department, category) in paths
        assert ("equipment", "lighting", "gripModifiers", "colorGels") in paths

    def test_both_kinds_share_department_rows(self):
        scene_paths = {spec.path for spec in SCENE_SCHEMA.fields}
        cut_paths = {spec.path for spec in CUT_SCHEMA.fields}
        for spec in department_fields():
            assert spec.path in scene_paths
            assert spec.path in cut_paths

    def test_legacy_promotions_target_declared_paths(self):
        declared = {spec.path for spec in SCENE_SCHEMA.fields}
        for rule in LEGACY_EQUIPMENT_PROMOTIONS:
            assert rule.target in declared, rule.target
            assert rule.source[0] == "equipment"
