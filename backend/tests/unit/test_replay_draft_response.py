"""Tests for the draft response replay script."""

import importlib.util
import json
from pathlib import Path

import pytest

from src.services.draft_errors import ParseFailure

SCRIPT_PATH = Path(__file__).parents[2] / "scripts" / "replay_draft_response.py"


@pytest.fixture(scope="module")
def replay_script():
    spec = importlib.util.spec_from_file_location("replay_draft_response", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestReplay:
    def test_replays_cut_response(self, replay_script):
        raw = '```json\n{"cutList": [{"order": 1, "title": "A"}, {"order": 1, "title": "B"},]}\n```'

        drafts = replay_script.replay(raw, "cut")

        assert [draft["order"] for draft in drafts] == [1, 2]
        assert replay_script.validate(drafts, "cut") == []

    def test_expands_with_catalog_file(self, replay_script, sample_catalog_data, tmp_path):
        catalog_path = tmp_path / "catalog.json"
        catalog_path.write_text(json.dumps(sample_catalog_data, ensure_ascii=False), encoding="utf-8")
        raw = json.dumps({"scenes": [{"order": 1, "equipment": {"camera": "CAM_SET_A"}}]})

        drafts = replay_script.replay(raw, "scene", expand=True, catalog_path=catalog_path)

        camera = drafts[0]["equipment"]["cinematography"]["cameras"][0]
        assert camera["id"] == "CAM_SET_A"
        assert camera["alternatives"] == ["CAM_SET_B"]

    def test_parse_failure_propagates(self, replay_script):
        with pytest.raises(ParseFailure):
            replay_script.replay("no drafts here", "scene")

    def test_validate_reports_incomplete_drafts(self, replay_script):
        errors = replay_script.validate([{"order": 1, "title": "raw"}], "scene")

        assert len(errors) == 1
        assert errors[0].startswith("scene #1:")
