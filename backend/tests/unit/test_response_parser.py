"""Unit tests for the draft response parser."""

import json

import pytest

from src.services.draft_errors import ParseFailure
from src.services.response_parser import (
    extract_draft_items,
    extract_json_text,
    parse_draft_items,
    parse_draft_tree,
    repair_json_text,
    salvage_list,
)

FENCE = "`" * 3


def fenced(body: str, language: str = "json") -> str:
    return f"{FENCE}{language}\n{body}\n{FENCE}"


class TestExtractJsonText:
    """Tests for locating the JSON part of a response."""

    def test_json_fence_with_commentary(self):
        raw = "다음은 결과입니다:\n" + fenced('{"cutList": []}') + "\n감사합니다!"
        assert extract_json_text(raw) == '{"cutList": []}'

    def test_untagged_fence(self):
        raw = fenced('{"scenes": []}', language="")
        assert extract_json_text(raw) == '{"scenes": []}'

    def test_json_fence_preferred_over_other_fence(self):
        raw = fenced("print('hi')", language="python") + "\n" + fenced('{"a": 1}')
        assert extract_json_text(raw) == '{"a": 1}'

    def test_brace_span_inside_prose(self):
        raw = 'Sure! {"scenes": [{"order": 1}]} Let me know if you need more.'
        assert extract_json_text(raw) == '{"scenes": [{"order": 1}]}'

    def test_top_level_array(self):
        raw = 'Result: [{"order": 1}, {"order": 2}] done'
        assert extract_json_text(raw) == '[{"order": 1}, {"order": 2}]'

    def test_bracket_in_leading_prose(self):
        raw = 'Here are [3] scenes: {"scenes": [{"order": 1, "title": "a"}]}'
        assert extract_json_text(raw) == '{"scenes": [{"order": 1, "title": "a"}]}'

    def test_unterminated_fence(self):
        """A response cut off before its closing fence still yields the JSON."""
        raw = FENCE + 'json\n{"cutList": [{"order": 1}'
        assert extract_json_text(raw) == '{"cutList": [{"order": 1}'

    def test_no_json(self):
        assert extract_json_text("죄송합니다. 생성할 수 없습니다.") == "죄송합니다. 생성할 수 없습니다."

    def test_none_input(self):
        assert extract_json_text(None) == ""


class TestRepairJsonText:
    """Tests for the bounded textual repairs."""

    def test_trailing_commas(self):
        repaired = repair_json_text('{"a": [1, 2,], "b": {"c": 1,},}')
        assert json.loads(repaired) == {"a": [1, 2], "b": {"c": 1}}

    def test_undefined_becomes_empty_string(self):
        repaired = repair_json_text('{"title": undefined, "tags": [undefined]}')
        assert json.loads(repaired) == {"title": "", "tags": [""]}

    def test_null_becomes_empty_string(self):
        assert json.loads(repair_json_text('{"title": null}')) == {"title": ""}

    def test_nan_becomes_zero(self):
        assert json.loads(repair_json_text('{"order": NaN, "x": -NaN}')) == {"order": 0, "x": 0}

    def test_literal_inside_word_untouched(self):
        repaired = repair_json_text('{"note": "nullable undefinedness"}')
        assert json.loads(repaired) == {"note": "nullable undefinedness"}

    def test_string_contents_untouched(self):
        repaired = repair_json_text('{"title": "wait, null here", "note": "a,]", "mood": "NaN, undefined",}')
        assert json.loads(repaired) == {"title": "wait, null here", "note": "a,]", "mood": "NaN, undefined"}

    def test_escaped_quotes_inside_string(self):
        repaired = repair_json_text('{"line": "그가 \\"null\\" 이라고, 말했다", "x": null,}')
        assert json.loads(repaired) == {"line": '그가 "null" 이라고, 말했다', "x": ""}


class TestSalvageList:
    """Tests for recovering the complete prefix of a truncated list."""

    def test_element_cut_inside_nested_object(self):
        text = (
            '{"cutList": [{"order": 1, "title": "A"}, {"order": 2, "title": "B"}, '
            '{"order": 3, "cameraSetup": {"shotSize": "CU"}'
        )
        salvaged = salvage_list(text, "cutList")
        assert salvaged == {"cutList": [{"order": 1, "title": "A"}, {"order": 2, "title": "B"}]}

    def test_text_ending_after_complete_element(self):
        text = '{"cutList": [{"order": 1}, {"order": 2}'
        assert salvage_list(text, "cutList") == {"cutList": [{"order": 1}, {"order": 2}]}

    def test_brackets_inside_strings_ignored(self):
        text = '{"cutList": [{"title": "a [b] {c}, d"}, {"title": "cut'
        assert salvage_list(text, "cutList") == {"cutList": [{"title": "a [b] {c}, d"}]}

    def test_cut_before_first_element_completes(self):
        assert salvage_list('{"cutList": [{"order": 1, "ti', "cutList") == {"cutList": []}

    def test_missing_key(self):
        assert salvage_list('{"scenes": [', "cutList") is None


class TestParseDraftTree:
    """Tests for the ordered parsing strategies."""

    def test_strict_parse(self):
        assert parse_draft_tree('{"scenes": [{"order": 1}]}', "scenes") == {"scenes": [{"order": 1}]}

    def test_repaired_parse(self):
        tree = parse_draft_tree('{"scenes": [{"order": 1, "title": undefined,},]}', "scenes")
        assert tree == {"scenes": [{"order": 1, "title": ""}]}

    def test_nan_rejected_by_strict_parse(self):
        tree = parse_draft_tree('{"scenes": [{"order": NaN}]}', "scenes")
        assert tree == {"scenes": [{"order": 0}]}

    def test_truncated_list_without_salvage_falls_back(self):
        tree = parse_draft_tree('{"scenes": [{"order": 1}, {"order": 2, "ti', "scenes")
        assert tree == {"scenes": []}

    def test_truncated_list_with_salvage(self):
        tree = parse_draft_tree(
            '{"cutList": [{"order": 1}, {"order": 2, "ti',
            "cutList",
            repair_truncated_lists=True,
        )
        assert tree == {"cutList": [{"order": 1}]}

    def test_garbage_never_raises(self):
        assert parse_draft_tree("<html>502 Bad Gateway</html>", "cutList") == {"cutList": []}


class TestExtractDraftItems:
    """Tests for locating the draft list in a parsed tree."""

    def test_list_under_key(self):
        items = extract_draft_items({"scenes": [{"order": 1}, {"order": 2}]}, "scenes")
        assert [item["order"] for item in items] == [1, 2]

    def test_top_level_list(self):
        assert extract_draft_items([{"order": 1}], "cutList") == [{"order": 1}]

    def test_single_item_object(self):
        item = {"order": 1, "title": "오프닝"}
        assert extract_draft_items(item, "scenes") == [item]

    def test_non_object_elements_dropped(self):
        items = extract_draft_items({"scenes": [1, {"order": 1}, "scene"]}, "scenes")
        assert items == [{"order": 1}]

    @pytest.mark.parametrize(
        "tree",
        [
            {"scenes": []},
            {"scenes": ["a", 2]},
            {"other": [{"order": 1}]},
            {"scenes": {"order": 1}},
            "scenes",
            None,
        ],
    )
    def test_unusable_tree_raises(self, tree):
        with pytest.raises(ParseFailure) as exc_info:
            extract_draft_items(tree, "scenes")
        assert "unparseable response" in str(exc_info.value)


class TestParseDraftItems:
    """End-to-end parsing of raw responses."""

    def test_fenced_response_with_trailing_commas(self):
        raw = "결과:\n" + fenced('{"cutList": [{"order": 1, "title": "A",}, {"order": 2, "title": "B",},]}')
        items = parse_draft_items(raw, "cutList", repair_truncated_lists=True)
        assert [item["title"] for item in items] == ["A", "B"]

    def test_truncated_cut_response(self):
        raw = fenced('{"cutList": [{"order": 1}, {"order": 2}, {"order": 3, "cameraSetup": {"shotSize": "C')
        items = parse_draft_items(raw, "cutList", repair_truncated_lists=True)
        assert [item["order"] for item in items] == [1, 2]

    @pytest.mark.parametrize("list_key,repair", [("scenes", False), ("cutList", True)])
    def test_unrecoverable_response_raises(self, list_key, repair):
        with pytest.raises(ParseFailure):
            parse_draft_items("I'm sorry, I can't do that.", list_key, repair_truncated_lists=repair)

    def test_bracket_in_prose_before_object(self):
        items = parse_draft_items('Here are [3] scenes: {"scenes": [{"order": 1, "title": "a"}]}', "scenes")
        assert items == [{"order": 1, "title": "a"}]

    def test_trailing_comma_with_literal_text_in_string(self):
        items = parse_draft_items('{"scenes": [{"order": 1, "title": "wait, null here",}]}', "scenes")
        assert items == [{"order": 1, "title": "wait, null here"}]
