"""
Tests for batch edits (apply_edits and apply_edit_file).
"""

import json

import pytest

from textgraft import (
    ReplacementIndexError,
    TextMap,
    TextNotFoundError,
    ValidationError,
)

HTML = "<p>First paragraph with target text.</p><p>Second paragraph with old text.</p>"


@pytest.fixture
def text_map():
    return TextMap.from_html(HTML)


class TestApplyEdits:
    """Tests for TextMap.apply_edits()."""

    def test_replace_and_delete(self, text_map):
        """Test edits are applied in order with a remap after each."""
        results = text_map.apply_edits(
            [
                {"type": "replace_text", "find": "old", "replace": "new"},
                {"type": "delete_text", "text": "target"},
            ]
        )

        assert [r.success for r in results] == [True, True]
        assert results[0].address == "1.0"
        assert results[0].message == "Replaced 'old' with 'new'"
        assert results[1].address == "0.0"
        assert results[1].message == "Deleted 'target'"
        assert text_map.get_text() == (
            "First paragraph with  text.Second paragraph with new text."
        )
        assert not text_map.is_stale
        assert text_map.generation == 2

    def test_optional_parameters(self, text_map):
        """Test at, preserve_word and replacement_index are passed through."""
        results = text_map.apply_edits(
            [
                {
                    "type": "replace_text",
                    "find": "a",
                    "replace": "A",
                    "at": "1.0",
                    "preserve_word": False,
                    "replacement_index": 1,
                }
            ]
        )

        assert results[0].success
        assert results[0].address == "1.0"
        assert "Second parAgraph with old text." in text_map.get_text()

    def test_partial_success(self, text_map):
        """Test a failed edit does not stop later edits."""
        results = text_map.apply_edits(
            [
                {"type": "replace_text", "find": "missing", "replace": "x"},
                {"type": "replace_text", "find": "old", "replace": "new"},
            ]
        )

        assert [r.success for r in results] == [False, True]
        assert "Text not found" in results[0].message
        assert isinstance(results[0].error, TextNotFoundError)
        assert "new text" in text_map.get_text()

    def test_stop_on_error(self, text_map):
        """Test stop_on_error halts at the first failure."""
        results = text_map.apply_edits(
            [
                {"type": "replace_text", "find": "missing", "replace": "x"},
                {"type": "replace_text", "find": "old", "replace": "new"},
            ],
            stop_on_error=True,
        )

        assert len(results) == 1
        assert "old text" in text_map.get_text()

    def test_replacement_index_out_of_range(self, text_map):
        """Test a missing occurrence is reported as a failed edit."""
        results = text_map.apply_edits(
            [{"type": "replace_text", "find": "old", "replace": "new", "replacement_index": 3}]
        )

        assert not results[0].success
        assert "No such occurrence" in results[0].message
        assert isinstance(results[0].error, ReplacementIndexError)

    def test_missing_type(self, text_map):
        """Test edits without a type fail validation."""
        results = text_map.apply_edits([{"find": "old", "replace": "new"}])

        assert not results[0].success
        assert results[0].edit_type == "unknown"
        assert isinstance(results[0].error, ValidationError)

    def test_unknown_type(self, text_map):
        """Test unknown edit types fail validation."""
        results = text_map.apply_edits([{"type": "insert_text", "text": "x"}])

        assert not results[0].success
        assert "Unknown edit type" in results[0].message

    def test_missing_parameters(self, text_map):
        """Test required parameters are checked."""
        results = text_map.apply_edits(
            [
                {"type": "replace_text", "find": "old"},
                {"type": "delete_text"},
            ]
        )

        assert [r.success for r in results] == [False, False]
        assert "'find' or 'replace'" in results[0].message
        assert "'text'" in results[1].message

    def test_result_str(self, text_map):
        """Test results render with a status mark."""
        ok, failed = text_map.apply_edits(
            [
                {"type": "replace_text", "find": "old", "replace": "new"},
                {"type": "delete_text", "text": "missing"},
            ]
        )

        assert str(ok) == "✓ replace_text: Replaced 'old' with 'new'"
        assert str(failed).startswith("✗ delete_text: Text not found")


class TestApplyEditFile:
    """Tests for TextMap.apply_edit_file()."""

    def test_yaml_file(self, text_map, tmp_path):
        """Test edits load from YAML."""
        path = tmp_path / "edits.yaml"
        path.write_text(
            """
edits:
  - type: replace_text
    find: "old"
    replace: "new"
  - type: delete_text
    text: "target"
""",
            encoding="utf-8",
        )

        results = text_map.apply_edit_file(path)

        assert all(r.success for r in results)
        assert "new text" in text_map.get_text()

    def test_json_file(self, text_map, tmp_path):
        """Test edits load from JSON."""
        path = tmp_path / "edits.json"
        path.write_text(
            json.dumps({"edits": [{"type": "replace_text", "find": "old", "replace": "new"}]}),
            encoding="utf-8",
        )

        results = text_map.apply_edit_file(path, format="json")

        assert results[0].success
        assert "new text" in text_map.get_text()

    def test_missing_file(self, text_map, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            text_map.apply_edit_file(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "content,format,match",
        [
            ("edits: [unclosed", "yaml", "Invalid YAML"),
            ("{", "json", "Invalid JSON"),
            ("- just a list", "yaml", "dictionary"),
            ("other: []", "yaml", "'edits' key"),
            ("edits: not-a-list", "yaml", "must be a list"),
            ("edits: []", "toml", "Unsupported format"),
        ],
    )
    def test_invalid_content(self, text_map, tmp_path, content, format, match):
        """Test malformed edit files raise ValidationError."""
        path = tmp_path / "edits.txt"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ValidationError, match=match):
            text_map.apply_edit_file(path, format=format)
