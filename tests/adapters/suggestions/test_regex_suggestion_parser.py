"""
Tests for the RegexSuggestionParser.
"""

import json

import pytest

from mcedit.adapters.suggestions.regex_suggestion_parser import RegexSuggestionParser
from mcedit.entities.edit import (
    CreateInstruction,
    DeleteLine,
    EditsInstruction,
    InsertLine,
    RegionEdit,
    ReplaceInstruction,
    ReplaceLine,
)
from mcedit.exceptions import SuggestionParseError


@pytest.fixture
def parser(mock_logger):
    return RegexSuggestionParser(mock_logger)


class TestStructuredSuggestions:
    """Test cases for JSON suggestions."""

    def test_replace(self, parser):
        """Test a JSON whole-file replacement."""
        result = parser.parse('{"type": "replace", "content": "new"}')

        assert result == ReplaceInstruction(content="new")

    def test_create_with_overwrite(self, parser):
        """Test a JSON create with overwrite."""
        result = parser.parse('{"type": "create", "content": "x", "overwrite": true}')

        assert result == CreateInstruction(content="x", overwrite=True)

    def test_create_defaults_to_no_overwrite(self, parser):
        """Test that overwrite defaults to false."""
        result = parser.parse('{"type": "create", "content": "x"}')

        assert result.overwrite is False

    def test_edit_operations_are_zero_based(self, parser):
        """Test that JSON line numbers are taken as-is."""
        suggestion = {
            "type": "edit",
            "edits": [
                {"action": "insert", "line": 0, "content": "top"},
                {"action": "replace", "line": 2, "content": "R"},
                {"action": "delete", "line": 3},
                {"action": "region", "start": 1, "end": 2, "content": "Z"},
                {"action": "replace_line", "line": 1, "content": "Q"},
                {"action": "delete_line", "line": 0},
            ],
        }

        result = parser.parse(json.dumps(suggestion))

        assert result == EditsInstruction(
            edits=[
                InsertLine(line=0, content="top"),
                ReplaceLine(line=2, content="R"),
                DeleteLine(line=3),
                RegionEdit(start=1, end=2, content="Z"),
                ReplaceLine(line=1, content="Q"),
                DeleteLine(line=0),
            ]
        )

    def test_json_inside_code_block(self, parser):
        """Test that a fenced JSON block is recognized."""
        text = (
            "Here is the change:\n"
            "```json\n"
            '{"type": "edit", "edits": [{"action": "delete", "line": 1}]}\n'
            "```\n"
        )

        assert parser.parse(text) == EditsInstruction(edits=[DeleteLine(line=1)])

    def test_json_inside_untagged_code_block(self, parser):
        """Test that an untagged fenced block is tried as JSON too."""
        text = '```\n{"type": "replace", "content": "abc"}\n```'

        assert parser.parse(text) == ReplaceInstruction(content="abc")

    @pytest.mark.parametrize(
        "suggestion",
        [
            '{"type": "edit", "edits": [{"action": "insert", "line": -1, "content": "x"}]}',
            '{"type": "edit", "edits": [{"action": "explode", "line": 1}]}',
            '{"type": "replace"}',
            '{"type": "unknown", "content": "x"}',
            '{"type": "edit", "edits": [{"action": "insert", "line": "1", "content": "x"}]}',
        ],
    )
    def test_invalid_structured_suggestion(self, parser, suggestion):
        """Test that malformed structured suggestions are rejected."""
        with pytest.raises(SuggestionParseError, match="Invalid structured suggestion"):
            parser.parse(suggestion)

    def test_json_without_type_is_plain_text(self, parser):
        """Test that JSON lacking a type falls through to a full replacement."""
        text = '{"content": "x"}'

        assert parser.parse(text) == ReplaceInstruction(content=text)


class TestNaturalLanguageSuggestions:
    """Test cases for plain-English suggestions, whose line numbers are 1-based."""

    def test_replace_lines(self, parser):
        """Test replacing an inclusive 1-based line span."""
        result = parser.parse("Replace lines 2-3 with:\nfoo\nbar\n")

        assert result == EditsInstruction(edits=[RegionEdit(start=1, end=3, content="foo\nbar")])

    def test_change_lines_with_to(self, parser):
        """Test the 'to' range form."""
        result = parser.parse("change lines 1 to 2:\nX")

        assert result == EditsInstruction(edits=[RegionEdit(start=0, end=2, content="X")])

    def test_insert_after_line(self, parser):
        """Test that 'after line N' inserts at zero-based index N."""
        result = parser.parse("insert after line 2:\nnew line")

        assert result == EditsInstruction(edits=[InsertLine(line=2, content="new line")])

    def test_insert_before_line(self, parser):
        """Test that 'before line N' inserts at zero-based index N-1."""
        result = parser.parse("Add before line 1:\nheader")

        assert result == EditsInstruction(edits=[InsertLine(line=0, content="header")])

    def test_delete_single_line(self, parser):
        """Test deleting one line."""
        assert parser.parse("delete line 4") == EditsInstruction(edits=[DeleteLine(line=3)])

    def test_delete_line_range(self, parser):
        """Test that deleting a range becomes an empty region edit."""
        result = parser.parse("Remove lines 2-4")

        assert result == EditsInstruction(edits=[RegionEdit(start=1, end=4, content="")])

    def test_line_zero_is_rejected(self, parser):
        """Test that line 0 is not a valid 1-based line."""
        with pytest.raises(SuggestionParseError, match="start at 1"):
            parser.parse("delete line 0")

    def test_replace_the_file(self, parser):
        """Test a whole-file replacement phrase."""
        result = parser.parse("Replace the file with:\n\nline one\nline two\n\n")

        assert result == ReplaceInstruction(content="line one\nline two")

    def test_create_a_new_file(self, parser):
        """Test a file creation phrase."""
        result = parser.parse("Create a new file containing:\nhello")

        assert result == CreateInstruction(content="hello")

    def test_unstructured_text_replaces_file(self, parser, mock_logger):
        """Test that anything else becomes the new file content verbatim."""
        text = "def main():\n    pass\n"

        assert parser.parse(text) == ReplaceInstruction(content=text)
        mock_logger.info.assert_any_call("Parsed suggestion as 'replace'")

    @pytest.mark.parametrize("text", ["", "   \n  "])
    def test_empty_suggestion(self, parser, text):
        """Test that empty suggestions are rejected."""
        with pytest.raises(SuggestionParseError, match="empty"):
            parser.parse(text)
