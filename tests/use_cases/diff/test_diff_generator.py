"""
Tests for the DiffGenerator.
"""

import pytest

from mcedit.use_cases.diff.diff_generator import DiffGenerator, DiffHunk

HEADER = "--- Original\n+++ Modified\n"


@pytest.fixture
def generator(mock_logger):
    return DiffGenerator(mock_logger)


class TestUnifiedDiff:
    """Test cases for unified diff generation."""

    def test_identical_texts(self, generator):
        """Test that identical texts give only the header."""
        assert generator.generate_unified_diff("a\nb\n", "a\nb\n") == HEADER

    def test_both_empty(self, generator):
        """Test that two empty texts give only the header."""
        assert generator.generate_unified_diff("", "") == HEADER

    def test_addition_to_empty(self, generator):
        """Test adding lines to an empty text."""
        diff = generator.generate_unified_diff("", "a\nb\n")

        assert diff == HEADER + "@@ -1,0 +1,2 @@\n+a\n+b\n"

    def test_deletion_of_everything(self, generator):
        """Test removing all lines."""
        diff = generator.generate_unified_diff("a\nb\n", "")

        assert diff == HEADER + "@@ -1,2 +1,0 @@\n-a\n-b\n"

    def test_single_line_change(self, generator):
        """Test a change in the first of six lines."""
        original = "1\n2\n3\n4\n5\n6\n"
        modified = "X\n2\n3\n4\n5\n6\n"

        diff = generator.generate_unified_diff(original, modified)

        assert diff == HEADER + "@@ -1,3 +1,3 @@\n-1\n+X\n 2\n 3\n"

    def test_hunks_are_cut_after_four_lines(self, generator):
        """Test that a change spilling over a flush point opens a second hunk."""
        original = "a\nb\nc\nd\ne\nf\ng\nh\n"
        modified = "a\nb\nc\nd\ne\nf\ng\nH\n"

        diff = generator.generate_unified_diff(original, modified)

        assert diff == (
            HEADER
            + "@@ -5,4 +5,3 @@\n e\n f\n g\n-h\n"
            + "@@ -9,0 +8,1 @@\n+H\n"
        )

    def test_unchanged_hunks_are_dropped(self, generator):
        """Test that hunks holding only context are not emitted."""
        hunks = generator.compute_hunks("1\n2\n3\n4\n5\n6\n7\n8\n", "1\n2\n3\n4\n5\n6\n7\nX\n")

        assert len(hunks) == 2
        assert all(h.has_changes for h in hunks)

    def test_hunk_lengths_are_per_hunk(self, generator):
        """Test that each hunk counts only its own lines."""
        original = "\n".join(str(i) for i in range(12)) + "\n"
        modified = original.replace("1\n", "one\n", 1).replace("10\n", "ten\n")

        hunks = generator.compute_hunks(original, modified)

        for hunk in hunks:
            orig_count = sum(1 for line in hunk.lines if not line.startswith("+"))
            mod_count = sum(1 for line in hunk.lines if not line.startswith("-"))
            assert hunk.orig_len == orig_count
            assert hunk.mod_len == mod_count

    def test_missing_trailing_newline_is_a_change(self, generator):
        """Test that texts differing only in the final newline produce a hunk."""
        assert generator.generate_unified_diff("a", "a\n") == HEADER + "@@ -1,1 +1,1 @@\n-a\n+a\n"
        assert generator.generate_unified_diff("a\nb", "a\nb\n") == (
            HEADER + "@@ -1,2 +1,2 @@\n a\n-b\n+b\n"
        )

    def test_lines_split_on_newline_only(self, generator):
        """Test that form feeds and other separators stay inside their line."""
        diff = generator.generate_unified_diff("a\x0cb\n", "a\x0cc\n")

        assert diff == HEADER + "@@ -1,1 +1,1 @@\n-a\x0cb\n+a\x0cc\n"

    def test_crlf_terminators_are_stripped(self, generator):
        """Test that CRLF line endings do not leak into the diff lines."""
        diff = generator.generate_unified_diff("a\r\nb\r\n", "a\r\nc\r\n")

        assert diff == HEADER + "@@ -1,2 +1,2 @@\n a\n-b\n+c\n"

    def test_hunk_header(self):
        """Test that hunk headers are 1-based."""
        hunk = DiffHunk(orig_start=0, orig_len=2, mod_start=4, mod_len=3, lines=("+x",))

        assert hunk.header() == "@@ -1,2 +5,3 @@"


class TestWordAndHtmlDiff:
    """Test cases for the word and HTML renderings."""

    def test_word_diff(self, generator):
        """Test marking a replaced word."""
        diff = generator.generate_word_diff("the quick fox", "the slow fox")

        assert diff == "the [-quick-]{+slow+} fox"

    def test_word_diff_insertion(self, generator):
        """Test marking inserted words."""
        diff = generator.generate_word_diff("a c", "a b c")

        assert "{+" in diff
        assert "[-" not in diff

    def test_word_diff_identical(self, generator):
        """Test that identical texts are returned unmarked."""
        assert generator.generate_word_diff("same text", "same text") == "same text"

    def test_html_diff(self, generator):
        """Test HTML rendering with escaping."""
        html = generator.generate_html_diff("a\n<b>\n", "a\n<c>\n")

        assert html.startswith('<pre class="diff">\n')
        assert html.endswith("\n</pre>")
        assert '<span class="deletion">-&lt;b&gt;</span>' in html
        assert '<span class="insertion">+&lt;c&gt;</span>' in html
        assert "\n a\n" in html

    def test_html_diff_keeps_line_separators(self, generator):
        """Test that a form feed does not split a line in the HTML rendering."""
        html = generator.generate_html_diff("x\x0cy\n", "x\x0cz\n")

        assert '<span class="deletion">-x\x0cy</span>' in html
        assert '<span class="insertion">+x\x0cz</span>' in html
