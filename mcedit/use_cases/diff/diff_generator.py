"""
Diff generation use case.

Texts are split on ``\\n`` only and lines are compared with their terminators,
so a missing final newline counts as a change. Line alignment comes from
``difflib.SequenceMatcher``; a ``replace`` opcode is expanded into its deleted lines
followed by its inserted lines. Hunks are cut with a fixed rule rather than a
context window: a hunk accumulates changes and is flushed as soon as it holds more
than three lines, and a flushed hunk without any insert or delete is dropped.
"""

import difflib
import html
import logging
import re
from dataclasses import dataclass, field

HUNK_FLUSH_THRESHOLD = 3

_WORD_RE = re.compile(r"\s+|\S+")


@dataclass(frozen=True)
class DiffHunk:
    """A block of a unified diff. Starts are zero-based."""

    orig_start: int
    orig_len: int
    mod_start: int
    mod_len: int
    lines: tuple[str, ...]

    @property
    def has_changes(self) -> bool:
        return any(line.startswith(("+", "-")) for line in self.lines)

    def header(self) -> str:
        return (
            f"@@ -{self.orig_start + 1},{self.orig_len} "
            f"+{self.mod_start + 1},{self.mod_len} @@"
        )


@dataclass
class _OpenHunk:
    orig_start: int
    mod_start: int
    orig_len: int = 0
    mod_len: int = 0
    lines: list[str] = field(default_factory=list)

    def freeze(self) -> DiffHunk:
        return DiffHunk(
            orig_start=self.orig_start,
            orig_len=self.orig_len,
            mod_start=self.mod_start,
            mod_len=self.mod_len,
            lines=tuple(self.lines),
        )


def _diff_lines(text: str) -> list[str]:
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _line_changes(original: list[str], modified: list[str]) -> list[tuple[str, str]]:
    matcher = difflib.SequenceMatcher(None, original, modified, autojunk=False)
    changes: list[tuple[str, str]] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            changes.extend((" ", line) for line in original[i1:i2])
            continue
        if tag in ("delete", "replace"):
            changes.extend(("-", line) for line in original[i1:i2])
        if tag in ("insert", "replace"):
            changes.extend(("+", line) for line in modified[j1:j2])
    return changes


class DiffGenerator:
    """Computes line-level unified diffs and word/HTML renderings."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(__name__)

    def compute_hunks(self, original: str, modified: str) -> list[DiffHunk]:
        """
        Compute the hunks of a unified diff between two texts.

        Args:
            original: Text before the change
            modified: Text after the change

        Returns:
            Emitted hunks in order; empty when the texts have the same lines
        """
        hunks: list[DiffHunk] = []
        current: _OpenHunk | None = None
        orig_no = 0
        mod_no = 0

        for prefix, text in _line_changes(_diff_lines(original), _diff_lines(modified)):
            if current is None:
                current = _OpenHunk(orig_start=orig_no, mod_start=mod_no)
            current.lines.append(f"{prefix}{_strip_terminator(text)}")
            if prefix != "+":
                current.orig_len += 1
                orig_no += 1
            if prefix != "-":
                current.mod_len += 1
                mod_no += 1

            if len(current.lines) > HUNK_FLUSH_THRESHOLD:
                hunk = current.freeze()
                if hunk.has_changes:
                    hunks.append(hunk)
                current = None

        if current is not None:
            hunk = current.freeze()
            if hunk.has_changes:
                hunks.append(hunk)
        return hunks

    def generate_unified_diff(self, original: str, modified: str) -> str:
        """
        Render a unified diff with ``--- Original`` / ``+++ Modified`` headers.

        Hunk headers are 1-based: ``@@ -start,len +start,len @@``.
        """
        out = ["--- Original", "+++ Modified"]
        hunks = self.compute_hunks(original, modified)
        for hunk in hunks:
            out.append(hunk.header())
            out.extend(hunk.lines)
        self._logger.debug(f"Generated unified diff with {len(hunks)} hunks")
        return "\n".join(out) + "\n"

    def generate_word_diff(self, original: str, modified: str) -> str:
        """Inline word diff: deletions as ``[-x-]``, insertions as ``{+y+}``."""
        old = _WORD_RE.findall(original)
        new = _WORD_RE.findall(modified)
        matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
        parts: list[str] = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                parts.append("".join(old[i1:i2]))
                continue
            if tag in ("delete", "replace"):
                parts.append(f"[-{''.join(old[i1:i2])}-]")
            if tag in ("insert", "replace"):
                parts.append(f"{{+{''.join(new[j1:j2])}+}}")
        return "".join(parts)

    def generate_html_diff(self, original: str, modified: str) -> str:
        out = ['<pre class="diff">']
        for prefix, text in _line_changes(_diff_lines(original), _diff_lines(modified)):
            escaped = html.escape(_strip_terminator(text).rstrip(), quote=False)
            if prefix == "-":
                out.append(f'<span class="deletion">-{escaped}</span>')
            elif prefix == "+":
                out.append(f'<span class="insertion">+{escaped}</span>')
            else:
                out.append(f" {escaped}")
        return "\n".join(out) + "\n</pre>"
