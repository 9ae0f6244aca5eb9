"""
Local project analyzer: project type detection, file listing and text search.

Hidden entries (names starting with ``.``) and configured exclude patterns are
skipped while walking, which also keeps the backup directory out of results.
"""

import fnmatch
import logging
import os
import re
from collections import Counter
from typing import Any, Iterable, Iterator

from typing_extensions import override

from mcedit.exceptions import ProjectAnalysisError
from mcedit.ports.project.project_analyzer_port import ProjectAnalyzerPort

KNOWN_TYPES: dict[str, str] = {
    "rs": "Rust",
    "go": "Go",
    "js": "JavaScript",
    "ts": "TypeScript",
    "py": "Python",
    "java": "Java",
    "c": "C",
    "cpp": "C++",
    "h": "C/C++ Header",
    "hpp": "C++ Header",
    "cs": "C#",
    "rb": "Ruby",
    "php": "PHP",
    "html": "HTML",
    "css": "CSS",
    "json": "JSON",
    "md": "Markdown",
    "yml": "YAML",
    "yaml": "YAML",
    "toml": "TOML",
    "xml": "XML",
    "txt": "Text",
    "sh": "Shell",
    "bat": "Batch",
    "ps1": "PowerShell",
    "tf": "Terraform",
    "sql": "SQL",
}

TEXT_EXTENSIONS = frozenset(KNOWN_TYPES)

KEY_FILES: tuple[str, ...] = (
    ".git/config",
    ".gitignore",
    ".gitmodules",
    "package.json",
    "Cargo.toml",
    "go.mod",
    "requirements.txt",
    "setup.py",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    ".env",
    ".env.example",
    "docker-compose.yml",
    "Dockerfile",
    "Makefile",
    "CMakeLists.txt",
    "README.md",
    "LICENSE",
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    ".github/workflows",
    ".travis.yml",
    "Jenkinsfile",
    "azure-pipelines.yml",
)

PROJECT_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Node.js", ("package.json",)),
    ("Rust", ("Cargo.toml",)),
    ("Go", ("go.mod",)),
    ("Python", ("requirements.txt", "setup.py", "pyproject.toml")),
    ("Java", ("pom.xml", "build.gradle")),
    ("C/C++", ("CMakeLists.txt", "Makefile")),
    ("Docker", ("Dockerfile", "docker-compose.yml")),
)

# Checked in order when no marker file is present
EXTENSION_FALLBACK: tuple[tuple[str, str], ...] = (
    ("rs", "Rust"),
    ("py", "Python"),
    ("js", "JavaScript"),
    ("ts", "TypeScript"),
    ("go", "Go"),
    ("java", "Java"),
    ("html", "Web"),
    ("tf", "Terraform"),
)


def _extension(name: str) -> str:
    _, ext = os.path.splitext(name)
    return ext[1:].lower()


class LocalProjectAnalyzer(ProjectAnalyzerPort):
    """Walks a project directory on the local file system."""

    def __init__(
        self,
        base_directory: str,
        exclude_patterns: Iterable[str] = (),
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            base_directory: Directory to analyze
            exclude_patterns: Glob patterns of entry names to skip while walking
            logger: Logger instance to use for logging
        """
        self._base = os.path.abspath(base_directory)
        self._exclude = tuple(exclude_patterns)
        self._logger = logger or logging.getLogger(__name__)

    def _skipped(self, name: str) -> bool:
        if name.startswith("."):
            return True
        return any(fnmatch.fnmatch(name, pattern) for pattern in self._exclude)

    def _walk(self) -> Iterator[tuple[str, list[str], list[str]]]:
        if not os.path.isdir(self._base):
            raise ProjectAnalysisError(f"Directory does not exist: {self._base}")

        def _on_error(err: OSError) -> None:
            self._logger.warning(f"Could not read {err.filename}: {err}")

        for root, dirs, files in os.walk(self._base, onerror=_on_error):
            dirs[:] = sorted(d for d in dirs if not self._skipped(d))
            yield root, dirs, sorted(f for f in files if not self._skipped(f))

    @override
    def analyze_project(self) -> dict[str, Any]:
        self._logger.info(f"Analyzing project in {self._base}")
        extension_counts: Counter[str] = Counter()
        total_files = 0
        total_dirs = 0
        total_size = 0

        for root, _, files in self._walk():
            total_dirs += 1
            for name in files:
                full = os.path.join(root, name)
                if not os.path.isfile(full):
                    continue
                total_files += 1
                try:
                    total_size += os.path.getsize(full)
                except OSError as e:
                    self._logger.warning(f"Could not stat {full}: {e}")
                ext = _extension(name)
                if ext:
                    extension_counts[ext] += 1

        languages = [
            {"extension": ext, "language": KNOWN_TYPES.get(ext, "Unknown"), "count": count}
            for ext, count in sorted(extension_counts.items())
        ]
        key_files = [
            {"file": rel, "exists": True}
            for rel in KEY_FILES
            if os.path.exists(os.path.join(self._base, rel))
        ]

        return {
            "project_directory": self._base,
            "project_type": self._detect_project_type(
                {k["file"] for k in key_files}, extension_counts
            ),
            "stats": {
                "total_files": total_files,
                "total_directories": total_dirs,
                "total_size_bytes": total_size,
            },
            "languages": languages,
            "key_files": key_files,
        }

    @staticmethod
    def _detect_project_type(
        key_files: set[str], extension_counts: Counter[str]
    ) -> list[str]:
        detected = [
            project_type
            for project_type, markers in PROJECT_MARKERS
            if any(marker in key_files for marker in markers)
        ]
        if detected:
            return detected
        for ext, project_type in EXTENSION_FALLBACK:
            if extension_counts.get(ext, 0) > 0:
                return [project_type]
        return ["Unknown"]

    @override
    def list_files(self, pattern: str | None = None) -> list[str]:
        try:
            regex = re.compile(pattern) if pattern else None
        except re.error as e:
            raise ProjectAnalysisError(f"Invalid pattern '{pattern}': {e}") from e

        found: list[str] = []
        for root, _, files in self._walk():
            for name in files:
                if regex is None or regex.search(name):
                    found.append(os.path.join(root, name))
        self._logger.info(f"Listed {len(found)} files in {self._base}")
        return found

    @override
    def search_files(self, query: str) -> list[dict[str, Any]]:
        try:
            regex = re.compile(query)
        except re.error as e:
            raise ProjectAnalysisError(f"Invalid query '{query}': {e}") from e

        results: list[dict[str, Any]] = []
        for root, _, files in self._walk():
            for name in files:
                if _extension(name) not in TEXT_EXTENSIONS:
                    continue
                full = os.path.join(root, name)
                try:
                    with open(full, "r", encoding="utf-8") as f:
                        lines = f.read().splitlines()
                except (OSError, UnicodeDecodeError) as e:
                    self._logger.warning(f"Skipping unreadable file {full}: {e}")
                    continue

                matches = [
                    {"line_number": number, "line": line}
                    for number, line in enumerate(lines, start=1)
                    if regex.search(line)
                ]
                if matches:
                    results.append(
                        {"file": os.path.relpath(full, self._base), "matches": matches}
                    )

        self._logger.info(f"Found matches for '{query}' in {len(results)} files")
        return results
