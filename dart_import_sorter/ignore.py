"""Rules deciding which Dart files are left alone.

Three sources are combined: well-known generated file suffixes, the
package's ``.gitignore`` and the ``ignored_files`` regexes of the
configuration. Paths are always compared in their package-relative,
forward-slash form.
"""

import functools
import logging
from pathlib import Path
import re
from typing import Iterable
from typing import Optional

import pathspec

LOG = logging.getLogger(__name__)

GENERATED_FILE_PATTERNS = [
    re.compile(r"\.g\.dart$"),
    re.compile(r"\.freezed\.dart$"),
    re.compile(r"\.gr\.dart$"),
    re.compile(r"\.gen\.dart$"),
    re.compile(r"\.mocks\.dart$"),
    re.compile(r"\.config\.dart$"),
    re.compile(r"\.chopper\.dart$"),
    re.compile(r"\.reflectable\.dart$"),
]

PLUGIN_REGISTRANT = "lib/generated_plugin_registrant.dart"


def is_generated(path: str) -> bool:
    return any(pattern.search(path) for pattern in GENERATED_FILE_PATTERNS)


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lstrip("/")


@functools.lru_cache(maxsize=None)
def compile_gitignore_pattern(pattern: str) -> pathspec.PathSpec:
    """Compile a single .gitignore pattern into a PathSpec."""
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, [pattern])


def matches_gitignore_pattern(path: str, pattern: str) -> bool:
    """Return True when the relative path is ignored by a single pattern."""
    return compile_gitignore_pattern(pattern).match_file(_normalize(path))


def build_gitignore_spec(root) -> Optional[pathspec.PathSpec]:
    """Build a PathSpec from a package's .gitignore, or None without one."""
    gitignore = Path(root) / ".gitignore"
    if not gitignore.is_file():
        return None
    try:
        text = gitignore.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        LOG.warning("Could not read %s: %s", gitignore, exc)
        return None

    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            lines.append(line)
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, lines)


def matches_ignored_files(path: str, patterns: Iterable[str]) -> bool:
    """Search the configured ``ignored_files`` regexes in a ``/lib/x.dart`` style path."""
    for pattern in patterns:
        try:
            if re.search(pattern, path):
                return True
        except re.error as exc:
            LOG.warning("Invalid ignored_files pattern %r: %s", pattern, exc)
    return False


def is_ignored(relative_path: str, gitignore: Optional[pathspec.PathSpec] = None,
               ignored_files: Iterable[str] = (), has_flutter: bool = False) -> bool:
    """Return True when a package-relative path must not be sorted."""
    if has_flutter and relative_path == PLUGIN_REGISTRANT:
        return True
    if gitignore is not None and gitignore.match_file(_normalize(relative_path)):
        return True
    if is_generated(relative_path):
        return True
    return matches_ignored_files("/" + relative_path, ignored_files)
