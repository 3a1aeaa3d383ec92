"""Discovery of the Dart files of a package."""

import logging
from pathlib import Path
import re
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Sequence
from typing import Tuple

from dart_import_sorter.ignore import is_ignored
from dart_import_sorter.ignore import build_gitignore_spec

LOG = logging.getLogger(__name__)

SOURCE_DIRS = ("lib", "bin", "test", "tests", "test_driver", "integration_test")


def iter_dart_files(root) -> Iterator[Path]:
    """Yield the Dart files below the source directories of a package."""
    root_path = Path(root)
    for name in SOURCE_DIRS:
        source_dir = root_path / name
        if not source_dir.is_dir():
            continue
        for path in sorted(source_dir.rglob("*.dart")):
            if path.is_file():
                yield path


def relative_posix(path: Path, root) -> str:
    return path.relative_to(root).as_posix()


def filter_by_patterns(paths: Iterable[Path], patterns: Sequence[str]) -> List[Path]:
    """Keep only the files named on the command line.

    Filtering only happens when one of the arguments ends in ``dart``; every
    non-option argument is then searched as a regex in the file path.
    """
    paths = list(paths)
    if not any(p.endswith("dart") for p in patterns):
        return paths

    regexes = []
    for pattern in patterns:
        if pattern.startswith("-"):
            continue
        try:
            regexes.append(re.compile(pattern))
        except re.error as exc:
            LOG.warning("Invalid file pattern %r: %s", pattern, exc)
    return [p for p in paths if any(r.search(p.as_posix()) for r in regexes)]


def partition_ignored(root, paths: Iterable[Path], ignored_files: Iterable[str] = (),
                      has_flutter: bool = False) -> Tuple[List[Path], List[Path]]:
    """Split files into those to sort and those ignored.

    Returns:
        A (kept, ignored) tuple of lists, each in input order.
    """
    gitignore = build_gitignore_spec(root)
    ignored_files = list(ignored_files)
    kept: List[Path] = []
    ignored: List[Path] = []
    for path in paths:
        relative = relative_posix(path, root)
        if is_ignored(relative, gitignore, ignored_files, has_flutter):
            ignored.append(path)
        else:
            kept.append(path)
    return kept, ignored
