#!/usr/bin/env python3
"""Core utilities for dart-import-sorter. This module sorts the import and
export directives of a Dart file into their categories, renders the canonical
header zone, and tells whether the file content actually changed.
"""
from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from dart_import_sorter.parser import Directive
from dart_import_sorter.parser import HeaderParseError
from dart_import_sorter.parser import HeaderZone
from dart_import_sorter.parser import parse_header
from dart_import_sorter.rules import Category
from dart_import_sorter.rules import ClassificationContext
from dart_import_sorter.rules import split_directives

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteOptions:
    insert_headers: bool = True
    emoji_headers: bool = False
    strip_comments: bool = False


@dataclass(frozen=True)
class RewriteResult:
    changed: bool
    text: str
    warnings: Tuple[Tuple[int, str], ...] = ()


def sort_category(directives: Iterable[Directive]) -> List[Directive]:
    """Sort directives by target, case-insensitively, keeping ties in place."""
    return sorted(directives, key=lambda d: d.target.lower())


def render_header_zone(zone: HeaderZone, context: ClassificationContext,
                       options: RewriteOptions) -> List[str]:
    """Render the canonical lines of a file from its parsed header zone."""
    new_lines: List[str] = []
    if zone.prefix:
        new_lines.extend(zone.prefix)
        new_lines.append('')

    grouped = split_directives(zone.directives, context)
    current_category: Optional[Category] = None
    for category, directives in grouped.items():
        if not directives:
            continue
        if current_category is not None:
            # One blank line between category blocks
            new_lines.append('')
        current_category = category
        if options.insert_headers:
            new_lines.append(category.header(options.emoji_headers))
        for directive in sort_category(directives):
            new_lines.extend(directive.render(options.strip_comments))

    if zone.remainder:
        new_lines.append('')
        new_lines.extend(zone.remainder)
    return new_lines


def rewrite(lines: Sequence[str], package_name: str, workspace_packages: Iterable[str] = (),
            options: Optional[RewriteOptions] = None, has_flutter: bool = True) -> RewriteResult:
    """Rewrite the header zone of a Dart file into its canonical form.

    The original text is taken to be the lines joined with newlines plus a
    final newline. Files whose header cannot be parsed are returned unchanged
    with a warning; this function never raises for bad input.
    """
    context = ClassificationContext.create(package_name, workspace_packages, has_flutter)
    return rewrite_with_context(lines, context, options)


def rewrite_with_context(lines: Sequence[str], context: ClassificationContext,
                         options: Optional[RewriteOptions] = None) -> RewriteResult:
    """Same as rewrite(), for callers that already hold a ClassificationContext."""
    options = options or RewriteOptions()
    lines = list(lines)
    original = '\n'.join(lines) + '\n'

    try:
        zone = parse_header(lines)
    except HeaderParseError as exc:
        LOG.debug("Leaving file unchanged: %s", exc)
        return RewriteResult(False, original, ((exc.lineno, f"Unparsable header: {exc.message}"),))

    if not zone.directives:
        LOG.debug("No import or export directives found.")
        return RewriteResult(False, original)

    text = '\n'.join(render_header_zone(zone, context, options)) + '\n'
    return RewriteResult(text != original, text)


@dataclass(frozen=True)
class FileResult:
    modified: bool
    warnings: Tuple[Tuple[int, str], ...] = ()
    error: Optional[str] = None


def split_source(source: str) -> Tuple[List[str], Optional[str]]:
    """Split file text on its line terminator.

    Only '\\n' and '\\r\\n' end a line, so form feeds and Unicode separators
    inside string literals stay where they are. Returns the lines and the
    terminator, or None as terminator when the file mixes both kinds.
    """
    crlf = source.count('\r\n')
    if crlf and crlf != source.count('\n'):
        return [], None
    newline = '\r\n' if crlf else '\n'
    lines = source.split(newline)
    if lines[-1] == '':
        lines.pop()
    return lines, newline


def process_file(file_path: str, context: ClassificationContext, options: Optional[RewriteOptions] = None,
                 apply: bool = False) -> FileResult:
    """Process a single Dart file and sort its directives.
    The file is only written when apply is True. Read and write failures are
    reported in FileResult.error, never as warnings.
    """
    path_obj = Path(file_path)

    try:
        with open(path_obj, 'r', encoding='utf-8', newline='') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return FileResult(False, error=f"Could not read file: {e}")

    lines, newline = split_source(source)
    if newline is None:
        return FileResult(False, ((0, "Mixed line endings, file left unchanged"),))

    result = rewrite_with_context(lines, context, options)
    if not result.changed:
        return FileResult(False, result.warnings)

    if apply:
        try:
            with open(path_obj, 'w', encoding='utf-8', newline=newline) as f:
                f.write(result.text)
        except OSError as e:
            return FileResult(False, result.warnings, f"Could not write file: {e}")
    return FileResult(True, result.warnings)
