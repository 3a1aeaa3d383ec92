"""Top-level package for dart-import-sorter.

This package exposes the core API for sorting the import and export
directives of Dart files.
"""

from dart_import_sorter.core import FileResult
from dart_import_sorter.core import process_file
from dart_import_sorter.core import rewrite
from dart_import_sorter.core import rewrite_with_context
from dart_import_sorter.core import RewriteOptions
from dart_import_sorter.core import RewriteResult
from dart_import_sorter.parser import Directive
from dart_import_sorter.parser import HeaderParseError
from dart_import_sorter.parser import parse_header
from dart_import_sorter.rules import Category
from dart_import_sorter.rules import classify_directive
from dart_import_sorter.rules import ClassificationContext


__all__ = [
    "Category",
    "ClassificationContext",
    "classify_directive",
    "Directive",
    "FileResult",
    "HeaderParseError",
    "parse_header",
    "process_file",
    "rewrite",
    "rewrite_with_context",
    "RewriteOptions",
    "RewriteResult",
]
