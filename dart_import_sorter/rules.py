"""Rules module for dart-import-sorter.

This module defines the categories directives are grouped into and the
classification of a directive target into exactly one of them.

Categories are emitted in this order: Dart SDK, Flutter, third-party packages,
workspace sibling packages, the package itself, relative paths.
"""

from dataclasses import dataclass
import enum
from typing import Dict
from typing import FrozenSet
from typing import Iterable
from typing import List
from typing import Union

from dart_import_sorter.parser import Directive


SDK_PREFIX = "dart:"
FLUTTER_PREFIX = "package:flutter/"
PACKAGE_PREFIX = "package:"


class Category(enum.IntEnum):
    SDK = 0
    FRAMEWORK = 1
    PACKAGE = 2
    WORKSPACE = 3
    PROJECT = 4
    RELATIVE = 5

    @property
    def label(self) -> str:
        return _LABELS[self][1]

    @property
    def emoji(self) -> str:
        return _LABELS[self][0]

    def header(self, emojis: bool = False) -> str:
        """Return the comment line announcing this category."""
        if emojis:
            return f"// {self.emoji} {self.label} imports:"
        return f"// {self.label} imports:"


_LABELS = {
    Category.SDK: ("🎯", "Dart"),
    Category.FRAMEWORK: ("🐦", "Flutter"),
    Category.PACKAGE: ("📦", "Package"),
    Category.WORKSPACE: ("🏢", "Workspace"),
    Category.PROJECT: ("🌎", "Project"),
    Category.RELATIVE: ("📁", "Relative"),
}


@dataclass(frozen=True)
class ClassificationContext:
    """What the classifier knows about the package a file belongs to."""

    package_name: str = ""
    workspace_packages: FrozenSet[str] = frozenset()
    has_flutter: bool = True

    @classmethod
    def create(cls, package_name: str, workspace_packages: Iterable[str] = (),
               has_flutter: bool = True) -> "ClassificationContext":
        return cls(package_name or "", frozenset(workspace_packages or ()), has_flutter)


def package_name_of(target: str) -> str:
    """Return the package name of a ``package:`` target, or '' for anything else."""
    if not target.startswith(PACKAGE_PREFIX):
        return ""
    return target[len(PACKAGE_PREFIX):].split("/", 1)[0].strip()


def classify_directive(directive: Union[Directive, str], context: ClassificationContext) -> Category:
    """Classify a directive (or a bare target string) into a Category.

    Args:
        directive: A parsed Directive or its target string.
        context: The classification context of the file's package.

    Returns:
        The first matching category. Empty or malformed targets are RELATIVE.
    """
    target = directive.target if isinstance(directive, Directive) else directive
    if target.startswith(SDK_PREFIX):
        return Category.SDK
    if context.has_flutter and target.startswith(FLUTTER_PREFIX):
        return Category.FRAMEWORK
    name = package_name_of(target)
    if not name:
        return Category.RELATIVE
    if context.package_name and name == context.package_name:
        return Category.PROJECT
    if name in context.workspace_packages:
        return Category.WORKSPACE
    return Category.PACKAGE


def split_directives(directives: Iterable[Directive],
                     context: ClassificationContext) -> Dict[Category, List[Directive]]:
    """Split directives into categories, keeping their original relative order.

    Returns:
        A dictionary with every Category as key, in output order.
    """
    grouped: Dict[Category, List[Directive]] = {category: [] for category in Category}
    for directive in directives:
        grouped[classify_directive(directive, context)].append(directive)
    return grouped
