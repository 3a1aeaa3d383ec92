#!/usr/bin/env python3
"""Command-line interface for dart-import-sorter using Click."""

from dataclasses import dataclass
from dataclasses import field
from importlib import metadata
import logging
from pathlib import Path
import sys
import time
from typing import Any
from typing import List
from typing import Mapping
from typing import Optional
from typing import Sequence

import click
from dart_import_sorter import core
from dart_import_sorter.config import resolve_config
from dart_import_sorter.discovery import filter_by_patterns
from dart_import_sorter.discovery import iter_dart_files
from dart_import_sorter.discovery import partition_ignored
from dart_import_sorter.discovery import relative_posix
from dart_import_sorter.workspace import find_workspace_packages
from dart_import_sorter.workspace import load_package
from dart_import_sorter.workspace import Package
from dart_import_sorter.workspace import workspace_package_names


try:
    VERSION = f"dart-import-sorter {metadata.version('dart-import-sorter')}"
except metadata.PackageNotFoundError:
    VERSION = "dart-import-sorter"

RULE = "═" * 59


@dataclass
class PackageReport:
    """What happened to the files of one package."""

    name: str
    root: Path
    sorted_files: List[Path] = field(default_factory=list)
    ignored_files: List[Path] = field(default_factory=list)
    errors: int = 0


@dataclass(frozen=True)
class Flags:
    emojis: bool = False
    no_comments: bool = False
    strip_comments: bool = False
    ignore_config: bool = False
    list_ignored: bool = False


def _process_package(package: Package, workspace_names: Sequence[str], flags: Flags,
                     patterns: Sequence[str], apply_changes: bool,
                     workspace_pubspec: Optional[Mapping[str, Any]] = None) -> PackageReport:
    """Sort the Dart files of one package.

    Args:
        package: The package to process.
        workspace_names: Names of every package of the workspace, or empty.
        flags: Command-line flags.
        patterns: File arguments given on the command line.
        apply_changes: If True, write sorted files back to disk.
        workspace_pubspec: The workspace root manifest, for inherited config.
    Returns:
        A PackageReport for the package.
    """
    config = resolve_config(package.pubspec, workspace_pubspec, flags.ignore_config)
    config = config.with_flags(flags.emojis, flags.no_comments, flags.strip_comments)
    options = config.options()
    context = package.context(workspace_names)

    files = filter_by_patterns(iter_dart_files(package.path), patterns)
    files, ignored = partition_ignored(package.path, files, config.ignored_files, package.has_flutter)
    report = PackageReport(package.name, package.path, ignored_files=ignored)

    flutter_icon = "🐦" if package.has_flutter else "  "
    logging.info("  📦 %s  %s", package.name, flutter_icon)

    for file_path in files:
        result = core.process_file(str(file_path), context, options, apply=apply_changes)
        for lineno, msg in result.warnings:
            logging.warning("[%s] line %s: %s", file_path, lineno, msg)
        if result.error:
            logging.error("[%s] %s", file_path, result.error)
            report.errors += 1
        if result.modified:
            report.sorted_files.append(file_path)
            relative = relative_posix(file_path, package.path)
            if apply_changes:
                logging.info("     %s %s", click.style("✔", fg="green"), relative)
            else:
                logging.info("     %s %s: imports would be sorted.", click.style("✘", fg="red"), relative)

    if not report.sorted_files:
        logging.info("     %s", click.style("No files sorted", fg="bright_black"))
    logging.info("")
    return report


def _log_summary(reports: List[PackageReport], elapsed: float, workspace: bool, list_ignored: bool) -> None:
    sorted_count = sum(len(r.sorted_files) for r in reports)
    ignored = [(r.root, path) for r in reports for path in r.ignored_files]

    logging.info(click.style(RULE, fg="bright_black"))
    logging.info("  ✨ %s", click.style("Workspace Summary" if workspace else "Summary", fg="green", bold=True))
    logging.info(click.style(RULE, fg="bright_black"))
    if workspace:
        logging.info("  📦 Packages processed: %s", click.style(str(len(reports)), fg="green", bold=True))
    logging.info("  📝 Files sorted: %s", click.style(str(sorted_count), fg="green", bold=True))
    logging.info("  🚫 Files ignored: %s", click.style(str(len(ignored)), fg="green", bold=True))
    logging.info("  ⏱️  Time elapsed: %s", click.style(f"{elapsed:.3f}s", fg="green", bold=True))
    logging.info(click.style(RULE, fg="bright_black"))

    if list_ignored and ignored:
        logging.info("  📋 %s", click.style("Ignored files:", fg="yellow"))
        for root, path in ignored:
            logging.info("     ❌ %s", relative_posix(path, root))


def _handle_project(path: Path, patterns: Sequence[str], flags: Flags, apply_changes: bool,
                    exit_if_changed: bool = False) -> int:
    """Sort the imports of a single package or of every package of a workspace.

    Returns:
        0 if no changes, 1 if files changed (or would change), 2 if an error occurred.
    """
    root_package = load_package(path)
    if root_package is None:
        logging.error("No pubspec.yaml found in %s", path)
        return 2

    start = time.perf_counter()
    members = find_workspace_packages(path)
    logging.info("")
    logging.info(click.style(RULE, fg="bright_black"))
    if members:
        title = f"Workspace with {len(members)} packages"
    else:
        title = "Single Package"
    logging.info("  ✨ %s", click.style(title, fg="green", bold=True))
    logging.info(click.style(RULE, fg="bright_black"))

    if members:
        names = workspace_package_names(members)
        reports = [
            _process_package(member, names, flags, patterns, apply_changes, root_package.pubspec)
            for member in members
        ]
    else:
        reports = [_process_package(root_package, (), flags, patterns, apply_changes)]

    _log_summary(reports, time.perf_counter() - start, bool(members), flags.list_ignored)

    if any(r.errors for r in reports):
        return 2
    changed = any(r.sorted_files for r in reports)
    if changed and (not apply_changes or exit_if_changed):
        return 1
    return 0


def sort_options(func):
    """Options shared by the check and fix commands."""
    decorators = [
        click.argument("files", nargs=-1),
        click.option("--path", "project_path", default=".", show_default=True,
                     type=click.Path(exists=True, file_okay=False, dir_okay=True),
                     help="Root of the package or workspace."),
        click.option("-e", "--emojis", is_flag=True, help="Add emojis to the category comments."),
        click.option("--no-comments", is_flag=True, help="Do not add category comments."),
        click.option("--strip-comments", is_flag=True, help="Remove comments attached to directives."),
        click.option("--ignore-config", is_flag=True, help="Ignore the import_sorter block of pubspec.yaml."),
        click.option("-l", "--list-ignored", is_flag=True, help="List the files that were ignored."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="dart-import-sorter CLI")
def cli(verbose: bool, quiet: bool) -> None:
    """Sort the imports and exports of Dart packages and workspaces."""
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


@cli.command(help="Report files whose imports are not sorted, without modifying them.")
@sort_options
def check(files, project_path, emojis, no_comments, strip_comments, ignore_config, list_ignored) -> None:
    flags = Flags(emojis, no_comments, strip_comments, ignore_config, list_ignored)
    exit_code = _handle_project(Path(project_path), files, flags, apply_changes=False)
    sys.exit(exit_code)


@cli.command(help="Sort imports in place.")
@sort_options
@click.option("--exit-if-changed", is_flag=True, help="Exit with status 1 if any file was changed.")
def fix(files, project_path, emojis, no_comments, strip_comments, ignore_config, list_ignored,
        exit_if_changed) -> None:
    flags = Flags(emojis, no_comments, strip_comments, ignore_config, list_ignored)
    exit_code = _handle_project(Path(project_path), files, flags, apply_changes=True,
                                exit_if_changed=exit_if_changed)
    sys.exit(exit_code)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
