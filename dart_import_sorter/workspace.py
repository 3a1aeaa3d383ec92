"""Package and workspace discovery for dart-import-sorter.

A project is either a single package (a directory with ``pubspec.yaml``) or a
workspace whose root ``pubspec.yaml`` lists its member packages::

    workspace:
      - packages/*
      - apps/mobile

The names of all member packages are used to tell workspace imports apart
from third-party ones.
"""

from dataclasses import dataclass
from dataclasses import field
import logging
from pathlib import Path
from typing import Any
from typing import Iterable
from typing import List
from typing import Mapping
from typing import Optional
from typing import Set

import yaml

from dart_import_sorter.config import read_pubspec
from dart_import_sorter.rules import ClassificationContext

LOG = logging.getLogger(__name__)

FLUTTER = "flutter"


@dataclass(frozen=True)
class Package:
    path: Path
    name: str
    pubspec: Mapping[str, Any] = field(default_factory=dict)
    dependencies: frozenset = frozenset()

    @property
    def has_flutter(self) -> bool:
        return FLUTTER in self.dependencies

    def context(self, workspace_packages: Iterable[str] = ()) -> ClassificationContext:
        return ClassificationContext.create(self.name, workspace_packages, self.has_flutter)


def _read_lock_packages(root: Path) -> Set[str]:
    lock = root / "pubspec.lock"
    if not lock.is_file():
        return set()
    try:
        with open(lock, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        LOG.warning("Could not read %s: %s", lock, exc)
        return set()
    if not isinstance(data, Mapping) or not isinstance(data.get("packages"), Mapping):
        return set()
    return {str(name) for name in data["packages"]}


def _declared_dependencies(pubspec: Mapping[str, Any]) -> Set[str]:
    names: Set[str] = set()
    for key in ("dependencies", "dev_dependencies"):
        section = pubspec.get(key)
        if isinstance(section, Mapping):
            names.update(str(name) for name in section)
    return names


def load_package(path) -> Optional[Package]:
    """Load the package at path, or return None when it has no pubspec.yaml."""
    root = Path(path)
    pubspec = read_pubspec(root)
    if pubspec is None:
        return None
    name = pubspec.get("name")
    name = str(name) if name else root.name
    dependencies = _read_lock_packages(root) | _declared_dependencies(pubspec)
    return Package(path=root, name=name, pubspec=pubspec, dependencies=frozenset(dependencies))


def workspace_patterns(pubspec: Mapping[str, Any]) -> List[str]:
    """Return the member patterns listed under ``workspace:``."""
    workspace = pubspec.get("workspace") if pubspec else None
    if isinstance(workspace, Mapping):
        workspace = workspace.get("packages")
    if not isinstance(workspace, list):
        return []
    return [str(entry) for entry in workspace]


def resolve_workspace_pattern(root: Path, pattern: str) -> List[Path]:
    """Resolve one workspace entry to the package directories it names."""
    pattern = pattern.strip().strip("/")
    if not pattern:
        return []
    if "*" in pattern or "?" in pattern:
        candidates = sorted(root.glob(pattern))
    else:
        candidates = [root / pattern]
    return [c for c in candidates if c.is_dir() and (c / "pubspec.yaml").is_file()]


def find_workspace_packages(root) -> List[Package]:
    """Return the member packages of the workspace at root, in manifest order.

    A directory that is not a workspace root, or whose manifest cannot be
    read, yields an empty list.
    """
    root = Path(root)
    pubspec = read_pubspec(root)
    if not pubspec:
        return []

    packages: List[Package] = []
    seen: Set[Path] = set()
    for pattern in workspace_patterns(pubspec):
        for path in resolve_workspace_pattern(root, pattern):
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            package = load_package(path)
            if package is not None:
                packages.append(package)
    LOG.debug("Found %d workspace packages in %s", len(packages), root)
    return packages


def workspace_package_names(packages: Iterable[Package]) -> List[str]:
    return [package.name for package in packages if package.name]
