"""Configuration of dart-import-sorter.

Settings come from the ``import_sorter:`` block of ``pubspec.yaml``::

    import_sorter:
      emojis: true
      comments: false
      strip_comments: false
      ignored_files:
        - \\/lib\\/src\\/legacy\\/*

A workspace root block applies to every member package; a package block
overrides it key by key.
"""

from dataclasses import dataclass
from dataclasses import replace
import logging
from pathlib import Path
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Tuple

import yaml

from dart_import_sorter.core import RewriteOptions

LOG = logging.getLogger(__name__)

CONFIG_KEY = "import_sorter"


@dataclass(frozen=True)
class SorterConfig:
    emojis: bool = False
    comments: bool = True
    strip_comments: bool = False
    ignored_files: Tuple[str, ...] = ()

    def options(self) -> RewriteOptions:
        return RewriteOptions(
            insert_headers=self.comments,
            emoji_headers=self.emojis,
            strip_comments=self.strip_comments,
        )

    def merge(self, block: Optional[Mapping[str, Any]]) -> "SorterConfig":
        """Return a copy with the keys present in a config block applied."""
        if not block:
            return self
        changes = {}
        for key in ("emojis", "comments", "strip_comments"):
            if key in block:
                changes[key] = bool(block[key])
        if "ignored_files" in block:
            value = block["ignored_files"]
            if isinstance(value, str):
                changes["ignored_files"] = (value,)
            elif isinstance(value, list):
                changes["ignored_files"] = tuple(str(p) for p in value)
            elif value is None:
                changes["ignored_files"] = ()
            else:
                LOG.warning("Ignoring ignored_files setting %r: expected a list of regexes", value)
        return replace(self, **changes)

    def with_flags(self, emojis: bool = False, no_comments: bool = False,
                   strip_comments: bool = False) -> "SorterConfig":
        """Apply command-line flags; flags can only switch features on."""
        return replace(
            self,
            emojis=self.emojis or emojis,
            comments=self.comments and not no_comments,
            strip_comments=self.strip_comments or strip_comments,
        )


def read_pubspec(root) -> Optional[Mapping[str, Any]]:
    """Load ``pubspec.yaml`` from a directory, or None if missing or invalid."""
    pubspec = Path(root) / "pubspec.yaml"
    if not pubspec.is_file():
        return None
    try:
        with open(pubspec, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        LOG.warning("Could not read %s: %s", pubspec, exc)
        return None
    return data if isinstance(data, Mapping) else None


def config_block(pubspec: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """Return the ``import_sorter`` block of a loaded pubspec, if it is a mapping."""
    if not pubspec:
        return None
    block = pubspec.get(CONFIG_KEY)
    return block if isinstance(block, Mapping) else None


def resolve_config(package_pubspec: Optional[Mapping[str, Any]],
                   workspace_pubspec: Optional[Mapping[str, Any]] = None,
                   ignore_config: bool = False) -> SorterConfig:
    """Resolve the effective configuration of one package."""
    config = SorterConfig()
    if ignore_config:
        return config
    config = config.merge(config_block(workspace_pubspec))
    return config.merge(config_block(package_pubspec))
