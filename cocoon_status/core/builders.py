"""
LUCI builder tables.

Two tables map a builder display name to the repository it reports to:
``builders`` for post-submit (prod) builds and ``try_builders`` for
pre-submit builds. Only try builders are watched for pending statuses.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from cocoon_status.core.exceptions import InvalidConfigurationError
from cocoon_status.models.status import RepositorySlug


@dataclass(frozen=True)
class BuilderConfig:
    """A builder known to the service."""

    name: str
    repo: str
    task_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuilderConfig":
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidConfigurationError("builder name")
        return cls(
            name=name,
            repo=data.get("repo") or "",
            task_name=data.get("taskName") or data.get("task_name"),
        )


DEFAULT_BUILDERS: list[dict[str, str]] = [
    {"name": "Linux", "repo": "flutter", "taskName": "linux_bot"},
    {"name": "Mac", "repo": "flutter", "taskName": "mac_bot"},
    {"name": "Windows", "repo": "flutter", "taskName": "windows_bot"},
    {"name": "Linux Coverage", "repo": "flutter"},
    {"name": "Linux Host Engine", "repo": "engine"},
    {"name": "Linux Fuchsia", "repo": "engine"},
    {"name": "Linux Android AOT Engine", "repo": "engine"},
    {"name": "Linux Android Debug Engine", "repo": "engine"},
    {"name": "Mac Host Engine", "repo": "engine"},
    {"name": "Mac Android AOT Engine", "repo": "engine"},
    {"name": "Mac Android Debug Engine", "repo": "engine"},
    {"name": "Mac iOS Engine", "repo": "engine"},
    {"name": "Mac iOS Engine Profile", "repo": "engine"},
    {"name": "Mac iOS Engine Release", "repo": "engine"},
    {"name": "Windows Host Engine", "repo": "engine"},
    {"name": "Windows Android AOT Engine", "repo": "engine"},
]

DEFAULT_TRY_BUILDERS: list[dict[str, str]] = [
    {"name": "Cocoon", "repo": "cocoon"},
    {"name": "Linux", "repo": "flutter", "taskName": "linux_bot"},
    {"name": "Windows", "repo": "flutter", "taskName": "windows_bot"},
    {"name": "Linux Host Engine", "repo": "engine"},
    {"name": "Linux Fuchsia", "repo": "engine"},
    {"name": "Linux Android AOT Engine", "repo": "engine"},
    {"name": "Linux Android Debug Engine", "repo": "engine"},
    {"name": "Linux Web Engine", "repo": "engine"},
    {"name": "Mac Host Engine", "repo": "engine"},
    {"name": "Mac Android AOT Engine", "repo": "engine"},
    {"name": "Mac Android Debug Engine", "repo": "engine"},
    {"name": "Mac iOS Engine", "repo": "engine"},
    {"name": "Windows Host Engine", "repo": "engine"},
    {"name": "Windows Android AOT Engine", "repo": "engine"},
    {"name": "Windows Web Engine", "repo": "engine"},
    {"name": "Mac Web Engine", "repo": "engine"},
    {"name": "fuchsia_ctl", "repo": "packages"},
]


class BuilderRegistry:
    """Lookup over the prod and try builder tables."""

    def __init__(
        self,
        builders: Iterable[BuilderConfig] = (),
        try_builders: Iterable[BuilderConfig] = (),
    ) -> None:
        self._builders = {b.name: b for b in builders}
        self._try_builders = {b.name: b for b in try_builders}

    @classmethod
    def from_tables(
        cls,
        builders: list[dict[str, Any]],
        try_builders: list[dict[str, Any]],
    ) -> "BuilderRegistry":
        """Build a registry from raw table rows."""
        return cls(
            [BuilderConfig.from_dict(row) for row in builders],
            [BuilderConfig.from_dict(row) for row in try_builders],
        )

    @classmethod
    def default(cls) -> "BuilderRegistry":
        return cls.from_tables(DEFAULT_BUILDERS, DEFAULT_TRY_BUILDERS)

    @classmethod
    def from_file(cls, path: str | Path) -> "BuilderRegistry":
        """
        Load tables from a JSON file.

        The file holds ``{"builders": [...], "try_builders": [...]}``; each
        row is ``{"name", "repo", "taskName"?}``.

        Raises:
            InvalidConfigurationError: If the file is unreadable or malformed
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InvalidConfigurationError(str(path)) from e

        if not isinstance(data, dict):
            raise InvalidConfigurationError(str(path))

        builders = data.get("builders", [])
        try_builders = data.get("try_builders", [])
        if not isinstance(builders, list) or not isinstance(try_builders, list):
            raise InvalidConfigurationError(str(path))
        if not all(isinstance(row, dict) for row in builders + try_builders):
            raise InvalidConfigurationError(str(path))

        return cls.from_tables(builders, try_builders)

    def find_builder_config(self, name: str) -> BuilderConfig | None:
        """Find a builder in the prod table, then the try table."""
        return self._builders.get(name) or self._try_builders.get(name)

    def watched_builder_names(self) -> set[str]:
        """Names of try builders that get pending statuses."""
        return set(self._try_builders)

    def repo_slug_for_builder(self, name: str, owner: str = "flutter") -> RepositorySlug | None:
        """Repository a try builder reports to, or None when unknown."""
        config = self._try_builders.get(name)
        if config is None or not config.repo:
            return None
        return RepositorySlug(owner=owner, name=config.repo)

    def __contains__(self, name: str) -> bool:
        return self.find_builder_config(name) is not None


def load_registry(builders_file: str | None) -> BuilderRegistry:
    """Load the registry from a file, falling back to the built-in tables."""
    if builders_file:
        return BuilderRegistry.from_file(builders_file)
    return BuilderRegistry.default()
