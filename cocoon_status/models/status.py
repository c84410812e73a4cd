"""
Data model for GitHub commit statuses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class StatusState(str, Enum):
    """States accepted by the GitHub commit status API."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


@dataclass(frozen=True)
class RepositorySlug:
    """Owner/name pair identifying a GitHub repository."""

    owner: str
    name: str

    @classmethod
    def parse(cls, full_name: str) -> "RepositorySlug":
        """Parse an ``owner/name`` string."""
        owner, sep, name = full_name.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Invalid repository slug: {full_name!r}")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class CommitStatus:
    """A single status entry posted on a commit.

    GitHub never overwrites statuses, it appends them. The current status
    of a context is the newest entry carrying that context.

    ``state`` holds a :class:`StatusState` for known states and the raw
    string for anything else another actor may have written.
    """

    context: str
    state: StatusState | str
    target_url: str = ""
    description: str = ""
    created_at: datetime | None = None

    @property
    def state_value(self) -> str:
        if isinstance(self.state, StatusState):
            return self.state.value
        return self.state

    @property
    def is_pending(self) -> bool:
        return self.state_value == StatusState.PENDING.value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommitStatus":
        """Build from a GitHub API status object."""
        raw_state = data.get("state") or ""
        try:
            state: StatusState | str = StatusState(raw_state)
        except ValueError:
            state = raw_state

        created_at = None
        if data.get("created_at"):
            created_at = datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))

        return cls(
            context=data.get("context") or "",
            state=state,
            target_url=data.get("target_url") or "",
            description=data.get("description") or "",
            created_at=created_at,
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to the GitHub create-status request body."""
        return {
            "state": self.state_value,
            "target_url": self.target_url,
            "description": self.description,
            "context": self.context,
        }
