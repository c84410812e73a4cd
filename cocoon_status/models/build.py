"""
Data model for LUCI builds and their Pub/Sub notifications.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cocoon_status.core.exceptions import PushMessageError


class BuildStatus(str, Enum):
    """Lifecycle stage of a build."""

    SCHEDULED = "scheduled"
    STARTED = "started"
    COMPLETED = "completed"


class BuildResult(str, Enum):
    """Outcome of a completed build."""

    SUCCESS = "success"
    FAILURE = "failure"
    INFRA_FAILURE = "infra_failure"
    CANCELED = "canceled"

    @classmethod
    def parse(cls, raw: str | None) -> "BuildResult | None":
        """Parse a result string, returning None for unknown values."""
        if not raw:
            return None
        try:
            return cls(raw.lower())
        except ValueError:
            return None


# Buildbucket v2 folds the result into the status field.
_V2_STATUSES: dict[str, tuple[BuildStatus, BuildResult | None]] = {
    "SCHEDULED": (BuildStatus.SCHEDULED, None),
    "STARTED": (BuildStatus.STARTED, None),
    "SUCCESS": (BuildStatus.COMPLETED, BuildResult.SUCCESS),
    "FAILURE": (BuildStatus.COMPLETED, BuildResult.FAILURE),
    "INFRA_FAILURE": (BuildStatus.COMPLETED, BuildResult.INFRA_FAILURE),
    "CANCELED": (BuildStatus.COMPLETED, BuildResult.CANCELED),
}


@dataclass(frozen=True)
class BuilderId:
    """Fully qualified builder name."""

    project: str
    bucket: str
    builder: str


@dataclass
class Build:
    """A single build known to Buildbucket."""

    id: int
    builder_id: BuilderId
    status: BuildStatus | None = None
    result: BuildResult | None = None
    tags: list[tuple[str, str]] = field(default_factory=list)
    url: str = ""

    @property
    def builder_name(self) -> str:
        return self.builder_id.builder

    def tag(self, key: str) -> str | None:
        """Return the first value of a tag, if present."""
        for tag_key, value in self.tags:
            if tag_key == key:
                return value
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Build":
        """Parse a Buildbucket v2 build object."""
        builder = data.get("builder") or {}
        status, result = _V2_STATUSES.get(data.get("status", ""), (None, None))
        return cls(
            id=int(data["id"]),
            builder_id=BuilderId(
                project=builder.get("project", ""),
                bucket=builder.get("bucket", ""),
                builder=builder.get("builder", ""),
            ),
            status=status,
            result=result,
            tags=[(t.get("key", ""), t.get("value", "")) for t in data.get("tags") or []],
        )

    @classmethod
    def from_push_dict(cls, data: dict[str, Any]) -> "Build":
        """Parse the v1 build object carried by Pub/Sub notifications.

        v1 tags are ``key:value`` strings and the bucket is qualified as
        ``luci.<project>.<bucket>``.
        """
        tags = []
        for raw in data.get("tags") or []:
            key, _, value = raw.partition(":")
            tags.append((key, value))

        bucket = data.get("bucket", "")
        project = data.get("project", "")
        if bucket.startswith("luci."):
            parts = bucket.split(".", 2)
            if len(parts) == 3:
                project = project or parts[1]
                bucket = parts[2]

        builder_name = next((value for key, value in tags if key == "builder"), "")

        status = None
        if data.get("status"):
            try:
                status = BuildStatus(data["status"].lower())
            except ValueError:
                status = None

        result = BuildResult.parse(data.get("result"))
        if result == BuildResult.FAILURE and data.get("failure_reason") == "INFRA_FAILURE":
            result = BuildResult.INFRA_FAILURE

        return cls(
            id=int(data["id"]),
            builder_id=BuilderId(project=project, bucket=bucket, builder=builder_name),
            status=status,
            result=result,
            tags=tags,
            url=data.get("url") or "",
        )


@dataclass
class BuildPushMessage:
    """A LUCI build notification delivered through Pub/Sub push."""

    build: Build
    user_data: dict[str, Any] = field(default_factory=dict)

    @property
    def commit_sha(self) -> str | None:
        """Commit the build ran against, from user data or the buildset tag."""
        sha = self.user_data.get("commit_sha")
        if sha:
            return sha
        for key, value in self.build.tags:
            if key == "buildset" and value.startswith("sha/git/"):
                return value[len("sha/git/"):]
        return None

    @property
    def repo_owner(self) -> str | None:
        return self.user_data.get("repo_owner")

    @property
    def repo_name(self) -> str | None:
        return self.user_data.get("repo_name")

    @property
    def builder_name(self) -> str:
        return self.user_data.get("builder_name") or self.build.builder_name

    @classmethod
    def from_pubsub(cls, envelope: dict[str, Any]) -> "BuildPushMessage":
        """
        Decode a Pub/Sub push envelope.

        Args:
            envelope: The request body, ``{"message": {"data": <base64>}}``

        Returns:
            Decoded push message

        Raises:
            PushMessageError: If the envelope or its payload is malformed
        """
        try:
            encoded = envelope["message"]["data"]
            payload = json.loads(base64.b64decode(encoded))
            build = Build.from_push_dict(payload["build"])
        except (KeyError, TypeError, AttributeError, ValueError, binascii.Error) as e:
            raise PushMessageError(f"Malformed build notification: {e}") from e

        return cls(build=build, user_data=_decode_user_data(payload.get("user_data")))


def _decode_user_data(raw: Any) -> dict[str, Any]:
    # user_data is either plain JSON or base64-encoded JSON
    if not raw:
        return {}
    if not isinstance(raw, str):
        raise PushMessageError("User data is not a string")
    try:
        data = json.loads(raw)
    except ValueError:
        try:
            data = json.loads(base64.b64decode(raw))
        except (ValueError, binascii.Error) as e:
            raise PushMessageError(f"Malformed user data: {e}") from e
    if not isinstance(data, dict):
        raise PushMessageError("User data is not an object")
    return data
