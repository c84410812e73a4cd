# Models - commit statuses and LUCI builds
from .build import Build, BuilderId, BuildPushMessage, BuildResult, BuildStatus
from .status import CommitStatus, RepositorySlug, StatusState

__all__ = [
    "Build",
    "BuilderId",
    "BuildPushMessage",
    "BuildResult",
    "BuildStatus",
    "CommitStatus",
    "RepositorySlug",
    "StatusState",
]
