# Services module - external API integrations
from .buildbucket import BuildBucketClient
from .github import GitHubClient
from .status import BuildStatusDispatcher, StatusReconciler

__all__ = ["BuildBucketClient", "BuildStatusDispatcher", "GitHubClient", "StatusReconciler"]
