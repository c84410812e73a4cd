"""
Posts pending statuses for every watched try build of a pull request.
"""

from __future__ import annotations

from cocoon_status.core.builders import BuilderRegistry
from cocoon_status.core.logging import get_logger
from cocoon_status.models.status import RepositorySlug
from cocoon_status.services.buildbucket.client import BuildBucketClient

from .formatting import build_console_url
from .reconciler import StatusReconciler

logger = get_logger(__name__)

DEFAULT_BUILD_URL_TEMPLATE = "https://ci.chromium.org/p/{project}/builders/{bucket}/{builder}/b{id}"


class BuildStatusDispatcher:
    """Maps in-flight try builds onto pending commit statuses."""

    def __init__(
        self,
        buildbucket: BuildBucketClient,
        registry: BuilderRegistry,
        reconciler: StatusReconciler,
        *,
        project: str = "flutter",
        bucket: str = "try",
        user_agent: str = "flutter-cocoon",
        build_url_template: str = DEFAULT_BUILD_URL_TEMPLATE,
    ) -> None:
        self._buildbucket = buildbucket
        self._registry = registry
        self._reconciler = reconciler
        self._project = project
        self._bucket = bucket
        self._user_agent = user_agent
        self._build_url_template = build_url_template

    def _search_predicate(self, pr_number: int, commit_sha: str) -> dict:
        return {
            "builder": {"project": self._project, "bucket": self._bucket},
            "tags": [
                {"key": "buildset", "value": f"pr/git/{pr_number}"},
                {"key": "buildset", "value": f"sha/git/{commit_sha}"},
                {"key": "user_agent", "value": self._user_agent},
            ],
        }

    async def set_builds_pending_status(
        self,
        pr_number: int,
        commit_sha: str,
        slug: RepositorySlug,
    ) -> None:
        """
        Post pending statuses for the try builds of a pull request.

        Builds whose builder is not in the try table are skipped, as
        Buildbucket also reports internal and experimental jobs.

        Args:
            pr_number: Pull request number, the build set being queried
            commit_sha: Head commit the builds run against
            slug: Repository the pull request belongs to
        """
        builds = await self._buildbucket.search_builds(self._search_predicate(pr_number, commit_sha))
        if not builds:
            logger.debug(f"No try builds for {slug}#{pr_number} at {commit_sha}")
            return

        watched = self._registry.watched_builder_names()
        for build in builds:
            if build.builder_name not in watched:
                logger.debug(f"Skipping unwatched builder '{build.builder_name}'")
                continue

            await self._reconciler.set_pending_status(
                ref=commit_sha,
                builder_name=build.builder_name,
                build_url=build_console_url(self._build_url_template, build),
                slug=slug,
            )
