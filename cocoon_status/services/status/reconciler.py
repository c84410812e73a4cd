"""
Decides whether a commit status must be written for a LUCI builder.
"""

from contextlib import aclosing

from cocoon_status.core.builders import BuilderRegistry
from cocoon_status.core.logging import get_logger
from cocoon_status.models.build import BuildResult
from cocoon_status.models.status import CommitStatus, RepositorySlug, StatusState
from cocoon_status.services.github.client import GitHubClient

from .formatting import completed_state, status_description, with_reload_hint

logger = get_logger(__name__)


class StatusReconciler:
    """Posts LUCI build statuses on GitHub commits.

    Builders missing from both builder tables are skipped silently, since
    Buildbucket job names and configured names drift apart. GitHub errors
    are not caught here.
    """

    def __init__(
        self,
        registry: BuilderRegistry,
        github: GitHubClient,
        description_prefix: str = "Flutter LUCI Build",
        reload_seconds: int = 30,
    ) -> None:
        self._registry = registry
        self._github = github
        self._description_prefix = description_prefix
        self._reload_seconds = reload_seconds

    async def _latest_status(self, slug: RepositorySlug, ref: str, context: str) -> CommitStatus | None:
        # GitHub lists statuses newest first
        async with aclosing(self._github.list_statuses(slug, ref)) as statuses:
            async for status in statuses:
                if status.context == context:
                    return status
        return None

    async def set_pending_status(
        self,
        ref: str,
        builder_name: str,
        build_url: str,
        slug: RepositorySlug,
    ) -> bool:
        """
        Mark a builder as pending on a commit unless it already is.

        Args:
            ref: Commit SHA
            builder_name: Builder display name, used as the status context
            build_url: Build page URL
            slug: Repository the commit belongs to

        Returns:
            True if a new status was posted
        """
        if builder_name not in self._registry:
            logger.debug(f"Builder '{builder_name}' is not configured, skipping pending status")
            return False

        latest = await self._latest_status(slug, ref, builder_name)
        if latest is not None and latest.is_pending and latest.target_url == build_url:
            logger.debug(f"'{builder_name}' already pending on {slug}@{ref}")
            return False

        status = CommitStatus(
            context=builder_name,
            state=StatusState.PENDING,
            target_url=with_reload_hint(build_url, self._reload_seconds),
            description=status_description(self._description_prefix, builder_name),
        )
        await self._github.create_status(slug, ref, status)
        return True

    async def set_completed_status(
        self,
        ref: str,
        builder_name: str,
        build_url: str,
        slug: RepositorySlug,
        result: BuildResult | None,
    ) -> None:
        """Post the final status of a build. Always writes."""
        if builder_name not in self._registry:
            logger.debug(f"Builder '{builder_name}' is not configured, skipping completed status")
            return

        status = CommitStatus(
            context=builder_name,
            state=completed_state(result),
            target_url=build_url,
            description=status_description(self._description_prefix, builder_name),
        )
        await self._github.create_status(slug, ref, status)
