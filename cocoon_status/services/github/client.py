"""
GitHub API client for commit status operations.
"""

from typing import AsyncIterator

import httpx

from cocoon_status.core.exceptions import GitHubAPIError
from cocoon_status.core.logging import get_logger
from cocoon_status.models.status import CommitStatus, RepositorySlug

logger = get_logger(__name__)


class GitHubClient:
    """Client for the GitHub commit status API."""

    BASE_URL = "https://api.github.com"
    PER_PAGE = 100

    def __init__(self, token: str, base_url: str | None = None, timeout: float = 30.0):
        self._token = token
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    async def list_statuses(self, slug: RepositorySlug, ref: str) -> AsyncIterator[CommitStatus]:
        """
        Iterate the statuses posted on a commit, newest first.

        Pages are fetched lazily, so a caller that stops early does not
        pull the rest of the history.

        Args:
            slug: Repository the commit belongs to
            ref: Commit SHA, branch or tag name

        Yields:
            Commit statuses in reverse chronological order

        Raises:
            GitHubAPIError: If API call fails
        """
        url = f"{self._base_url}/repos/{slug.full_name}/commits/{ref}/statuses"

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            page = 1
            while True:
                try:
                    response = await client.get(
                        url,
                        headers=self._headers,
                        params={"per_page": self.PER_PAGE, "page": page},
                    )
                    response.raise_for_status()
                except httpx.HTTPError as e:
                    raise GitHubAPIError(f"Failed to list statuses for {slug}@{ref}: {e}") from e

                try:
                    items = response.json()
                except ValueError as e:
                    raise GitHubAPIError(f"GitHub returned invalid JSON for {slug}@{ref}") from e

                for item in items:
                    yield CommitStatus.from_dict(item)

                if len(items) < self.PER_PAGE:
                    break
                page += 1

    async def create_status(
        self,
        slug: RepositorySlug,
        ref: str,
        status: CommitStatus,
    ) -> CommitStatus:
        """
        Post a new status on a commit.

        Args:
            slug: Repository the commit belongs to
            ref: Commit SHA
            status: Status to post

        Returns:
            The status as recorded by GitHub

        Raises:
            GitHubAPIError: If API call fails
        """
        url = f"{self._base_url}/repos/{slug.full_name}/statuses/{ref}"

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.post(url, headers=self._headers, json=status.to_dict())
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise GitHubAPIError(f"Failed to create status for {slug}@{ref}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(f"GitHub returned invalid JSON for {slug}@{ref}") from e

        logger.info(f"Posted {status.state_value} status '{status.context}' on {slug}@{ref}")
        return CommitStatus.from_dict(data)
