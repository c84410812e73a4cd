"""
Pytest configuration and shared fixtures.
"""

import pytest
from unittest.mock import patch


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token")
    monkeypatch.setenv("WEBHOOK_SECRET", "test_secret")
    monkeypatch.delenv("BUILDERS_FILE", raising=False)
    monkeypatch.delenv("BUILDBUCKET_TOKEN", raising=False)


# ============================================================================
# Fake Collaborators
# ============================================================================

class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self):
        self.statuses = []
        self.created = []
        self.list_calls = []
        self.error = None

    async def list_statuses(self, slug, ref):
        self.list_calls.append((slug, ref))
        if self.error is not None:
            raise self.error
        for status in self.statuses:
            yield status

    async def create_status(self, slug, ref, status):
        if self.error is not None:
            raise self.error
        self.created.append((slug, ref, status))
        return status

    @property
    def call_count(self):
        return len(self.list_calls) + len(self.created)


class FakeBuildBucket:
    """In-memory stand-in for BuildBucketClient."""

    def __init__(self, builds=None):
        self.builds = list(builds or [])
        self.predicates = []

    async def search_builds(self, predicate):
        self.predicates.append(predicate)
        return list(self.builds)


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def slug():
    from cocoon_status.models.status import RepositorySlug
    return RepositorySlug("flutter", "flutter")


@pytest.fixture
def registry():
    """Default prod table with only Linux watched as a try builder."""
    from cocoon_status.core.builders import BuilderRegistry, DEFAULT_BUILDERS
    return BuilderRegistry.from_tables(DEFAULT_BUILDERS, [{"name": "Linux", "repo": "flutter"}])


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def fake_buildbucket():
    return FakeBuildBucket()


@pytest.fixture
def reconciler(registry, fake_github):
    from cocoon_status.services.status.reconciler import StatusReconciler
    return StatusReconciler(registry, fake_github, description_prefix="Flutter LUCI Build")


@pytest.fixture
def dispatcher(fake_buildbucket, registry, reconciler):
    from cocoon_status.services.status.dispatcher import BuildStatusDispatcher
    return BuildStatusDispatcher(fake_buildbucket, registry, reconciler)


@pytest.fixture
def github_client():
    """Create a GitHubClient with test config."""
    from cocoon_status.services.github.client import GitHubClient
    return GitHubClient("ghp_test")


@pytest.fixture
def buildbucket_client():
    """Create a BuildBucketClient with test config."""
    from cocoon_status.services.buildbucket.client import BuildBucketClient
    return BuildBucketClient("https://bb.example.com", token="bb_token")


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx AsyncClient."""
    with patch("httpx.AsyncClient") as mock:
        client_instance = mock.return_value.__aenter__.return_value
        yield client_instance
