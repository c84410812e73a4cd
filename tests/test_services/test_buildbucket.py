"""
Tests for Buildbucket service.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock
import httpx

from cocoon_status.core.exceptions import BuildBucketAPIError
from cocoon_status.models.build import BuildResult, BuildStatus


def prpc_response(payload: dict, prefix: str = ")]}'\n") -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.text = prefix + json.dumps(payload)
    response.raise_for_status = MagicMock()
    return response


BUILD_JSON = {
    "id": "8912345",
    "builder": {"project": "flutter", "bucket": "try", "builder": "Linux"},
    "status": "STARTED",
    "tags": [
        {"key": "buildset", "value": "pr/git/123"},
        {"key": "buildset", "value": "sha/git/abc"},
    ],
}


class TestBuildBucketClient:
    """Tests for BuildBucketClient class."""

    def test_auth_header(self, buildbucket_client):
        assert buildbucket_client._headers["Authorization"] == "Bearer bb_token"

    def test_no_token_no_auth_header(self):
        from cocoon_status.services.buildbucket.client import BuildBucketClient

        client = BuildBucketClient("https://bb.example.com/")
        assert "Authorization" not in client._headers
        assert client._host == "https://bb.example.com"

    @pytest.mark.asyncio
    async def test_search_builds(self, buildbucket_client, mock_httpx_client):
        """Builds are parsed from the first batch response."""
        mock_httpx_client.post = AsyncMock(return_value=prpc_response({
            "responses": [{"searchBuilds": {"builds": [BUILD_JSON]}}],
        }))

        predicate = {"builder": {"project": "flutter", "bucket": "try"}}
        builds = await buildbucket_client.search_builds(predicate)

        assert len(builds) == 1
        build = builds[0]
        assert build.id == 8912345
        assert build.builder_name == "Linux"
        assert build.builder_id.bucket == "try"
        assert build.status == BuildStatus.STARTED
        assert build.tag("buildset") == "pr/git/123"

        call = mock_httpx_client.post.call_args
        assert call.args[0] == "https://bb.example.com/prpc/buildbucket.v2.Builds/Batch"
        assert call.kwargs["json"] == {"requests": [{"searchBuilds": {"predicate": predicate}}]}

    @pytest.mark.asyncio
    async def test_search_builds_empty(self, buildbucket_client, mock_httpx_client):
        """A response without builds yields an empty list."""
        mock_httpx_client.post = AsyncMock(return_value=prpc_response({
            "responses": [{"searchBuilds": {}}],
        }))

        assert await buildbucket_client.search_builds({}) == []

    @pytest.mark.asyncio
    async def test_response_without_xssi_prefix(self, buildbucket_client, mock_httpx_client):
        mock_httpx_client.post = AsyncMock(return_value=prpc_response(
            {"responses": [{"searchBuilds": {"builds": [dict(BUILD_JSON, status="SUCCESS")]}}]},
            prefix="",
        ))

        builds = await buildbucket_client.search_builds({})

        assert builds[0].status == BuildStatus.COMPLETED
        assert builds[0].result == BuildResult.SUCCESS

    @pytest.mark.asyncio
    async def test_batch_entry_error_raises(self, buildbucket_client, mock_httpx_client):
        mock_httpx_client.post = AsyncMock(return_value=prpc_response({
            "responses": [{"error": {"code": 7, "message": "permission denied"}}],
        }))

        with pytest.raises(BuildBucketAPIError, match="permission denied"):
            await buildbucket_client.batch([{"searchBuilds": {}}])

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, buildbucket_client, mock_httpx_client):
        mock_httpx_client.post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(BuildBucketAPIError):
            await buildbucket_client.search_builds({})

    @pytest.mark.asyncio
    async def test_http_status_error_raises(self, buildbucket_client, mock_httpx_client):
        request = httpx.Request("POST", "https://bb.example.com/prpc/buildbucket.v2.Builds/Batch")
        response = httpx.Response(500, request=request, text="oops")
        mock_httpx_client.post = AsyncMock(return_value=response)

        with pytest.raises(BuildBucketAPIError, match="500"):
            await buildbucket_client.search_builds({})

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, buildbucket_client, mock_httpx_client):
        response = MagicMock()
        response.text = ")]}'\nnot json"
        response.raise_for_status = MagicMock()
        mock_httpx_client.post = AsyncMock(return_value=response)

        with pytest.raises(BuildBucketAPIError, match="invalid JSON"):
            await buildbucket_client.search_builds({})
