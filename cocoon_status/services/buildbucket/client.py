"""
Buildbucket v2 pRPC client.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from cocoon_status.core.exceptions import BuildBucketAPIError
from cocoon_status.core.logging import get_logger
from cocoon_status.models.build import Build

logger = get_logger(__name__)

# pRPC prepends this to JSON responses
XSSI_PREFIX = ")]}'"


class BuildBucketClient:
    """HTTP client for the Buildbucket Builds service."""

    def __init__(self, host: str, token: str | None = None, timeout: float = 30.0) -> None:
        self._host = host.rstrip("/")
        self._token = token
        self._timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._host}/prpc/buildbucket.v2.Builds/{method}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Buildbucket error %s: %s", exc.response.status_code, exc.response.text)
            raise BuildBucketAPIError(f"Buildbucket error: {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.error("Buildbucket request failed: %s", exc)
            raise BuildBucketAPIError("Buildbucket request failed") from exc

        body = response.text
        if body.startswith(XSSI_PREFIX):
            body = body[len(XSSI_PREFIX):]

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise BuildBucketAPIError("Buildbucket returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise BuildBucketAPIError("Buildbucket returned unexpected payload")

        return data

    async def batch(self, requests: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Issue several Builds requests in one round trip.

        Args:
            requests: Batch request entries, e.g. ``{"searchBuilds": {...}}``

        Returns:
            One response entry per request, in request order

        Raises:
            BuildBucketAPIError: If the call fails or any entry carries an error
        """
        data = await self._post("Batch", {"requests": requests})
        responses = data.get("responses", [])

        for entry in responses:
            if "error" in entry:
                error = entry["error"]
                raise BuildBucketAPIError(
                    f"Buildbucket batch entry failed: {error.get('code')} {error.get('message', '')}".rstrip()
                )

        return responses

    async def search_builds(self, predicate: dict[str, Any]) -> list[Build]:
        """Search builds matching a predicate through a single-entry batch."""
        responses = await self.batch([{"searchBuilds": {"predicate": predicate}}])

        builds: list[Build] = []
        for entry in responses:
            for raw in entry.get("searchBuilds", {}).get("builds", []):
                builds.append(Build.from_dict(raw))
        return builds
