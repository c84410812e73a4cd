"""
GitHub webhook handler for pull_request events.
"""

import hmac
import hashlib
from aiohttp import web

from cocoon_status.core.exceptions import APIError
from cocoon_status.core.logging import get_logger
from cocoon_status.models.status import RepositorySlug
from cocoon_status.webhooks.keys import DISPATCHER_KEY, SETTINGS_KEY

logger = get_logger(__name__)

PENDING_ACTIONS = {"opened", "reopened", "synchronize"}


def verify_signature(secret: str, body: bytes, signature: str) -> bool:
    """Check an X-Hub-Signature-256 header against the request body."""
    expected = "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(signature, expected)


async def handle_pull_request(request: web.Request) -> web.Response:
    """Post pending statuses for the try builds of an updated pull request."""
    settings = request.app[SETTINGS_KEY]
    body = await request.read()

    if settings.webhook_secret:
        signature = request.headers.get("X-Hub-Signature-256")
        if not signature:
            return web.Response(status=401, text="No signature")
        if not verify_signature(settings.webhook_secret, body, signature):
            return web.Response(status=401, text="Invalid signature")

    event = request.headers.get("X-GitHub-Event")
    if event != "pull_request":
        return web.Response(status=200, text="Ignored event")

    try:
        payload = await request.json()
        action = payload.get("action")
        pull_request = payload["pull_request"]
        pr_number = int(pull_request["number"])
        head_sha = pull_request["head"]["sha"]
        slug = RepositorySlug.parse(payload["repository"]["full_name"])
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Malformed pull_request payload: {e}")
        return web.Response(status=400, text="Malformed payload")

    if action not in PENDING_ACTIONS:
        return web.Response(status=200, text="Ignored action")

    if not settings.is_presubmit_supported_repo(slug.name):
        logger.debug(f"Presubmit not supported for {slug}")
        return web.Response(status=200, text="Unsupported repository")

    dispatcher = request.app[DISPATCHER_KEY]
    try:
        await dispatcher.set_builds_pending_status(pr_number, head_sha, slug)
    except APIError as e:
        logger.error(f"Failed to set pending statuses for {slug}#{pr_number}: {e}")
        return web.Response(status=500, text="Status update failed")

    return web.Response(status=200, text="Processed")
