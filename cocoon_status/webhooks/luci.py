"""
LUCI Pub/Sub push handler for build notifications.
"""

from aiohttp import web

from cocoon_status.core.exceptions import APIError, PushMessageError
from cocoon_status.core.logging import get_logger
from cocoon_status.models.build import BuildPushMessage, BuildStatus
from cocoon_status.models.status import RepositorySlug
from cocoon_status.webhooks.keys import RECONCILER_KEY, REGISTRY_KEY

logger = get_logger(__name__)


async def handle_build_notification(request: web.Request) -> web.Response:
    """Handle a build status change pushed by LUCI."""
    try:
        envelope = await request.json()
        message = BuildPushMessage.from_pubsub(envelope)
    except (ValueError, PushMessageError) as e:
        logger.warning(f"Rejected build notification: {e}")
        return web.Response(status=400, text="Malformed notification")

    build = message.build
    sha = message.commit_sha
    if message.repo_owner and message.repo_name:
        slug = RepositorySlug(owner=message.repo_owner, name=message.repo_name)
    else:
        # Fall back to the repository the try builder is configured for
        slug = request.app[REGISTRY_KEY].repo_slug_for_builder(message.builder_name)

    if slug is None or not sha:
        logger.debug(f"Build {build.id} carries no repository or commit, ignoring")
        return web.Response(status=200, text="Ignored build")

    reconciler = request.app[RECONCILER_KEY]

    try:
        if build.status == BuildStatus.COMPLETED:
            await reconciler.set_completed_status(
                ref=sha,
                builder_name=message.builder_name,
                build_url=build.url,
                slug=slug,
                result=build.result,
            )
        elif build.status in (BuildStatus.SCHEDULED, BuildStatus.STARTED):
            await reconciler.set_pending_status(
                ref=sha,
                builder_name=message.builder_name,
                build_url=build.url,
                slug=slug,
            )
        else:
            return web.Response(status=200, text="Ignored status")
    except APIError as e:
        # Non-2xx makes Pub/Sub redeliver the message
        logger.error(f"Failed to update '{message.builder_name}' on {slug}@{sha}: {e}")
        return web.Response(status=500, text="Status update failed")

    return web.Response(status=200, text="Processed")
