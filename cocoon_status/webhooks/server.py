"""
Webhook server setup.
"""

from aiohttp import web

from cocoon_status.core.builders import BuilderRegistry
from cocoon_status.core.config import Settings
from cocoon_status.core.logging import get_logger
from cocoon_status.services.status import BuildStatusDispatcher, StatusReconciler
from cocoon_status.webhooks.github import handle_pull_request
from cocoon_status.webhooks.keys import DISPATCHER_KEY, RECONCILER_KEY, REGISTRY_KEY, SETTINGS_KEY
from cocoon_status.webhooks.luci import handle_build_notification

logger = get_logger(__name__)


def create_app(
    reconciler: StatusReconciler,
    dispatcher: BuildStatusDispatcher,
    registry: BuilderRegistry,
    settings: Settings,
) -> web.Application:
    """Create the webhook application."""
    app = web.Application()
    app[RECONCILER_KEY] = reconciler
    app[DISPATCHER_KEY] = dispatcher
    app[REGISTRY_KEY] = registry
    app[SETTINGS_KEY] = settings
    app.router.add_post("/webhook/luci", handle_build_notification)
    app.router.add_post("/webhook/github", handle_pull_request)
    return app


async def start_webhook_server(app: web.Application, host: str = "0.0.0.0", port: int = 8081) -> web.AppRunner:
    """
    Start the webhook server.

    Args:
        app: Application from create_app
        host: Host to bind to
        port: Port to bind to

    Returns:
        The runner, for cleanup on shutdown
    """
    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Webhook server started on {host}:{port}")
    return runner
