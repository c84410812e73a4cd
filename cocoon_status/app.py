"""
Application factory and main entry point.
"""

import sys
import asyncio
from aiohttp import web

from cocoon_status.core.builders import load_registry
from cocoon_status.core.config import Settings, settings
from cocoon_status.core.logging import setup_logging, get_logger
from cocoon_status.services.buildbucket import BuildBucketClient
from cocoon_status.services.github import GitHubClient
from cocoon_status.services.status import BuildStatusDispatcher, StatusReconciler
from cocoon_status.webhooks.server import create_app, start_webhook_server

logger = get_logger(__name__)


def build_app(config: Settings) -> web.Application:
    """Wire clients and services into the webhook application."""
    registry = load_registry(config.builders_file)

    github = GitHubClient(config.github_token, config.github_api_url, timeout=config.http_timeout)
    buildbucket = BuildBucketClient(
        config.buildbucket_host,
        token=config.buildbucket_token,
        timeout=config.http_timeout,
    )

    reconciler = StatusReconciler(
        registry,
        github,
        description_prefix=config.status_description_prefix,
        reload_seconds=config.status_reload_seconds,
    )
    dispatcher = BuildStatusDispatcher(
        buildbucket,
        registry,
        reconciler,
        project=config.luci_project,
        bucket=config.luci_try_bucket,
        user_agent=config.luci_user_agent,
        build_url_template=config.build_url_template,
    )
    return create_app(reconciler, dispatcher, registry, config)


async def main() -> None:
    """Main application entry point."""
    setup_logging()

    if not settings.github_token:
        logger.error("GITHUB_TOKEN not set!")
        sys.exit(1)

    logger.info("Starting status service...")
    runner = await start_webhook_server(build_app(settings), settings.webhook_host, settings.webhook_port)

    # Keep running until cancelled
    stop_signal = asyncio.Event()
    try:
        await stop_signal.wait()
    except asyncio.CancelledError:
        pass
    finally:
        await runner.cleanup()
