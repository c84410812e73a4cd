# Webhooks - LUCI and GitHub event endpoints
from .server import create_app, start_webhook_server

__all__ = ["create_app", "start_webhook_server"]
