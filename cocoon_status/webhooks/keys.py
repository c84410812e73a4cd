"""
Application keys for services shared with webhook handlers.
"""

from aiohttp import web

from cocoon_status.core.builders import BuilderRegistry
from cocoon_status.core.config import Settings
from cocoon_status.services.status import BuildStatusDispatcher, StatusReconciler

RECONCILER_KEY = web.AppKey("reconciler", StatusReconciler)
DISPATCHER_KEY = web.AppKey("dispatcher", BuildStatusDispatcher)
REGISTRY_KEY = web.AppKey("registry", BuilderRegistry)
SETTINGS_KEY = web.AppKey("settings", Settings)
