# Status services - LUCI build to GitHub status reconciliation
from .dispatcher import BuildStatusDispatcher
from .reconciler import StatusReconciler

__all__ = ["BuildStatusDispatcher", "StatusReconciler"]
