"""
Reports LUCI build outcomes to GitHub as commit statuses.
"""

__version__ = "0.1.0"
