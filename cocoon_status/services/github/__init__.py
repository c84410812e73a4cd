# GitHub services - commit status API integration
from .client import GitHubClient

__all__ = ["GitHubClient"]
