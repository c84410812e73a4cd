"""
Custom application exceptions.
"""


class CocoonStatusError(Exception):
    """Base exception for status service errors."""
    pass


class InvalidConfigurationError(CocoonStatusError):
    """A configuration value is missing or malformed."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invalid configuration value for {key}")


class PushMessageError(CocoonStatusError):
    """A build notification could not be decoded."""
    pass


class APIError(CocoonStatusError):
    """External API call failed."""
    pass


class GitHubAPIError(APIError):
    """GitHub API call failed."""
    pass


class BuildBucketAPIError(APIError):
    """Buildbucket API call failed."""
    pass
