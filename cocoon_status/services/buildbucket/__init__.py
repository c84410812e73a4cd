# Buildbucket services - LUCI build queries
from .client import BuildBucketClient

__all__ = ["BuildBucketClient"]
