"""Release branch push handling."""

from releasemerge.release.raise_pr import MissingVersion, raise_pull_request, read_version

__all__ = ["MissingVersion", "raise_pull_request", "read_version"]
