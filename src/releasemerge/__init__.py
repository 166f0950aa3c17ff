"""releasemerge - open and auto-merge release version bump pull requests."""

__version__ = "0.3.0"
