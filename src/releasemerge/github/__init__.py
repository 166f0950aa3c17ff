"""GitHub API and webhook event access."""

from releasemerge.github.client import GitHubApiError, GitHubClient
from releasemerge.github.event import Event, EventPayloadError, load_event

__all__ = ["Event", "EventPayloadError", "GitHubApiError", "GitHubClient", "load_event"]
