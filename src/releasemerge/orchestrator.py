"""Event dispatch for one action run."""

from __future__ import annotations

import logging

from releasemerge.config import Config
from releasemerge.git.repo import GitRepo
from releasemerge.github.client import GitHubClient
from releasemerge.github.event import Event
from releasemerge.pr.merge import approve_and_merge
from releasemerge.release.raise_pr import raise_pull_request

logger = logging.getLogger(__name__)


class UnknownEvent(RuntimeError):
    """Raised for event names this action does not handle."""


def run(
    event: Event,
    config: Config,
    *,
    github: GitHubClient,
    git: GitRepo,
    token: str,
) -> str:
    """Dispatch on the event name and return the flow's outcome."""
    logger.debug("Event name: %s", event.name)
    logger.debug("Action type: %s", event.action or "Unknown")

    if event.name == "push":
        return raise_pull_request(event, config, git=git, github=github, token=token)
    if event.name == "pull_request":
        return approve_and_merge(event, config, github=github)
    raise UnknownEvent(f"Unknown eventName: {event.name}")


def describe(outcome: str) -> str:
    return {
        "ignored": "Nothing to do for this event",
        "no-diff": "No version change to propose",
        "pull-request-opened": "Opened version bump pull request",
        "approved": "Approved pull request (not mergeable yet)",
        "merged": "Approved and merged pull request",
    }.get(outcome, outcome)
