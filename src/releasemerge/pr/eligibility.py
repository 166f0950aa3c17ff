"""Eligibility precheck for automatically generated release pull requests."""

from __future__ import annotations

from releasemerge import ui
from releasemerge.config import Config
from releasemerge.types import PullRequestSnapshot


def is_eligible(pr: PullRequestSnapshot, config: Config) -> bool:
    """Return True only for PRs authored by the bot with the release title prefix.

    Anything else is ignored, not rejected.
    """
    ui.info("Checking pull request is a release pull request")
    if not pr.author_login or pr.author_login != config.pull_request_author:
        ui.info(f"Pull request is not authored by {config.pull_request_author}, ignoring.")
        return False

    if not pr.title.startswith(config.pull_request_prefix):
        ui.info(f'Pull request title does not start with "{config.pull_request_prefix}", ignoring.')
        return False

    return True
