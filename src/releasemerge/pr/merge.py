"""Validate, approve and merge release pull requests."""

from __future__ import annotations

from releasemerge import ui
from releasemerge.config import Config
from releasemerge.github.client import GitHubClient
from releasemerge.github.event import Event
from releasemerge.pr.eligibility import is_eligible
from releasemerge.pr.merge_method import select_merge_method
from releasemerge.pr.validate import check_file_count, raise_for_verdict, validate_files

APPROVAL_BODY = "Approved automatically by releasemerge: release version bump matched the expected changes."

OUTCOME_IGNORED = "ignored"
OUTCOME_APPROVED = "approved"
OUTCOME_MERGED = "merged"


def approve_and_merge(event: Event, config: Config, *, github: GitHubClient) -> str:
    """Approve and merge the event's pull request when it is a valid release bump.

    Returns:
        ``ignored`` for non-release PRs, ``approved`` when approved but not
        mergeable, ``merged`` otherwise

    Raises:
        ValidationFailure: If a release PR contains unexpected changes
    """
    owner, repo, number = event.owner, event.repo, event.pull_request_number
    ui.info(f"Pull request: {owner}/{repo}#{number}")

    # The webhook copy can be stale; fetch the current state once.
    pull_request = github.get_pull_request(owner, repo, number)

    if not is_eligible(pull_request, config):
        return OUTCOME_IGNORED

    ui.info("Validating pull request changes")
    raise_for_verdict(check_file_count(pull_request, config))
    files = github.list_files(owner, repo, number)
    raise_for_verdict(validate_files(files, config))

    ui.info("Conditions met. Approving.")
    github.create_review(owner, repo, number, event="APPROVE", body=APPROVAL_BODY)

    ui.info("Checking if pull request is mergeable")
    if pull_request.mergeable is not True:
        ui.info("Pull request is not mergeable, exiting.")
        return OUTCOME_APPROVED

    merge_method = select_merge_method(event.base_repository)
    ui.info(f"Pull request mergeable. Merging with method `{merge_method.value}`")
    github.merge_pull_request(owner, repo, number, merge_method=merge_method)
    return OUTCOME_MERGED
