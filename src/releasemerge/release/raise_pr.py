"""Open a version bump pull request after a release commit on the release branch."""

from __future__ import annotations

import json
import os
from urllib.parse import urlparse

from releasemerge import ui
from releasemerge.config import Config
from releasemerge.git.repo import GitRepo
from releasemerge.github.client import GitHubClient
from releasemerge.github.event import Event

VERSION_MANIFEST = "package.json"
DEFAULT_SERVER_URL = "https://github.com"
REMOTE = "origin"

OUTCOME_IGNORED = "ignored"
OUTCOME_NO_DIFF = "no-diff"
OUTCOME_OPENED = "pull-request-opened"


class MissingVersion(RuntimeError):
    """Raised when the new version cannot be read from the version manifest."""


def read_version(git: GitRepo, manifest: str = VERSION_MANIFEST) -> str:
    """Read the ``version`` field from a JSON manifest in the working tree."""
    if not git.file_exists(manifest):
        raise MissingVersion(f"Could not find version number: {manifest} not found")
    try:
        data = json.loads(git.read_file(manifest))
    except UnicodeDecodeError as exc:
        raise MissingVersion(f"Could not find version number: {manifest} is not UTF-8 text") from exc
    except json.JSONDecodeError as exc:
        raise MissingVersion(f"Could not find version number: {manifest} is not valid JSON") from exc

    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version.strip():
        raise MissingVersion("Could not find version number")
    return version.strip()


def authenticated_remote_url(full_name: str, token: str, server_url: str | None = None) -> str:
    """Build an HTTPS remote URL that pushes with the workflow token."""
    parsed = urlparse(server_url or os.environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL)
    host = parsed.netloc or parsed.path
    return f"https://x-access-token:{token}@{host}/{full_name}.git"


def build_commit_message(config: Config, version: str) -> str:
    return f"{config.pull_request_prefix} {version}"


def build_branch_name(config: Config, version: str) -> str:
    return f"{config.new_branch_prefix}{version}"


def raise_pull_request(
    event: Event,
    config: Config,
    *,
    git: GitRepo,
    github: GitHubClient,
    token: str,
) -> str:
    """Commit the release version bump to a new branch and open a pull request.

    Steps are not retried. A failure after the push leaves the branch on the
    remote without a pull request.
    """
    ui.info("Checking for a release branch")
    if event.ref != f"refs/heads/{config.release_branch}":
        ui.info(f"Push is not to {config.release_branch}, ignoring")
        return OUTCOME_IGNORED

    ui.info("Checking changes")
    if not git.has_uncommitted_diff():
        ui.info("New release not created. No further action needed.")
        return OUTCOME_NO_DIFF

    ui.info("Changes detected. Creating pull request")
    with ui.group("Getting new package version"):
        version = read_version(git)
        ui.info(f"New version: {version}")

    message = build_commit_message(config, version)
    branch = build_branch_name(config, version)
    files = [name for name in config.allowed_files if git.file_exists(name)]

    with ui.group("Committing changes"):
        git.configure_identity(config.commit_user, config.commit_email)
        git.set_remote_url(REMOTE, authenticated_remote_url(event.repository_full_name, token))
        git.create_branch(branch)
        git.stage(files)
        git.commit(message)
        ui.info(git.status())
        git.push(REMOTE, branch)

    ui.info("Opening pull request")
    created = github.create_pull_request(
        event.owner,
        event.repo,
        title=message,
        body=f"Updating the version number in the repository following the release of v{version}",
        base=config.release_branch,
        head=branch,
    )
    url = (created or {}).get("html_url")
    if url:
        ui.info(f"Opened {url}")
    return OUTCOME_OPENED
