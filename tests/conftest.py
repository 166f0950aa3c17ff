"""Pytest configuration and fixtures for releasemerge tests."""
from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest

from releasemerge.config import Config, resolve_config
from releasemerge.github.event import Event
from releasemerge.types import FileChange, MergeMethod, PullRequestSnapshot, RepositoryPolicy

VERSION_PATCH = '-  "version": "1.0.0",\n+  "version": "1.1.0",'


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'releasemerge' (the package) not 'src/releasemerge'.",
            returncode=1,
        )


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def write_package_files(repo: Path, version: str) -> None:
    for name in ("package.json", "package-lock.json"):
        (repo / name).write_text(
            json.dumps({"name": "demo", "version": version}, indent=2) + "\n",
            encoding="utf-8",
        )


@pytest.fixture
def config() -> Config:
    return resolve_config({})


@pytest.fixture
def repo_with_origin(tmp_path: Path) -> Path:
    """Working tree on main with package files at 1.0.0 and a bare origin."""
    remote = tmp_path / "origin.git"
    subprocess.run(["git", "init", "--bare", str(remote)], check=True, capture_output=True)

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    write_package_files(repo, "1.0.0")
    (repo / "README.md").write_text("# demo\n", encoding="utf-8")
    git(repo, "add", "README.md", "package.json", "package-lock.json")
    git(repo, "commit", "-m", "initial")
    git(repo, "branch", "-M", "main")
    git(repo, "remote", "add", "origin", str(remote))
    git(repo, "push", "-u", "origin", "main")
    return repo


def make_snapshot(
    *,
    author: str | None = "guardian-ci",
    title: str = "chore(release): 1.1.0",
    changed_files: int = 2,
    mergeable: bool | None = True,
) -> PullRequestSnapshot:
    return PullRequestSnapshot(
        number=7,
        author_login=author,
        title=title,
        changed_files=changed_files,
        mergeable=mergeable,
        base_repository=RepositoryPolicy(allow_merge_commit=True),
    )


def release_files() -> list[FileChange]:
    return [
        FileChange(filename="package.json", changes=2, patch=VERSION_PATCH),
        FileChange(filename="package-lock.json", changes=2, patch=VERSION_PATCH),
    ]


def pull_request_event(
    *,
    allow_merge_commit: bool = False,
    allow_squash_merge: bool = True,
    allow_rebase_merge: bool = False,
) -> Event:
    return Event(
        name="pull_request",
        payload={
            "action": "opened",
            "pull_request": {
                "number": 7,
                "base": {
                    "repo": {
                        "allow_merge_commit": allow_merge_commit,
                        "allow_squash_merge": allow_squash_merge,
                        "allow_rebase_merge": allow_rebase_merge,
                    }
                },
            },
            "repository": {"name": "demo", "full_name": "acme/demo", "owner": {"login": "acme"}},
        },
    )


def push_event(ref: str = "refs/heads/main") -> Event:
    return Event(
        name="push",
        payload={
            "ref": ref,
            "repository": {"name": "demo", "full_name": "acme/demo", "owner": {"login": "acme", "name": "acme"}},
        },
    )


class FakeGitHub:
    """In-memory stand-in for GitHubClient that records calls."""

    def __init__(
        self,
        snapshot: PullRequestSnapshot | None = None,
        files: list[FileChange] | None = None,
    ):
        self.snapshot = snapshot or make_snapshot()
        self.files = release_files() if files is None else files
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequestSnapshot:
        self.calls.append(("get_pull_request", {"owner": owner, "repo": repo, "number": number}))
        return self.snapshot

    def list_files(self, owner: str, repo: str, number: int) -> list[FileChange]:
        self.calls.append(("list_files", {"owner": owner, "repo": repo, "number": number}))
        return self.files

    def create_review(self, owner: str, repo: str, number: int, *, event: str, body: str) -> dict[str, Any]:
        self.calls.append(("create_review", {"number": number, "event": event, "body": body}))
        return {"id": 1}

    def merge_pull_request(self, owner: str, repo: str, number: int, *, merge_method: MergeMethod) -> dict[str, Any]:
        self.calls.append(("merge_pull_request", {"number": number, "merge_method": merge_method}))
        return {"merged": True}

    def create_pull_request(self, owner: str, repo: str, *, title: str, body: str, base: str, head: str) -> dict[str, Any]:
        self.calls.append(
            ("create_pull_request", {"owner": owner, "repo": repo, "title": title, "body": body, "base": base, "head": head})
        )
        return {"html_url": f"https://github.com/{owner}/{repo}/pull/8"}

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()
