"""Value types shared by the pull request and release flows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MergeMethod(str, Enum):
    """Merge strategies accepted by the pulls merge endpoint."""

    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"


@dataclass(frozen=True)
class RepositoryPolicy:
    """Merge strategies a repository allows."""

    allow_merge_commit: bool = False
    allow_squash_merge: bool = False
    allow_rebase_merge: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RepositoryPolicy:
        """Build from a GitHub repository object; missing flags read as False."""
        data = data or {}
        return cls(
            allow_merge_commit=bool(data.get("allow_merge_commit", False)),
            allow_squash_merge=bool(data.get("allow_squash_merge", False)),
            allow_rebase_merge=bool(data.get("allow_rebase_merge", False)),
        )


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Pull request state as returned by the REST API at decision time."""

    number: int
    author_login: str | None
    title: str
    changed_files: int
    mergeable: bool | None
    base_repository: RepositoryPolicy

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PullRequestSnapshot:
        user = data.get("user") or {}
        base_repo = (data.get("base") or {}).get("repo")
        return cls(
            number=int(data["number"]),
            author_login=user.get("login") or None,
            title=str(data.get("title") or ""),
            changed_files=int(data.get("changed_files") or 0),
            mergeable=data.get("mergeable"),
            base_repository=RepositoryPolicy.from_dict(base_repo),
        )


@dataclass(frozen=True)
class FileChange:
    """One entry of a pull request's changed file listing."""

    filename: str
    changes: int
    patch: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileChange:
        patch = data.get("patch")
        return cls(
            filename=str(data["filename"]),
            changes=int(data.get("changes") or 0),
            patch=patch if isinstance(patch, str) else None,
        )


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of a change-set validation step."""

    passed: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> ValidationVerdict:
        return cls(passed=True)

    @classmethod
    def fail(cls, reason: str) -> ValidationVerdict:
        return cls(passed=False, reason=reason)
