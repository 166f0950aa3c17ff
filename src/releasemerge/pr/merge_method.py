"""Merge strategy selection."""

from __future__ import annotations

from releasemerge.types import MergeMethod, RepositoryPolicy


def select_merge_method(repo: RepositoryPolicy) -> MergeMethod:
    """Pick the first allowed of merge, squash, rebase; fall back to merge."""
    if repo.allow_merge_commit:
        return MergeMethod.MERGE
    if repo.allow_squash_merge:
        return MergeMethod.SQUASH
    if repo.allow_rebase_merge:
        return MergeMethod.REBASE
    return MergeMethod.MERGE
