"""Version-control collaborator for the release flow."""

from releasemerge.git.repo import GitCommandError, GitRepo, GitResult

__all__ = ["GitCommandError", "GitRepo", "GitResult"]
