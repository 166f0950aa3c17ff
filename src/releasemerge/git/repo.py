"""Git working tree operations used by the release flow."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from releasemerge.ui import mask_credentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitResult:
    """Outcome of one git invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


class GitCommandError(RuntimeError):
    """A git command exited non-zero. Credentials in URLs are masked."""

    def __init__(self, result: GitResult):
        command = mask_credentials(" ".join(("git", *result.args)))
        output = mask_credentials((result.stderr or result.stdout).strip())
        super().__init__(f"{command} exited with {result.returncode}\n{output}")
        self.result = result


class GitRepo:
    """Scoped git operations on one working tree.

    Every method runs a single git command and raises ``GitCommandError`` on
    failure. Nothing is retried.
    """

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root.resolve()

    def _git(self, *args: str, check: bool = True) -> GitResult:
        logger.debug("git %s (in %s)", mask_credentials(" ".join(args)), self.repo_root)
        completed = subprocess.run(
            ["git", *args], cwd=self.repo_root, capture_output=True, text=True, check=False
        )
        result = GitResult(args, completed.returncode, completed.stdout, completed.stderr)
        if check and result.returncode != 0:
            raise GitCommandError(result)
        return result

    def has_uncommitted_diff(self) -> bool:
        """Return True when tracked files differ from the index."""
        result = self._git("diff", "--quiet", check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitCommandError(result)

    def file_exists(self, path: str) -> bool:
        return (self.repo_root / path).is_file()

    def read_file(self, path: str) -> str:
        return (self.repo_root / path).read_text(encoding="utf-8")

    def configure_identity(self, name: str, email: str) -> None:
        self._git("config", "user.name", name)
        self._git("config", "user.email", email)

    def set_remote_url(self, remote: str, url: str) -> None:
        self._git("remote", "set-url", remote, url)

    def create_branch(self, branch: str) -> None:
        self._git("checkout", "-b", branch)

    def stage(self, paths: Iterable[str]) -> None:
        staged = list(paths)
        if not staged:
            raise RuntimeError("Nothing to stage")
        self._git("add", "--", *staged)

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def push(self, remote: str, branch: str) -> None:
        self._git("push", "-u", remote, branch)

    def status(self) -> str:
        return self._git("status", "--short").stdout
