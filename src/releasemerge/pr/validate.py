"""Change-set validation for release pull requests.

A release pull request may only touch the files named in the expected change
map, each with exactly the expected number of changes and containing every
required literal string in its patch. Passing validation is what allows the
pull request to be approved and merged with the bot's credentials, so every
check fails on the first mismatch.
"""

from __future__ import annotations

from collections.abc import Iterable

from releasemerge.config import AnyChange, Config, LiteralChanges
from releasemerge.types import FileChange, PullRequestSnapshot, ValidationVerdict
from releasemerge.utils.pluralise import pluralise


class ValidationFailure(RuntimeError):
    """Raised when a release pull request contains unexpected changes."""


def _allowed_list(config: Config) -> str:
    return ", ".join(config.allowed_files)


def check_file_count(pr: PullRequestSnapshot, config: Config) -> ValidationVerdict:
    """Compare the PR's declared changed file count with the expected file set.

    Runs on the pull request object alone, before any file listing is fetched.
    Catches both extra and missing files.
    """
    expected = len(config.allowed_files)
    if pr.changed_files != expected:
        return ValidationVerdict.fail(
            f"Pull request changes {pr.changed_files} "
            f"{pluralise(pr.changed_files, 'file', 'files')}. "
            f"Expected to see changes to all of the following files: {_allowed_list(config)}"
        )
    return ValidationVerdict.ok()


def _check_file(file: FileChange, config: Config) -> ValidationVerdict:
    expected = config.expected_changes.get(file.filename)
    if expected is None:
        return ValidationVerdict.fail(
            f"Disallowed file ({file.filename}) changed. Allowed files are: {_allowed_list(config)}"
        )

    if isinstance(expected, AnyChange):
        return ValidationVerdict.ok()
    if not isinstance(expected, LiteralChanges):
        raise TypeError(f"Unsupported expectation for {file.filename}: {expected!r}")
    changes = expected.changes

    if file.changes != len(changes):
        return ValidationVerdict.fail(
            f"{file.changes} {pluralise(file.changes, 'change', 'changes')} in file: {file.filename}. "
            f"Expected {len(changes)} {pluralise(len(changes), 'change', 'changes')}"
        )

    if file.patch is None:
        if config.require_patch:
            return ValidationVerdict.fail(
                f"No diff available for {file.filename}; cannot verify expected changes"
            )
        return ValidationVerdict.ok()

    for change in changes:
        if change not in file.patch:
            return ValidationVerdict.fail(
                f"Expected to see the following string in diff for {file.filename}: {change}"
                f"\n\nPR Diff: {file.patch}"
            )
    return ValidationVerdict.ok()


def _check_listing(filenames: list[str], config: Config) -> ValidationVerdict:
    """The listed files must be exactly the expected set, each listed once."""
    seen: set[str] = set()
    for filename in filenames:
        if filename in seen:
            return ValidationVerdict.fail(
                f"File ({filename}) listed more than once. "
                f"Expected to see changes to all of the following files: {_allowed_list(config)}"
            )
        seen.add(filename)

    missing = [name for name in config.allowed_files if name not in seen]
    if missing:
        return ValidationVerdict.fail(
            f"No changes to {', '.join(missing)}. "
            f"Expected to see changes to all of the following files: {_allowed_list(config)}"
        )
    return ValidationVerdict.ok()


def validate_files(files: Iterable[FileChange], config: Config) -> ValidationVerdict:
    """Check each listed file in order; the first failing file decides.

    Once every listed file passes, the listing itself must match the expected
    file set exactly.
    """
    filenames: list[str] = []
    for file in files:
        verdict = _check_file(file, config)
        if not verdict.passed:
            return verdict
        filenames.append(file.filename)
    return _check_listing(filenames, config)


def validate(
    pr: PullRequestSnapshot,
    files: Iterable[FileChange],
    config: Config,
) -> ValidationVerdict:
    """Validate a pull request's change set against the expected change map."""
    verdict = check_file_count(pr, config)
    if not verdict.passed:
        return verdict
    return validate_files(files, config)


def raise_for_verdict(verdict: ValidationVerdict) -> None:
    if not verdict.passed:
        raise ValidationFailure(verdict.reason or "Pull request failed validation")
