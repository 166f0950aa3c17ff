"""Run configuration resolved from action inputs.

Inputs arrive as plain strings (GitHub Actions ``INPUT_*`` variables, CLI
options, or an optional YAML file) and are resolved once into an immutable
:class:`Config` that is passed explicitly to every flow.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

WILDCARD = "*"

INPUT_NAMES: tuple[str, ...] = (
    "github-token",
    "package-manager",
    "npm-lockfile-version",
    "additional-changes",
    "pr-author",
    "pr-prefix",
    "release-branch",
    "branch-prefix",
    "commit-user",
    "commit-email",
    "require-patch",
)

DEFAULTS: dict[str, str] = {
    "package-manager": "npm",
    "npm-lockfile-version": "1",
    "additional-changes": "{}",
    "pr-author": "guardian-ci",
    "pr-prefix": "chore(release):",
    "release-branch": "main",
    "branch-prefix": "release-",
    "commit-user": "guardian-ci",
    "commit-email": "guardian-ci@users.noreply.github.com",
    "require-patch": "false",
}

VERSION_BUMP: tuple[str, ...] = ('-  "version": "', '+  "version": "')

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class InvalidConfig(ValueError):
    """Raised when an input value cannot be turned into a valid configuration."""


@dataclass(frozen=True)
class LiteralChanges:
    """Required literal diff substrings; the tuple length is the expected change count."""

    changes: tuple[str, ...]


@dataclass(frozen=True)
class AnyChange:
    """Wildcard expectation: any change to the file is accepted."""

    def __str__(self) -> str:
        return WILDCARD


ExpectedChange = LiteralChanges | AnyChange
ExpectedChangeMap = Mapping[str, ExpectedChange]


def _package_manager_changes(lockfile_version: int) -> dict[str, dict[str, ExpectedChange]]:
    # Lockfile v2 carries the root version twice (top level and packages[""]).
    lockfile_bump = VERSION_BUMP * lockfile_version
    return {
        "npm": {
            "package.json": LiteralChanges(VERSION_BUMP),
            "package-lock.json": LiteralChanges(lockfile_bump),
        },
        "yarn": {
            "package.json": LiteralChanges(VERSION_BUMP),
        },
    }


PACKAGE_MANAGERS: tuple[str, ...] = tuple(_package_manager_changes(1))
LOCKFILE_VERSIONS: tuple[int, ...] = (1, 2)


@dataclass(frozen=True)
class Config:
    """Immutable policy for one run."""

    pull_request_author: str
    pull_request_prefix: str
    release_branch: str
    new_branch_prefix: str
    commit_user: str
    commit_email: str
    expected_changes: ExpectedChangeMap
    package_manager: str = "npm"
    npm_lockfile_version: int = 1
    require_patch: bool = False
    allowed_files: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        if not self.expected_changes:
            raise InvalidConfig("expected changes must name at least one file")
        frozen = MappingProxyType(dict(self.expected_changes))
        object.__setattr__(self, "expected_changes", frozen)
        object.__setattr__(self, "allowed_files", tuple(frozen))

    def describe_expected_changes(self) -> dict[str, Any]:
        """Return the expected change map in its input (JSON) shape."""
        return {
            filename: WILDCARD if isinstance(expected, AnyChange) else list(expected.changes)
            for filename, expected in self.expected_changes.items()
        }


def _value(inputs: Mapping[str, str | None], name: str) -> str:
    raw = inputs.get(name)
    if raw is None or raw == "":
        return DEFAULTS[name]
    return raw


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise InvalidConfig(f"Invalid {name} value ({raw}) provided. Expected true or false")


def _parse_lockfile_version(raw: str) -> int:
    try:
        version = int(raw.strip())
    except ValueError:
        version = 0
    if version not in LOCKFILE_VERSIONS:
        allowed = ", ".join(str(v) for v in LOCKFILE_VERSIONS)
        raise InvalidConfig(
            f"Invalid npm-lockfile-version value ({raw}) provided. Allowed values are: {allowed}"
        )
    return version


def parse_additional_changes(raw: str) -> dict[str, ExpectedChange]:
    """Parse the ``additional-changes`` JSON object into expectations."""
    if not raw or raw == "{}":
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConfig("Invalid JSON provided for additional-changes input") from exc

    if not isinstance(data, dict):
        raise InvalidConfig("additional-changes value must be an object")

    parsed: dict[str, ExpectedChange] = {}
    for filename, changes in data.items():
        if changes == WILDCARD:
            parsed[filename] = AnyChange()
            continue
        if not isinstance(changes, list):
            raise InvalidConfig('values in additional-changes object must be arrays or "*"')
        for change in changes:
            if not isinstance(change, str):
                raise InvalidConfig("values in additional-changes object must be strings")
        parsed[filename] = LiteralChanges(tuple(changes))
    return parsed


def resolve_config(inputs: Mapping[str, str | None]) -> Config:
    """Resolve named inputs (missing or empty means default) into a Config."""
    package_manager = _value(inputs, "package-manager")
    if package_manager not in PACKAGE_MANAGERS:
        raise InvalidConfig(
            f"Invalid package-manager value ({package_manager}) provided. "
            f"Allowed values are: {', '.join(PACKAGE_MANAGERS)}"
        )
    lockfile_version = _parse_lockfile_version(_value(inputs, "npm-lockfile-version"))

    # Package manager entries win so user input cannot loosen the version bump checks.
    expected: dict[str, ExpectedChange] = parse_additional_changes(_value(inputs, "additional-changes"))
    expected.update(_package_manager_changes(lockfile_version)[package_manager])

    return Config(
        pull_request_author=_value(inputs, "pr-author"),
        pull_request_prefix=_value(inputs, "pr-prefix"),
        release_branch=_value(inputs, "release-branch"),
        new_branch_prefix=_value(inputs, "branch-prefix"),
        commit_user=_value(inputs, "commit-user"),
        commit_email=_value(inputs, "commit-email"),
        expected_changes=expected,
        package_manager=package_manager,
        npm_lockfile_version=lockfile_version,
        require_patch=_parse_bool("require-patch", _value(inputs, "require-patch")),
    )


def input_env_var(name: str) -> str:
    """Return the environment variable GitHub Actions uses for an input."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def load_config_file(path: Path) -> dict[str, str]:
    """Load input values from a YAML mapping of input names.

    Nested values (for example ``additional-changes`` written as a YAML
    mapping) are JSON-encoded so they pass through the same parser as the
    action input string.

    Raises:
        InvalidConfig: If the file is missing, malformed or not a mapping
    """
    if not path.exists():
        raise InvalidConfig(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfig(f"Malformed YAML config at {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfig(f"Config file {path} must contain a mapping of input names")

    values: dict[str, str] = {}
    for name, value in data.items():
        if name not in INPUT_NAMES:
            raise InvalidConfig(f"Unknown input `{name}` in {path}")
        if isinstance(value, (dict, list)):
            values[name] = json.dumps(value)
        elif isinstance(value, bool):
            values[name] = "true" if value else "false"
        elif value is None:
            continue
        else:
            values[name] = str(value)
    return values
