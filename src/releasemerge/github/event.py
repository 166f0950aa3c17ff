"""Webhook event payload access.

The payload only tells us what triggered the run and where to look. Pull
request state used for decisions is always re-fetched from the API.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from releasemerge.types import RepositoryPolicy


class EventPayloadError(RuntimeError):
    """Raised when the event payload is missing or lacks a required field."""


@dataclass(frozen=True)
class Event:
    """Triggering webhook event name and raw payload."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def action(self) -> str | None:
        return self.payload.get("action")

    @property
    def ref(self) -> str | None:
        return self.payload.get("ref")

    def _repository(self) -> dict[str, Any]:
        repository = self.payload.get("repository")
        if not isinstance(repository, dict):
            raise EventPayloadError("Event payload does not include repository data")
        return repository

    @property
    def repository_full_name(self) -> str:
        full_name = self._repository().get("full_name")
        if isinstance(full_name, str) and full_name:
            return full_name
        return f"{self.owner}/{self.repo}"

    @property
    def owner(self) -> str:
        repository = self._repository()
        owner = (repository.get("owner") or {}).get("login")
        if not owner:
            # push payloads carry owner.name for some repository types
            owner = (repository.get("owner") or {}).get("name")
        if not owner:
            raise EventPayloadError("Event payload is missing repository.owner.login")
        return str(owner)

    @property
    def repo(self) -> str:
        name = self._repository().get("name")
        if not name:
            raise EventPayloadError("Event payload is missing repository.name")
        return str(name)

    def _pull_request(self) -> dict[str, Any]:
        pull_request = self.payload.get("pull_request")
        if not isinstance(pull_request, dict):
            raise EventPayloadError("Event payload does not include pull_request data")
        return pull_request

    @property
    def pull_request_number(self) -> int:
        number = self._pull_request().get("number")
        try:
            return int(number)
        except (TypeError, ValueError) as exc:
            raise EventPayloadError("Event payload pull_request.number is not an integer") from exc

    @property
    def base_repository(self) -> RepositoryPolicy:
        base = self._pull_request().get("base") or {}
        return RepositoryPolicy.from_dict(base.get("repo"))


def load_event(name: str, path: Path | None) -> Event:
    """Load the event payload written by the runner at ``GITHUB_EVENT_PATH``."""
    if not name:
        raise EventPayloadError("Event name not provided. Set GITHUB_EVENT_NAME or --event-name.")
    if path is None:
        raise EventPayloadError("Event payload path not provided. Set GITHUB_EVENT_PATH or --event-path.")
    if not path.exists():
        raise EventPayloadError(f"Event payload not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise EventPayloadError(f"Failed to parse event payload {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise EventPayloadError(f"Event payload {path} is not a JSON object")
    return Event(name=name, payload=payload)
