"""Console output for GitHub Actions runs."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

console = Console(highlight=False)

_CREDENTIAL_URL = re.compile(r"(https://)[^@/\s]+@")


def mask_credentials(text: str) -> str:
    """Hide userinfo credentials embedded in URLs."""
    return _CREDENTIAL_URL.sub(r"\1***@", text)


def debug_enabled() -> bool:
    """Return True when the runner requested step debug logging."""
    return os.environ.get("RUNNER_DEBUG") == "1"


def configure_logging(verbose: bool = False) -> None:
    """Configure stdlib logging once for the process."""
    level = logging.DEBUG if verbose or debug_enabled() else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def info(message: str) -> None:
    console.print(message, markup=False, soft_wrap=True)


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold the enclosed output into a collapsible Actions log group."""
    console.print(f"::group::{title}", markup=False, soft_wrap=True)
    try:
        yield
    finally:
        console.print("::endgroup::", markup=False)


def error(message: str) -> None:
    """Emit an Actions error annotation.

    Newlines are percent-encoded so multi-line messages (such as an echoed
    patch) stay inside one annotation.
    """
    encoded = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    console.print(f"::error::{encoded}", markup=False, soft_wrap=True)
