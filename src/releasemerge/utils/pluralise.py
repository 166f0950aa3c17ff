"""Pluralisation for human-readable messages."""

from __future__ import annotations


def pluralise(number: int, singular: str, plural: str) -> str:
    """Return ``singular`` when ``number`` is exactly one, otherwise ``plural``."""
    return singular if number == 1 else plural
