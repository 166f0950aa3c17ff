"""Small shared helpers."""

from releasemerge.utils.pluralise import pluralise

__all__ = ["pluralise"]
