"""Candidate ordering policies."""

from .prefer import identity_prefer, resolve_prefer, sort_versions_prefer

__all__ = [
    "identity_prefer",
    "resolve_prefer",
    "sort_versions_prefer",
]
