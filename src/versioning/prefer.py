"""Prefer policies: functions that order candidates before selection.

A policy takes the candidate list and returns it in preference order; the
first element is what selection picks.
"""
from __future__ import annotations

from typing import Any, Callable, List, Optional

import semantic_version

from repository.errors import ConfigurationError
from repository.models import Candidate

PreferPolicy = Callable[[List[Candidate]], List[Candidate]]


def identity_prefer(candidates: List[Candidate]) -> List[Candidate]:
    """Keep upstream order."""
    return candidates


def _coerce(version: Optional[str]) -> Optional[semantic_version.Version]:
    if not version:
        return None
    try:
        return semantic_version.Version.coerce(version)
    except ValueError:
        return None


def sort_versions_prefer(candidates: List[Candidate]) -> List[Candidate]:
    """Order candidates newest version first.

    Candidates without a usable version follow the sortable ones in their
    original relative order.
    """
    parsed = [(c, _coerce(c.version)) for c in candidates]
    sortable = [(c, v) for c, v in parsed if v is not None]
    rest = [c for c, v in parsed if v is None]
    sortable.sort(key=lambda pair: pair[1], reverse=True)
    return [c for c, _ in sortable] + rest


def resolve_prefer(prefer: Any) -> PreferPolicy:
    """Map the ``prefer`` option onto a policy.

    A callable is used as-is, True sorts by version, and a false value keeps
    upstream order.
    """
    if callable(prefer):
        return prefer
    if prefer is None or prefer is False:
        return identity_prefer
    if prefer is True:
        return sort_versions_prefer
    raise ConfigurationError(
        f"prefer must be a bool or a callable, not {type(prefer).__name__}"
    )
