"""Version extraction from release and tag names.

A version pattern is a regular expression with exactly one capture group.
The group's text becomes the candidate version; a name the pattern does not
match simply has no version.
"""
from __future__ import annotations

import re
from typing import Optional, Union

from constants import Constants
from .errors import ConfigurationError

DEFAULT_VERSION_PATTERN = re.compile(Constants.DEFAULT_VERSION_PATTERN)


def compile_version_pattern(value: Optional[Union[str, re.Pattern]] = None) -> re.Pattern:
    """Compile and validate a version pattern.

    Args:
        value: Regex source, an already compiled pattern, or None for the
            default ``^v?(.*)$``.

    Returns:
        Compiled pattern with exactly one capture group.

    Raises:
        ConfigurationError: invalid regex or wrong number of groups.
    """
    if value is None:
        return DEFAULT_VERSION_PATTERN
    if isinstance(value, str):
        try:
            pattern = re.compile(value)
        except re.error as exc:
            raise ConfigurationError(f"invalid version pattern {value!r}: {exc}") from exc
    elif isinstance(value, re.Pattern):
        pattern = value
    else:
        raise ConfigurationError(
            f"version pattern must be a string or compiled regex, not {type(value).__name__}"
        )

    if pattern.groups != 1:
        raise ConfigurationError(
            f"version pattern {pattern.pattern!r} must have exactly one capture group, "
            f"found {pattern.groups}"
        )
    return pattern


def extract_version(pattern: re.Pattern, raw_name) -> Optional[str]:
    """Return the version captured from ``raw_name``, or None on no match.

    An empty capture is a present-but-empty version (``""``), not None.
    """
    if raw_name is None:
        return None
    match = pattern.search(str(raw_name))
    if match is None:
        return None
    return match.group(1) or ""
