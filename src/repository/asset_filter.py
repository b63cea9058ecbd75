"""Release asset inclusion policy."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .errors import ConfigurationError


class AssetMode(Enum):
    """How release assets are exposed as candidates."""
    DISABLED = "disabled"
    INCLUDE_ALL = "include_all"
    INCLUDE_MATCHING = "include_matching"


@dataclass(frozen=True)
class AssetPolicy:
    """Asset inclusion policy; ``pattern`` is set only for INCLUDE_MATCHING."""
    mode: AssetMode
    pattern: Optional[re.Pattern] = None

    @classmethod
    def disabled(cls) -> "AssetPolicy":
        return cls(AssetMode.DISABLED)

    @classmethod
    def include_all(cls) -> "AssetPolicy":
        return cls(AssetMode.INCLUDE_ALL)

    @classmethod
    def include_matching(cls, pattern) -> "AssetPolicy":
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as exc:
                raise ConfigurationError(f"invalid asset pattern {pattern!r}: {exc}") from exc
        if not isinstance(pattern, re.Pattern):
            raise ConfigurationError("asset pattern must be a string or compiled regex")
        return cls(AssetMode.INCLUDE_MATCHING, pattern)

    @classmethod
    def from_option(cls, value: Any) -> "AssetPolicy":
        """Map the ``include_assets`` option onto a policy.

        False/None disable assets, True includes every asset, and a string
        or compiled regex includes assets whose name matches it.
        """
        if value is None or value is False:
            return cls.disabled()
        if value is True:
            return cls.include_all()
        if isinstance(value, (str, re.Pattern)):
            return cls.include_matching(value)
        raise ConfigurationError(
            f"include_assets must be a bool or a pattern, not {type(value).__name__}"
        )


def filter_assets(
    policy: AssetPolicy,
    assets: Optional[Iterable[Dict[str, Any]]],
) -> List[Dict[str, Any]]:
    """Return the assets exposed under ``policy``, in upstream order.

    Every asset must carry a string ``name``; the normalizer checks this
    before filtering.
    """
    if policy.mode is AssetMode.DISABLED or assets is None:
        return []
    if policy.mode is AssetMode.INCLUDE_ALL:
        return list(assets)
    return [asset for asset in assets if policy.pattern.search(asset["name"])]
