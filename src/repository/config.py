"""Source configuration for a forge-hosted package."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

from constants import Constants, EndpointKind
from versioning.prefer import PreferPolicy, resolve_prefer
from .asset_filter import AssetPolicy
from .errors import ConfigurationError
from .models import RepoRef
from .version_match import compile_version_pattern


@dataclass
class ForgeSourceConfig:  # pylint: disable=too-many-instance-attributes
    """Where to look for releases and how to turn them into candidates.

    Options are validated once here; the derived fields (``ref``,
    ``endpoint_kind``, ``version_pattern``, ``asset_policy``,
    ``prefer_policy``) are what the rest of the pipeline consumes.

    ``token`` is supplied by the host; this class never reads the
    environment.
    """
    owner: Optional[str] = None
    repo: Optional[str] = None
    include_assets: Any = False
    tags_only: bool = False
    version: Any = None
    prefer: Any = False
    token: Optional[str] = None
    api_base: str = Constants.GITHUB_API_BASE
    start_url: Optional[str] = None

    ref: RepoRef = field(init=False, repr=False)
    endpoint_kind: EndpointKind = field(init=False, repr=False)
    version_pattern: re.Pattern = field(init=False, repr=False)
    asset_policy: AssetPolicy = field(init=False, repr=False)
    prefer_policy: PreferPolicy = field(init=False, repr=False)

    def __post_init__(self):
        if self.owner is None or self.repo is None:
            missing = "owner" if self.owner is None else "repo"
            raise ConfigurationError(f"repository {missing} is required")
        if self.start_url is not None:
            raise ConfigurationError(
                "start_url cannot be set for a forge source; the listing URL is derived "
                "from owner and repo"
            )
        if not isinstance(self.api_base, str) or not self.api_base.strip():
            raise ConfigurationError("api_base must be a non-empty URL")

        self.ref = RepoRef(owner=self.owner, name=self.repo)
        self.endpoint_kind = EndpointKind.TAGS if self.tags_only else EndpointKind.RELEASES
        self.version_pattern = compile_version_pattern(self.version)
        self.asset_policy = AssetPolicy.from_option(self.include_assets)
        self.prefer_policy = resolve_prefer(self.prefer)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], **overrides: Any) -> "ForgeSourceConfig":
        """Build from a config-file section, letting non-None overrides win."""
        known = {
            "owner", "repo", "include_assets", "tags_only", "version",
            "prefer", "token", "api_base", "start_url",
        }
        unknown = sorted(set(data or {}) - known)
        if unknown:
            raise ConfigurationError(f"unknown source option(s): {', '.join(unknown)}")
        values = dict(data or {})
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def listing_url(self) -> str:
        """URL of the releases or tags listing for this repository."""
        base = self.api_base.rstrip("/")
        owner = quote(self.ref.owner, safe="")
        name = quote(self.ref.name, safe="")
        return f"{base}/repos/{owner}/{name}/{self.endpoint_kind.value}"
