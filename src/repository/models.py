"""Data models for forge listings and download candidates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class RepoRef:
    """Identity of an upstream repository."""
    owner: str
    name: str

    def __post_init__(self):
        for label, value in (("owner", self.owner), ("name", self.name)):
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"repository {label} is required")

    @classmethod
    def parse(cls, slug: str) -> "RepoRef":
        """Build a RepoRef from an ``owner/name`` slug."""
        owner, sep, name = (slug or "").strip().strip("/").partition("/")
        if not sep or "/" in name:
            raise ConfigurationError(f"expected OWNER/REPO, got {slug!r}")
        return cls(owner=owner, name=name)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Candidate:
    """A single downloadable option handed to selection.

    ``version`` is None when no version could be derived from the name;
    ``asset_url`` is set only for candidates built from a release asset.
    """
    filename: str
    url: str
    version: Optional[str] = None
    asset_url: Optional[str] = None

    @classmethod
    def for_entry(cls, name: str, tarball_url: str, version: Optional[str]) -> "Candidate":
        """Candidate for a release or tag source archive."""
        return cls(filename=name, url=tarball_url, version=version)

    @classmethod
    def for_asset(cls, asset: Dict[str, Any], version: Optional[str]) -> "Candidate":
        """Candidate for a release asset, inheriting the release version."""
        return cls(
            filename=asset["name"],
            url=asset["browser_download_url"],
            version=version,
            asset_url=asset["url"],
        )

    @property
    def is_asset(self) -> bool:
        return self.asset_url is not None

    def to_dict(self) -> Dict[str, str]:
        """Serialize, leaving out optional fields that are absent."""
        out = {"filename": self.filename, "url": self.url}
        if self.version is not None:
            out["version"] = self.version
        if self.asset_url is not None:
            out["asset_url"] = self.asset_url
        return out


@dataclass(frozen=True)
class FileResult:
    """Transport result for a fetched file.

    Exactly one of ``content`` (inline body) or ``path`` (stored body) is
    normally set; both may be missing on a broken transport response.
    """
    filename: str
    content: Optional[Union[bytes, str]] = None
    path: Optional[str] = None


@dataclass(frozen=True)
class ListResult:
    """Transport result holding a list of download candidates."""
    candidates: List[Candidate] = field(default_factory=list)


FetchResult = Union[FileResult, ListResult]
