"""Host configuration: config files, environment and CLI overrides.

Builds the :class:`ForgeSourceConfig` used by the pipeline. Precedence, from
highest: CLI flags, config file, environment (token only), built-in defaults.
This is the only module that reads the process environment.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from repository.config import ForgeSourceConfig
from repository.errors import ConfigurationError
from repository.models import RepoRef

logger = logging.getLogger(__name__)

_HTTP_OVERRIDES = {
    "request_timeout": "REQUEST_TIMEOUT",
    "retry_max": "HTTP_RETRY_MAX",
    "per_page": "REPO_API_PER_PAGE",
    "max_pages": "MAX_LISTING_PAGES",
    "max_response_bytes": "MAX_RESPONSE_BYTES",
}


def find_default_config() -> Optional[str]:
    """Return the first existing default config file, if any."""
    for candidate in Constants.CONFIG_FILE_NAMES:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON config file.

    With no explicit path the default locations are tried and a missing
    default file yields an empty config. An explicit path must exist.

    Raises:
        ConfigurationError: explicit file missing, unparsable, or not a mapping.
    """
    if not path:
        path = find_default_config()
        if not path:
            return {}
    elif not os.path.isfile(path):
        raise ConfigurationError(f"config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"failed to load config {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config {path} must contain a mapping at the top level")
    logger.debug("Loaded config from %s", path)
    return data


def get_token(cli_token: Optional[str] = None,
              environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Resolve the API token: CLI value first, then GITHUB_PAT, then GITHUB_TOKEN."""
    if cli_token and cli_token.strip():
        return cli_token.strip()
    env = os.environ if environ is None else environ
    for name in Constants.ENV_GITHUB_TOKENS:
        value = env.get(name)
        if value and value.strip():
            return value.strip()
    return None


def apply_http_overrides(section: Optional[Dict[str, Any]]) -> None:
    """Apply the ``http:`` config section onto Constants.

    Raises:
        ConfigurationError: unknown key or non-positive integer value.
    """
    for key, value in (section or {}).items():
        attr = _HTTP_OVERRIDES.get(key)
        if attr is None:
            raise ConfigurationError(f"unknown http option: {key}")
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"http.{key} must be an integer") from exc
        if number <= 0:
            raise ConfigurationError(f"http.{key} must be positive")
        setattr(Constants, attr, number)


def _repository_overrides(args) -> Dict[str, Optional[str]]:
    owner = getattr(args, "OWNER", None)
    repo = getattr(args, "REPO", None)
    slug = getattr(args, "REPOSITORY", None)
    if slug:
        ref = RepoRef.parse(slug)
        owner = owner or ref.owner
        repo = repo or ref.name
    return {"owner": owner, "repo": repo}


def build_source_config(args, environ: Optional[Mapping[str, str]] = None) -> ForgeSourceConfig:
    """Combine config file, environment and CLI arguments into a source config."""
    data = load_config_file(getattr(args, "CONFIG", None))
    apply_http_overrides(data.get("http"))

    source = data.get("source") or {}
    if not isinstance(source, dict):
        raise ConfigurationError("config 'source' section must be a mapping")

    overrides = _repository_overrides(args)
    overrides.update(
        include_assets=getattr(args, "INCLUDE_ASSETS", None),
        tags_only=getattr(args, "TAGS_ONLY", None),
        version=getattr(args, "VERSION_PATTERN", None),
        prefer=getattr(args, "PREFER", None),
        api_base=getattr(args, "API_BASE", None),
    )
    token = get_token(getattr(args, "TOKEN", None) or source.get("token"), environ)
    overrides["token"] = token
    return ForgeSourceConfig.from_mapping(source, **overrides)
