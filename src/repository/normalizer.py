"""Normalization of release/tag listing payloads into download candidates.

The forge answers the releases and tags endpoints with differently shaped
JSON arrays. ``normalize`` flattens either into one ordered list of
:class:`Candidate` records: each entry's source archive first, followed by
whichever of its release assets the asset policy lets through.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Union

from constants import EndpointKind
from common.logging_utils import extra_context, is_debug_enabled
from .asset_filter import AssetMode, AssetPolicy, filter_assets
from .errors import MalformedResponse
from .models import Candidate
from .version_match import extract_version

logger = logging.getLogger(__name__)

_ASSET_FIELDS = ("name", "url", "browser_download_url")


def decode_payload(
    content: Optional[Union[bytes, str]] = None,
    path: Optional[str] = None,
) -> Any:
    """Decode a listing payload from inline content or a stored file.

    Raises:
        MalformedResponse: no content or path, unreadable file, or bad JSON.
    """
    if content:
        text = content
        source = "content"
    elif path:
        try:
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedResponse(f"cannot read response body from {path}: {exc}") from exc
        source = path
    else:
        raise MalformedResponse("malformed response object: no content or path")

    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedResponse(f"response {source} is not valid JSON: {exc}") from exc


def _require_str(entry: dict, key: str, index: int, what: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise MalformedResponse(f"{what} #{index} is missing required field '{key}'")
    return value


def _entry_assets(entry: dict, index: int) -> List[dict]:
    assets = entry.get("assets")
    if assets is None:
        return []
    if not isinstance(assets, list) or not all(isinstance(a, dict) for a in assets):
        raise MalformedResponse(f"release #{index} has a malformed 'assets' list")
    return assets


def normalize(
    endpoint_kind: EndpointKind,
    raw_entries: Any,
    version_pattern: re.Pattern,
    asset_policy: AssetPolicy,
) -> List[Candidate]:
    """Flatten a decoded listing payload into download candidates.

    Args:
        endpoint_kind: Endpoint the payload came from; selects the name
            field and whether assets are considered at all.
        raw_entries: Decoded JSON payload, expected to be a list of objects.
        version_pattern: Single-group pattern applied to each entry name.
        asset_policy: Which release assets become extra candidates.

    Returns:
        Candidates in upstream order, each entry followed by its assets.

    Raises:
        MalformedResponse: payload is not a list of well-formed entries.
    """
    if not isinstance(raw_entries, list):
        raise MalformedResponse(
            f"expected a JSON array of {endpoint_kind.value}, got {type(raw_entries).__name__}"
        )

    what = "release" if endpoint_kind is EndpointKind.RELEASES else "tag"
    name_field = endpoint_kind.name_field
    candidates: List[Candidate] = []

    for index, entry in enumerate(raw_entries):
        if not isinstance(entry, dict):
            raise MalformedResponse(f"{what} #{index} is not an object")
        name = _require_str(entry, name_field, index, what)
        tarball_url = _require_str(entry, "tarball_url", index, what)
        version = extract_version(version_pattern, name)

        candidates.append(Candidate.for_entry(name, tarball_url, version))

        if endpoint_kind is EndpointKind.TAGS or asset_policy.mode is AssetMode.DISABLED:
            continue
        assets = _entry_assets(entry, index)
        for asset in assets:
            _require_str(asset, "name", index, f"asset of {what}")
        for asset in filter_assets(asset_policy, assets):
            for key in _ASSET_FIELDS:
                _require_str(asset, key, index, f"asset of {what}")
            candidates.append(Candidate.for_asset(asset, version))

    if is_debug_enabled(logger):
        logger.debug(
            "Normalized listing",
            extra=extra_context(
                event="normalize",
                component="normalizer",
                endpoint=endpoint_kind.value,
                entries=len(raw_entries),
                candidates=len(candidates),
            )
        )
    return candidates