"""Tests for listing payload normalization."""

import json
import re

import pytest

from constants import EndpointKind
from repository.asset_filter import AssetPolicy
from repository.errors import MalformedResponse
from repository.models import Candidate
from repository.normalizer import decode_payload, normalize
from repository.version_match import DEFAULT_VERSION_PATTERN


def _release(tag, tarball, assets=None):
    entry = {"tag_name": tag, "tarball_url": tarball}
    if assets is not None:
        entry["assets"] = assets
    return entry


def _asset(name, url, download):
    return {"name": name, "url": url, "browser_download_url": download}


RELEASES = [
    _release("v1.2.3", "U1", [_asset("lib-linux.so", "A1", "D1")]),
]


class TestNormalizeReleases:
    """Release payloads."""

    def test_release_with_all_assets(self):
        """Release archive followed by its asset, asset inherits version."""
        result = normalize(
            EndpointKind.RELEASES, RELEASES, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        )

        assert [c.to_dict() for c in result] == [
            {"filename": "v1.2.3", "url": "U1", "version": "1.2.3"},
            {"filename": "lib-linux.so", "url": "D1", "asset_url": "A1", "version": "1.2.3"},
        ]

    def test_release_assets_disabled(self):
        """With assets disabled only the release archive is listed."""
        result = normalize(
            EndpointKind.RELEASES, RELEASES, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled()
        )

        assert result == [Candidate(filename="v1.2.3", url="U1", version="1.2.3")]

    def test_order_is_entry_then_assets(self):
        """Entries keep upstream order, each followed by its assets in order."""
        payload = [
            _release("v2.0", "T2", [_asset("b.tgz", "A2b", "D2b"), _asset("a.tgz", "A2a", "D2a")]),
            _release("v1.0", "T1", [_asset("c.tgz", "A1c", "D1c")]),
        ]

        result = normalize(
            EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        )

        assert [c.filename for c in result] == ["v2.0", "b.tgz", "a.tgz", "v1.0", "c.tgz"]
        assert [c.version for c in result] == ["2.0", "2.0", "2.0", "1.0", "1.0"]

    def test_matching_policy_keeps_only_matching_assets(self):
        """Only assets whose name matches the pattern become candidates."""
        payload = [
            _release("v3.1", "T3", [
                _asset("tool-3.1.tar.xz", "A1", "D1"),
                _asset("tool-3.1.zip", "A2", "D2"),
                _asset("tool-3.1-extra.tar.xz", "A3", "D3"),
            ]),
        ]
        policy = AssetPolicy.include_matching(r"\.tar\.xz$")

        result = normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, policy)

        asset_names = [c.filename for c in result if c.is_asset]
        assert asset_names == ["tool-3.1.tar.xz", "tool-3.1-extra.tar.xz"]

    def test_missing_assets_field_is_empty(self):
        """A release without an assets list yields just its archive."""
        payload = [_release("v1", "T1"), {"tag_name": "v2", "tarball_url": "T2", "assets": None}]

        result = normalize(
            EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        )

        assert [c.filename for c in result] == ["v1", "v2"]

    def test_version_absent_when_pattern_does_not_match(self):
        """Unmatched names produce candidates without a version field."""
        pattern = re.compile(r"^release-(\d+\.\d+)$")
        payload = [
            _release("release-1.4", "T1", [_asset("x.bin", "A", "D")]),
            _release("nightly", "T2", [_asset("y.bin", "A2", "D2")]),
        ]

        result = normalize(EndpointKind.RELEASES, payload, pattern, AssetPolicy.include_all())

        assert result[0].version == "1.4"
        assert result[1].version == "1.4"
        assert "version" not in result[2].to_dict()
        assert "version" not in result[3].to_dict()

    def test_asset_version_is_not_rederived_from_asset_name(self):
        """Assets carry the release version even when their own name differs."""
        payload = [_release("v5.0.0", "T", [_asset("pkg-9.9.9.tgz", "A", "D")])]

        result = normalize(
            EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        )

        assert result[1].version == "5.0.0"

    def test_empty_capture_is_a_present_version(self):
        """A pattern matching an empty group still sets the version field."""
        payload = [_release("v", "T")]

        result = normalize(
            EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled()
        )

        assert result[0].to_dict() == {"filename": "v", "url": "T", "version": ""}

    def test_normalizing_twice_gives_equal_results(self):
        """Normalization is deterministic for the same payload."""
        args = (EndpointKind.RELEASES, RELEASES, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all())

        assert normalize(*args) == normalize(*args)

    def test_payload_is_not_mutated(self):
        """Upstream entries are read only."""
        payload = json.loads(json.dumps(RELEASES))

        normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all())

        assert payload == RELEASES

    def test_empty_payload(self):
        """No releases upstream means an empty candidate list."""
        assert normalize(
            EndpointKind.RELEASES, [], DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        ) == []


class TestNormalizeTags:
    """Tag payloads."""

    def test_tag_uses_name_field(self):
        """Tags read their name from 'name'."""
        payload = [{"name": "2.0", "tarball_url": "U2"}]

        result = normalize(EndpointKind.TAGS, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled())

        assert [c.to_dict() for c in result] == [{"filename": "2.0", "url": "U2", "version": "2.0"}]

    def test_tags_ignore_assets_even_when_included(self):
        """Tags never produce asset candidates and never validate 'assets'."""
        payload = [{"name": "v1", "tarball_url": "U", "assets": "not-a-list"}]

        result = normalize(
            EndpointKind.TAGS, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all()
        )

        assert len(result) == 1
        assert not result[0].is_asset

    def test_tag_name_field_not_tag_name(self):
        """A tag entry carrying only 'tag_name' is malformed."""
        payload = [{"tag_name": "v1", "tarball_url": "U"}]

        with pytest.raises(MalformedResponse):
            normalize(EndpointKind.TAGS, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled())


class TestNormalizeMalformed:
    """Structural errors abort normalization."""

    @pytest.mark.parametrize("payload", [{"message": "Not Found"}, "text", 42, None])
    def test_non_list_payload(self, payload):
        """Anything other than a JSON array is rejected."""
        with pytest.raises(MalformedResponse):
            normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled())

    def test_entry_not_an_object(self):
        """Array members must be objects."""
        with pytest.raises(MalformedResponse):
            normalize(
                EndpointKind.RELEASES, [_release("v1", "T"), "v2"],
                DEFAULT_VERSION_PATTERN, AssetPolicy.disabled()
            )

    def test_missing_tarball_url(self):
        """Entries must carry a tarball URL."""
        with pytest.raises(MalformedResponse, match="tarball_url"):
            normalize(
                EndpointKind.RELEASES, [{"tag_name": "v1"}],
                DEFAULT_VERSION_PATTERN, AssetPolicy.disabled()
            )

    def test_included_asset_missing_download_url(self):
        """An included asset without a download URL is malformed."""
        payload = [_release("v1", "T", [{"name": "a.tgz", "url": "A"}])]

        with pytest.raises(MalformedResponse, match="browser_download_url"):
            normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all())

    @pytest.mark.parametrize("policy", [
        AssetPolicy.include_all(),
        AssetPolicy.include_matching(".*"),
        AssetPolicy.include_matching("never-matches"),
    ])
    def test_nameless_asset_is_malformed_under_any_enabled_policy(self, policy):
        """An asset without a name fails the run whether or not the pattern would match."""
        payload = [_release("v1", "T", [{"url": "A", "browser_download_url": "D"}])]

        with pytest.raises(MalformedResponse, match="name"):
            normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, policy)

    def test_non_string_asset_name_is_malformed(self):
        """A matching policy never sees a non-string name."""
        payload = [_release("v1", "T", [{"name": 7, "url": "A", "browser_download_url": "D"}])]

        with pytest.raises(MalformedResponse, match="name"):
            normalize(
                EndpointKind.RELEASES, payload,
                DEFAULT_VERSION_PATTERN, AssetPolicy.include_matching("7")
            )

    def test_broken_assets_ignored_when_disabled(self):
        """With assets disabled the asset list is never inspected."""
        payload = [_release("v1", "T", [{"name": "a.tgz"}])]

        result = normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.disabled())

        assert len(result) == 1

    def test_assets_not_a_list(self):
        """A release 'assets' value must be a list."""
        payload = [{"tag_name": "v1", "tarball_url": "T", "assets": {"name": "x"}}]

        with pytest.raises(MalformedResponse):
            normalize(EndpointKind.RELEASES, payload, DEFAULT_VERSION_PATTERN, AssetPolicy.include_all())


class TestDecodePayload:
    """Decoding inline content and stored bodies."""

    def test_decodes_bytes_content(self):
        """Inline bytes are parsed as JSON."""
        assert decode_payload(content=b'[{"name": "1.0"}]') == [{"name": "1.0"}]

    def test_decodes_str_content(self):
        """Inline text is parsed as JSON."""
        assert decode_payload(content="[]") == []

    def test_decodes_from_path(self, tmp_path):
        """A stored body is read from disk as UTF-8."""
        body = tmp_path / "releases"
        body.write_text(json.dumps(RELEASES), encoding="utf-8")

        assert decode_payload(path=str(body)) == RELEASES

    def test_no_content_or_path(self):
        """A result with neither body form is malformed."""
        with pytest.raises(MalformedResponse, match="no content or path"):
            decode_payload()

    def test_invalid_json(self):
        """Unparsable bodies are malformed."""
        with pytest.raises(MalformedResponse):
            decode_payload(content=b"<html>rate limited</html>")

    def test_missing_file(self, tmp_path):
        """An unreadable path is malformed."""
        with pytest.raises(MalformedResponse):
            decode_payload(path=str(tmp_path / "missing"))
