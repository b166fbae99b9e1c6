"""Tests for gitcache.locator module."""

from __future__ import annotations

import pytest

from gitcache.errors import ReferenceParseError
from gitcache.locator import RepositoryReference, parse_reference


class TestParseReference:
    """Tests for parse_reference function."""

    def test_without_scheme(self) -> None:
        """Should default to https and split host/owner/name."""
        ref = parse_reference("example.com/acme/widgets")

        assert ref == RepositoryReference(host="example.com", owner="acme", name="widgets")

    @pytest.mark.parametrize(
        "text",
        [
            "https://example.com/acme/widgets",
            "http://example.com/acme/widgets/",
            "example.com/acme/widgets/tree/main",
            "  example.com/acme/widgets  ",
        ],
    )
    def test_equivalent_forms(self, text: str) -> None:
        """Should ignore scheme, trailing slashes, whitespace and extra segments."""
        ref = parse_reference(text)

        assert (ref.host, ref.owner, ref.name) == ("example.com", "acme", "widgets")

    def test_keeps_port_drops_userinfo(self) -> None:
        """Host should be the authority without credentials."""
        ref = parse_reference("https://user:pw@git.local:8080/acme/widgets")

        assert ref.host == "git.local:8080"
        assert ref.owner == "acme"

    def test_owner_name_without_host_is_rejected(self) -> None:
        """A bare owner/name is read as host 'acme' with one segment."""
        with pytest.raises(ReferenceParseError):
            parse_reference("acme/widgets")

    @pytest.mark.parametrize(
        "text",
        [
            "example.com",
            "example.com/",
            "example.com/acme",
            "example.com/acme/",
            "example.com//widgets",
            "example.com/acme//widgets",
            "example.com/ /widgets",
            "example.com/acme/ ",
            "",
            "example.com/../widgets",
            "example.com/./widgets",
            "example.com/acme/..",
            "example.com/acme/.",
            "example.com/%2E%2E/widgets",
            "example.com/acme%2F../widgets",
        ],
    )
    def test_missing_or_empty_segments(self, text: str) -> None:
        """Should reject missing, empty or dot owner and name segments."""
        with pytest.raises(ReferenceParseError):
            parse_reference(text)

    def test_percent_decodes_segments(self) -> None:
        """Owner and name should be the decoded path segments."""
        ref = parse_reference("example.com/ac%20me/wid%2Bgets")

        assert ref.owner == "ac me"
        assert ref.name == "wid+gets"
        assert ref.key_prefix == "gitcache/ac me/wid+gets"
        assert ref.clone_url() == "http://example.com/ac%20me/wid%2Bgets"

    def test_missing_host(self) -> None:
        with pytest.raises(ReferenceParseError, match="missing host"):
            parse_reference("https:///acme/widgets")

    @pytest.mark.parametrize(
        "text",
        ["https://example.com:notaport/acme/widgets", "https://[::1/acme/widgets"],
    )
    def test_malformed_url(self, text: str) -> None:
        with pytest.raises(ReferenceParseError):
            parse_reference(text)


class TestRepositoryReference:
    """Tests for RepositoryReference helpers."""

    def test_str(self) -> None:
        ref = RepositoryReference(host="example.com", owner="acme", name="widgets")
        assert str(ref) == "example.com/acme/widgets"

    def test_clone_url_defaults_to_http(self) -> None:
        ref = RepositoryReference(host="example.com", owner="acme", name="widgets")

        assert ref.clone_url() == "http://example.com/acme/widgets"
        assert ref.clone_url("https") == "https://example.com/acme/widgets"

    def test_key_prefix(self) -> None:
        ref = RepositoryReference(host="example.com", owner="acme", name="widgets")
        assert ref.key_prefix == "gitcache/acme/widgets"

    def test_is_immutable(self) -> None:
        ref = RepositoryReference(host="example.com", owner="acme", name="widgets")
        with pytest.raises(AttributeError):
            ref.owner = "other"  # type: ignore[misc]
