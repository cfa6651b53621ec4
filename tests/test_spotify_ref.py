"""Tests for Spotify reference parsing."""

import pytest

from sonos_cli.models import ContentKind, MusicReference
from sonos_cli.spotify_ref import looks_like_reference, parse_reference


class TestParseReference:
    """Tests for parse_reference()."""

    @pytest.mark.parametrize("kind", [ContentKind.PLAYLIST, ContentKind.TRACK])
    def test_web_link_drops_query(self, kind):
        ref = parse_reference(
            f"https://open.spotify.com/{kind.value}/4cOdK2wGLETKBW3PvgPWqT?si=abc123&utm=x"
        )
        assert ref == MusicReference(kind=kind, id="4cOdK2wGLETKBW3PvgPWqT")

    def test_web_link_without_query(self):
        ref = parse_reference("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M")
        assert ref.kind == ContentKind.PLAYLIST
        assert ref.id == "37i9dQZF1DXcBWIGoYBM5M"

    def test_bare_id_defaults_to_playlist(self):
        ref = parse_reference("37i9dQZF1DXcBWIGoYBM5M")
        assert ref == MusicReference(kind=ContentKind.PLAYLIST, id="37i9dQZF1DXcBWIGoYBM5M")

    def test_unknown_link_kind_is_kept_verbatim(self):
        ref = parse_reference("https://open.spotify.com/album/1DFixLWuPkv3KT3TnV35m3")
        assert ref.kind == "album"
        assert ref.uri == "spotify:album:1DFixLWuPkv3KT3TnV35m3"

    def test_truncated_link_does_not_raise(self):
        ref = parse_reference("https://open.spotify.com/track")
        assert ref.kind == ContentKind.TRACK
        assert ref.id == ""

    def test_garbage_is_passed_through_as_playlist_id(self):
        ref = parse_reference("not a spotify thing")
        assert ref.kind == ContentKind.PLAYLIST
        assert ref.id == "not a spotify thing"

    def test_uri(self):
        ref = MusicReference(kind=ContentKind.TRACK, id="4cOdK2wGLETKBW3PvgPWqT")
        assert ref.uri == "spotify:track:4cOdK2wGLETKBW3PvgPWqT"


class TestLooksLikeReference:
    """Tests for the bare-token classifier."""

    def test_accepts_https_links(self):
        assert looks_like_reference("https://open.spotify.com/track/abc")

    def test_accepts_22_char_alphanumeric(self):
        assert looks_like_reference("37i9dQZF1DXcBWIGoYBM5M")

    def test_rejects_wrong_length(self):
        assert not looks_like_reference("37i9dQZF1DXcBWIGoYBM5")
        assert not looks_like_reference("37i9dQZF1DXcBWIGoYBM5MX")

    def test_rejects_punctuation(self):
        assert not looks_like_reference("37i9dQZF1DXcBWIGoYBM-M")

    def test_rejects_words(self):
        assert not looks_like_reference("frobnicate")
