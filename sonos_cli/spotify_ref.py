"""Normalize Spotify links and bare ids into MusicReference values."""

import re

from .models import ContentKind, MusicReference

SPOTIFY_LINK_PREFIX = "https://open.spotify.com/"

_BARE_ID = re.compile(r"[a-zA-Z0-9]{22}")


def _kind_from_token(token: str):
    try:
        return ContentKind(token)
    except ValueError:
        return token


def parse_reference(text: str) -> MusicReference:
    """Split a Spotify reference into kind and id.

    Full links look like https://open.spotify.com/<kind>/<id>?si=...; the
    query string is dropped from the id. Anything else is taken as a bare
    id and assumed to be a playlist. No further validation is done, a
    malformed link simply yields whatever segments it has.
    """
    if text.startswith(SPOTIFY_LINK_PREFIX):
        parts = text.split("/")
        kind = parts[3] if len(parts) > 3 else ""
        raw_id = parts[4] if len(parts) > 4 else ""
        return MusicReference(kind=_kind_from_token(kind), id=raw_id.split("?")[0])

    return MusicReference(kind=ContentKind.PLAYLIST, id=text)


def looks_like_reference(token: str) -> bool:
    """True for web links and 22-character alphanumeric Spotify ids."""
    return token.startswith("https://") or bool(_BARE_ID.fullmatch(token))
