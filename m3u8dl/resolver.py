"""Fetch a playlist URL, follow master playlists and collect decryption keys."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from .fetch import FetchError, get
from .playlist import CryptMethod, Playlist, PlaylistError, parse_playlist
from .util import resolve_url


@dataclass
class Result:
    """A resolved media playlist with the keys needed to decrypt its segments."""

    url: str
    playlist: Playlist
    keys: dict[int, bytes] = field(default_factory=dict)


def from_url(link: str) -> Result:
    """Download and parse ``link``, descending into the first variant of a master playlist."""
    link = urlsplit(link).geturl()
    try:
        body = get(link)
    except FetchError as exc:
        raise FetchError(f"request m3u8 URL failed: {exc}", exc.status) from exc

    playlist = parse_playlist(body)

    if playlist.variants:
        return from_url(resolve_url(link, playlist.variants[0].uri))

    if not playlist.segments:
        raise PlaylistError("can not found any TS file description")

    result = Result(url=link, playlist=playlist)
    for index, key in playlist.keys.items():
        if key.method is not CryptMethod.AES128:
            continue
        try:
            key_bytes = get(resolve_url(link, key.uri))
        except FetchError as exc:
            raise FetchError(f"extract key failed: {exc}", exc.status) from exc
        print("decryption key: ", key_bytes.decode("utf-8", errors="replace"))
        result.keys[index] = key_bytes
    return result