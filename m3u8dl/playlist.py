"""Parser for M3U8 (HLS) playlists."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_LINE_PATTERN = re.compile(r'([a-zA-Z-]+)=("[^"]+"|[^",]+)')
_FLOAT_PREFIX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_STRICT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_SIGNED_PREFIX = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_PREFIX = re.compile(r"[0-9]+")
_UNSIGNED_STRICT = re.compile(r"[0-9]+")

_UINT64_MAX = (1 << 64) - 1


class PlaylistError(ValueError):
    """Raised when a playlist cannot be parsed."""


class PlaylistType(str, Enum):
    VOD = "VOD"
    EVENT = "EVENT"


class CryptMethod(str, Enum):
    AES128 = "AES-128"
    NONE = "NONE"


@dataclass
class Segment:
    uri: str = ""
    key_index: int = 0
    title: str = ""
    duration: float = 0.0
    length: int = 0
    offset: int = 0


@dataclass
class Variant:
    """A stream entry of a master playlist."""

    uri: str = ""
    bandwidth: int = 0
    resolution: str = ""
    codecs: str = ""
    program_id: int = 0


@dataclass
class Key:
    method: CryptMethod | None = None
    uri: str = ""
    iv: str = ""


@dataclass
class Playlist:
    version: int = 0
    media_sequence: int = 0
    segments: list[Segment] = field(default_factory=list)
    variants: list[Variant] = field(default_factory=list)
    keys: dict[int, Key] = field(default_factory=dict)
    end_list: bool = False
    playlist_type: PlaylistType | None = None
    target_duration: float = 0.0


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _tag_token(line: str, prefix: str) -> str:
    rest = line[len(prefix):].split(maxsplit=1)
    if not rest:
        raise PlaylistError(f"missing value: {line}")
    return rest[0]


def _scan_float(line: str, prefix: str) -> float:
    match = _FLOAT_PREFIX.match(_tag_token(line, prefix))
    if match is None:
        raise PlaylistError(f"expected a number: {line}")
    return float(match.group())


def _scan_int(line: str, prefix: str, low: int, high: int, signed: bool) -> int:
    pattern = _SIGNED_PREFIX if signed else _UNSIGNED_PREFIX
    match = pattern.match(_tag_token(line, prefix))
    if match is None:
        raise PlaylistError(f"expected an integer: {line}")
    value = int(match.group())
    if not low <= value <= high:
        raise PlaylistError(f"integer overflow: {line}")
    return value


def _parse_float(text: str) -> float:
    if not _FLOAT_STRICT.fullmatch(text):
        raise PlaylistError(f"invalid number: {text!r}")
    return float(text)


def _parse_uint(text: str, bits: int) -> int:
    if not _UNSIGNED_STRICT.fullmatch(text):
        raise PlaylistError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value >= 1 << bits:
        raise PlaylistError(f"value out of range: {text!r}")
    return value


def parse_line_parameters(line: str) -> dict[str, str]:
    """Extract ``KEY=value`` attributes from a tag line, unquoting values."""
    return {name: value.strip('"') for name, value in _LINE_PATTERN.findall(line)}


def parse_variant(line: str) -> Variant:
    """Parse the attributes of an ``#EXT-X-STREAM-INF`` line."""
    params = parse_line_parameters(line)
    if not params:
        raise PlaylistError("empty parameter")
    variant = Variant()
    for name, value in params.items():
        if name == "BANDWIDTH":
            variant.bandwidth = _parse_uint(value, 32)
        elif name == "RESOLUTION":
            variant.resolution = value
        elif name == "PROGRAM-ID":
            variant.program_id = _parse_uint(value, 32)
        elif name == "CODECS":
            variant.codecs = value
    return variant


def parse_playlist(text: str | bytes) -> Playlist:
    """Parse playlist text into a :class:`Playlist`."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")

    playlist = Playlist()
    key_index = 0
    segment: Segment | None = None
    ext_inf = False
    ext_byte = False

    numbered = enumerate(_split_lines(text), 1)
    for lineno, raw in numbered:
        line = raw.strip()
        if lineno == 1:
            if line == "#EXTM3U":
                continue
            print("invalid m3u8, missing #EXTM3U in line 1,ignore.")

        if not line:
            continue
        if line.startswith("#EXT-X-PLAYLIST-TYPE:"):
            value = _tag_token(line, "#EXT-X-PLAYLIST-TYPE:")
            try:
                playlist.playlist_type = PlaylistType(value)
            except ValueError:
                raise PlaylistError(f"invalid playlist type: {value}, line: {lineno}") from None
        elif line.startswith("#EXT-X-TARGETDURATION:"):
            playlist.target_duration = _scan_float(line, "#EXT-X-TARGETDURATION:")
        elif line.startswith("#EXT-X-MEDIA-SEQUENCE:"):
            playlist.media_sequence = _scan_int(
                line, "#EXT-X-MEDIA-SEQUENCE:", 0, _UINT64_MAX, signed=False
            )
        elif line.startswith("#EXT-X-VERSION:"):
            playlist.version = _scan_int(line, "#EXT-X-VERSION:", -128, 127, signed=True)
        elif line.startswith("#EXT-X-STREAM-INF:"):
            variant = parse_variant(line)
            following = next(numbered, None)
            if following is None:
                raise PlaylistError(f"invalid EXT-X-STREAM-INF URI, line: {lineno + 1}")
            uri_lineno, uri = following
            if not uri or uri.startswith("#"):
                raise PlaylistError(f"invalid EXT-X-STREAM-INF URI, line: {uri_lineno}")
            variant.uri = uri
            playlist.variants.append(variant)
        elif line.startswith("#EXTINF:"):
            if ext_inf:
                raise PlaylistError(f"duplicate EXTINF: {line}, line: {lineno}")
            if segment is None:
                segment = Segment()
            value = _tag_token(line, "#EXTINF:")
            if "," in value:
                parts = value.split(",")
                segment.title = parts[1]
                value = parts[0]
            segment.duration = _parse_float(value)
            segment.key_index = key_index
            ext_inf = True
        elif line.startswith("#EXT-X-BYTERANGE:"):
            if ext_byte:
                raise PlaylistError(f"duplicate EXT-X-BYTERANGE: {line}, line: {lineno}")
            if segment is None:
                segment = Segment()
            value = _tag_token(line, "#EXT-X-BYTERANGE:")
            if "@" in value:
                parts = value.split("@")
                segment.offset = _parse_uint(parts[1], 64)
                value = parts[0]
            segment.length = _parse_uint(value, 64)
            ext_byte = True
        elif not line.startswith("#"):
            if ext_inf and segment is not None:
                segment.uri = line
                playlist.segments.append(segment)
                segment = None
                ext_inf = False
                ext_byte = False
        elif line.startswith("#EXT-X-KEY"):
            params = parse_line_parameters(line)
            if not params:
                raise PlaylistError(f"invalid EXT-X-KEY: {line}, line: {lineno}")
            method_name = params.get("METHOD", "")
            try:
                method = CryptMethod(method_name) if method_name else None
            except ValueError:
                raise PlaylistError(
                    f"invalid EXT-X-KEY method: {method_name}, line: {lineno}"
                ) from None
            key_index += 1
            playlist.keys[key_index] = Key(
                method=method, uri=params.get("URI", ""), iv=params.get("IV", "")
            )
        elif line == "#EndList":
            playlist.end_list = True

    return playlist