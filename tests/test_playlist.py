import pytest

from m3u8dl.playlist import (
    CryptMethod,
    PlaylistError,
    PlaylistType,
    parse_line_parameters,
    parse_playlist,
    parse_variant,
)

MEDIA = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:7
#EXT-X-PLAYLIST-TYPE:VOD
#EXTINF:9.5,intro
first.ts
#EXT-X-KEY:METHOD=AES-128,URI="key.key",IV=0x0000000000000000000000000000000a
#EXTINF:10.0,
second.ts
#EXT-X-BYTERANGE:1024@2048
#EXTINF:4.25,
third.ts
#EndList
"""

MASTER = (
    "#EXTM3U\n"
    '#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=240000,RESOLUTION=416x234,'
    'CODECS="avc1.42e00a,mp4a.40.2"\n'
    "low/index.m3u8\n"
)


def test_media_playlist_header():
    playlist = parse_playlist(MEDIA)
    assert playlist.version == 3
    assert playlist.target_duration == 10.0
    assert playlist.media_sequence == 7
    assert playlist.playlist_type is PlaylistType.VOD
    assert playlist.end_list is True


def test_media_playlist_segments():
    playlist = parse_playlist(MEDIA)
    assert [s.uri for s in playlist.segments] == ["first.ts", "second.ts", "third.ts"]
    assert [s.duration for s in playlist.segments] == [9.5, 10.0, 4.25]
    assert [s.title for s in playlist.segments] == ["intro", "", ""]
    assert [s.key_index for s in playlist.segments] == [0, 1, 1]
    assert playlist.segments[2].length == 1024
    assert playlist.segments[2].offset == 2048


def test_media_playlist_keys():
    playlist = parse_playlist(MEDIA)
    assert list(playlist.keys) == [1]
    key = playlist.keys[1]
    assert key.method is CryptMethod.AES128
    assert key.uri == "key.key"
    assert key.iv == "0x0000000000000000000000000000000a"


def test_bytes_and_crlf_input():
    data = MEDIA.replace("\n", "\r\n").encode()
    playlist = parse_playlist(data)
    assert [s.uri for s in playlist.segments] == ["first.ts", "second.ts", "third.ts"]


def test_master_playlist_variants():
    playlist = parse_playlist(MASTER)
    assert playlist.segments == []
    assert len(playlist.variants) == 1
    variant = playlist.variants[0]
    assert variant.uri == "low/index.m3u8"
    assert variant.bandwidth == 240000
    assert variant.program_id == 1
    assert variant.resolution == "416x234"
    assert variant.codecs == "avc1.42e00a,mp4a.40.2"


def test_stream_inf_without_uri_raises():
    with pytest.raises(PlaylistError, match="EXT-X-STREAM-INF URI"):
        parse_playlist("#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1\n#EXTINF:1,\n")
    with pytest.raises(PlaylistError, match="EXT-X-STREAM-INF URI"):
        parse_playlist("#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1")


def test_duplicate_extinf_raises():
    with pytest.raises(PlaylistError, match="duplicate EXTINF.*line: 3"):
        parse_playlist("#EXTM3U\n#EXTINF:1,\n#EXTINF:2,\na.ts\n")


def test_duplicate_byterange_raises():
    with pytest.raises(PlaylistError, match="duplicate EXT-X-BYTERANGE"):
        parse_playlist("#EXTM3U\n#EXT-X-BYTERANGE:10\n#EXT-X-BYTERANGE:20\n")


def test_invalid_playlist_type_raises():
    with pytest.raises(PlaylistError, match="invalid playlist type"):
        parse_playlist("#EXTM3U\n#EXT-X-PLAYLIST-TYPE:LIVE\n")


def test_invalid_key_method_raises():
    with pytest.raises(PlaylistError, match="invalid EXT-X-KEY method"):
        parse_playlist("#EXTM3U\n#EXT-X-KEY:METHOD=SAMPLE-AES,URI=\"k\"\n")


def test_key_without_parameters_raises():
    with pytest.raises(PlaylistError, match="invalid EXT-X-KEY"):
        parse_playlist("#EXTM3U\n#EXT-X-KEY:\n")


def test_bad_numbers_raise():
    with pytest.raises(PlaylistError):
        parse_playlist("#EXTM3U\n#EXT-X-MEDIA-SEQUENCE:abc\n")
    with pytest.raises(PlaylistError):
        parse_playlist("#EXTM3U\n#EXT-X-VERSION:200\n")
    with pytest.raises(PlaylistError):
        parse_playlist("#EXTM3U\n#EXTINF:long,\na.ts\n")


def test_missing_header_is_tolerated(capsys):
    playlist = parse_playlist("#EXTINF:1.5,\na.ts\n")
    assert "missing #EXTM3U" in capsys.readouterr().out
    assert [s.uri for s in playlist.segments] == ["a.ts"]
    assert playlist.segments[0].duration == 1.5


def test_uri_without_extinf_is_ignored():
    playlist = parse_playlist("#EXTM3U\nstray.ts\n#EXTINF:2,\nreal.ts\n")
    assert [s.uri for s in playlist.segments] == ["real.ts"]


def test_parse_line_parameters_unquotes_values():
    params = parse_line_parameters('#EXT-X-KEY:METHOD=AES-128,URI="a,b.key",IV=0x1')
    assert params == {"METHOD": "AES-128", "URI": "a,b.key", "IV": "0x1"}


def test_parse_variant_requires_parameters():
    with pytest.raises(PlaylistError, match="empty parameter"):
        parse_variant("#EXT-X-STREAM-INF:")


def test_parse_variant_rejects_bad_bandwidth():
    with pytest.raises(PlaylistError):
        parse_variant("#EXT-X-STREAM-INF:BANDWIDTH=fast")