"""Download HLS (M3U8) playlists, decrypt AES-128 segments and merge them into one TS file."""

__version__ = "0.1.0"