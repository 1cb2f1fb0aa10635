# m3u8dl

A command-line downloader for HLS (M3U8) streams. It fetches a playlist,
follows a master playlist to its first variant, downloads every segment
in parallel, decrypts AES-128 encrypted segments, and merges them into a
single `.ts` file.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Downloading a stream

```
m3u8dl -u http://www.example.com/video/index.m3u8 -o ./videos
```

Options:

- `-u` — URL of the M3U8 playlist (required)
- `-o` — output folder (required)
- `-c` — number of segments downloaded at the same time (default 5, must be greater than 0)
- `-C` — resume an interrupted download, skipping segments already fetched;
  on by default, turn it off with `-C false`
- `-m` — maximum number of tries per segment; zero or less retries forever (default -1)

Segments are stored in a `ts` subfolder of the output folder while
downloading. Each finished segment is recorded in a `.finished` JSON state
file there, so an interrupted run picks up where it stopped. Segments that
keep failing are put back in the queue and tried again until `-m` is
reached. Bytes before the first MPEG-TS sync byte (`0x47`) of a segment are
dropped.

When all segments are done they are merged into one file named after the
playlist URL (with `:` and `/` replaced by `_` and spaces by `-`, plus
`.ts`), and the `ts` folder is removed. Segments whose URL contains
`adjump` are left out of the merged file.

If the output file already exists, nothing is downloaded. Errors are
printed, and the command always exits with status 0.

## Checking a list of playlists

```
m3u8-detect -f urls.txt
```

Reads one playlist URL per line (empty lines are ignored), checks up to 200
of them at a time and prints `[ok/N] URL` for each playlist that resolves,
where `N` is its number of segments. After a `-------` line it lists every
URL that could be resolved, in the order the checks finished.

## Library use

```python
from m3u8dl.playlist import parse_playlist
from m3u8dl.downloader import new_task

playlist = parse_playlist(text)
print(len(playlist.segments), playlist.target_duration)

task = new_task("./videos", "http://www.example.com/video/index.m3u8")
if not task.exists():
    output_path = task.start(5, True, -1)
```

Modules:

- `m3u8dl.playlist` — `parse_playlist`, `parse_variant`,
  `parse_line_parameters` and the `Playlist`, `Segment`, `Variant`, `Key`,
  `PlaylistType`, `CryptMethod` types; parse errors raise `PlaylistError`.
- `m3u8dl.resolver` — `from_url` downloads a playlist, descends into the
  first variant of a master playlist, fetches AES-128 keys and returns a
  `Result`.
- `m3u8dl.downloader` — `Downloader`, `new_task`, and helpers such as
  `gen_file_name` and `strip_to_sync_byte`.
- `m3u8dl.finish_state` — `FinishState` and `load_finish_state`, the
  persistent record of finished segments.
- `m3u8dl.crypt` — `aes128_encrypt` and `aes128_decrypt` (CBC with PKCS#5
  padding; an empty IV means the key is used as IV).
- `m3u8dl.fetch` — `get`, an HTTP GET that raises `FetchError` on any
  status other than 200.
- `m3u8dl.concurrency` — `run_concurrently`, a bounded thread pool runner.
- `m3u8dl.util` — `resolve_url`, `read_lines`, `current_dir` and progress
  bar helpers.

## What it does not do

- Only the first variant of a master playlist is downloaded; there is no
  choice of bandwidth or resolution.
- Live playlists are read once; the playlist is not reloaded for new
  segments.
- `#EXT-X-BYTERANGE` values are parsed, but segments are always fetched
  whole.
- Only `AES-128` and `NONE` encryption methods are accepted.