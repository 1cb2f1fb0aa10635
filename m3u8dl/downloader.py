"""Download the segments of a playlist concurrently and merge them into one file."""

from __future__ import annotations

import os
import shutil
import threading
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from .crypt import aes128_decrypt
from .fetch import FetchError, get
from .finish_state import TEMP_SUFFIX, FinishState, load_finish_state
from .resolver import Result, from_url
from .util import current_dir, draw_progress_bar, resolve_url

TS_EXT = ".ts"
TS_FOLDER_NAME = "ts"
FINISH_STATE_FILE_NAME = ".finished"
PROGRESS_WIDTH = 40
SYNC_BYTE = 0x47
AD_MARKER = "adjump"


def ts_filename(index: int) -> str:
    return f"{index}{TS_EXT}"


def gen_file_name(url: str) -> str:
    """Turn a playlist URL into the name of the merged output file."""
    return url.replace(":", "_").replace("/", "_").replace(" ", "-") + ".ts"


def last_chars(text: str, length: int) -> str:
    return text[max(len(text) - length, 0):]


def strip_to_sync_byte(data: bytes) -> bytes:
    """Drop any bytes before the first MPEG-TS sync byte (0x47)."""
    index = data.find(SYNC_BYTE)
    return data[index:] if index >= 0 else data


class Downloader:
    """Downloads every segment of a resolved playlist into ``output``."""

    def __init__(self, output: str, url: str, result: Result) -> None:
        self.result = result
        self.folder = output or current_dir()
        try:
            os.makedirs(self.folder, exist_ok=True)
        except OSError as exc:
            raise OSError(f"create storage folder failed: {exc}") from exc
        self.ts_folder = os.path.join(self.folder, TS_FOLDER_NAME)
        try:
            os.makedirs(self.ts_folder, exist_ok=True)
        except OSError as exc:
            raise OSError(f"create ts folder '[{self.ts_folder}]' failed: {exc}") from exc

        self.state_path = os.path.join(self.ts_folder, FINISH_STATE_FILE_NAME)
        try:
            self.finish_state: FinishState = load_finish_state(url, self.state_path)
        except (OSError, ValueError) as exc:
            raise OSError(f"load finish state '[{self.state_path}]' failed: {exc}") from exc

        self.seg_len = len(result.playlist.segments)
        self.file_name = gen_file_name(url)
        self._finished = 0
        self._lock = threading.Lock()

    @property
    def output_path(self) -> str:
        return os.path.join(self.folder, self.file_name)

    def exists(self) -> bool:
        """Whether the merged output file is already present."""
        return os.path.exists(self.output_path)

    def ts_url(self, seg_index: int) -> str:
        return resolve_url(self.result.url, self.result.playlist.segments[seg_index].uri)

    def start(self, concurrency: int = 5, continue_flag: bool = True, max_tries: int = -1) -> str:
        """Download all segments, retrying failures, then merge; returns the output path."""
        if concurrency <= 0:
            raise ValueError("concurrency must be greater than 0")
        pending: deque[tuple[int, int]] = deque((index, 0) for index in range(self.seg_len))
        running: dict[Future[None], tuple[int, int]] = {}

        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            while pending or running:
                while pending and len(running) < concurrency:
                    index, tries = pending.popleft()
                    future = pool.submit(self._proxy_download, index, continue_flag)
                    running[future] = (index, tries)
                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for future in done:
                    index, tries = running.pop(future)
                    error = future.exception()
                    if error is None:
                        continue
                    tries += 1
                    if max_tries <= 0 or tries < max_tries:
                        print(f"[failed({tries}/{max_tries})] {error}")
                        pending.append((index, tries))
                    else:
                        with self._lock:
                            self._finished += 1
                        print(f"[failed & giveup] {error}")

        return self.merge()

    def _proxy_download(self, seg_index: int, continue_flag: bool) -> None:
        ts_url = self.ts_url(seg_index)
        sign = "c"
        finished = self.finish_state.is_finished(seg_index)
        if not continue_flag or not finished:
            self._download(seg_index)

        with self._lock:
            self._finished += 1
            done = self._finished
        if not finished:
            self.finish_state.mark_finished(seg_index, self.state_path, ts_url)
            sign = "n"
        percent = done / self.seg_len * 100
        print(f"\r[download({sign}) {percent:6.2f}%] {last_chars(ts_url, 100)}", end="", flush=True)

    def _download(self, seg_index: int) -> None:
        name = ts_filename(seg_index)
        ts_url = self.ts_url(seg_index)
        try:
            data = get(ts_url)
        except FetchError as exc:
            raise FetchError(f"request {ts_url}, {exc}", exc.status) from exc

        segment = self.result.playlist.segments[seg_index]
        key = self.result.keys.get(segment.key_index)
        if key:
            iv = self.result.playlist.keys[segment.key_index].iv.encode()
            try:
                data = aes128_decrypt(data, key, iv)
            except ValueError as exc:
                raise ValueError(f"decryt: {ts_url}, {exc}") from exc

        data = strip_to_sync_byte(data)
        target = os.path.join(self.ts_folder, name)
        temp = target + TEMP_SUFFIX
        with open(temp, "wb") as handle:
            handle.write(data)
        os.replace(temp, target)

    def merge(self) -> str:
        """Concatenate downloaded segments, skipping ad segments, and remove the ts folder."""
        paths = [os.path.join(self.ts_folder, ts_filename(i)) for i in range(self.seg_len)]
        missing = sum(1 for path in paths if not os.path.exists(path))
        if missing:
            print(f"[warning] {missing} files missing")

        output = self.output_path
        try:
            handle = open(output, "wb")
        except OSError as exc:
            raise OSError(f"create main TS file failed：{exc}") from exc

        merged = skipped = 0
        with handle:
            for index, path in enumerate(paths):
                if self.finish_state.is_matched(index, AD_MARKER)[0]:
                    skipped += 1
                    continue
                try:
                    with open(path, "rb") as part:
                        handle.write(part.read())
                except OSError:
                    pass
                merged += 1
                draw_progress_bar("merge", merged / self.seg_len, PROGRESS_WIDTH)

        print(
            f"[warning] files merge failed(miss {self.seg_len - (merged + skipped)}, skip {skipped}) ",
            end="",
        )
        shutil.rmtree(self.ts_folder, ignore_errors=True)
        print(f"\n[output] {output}")
        return output


def new_task(output: str, url: str) -> Downloader:
    """Resolve ``url`` and prepare a downloader writing into ``output``."""
    return Downloader(output, url, from_url(url))