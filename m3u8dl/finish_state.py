"""Persistent record of which segments have been downloaded."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from typing import Any

TEMP_SUFFIX = "_tmp"


@dataclass
class SegmentState:
    finish: bool = False
    seg_index: int = 0
    ts_url: str = ""


def _state_to_json(state: SegmentState) -> dict[str, Any]:
    return {"state": state.finish, "index": state.seg_index, "url": state.ts_url}


def _state_from_json(data: Any) -> SegmentState:
    if not isinstance(data, dict):
        raise ValueError(f"invalid segment state: {data!r}")
    return SegmentState(
        finish=bool(data.get("state", False)),
        seg_index=int(data.get("index", 0)),
        ts_url=str(data.get("url", "")),
    )


class FinishState:
    """Thread-safe map of segment index to download state, stored as JSON."""

    def __init__(self, state: dict[int, SegmentState] | None = None) -> None:
        self.state: dict[int, SegmentState] = dict(state or {})
        self._lock = threading.RLock()

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> FinishState:
        """Read a state file written by :meth:`save`."""
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError("finish state must be a JSON object")
        return cls({int(index): _state_from_json(value) for index, value in data.items()})

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the state atomically through a temporary file."""
        path = os.fspath(path)
        temp = path + TEMP_SUFFIX
        with self._lock:
            payload = {str(index): _state_to_json(s) for index, s in self.state.items()}
            with open(temp, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
                handle.write("\n")
            os.replace(temp, path)

    def is_finished(self, seg_index: int) -> bool:
        with self._lock:
            meta = self.state.get(seg_index)
            return meta.finish if meta is not None else False

    def is_matched(self, seg_index: int, text: str) -> tuple[bool, str]:
        """Return whether the URL recorded for ``seg_index`` contains ``text``, and that URL."""
        with self._lock:
            meta = self.state.get(seg_index)
            if meta is not None and text in meta.ts_url:
                return True, meta.ts_url
            return False, ""

    def mark_finished(self, seg_index: int, path: str | os.PathLike[str], ts_url: str) -> None:
        """Record ``seg_index`` as downloaded from ``ts_url`` and persist the state."""
        with self._lock:
            self.state[seg_index] = SegmentState(finish=True, seg_index=seg_index, ts_url=ts_url)
            self.save(path)


def load_finish_state(url: str, path: str | os.PathLike[str]) -> FinishState:
    """Load the state file at ``path``, or create one recording ``url``."""
    if os.path.exists(path):
        return FinishState.load(path)
    state = FinishState({-1: SegmentState(finish=False, seg_index=-1, ts_url=url)})
    state.save(path)
    return state