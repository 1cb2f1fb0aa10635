"""Simple HTTP GET that insists on a 200 response."""

from __future__ import annotations

import urllib.error
import urllib.request

DEFAULT_TIMEOUT = 30.0


class FetchError(Exception):
    """Raised when a request fails or answers with a status other than 200."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def get(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch ``url`` and return the response body."""
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            status = response.status
            if status != 200:
                raise FetchError(f"http error: status code {status}", status)
            return response.read()
    except urllib.error.HTTPError as exc:
        exc.close()
        raise FetchError(f"http error: status code {exc.code}", exc.code) from exc
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise FetchError(str(exc)) from exc