"""HTTP access for Cloud SDK version lookup and downloads.

- HttpClient: protocol (injectable for tests)
- RealHttpClient: urllib implementation
- MockHttpClient: canned responses for tests
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from cdr import __version__
from cdr.core.result import Err, Ok, Result
from cdr.core.structured import StrDict, as_str_dict

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        """Fetch URL and parse the body as a JSON object."""
        ...

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        """Download URL to ``dest``, creating parent directories."""
        ...


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 60.0, user_agent: str = f"cdr/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _open(self, url: str):
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
        return urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context)

    def _error(self, url: str, e: Exception) -> HttpError:
        if isinstance(e, urllib.error.HTTPError):
            return HttpError(url=url, status=e.code, message=str(e.reason))
        if isinstance(e, urllib.error.URLError):
            return HttpError(url=url, status=0, message=str(e.reason))
        if isinstance(e, TimeoutError):
            return HttpError(url=url, status=0, message="Request timed out")
        return HttpError(url=url, status=0, message=str(e))

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        try:
            with self._open(url) as response:
                body: bytes = response.read()
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))

        try:
            data = as_str_dict(json.loads(body.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(data)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        try:
            with self._open(url) as response:
                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(64 * 1024)
                        if not chunk:
                            break
                        f.write(chunk)
        except (urllib.error.URLError, TimeoutError, ValueError, OSError) as e:
            return Err(self._error(url, e))
        return Ok(dest)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_json(COMPONENTS_URL, {"version": "400.0.0"})
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, StrDict | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: StrDict | HttpError) -> None:
        self._json_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def get_json(self, url: str) -> Result[StrDict, HttpError]:
        self.calls.append(("get_json", url))
        response = self._json_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        self.calls.append(("download", url))
        response = self._download_responses.get(url)
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        return Ok(dest)
