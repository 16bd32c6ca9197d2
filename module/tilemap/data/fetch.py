"""Fetching the CSV payload.

The network is behind a transport callable ``(method, url, headers) ->
HttpResponse`` so tests can swap in canned responses. Non-2xx answers and
network failures both surface as FetchError; nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional
from urllib.parse import urlparse

import requests
from loguru import logger

from tilemap.data.csv_parser import parse_csv, require_columns
from tilemap.data.normalize import REQUIRED_COLUMNS, DataSet, normalize_records

CSV_HEADERS = {"Accept": "text/csv, text/plain;q=0.9, */*;q=0.1"}


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class FetchError(Exception):
    """The CSV could not be retrieved."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


Transport = Callable[[str, str, Mapping[str, str]], HttpResponse]


def requests_transport(
    method: str, url: str, headers: Mapping[str, str], timeout: float = 30.0
) -> HttpResponse:
    try:
        response = requests.request(method, url, headers=dict(headers), timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(str(exc)) from exc
    return HttpResponse(
        status_code=response.status_code,
        body=response.content,
        reason=response.reason or "",
        headers=dict(response.headers.items()),
    )


class CsvFetcher:
    """GET a CSV document over HTTP(S), or read it from disk."""

    def __init__(self, transport: Transport = requests_transport) -> None:
        self._transport = transport

    def fetch_text(self, location: str) -> str:
        if urlparse(location).scheme not in {"http", "https"}:
            return self._read_local(location)

        logger.debug("GET {}", location)
        response = self._transport("GET", location, CSV_HEADERS)
        if not response.ok:
            reason = response.reason or "request failed"
            raise FetchError(f"{response.status_code} {reason}: {location}", response.status_code)
        try:
            return response.body.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FetchError(f"body is not UTF-8 text: {location}", response.status_code) from exc

    def fetch_dataset(self, location: str, strict: bool = False) -> DataSet:
        """Fetch, parse and normalize in one go.

        With *strict*, a CSV lacking x, y or value raises ValueError instead
        of degrading every row.
        """
        records = parse_csv(self.fetch_text(location))
        if strict:
            require_columns(records, list(REQUIRED_COLUMNS))
        logger.info("Fetched {} CSV rows from {}", len(records), location)
        return normalize_records(records)

    @staticmethod
    def _read_local(location: str) -> str:
        path = Path(location[len("file://"):] if location.startswith("file://") else location)
        try:
            return path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise FetchError(f"cannot read {path}: {exc.strerror or exc}") from exc
        except UnicodeDecodeError as exc:
            raise FetchError(f"{path} is not UTF-8 text") from exc
