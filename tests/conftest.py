"""Shared fixtures: configs and fetchers backed by an in-memory transport."""

from __future__ import annotations

import socket
from threading import Event, Thread
from typing import Any, Callable, Iterable, Iterator, Mapping

import httpx
import pytest

from tldsgen.config import GeneratorConfig, SourceConfig
from tldsgen.engine import Fetcher
from tldsgen.logging_conf import configure_logging

IANA_URL = "https://data.example/tlds-alpha-by-domain.txt"
PSL_URL = "https://data.example/effective_tld_names.dat"

IANA_BODY = (
    "# Version 2024101900, Last Updated Sat Oct 19 07:07:01 2024 UTC\n"
    "AAA\n"
    "COM\n"
    "ORG\n"
    "XN--11B4C3D\n"
)
PSL_BODY = (
    "// This Source Code Form is subject to the terms of the Mozilla Public\n"
    "\n"
    "// ===BEGIN ICANN DOMAINS===\n"
    "\n"
    "// ac : http://nic.ac/rules.htm\n"
    "ac\n"
    "com.ac\n"
    "*.ck\n"
    "!www.ck\n"
    "com\n"
    "xn--p1ai\n"
    "рф\n"
)

# A route is either (status, body), an exception to raise, or a handler.
Route = Any


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    configure_logging(verbose=True)


def build_transport(routes: Mapping[str, Route]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="missing")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_source() -> Callable[..., SourceConfig]:
    def _builder(name: str = "alpha", url: str = IANA_URL, pattern: str = r"^[^#]+$") -> SourceConfig:
        return SourceConfig(name=name, url=url, pattern=pattern)

    return _builder


@pytest.fixture
def make_config(make_source) -> Callable[..., GeneratorConfig]:
    def _builder(sources: Iterable[SourceConfig] | None = None, **overrides: Any) -> GeneratorConfig:
        base: dict[str, Any] = {
            "sources": list(sources)
            if sources is not None
            else [
                make_source("iana", IANA_URL, r"^[^#]+$"),
                make_source("publicsuffix", PSL_URL, r"^[^/.]+$"),
            ],
            "request_timeout": 5.0,
            "overall_timeout": 10.0,
            "retry_backoff": 0.0,
        }
        base.update(overrides)
        return GeneratorConfig(**base)

    return _builder


@pytest.fixture
def make_fetcher() -> Iterable[Callable[..., Fetcher]]:
    created: list[Fetcher] = []

    def _builder(config: GeneratorConfig, routes: Mapping[str, Route], **kwargs: Any) -> Fetcher:
        fetcher = Fetcher(config, transport=build_transport(routes), **kwargs)
        created.append(fetcher)
        return fetcher

    yield _builder
    for fetcher in created:
        fetcher.close()


@pytest.fixture
def stalled_server(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Yield the URL of a server that accepts connections and never answers."""

    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen()
    listener.settimeout(0.1)
    stop = Event()
    accepted: list[socket.socket] = []

    def serve() -> None:
        while not stop.is_set():
            try:
                conn, _addr = listener.accept()
            except OSError:
                continue
            accepted.append(conn)

    server = Thread(target=serve, name="stalled-server", daemon=True)
    server.start()
    host, port = listener.getsockname()
    yield f"http://{host}:{port}/list.txt"
    stop.set()
    server.join(timeout=2)
    for conn in accepted:
        conn.close()
    listener.close()
