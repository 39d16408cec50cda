# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading sources from files and over HTTP."""

from pathlib import Path

import httpx
import pytest

from perspectives.compiler.sources import SourceError, fetch_remote_sources, is_url, load_source
from perspectives.workspace.config import RemoteSource

# ###############
# Helpers
# ###############

PSP_TEXT = ':doos :Doos\n  :naam = "x"\n'


def _client(routes: dict[str, tuple[int, str]]) -> httpx.Client:
    """Return a client answering each URL in *routes* with (status, body); anything else is 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(str(request.url), (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


# ###############
# load_source
# ###############


class TestLoadSource:
    @pytest.mark.parametrize(
        ("location", "expected"),
        [("http://host/a.psp", True), ("https://host/a.psp", True), ("a.psp", False), ("ftp://host/a", False)],
    )
    def test_is_url(self, location: str, expected: bool) -> None:
        assert is_url(location) is expected

    def test_reads_local_file(self, tmp_path: Path) -> None:
        path = tmp_path / "a.psp"
        path.write_text(PSP_TEXT, encoding="utf-8")
        assert load_source(str(path)) == PSP_TEXT

    def test_missing_local_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError, match="Cannot read"):
            load_source(str(tmp_path / "weg.psp"))

    def test_fetches_url(self) -> None:
        client = _client({"https://models.example/a.psp": (200, PSP_TEXT)})
        assert load_source("https://models.example/a.psp", client=client) == PSP_TEXT

    def test_http_error_status(self) -> None:
        client = _client({})
        with pytest.raises(SourceError, match="status 404"):
            load_source("https://models.example/weg.psp", client=client)

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with pytest.raises(SourceError, match="connection refused"):
            load_source("https://models.example/a.psp", client=client)


# ###############
# fetch_remote_sources
# ###############


class TestFetchRemoteSources:
    def test_writes_each_source_by_name(self, tmp_path: Path) -> None:
        client = _client(
            {
                "https://models.example/a.psp": (200, PSP_TEXT),
                "https://models.example/b.psp": (200, "-- leeg\n"),
            }
        )
        sources = [
            RemoteSource(name="a", url="https://models.example/a.psp"),
            RemoteSource(name="b", url="https://models.example/b.psp"),
        ]
        written = fetch_remote_sources(sources, tmp_path / "remotes", client=client)
        assert written == [tmp_path / "remotes" / "a.psp", tmp_path / "remotes" / "b.psp"]
        assert written[0].read_text(encoding="utf-8") == PSP_TEXT

    def test_stops_at_first_failure(self, tmp_path: Path) -> None:
        client = _client({"https://models.example/b.psp": (200, PSP_TEXT)})
        sources = [
            RemoteSource(name="a", url="https://models.example/a.psp"),
            RemoteSource(name="b", url="https://models.example/b.psp"),
        ]
        with pytest.raises(SourceError):
            fetch_remote_sources(sources, tmp_path, client=client)
        assert not (tmp_path / "b.psp").exists()
