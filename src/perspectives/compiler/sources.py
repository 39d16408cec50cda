# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading .psp source text from local paths and HTTP(S) URLs."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from perspectives.workspace.config import RemoteSource

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_TIMEOUT = 10.0


class SourceError(Exception):
    """Raised when source text cannot be loaded."""


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def load_source(location: str, *, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the source text at *location*, a file path or an http(s) URL.

    Args:
        location: A local path, or a URL fetched with an HTTP GET.
        client: Client to fetch URLs with; a temporary one is created if omitted.
        timeout: Request timeout in seconds for the temporary client.

    Raises:
        SourceError: If the file cannot be read or the request fails.
    """
    if not is_url(location):
        try:
            return Path(location).read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Cannot read '{location}': {exc}") from exc

    if client is not None:
        return _fetch(client, location)
    with httpx.Client(timeout=timeout) as own_client:
        return _fetch(own_client, location)


def fetch_remote_sources(
    sources: list[RemoteSource],
    target_dir: Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[Path]:
    """Download every remote source to ``<target_dir>/<name>.psp``.

    Returns:
        The paths written, in the order of *sources*.

    Raises:
        SourceError: On the first source that cannot be fetched or written.
    """
    if client is None:
        with httpx.Client(timeout=timeout) as own_client:
            return fetch_remote_sources(sources, target_dir, client=own_client)

    written = []
    for source in sources:
        text = _fetch(client, source.url)
        destination = target_dir / f"{source.name}.psp"
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Cannot write '{destination}': {exc}") from exc
        logger.info("Fetched %s -> %s", source.url, destination)
        written.append(destination)
    return written


# ################
# Implementation
# ################


def _fetch(client: httpx.Client, url: str) -> str:
    logger.debug("GET %s", url)
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceError(f"Fetching '{url}' failed with status {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise SourceError(f"Fetching '{url}' failed: {exc}") from exc
    return response.text
