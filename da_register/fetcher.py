from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60


class FetchError(RuntimeError):
    pass


def _get(url: str, session: Optional[requests.Session]) -> requests.Response:
    client = session or requests
    try:
        response = client.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Failed to retrieve {url}: {exc}") from exc
    return response


def fetch_page(url: str, session: Optional[requests.Session] = None) -> BeautifulSoup:
    logger.info("Retrieving page: %s", url)
    response = _get(url, session)
    return BeautifulSoup(response.text, "html.parser")


def find_link_by_text(tree: BeautifulSoup, text: str, suffix: str = ".pdf") -> str | None:
    """Return the href of the last link ending in `suffix` whose label is `text`."""
    found: str | None = None
    for anchor in tree.find_all("a", href=True):
        href = str(anchor["href"])
        if not href.endswith(suffix):
            continue
        if anchor.get_text() == text:
            found = href
    return found


def resolve_url(base: str, relative: str) -> str:
    return urljoin(base, relative)


def fetch_binary(url: str, session: Optional[requests.Session] = None) -> bytes:
    logger.info("Retrieving document: %s", url)
    return _get(url, session).content
