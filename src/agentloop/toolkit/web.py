"""Fetch a web page and reduce it to visible text."""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from agentloop.exceptions import ToolArgumentError, ToolExecutionError

logger = logging.getLogger(__name__)

_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


def extract_text_from_html(html: str) -> str:
    """Extract visible text from HTML content.

    Text inside script/style elements is dropped; the remaining text
    nodes are stripped and joined with single spaces.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(list(_INVISIBLE_TAGS)):
        tag.decompose()
    return soup.get_text(separator=" ", strip=True)


def fetch_url(url: str, *, client: httpx.Client) -> str:
    """GET ``url`` and return its visible text.

    Raises:
        ToolArgumentError: Empty URL.
        ToolExecutionError: Transport failure or a non-200 status.
    """
    if not url:
        raise ToolArgumentError("url cannot be empty")

    logger.info("Fetching %s", url)
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        raise ToolExecutionError(f"failed to fetch URL: {exc}") from exc

    if response.status_code != httpx.codes.OK:
        raise ToolExecutionError(
            f"failed to fetch URL: {response.status_code} {response.reason_phrase}"
        )
    return extract_text_from_html(response.text)
