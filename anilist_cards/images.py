"""Poster fetching and base64 inlining."""

from __future__ import annotations

import base64
import logging
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from .anilist_base import HEADERS, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


def fetch_data_uri(url: str, timeout: float = HTTP_TIMEOUT) -> str:
    """
    Fetch ``url`` and return it as a ``data:<type>;base64,...`` URI.

    Any failure (network error, non-2xx status, empty body) is logged and
    yields an empty string; a missing poster never fails the card.
    """
    if not url:
        return ""
    try:
        req = urllib.request.Request(url, headers=HEADERS)
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if not 200 <= status < 300:
                raise ValueError(f"unexpected status {status}")
            payload = resp.read()
            content_type = resp.headers.get("Content-Type") or DEFAULT_CONTENT_TYPE
    except Exception as e:
        logger.warning("Failed to fetch and encode image %s: %s", url, e)
        return ""
    if not payload:
        logger.warning("Empty image body for %s", url)
        return ""
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def inline_images(urls: Sequence[str]) -> List[str]:
    """
    Fetch every URL concurrently and wait for all of them.

    Results keep the order of ``urls``; failed fetches come back as "".
    """
    if not urls:
        return []
    with ThreadPoolExecutor(max_workers=len(urls)) as executor:
        return list(executor.map(fetch_data_uri, urls))


__all__ = ["fetch_data_uri", "inline_images"]
