# activity.py

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

from .anilist_base import CACHE_SECONDS, DEFAULT_USER
from .client import AniListClient

logger = logging.getLogger(__name__)

_CLIENT = AniListClient()

DEFAULT_PER_PAGE = 5
MAX_PER_PAGE = 25


def _per_page(query: dict) -> int:
    try:
        value = int(query.get("perPage", [DEFAULT_PER_PAGE])[0])
    except (TypeError, ValueError):
        return DEFAULT_PER_PAGE
    return max(1, min(MAX_PER_PAGE, value))


def recent_activity(username: str, per_page: int, client: AniListClient) -> Tuple[int, dict]:
    """Returns (status_code, payload) for the user's latest activities."""
    try:
        user = client.user(username)
        if not user:
            return 404, {"message": f"User '{username}' Not Found"}
        activities = client.recent_activity(user["id"], page=1, per_page=per_page)
    except Exception:
        logger.exception("Failed to fetch activity for %r", username)
        return 500, {"message": "Error fetching data"}
    return 200, {
        "user": {"id": user["id"], "name": user.get("name", username)},
        "activities": activities,
    }


def respond_with_activity(handler: BaseHTTPRequestHandler, client: Optional[AniListClient] = None):
    query = parse_qs(urlparse(handler.path).query)
    username = query.get("username", [""])[0] or DEFAULT_USER
    status, payload = recent_activity(username, _per_page(query), client or _CLIENT)
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json; charset=utf-8")
    handler.send_header("Cache-Control", f"public, max-age={CACHE_SECONDS}, must-revalidate")
    handler.end_headers()
    handler.wfile.write(json.dumps(payload).encode())
