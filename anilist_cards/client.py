"""Minimal AniList GraphQL client."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from .anilist_base import API_URL, HEADERS, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

USER_QUERY = """
query ($name: String) {
  User(name: $name) {
    id
    name
    siteUrl
    avatar { large }
  }
}
"""

ANIME_LISTS_QUERY = """
query ($userId: Int) {
  MediaListCollection(userId: $userId, type: ANIME) {
    lists {
      name
      status
      entries {
        status
        score(format: POINT_10_DECIMAL)
        progress
        media {
          id
          format
          episodes
          title { romaji english native }
          coverImage { large }
        }
      }
    }
  }
}
"""

ACTIVITY_QUERY = """
query ($userId: Int, $page: Int, $perPage: Int) {
  Page(page: $page, perPage: $perPage) {
    activities(userId: $userId, sort: ID_DESC) {
      ... on ListActivity {
        id
        type
        status
        progress
        createdAt
        media {
          id
          title { romaji english native }
          coverImage { large }
        }
      }
      ... on TextActivity {
        id
        type
        text
        createdAt
      }
      ... on MessageActivity {
        id
        type
        message
        createdAt
      }
    }
  }
}
"""


class AniListError(RuntimeError):
    """Transport failure or GraphQL error payload from AniList."""


class AniListNotFound(AniListError):
    """AniList answered 404, over HTTP or in the GraphQL ``errors`` list."""


class AniListClient:
    """
    Long-lived handle on the AniList API.

    One instance is built per process and passed into each card; it holds no
    per-request state.
    """

    def __init__(self, url: str = API_URL, timeout: float = HTTP_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def _make_request(self, query: str, variables: dict) -> Optional[dict]:
        """POST a GraphQL query and return its ``data``. Every failure raises."""
        payload = json.dumps({"query": query, "variables": variables}).encode()
        req = urllib.request.Request(
            self.url,
            data=payload,
            headers={**HEADERS, "Content-Type": "application/json", "Accept": "application/json"},
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                body = json.load(resp)
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise AniListNotFound(f"AniList API Error: 404 {e.reason}") from e
            raise AniListError(f"AniList API Error: {e.code} {e.reason}") from e
        except (urllib.error.URLError, OSError, ValueError) as e:
            raise AniListError(f"AniList request failed: {e}") from e

        errors = body.get("errors") or []
        not_found = [err for err in errors if err.get("status") == 404]
        if not_found:
            raise AniListNotFound(f"AniList API Error: {not_found[0].get('message', 'Not Found.')}")
        if errors:
            raise AniListError(f"AniList API Error: {errors[0].get('message', 'unknown error')}")
        return body.get("data")

    def user(self, username: str) -> Optional[dict]:
        """User record for ``username``, or None if AniList does not know them."""
        # Only the user lookup treats 404 as an answer
        try:
            data = self._make_request(USER_QUERY, {"name": username})
        except AniListNotFound:
            return None
        if not data:
            return None
        return data.get("User")

    def anime_lists(self, user_id: int) -> list:
        """The user's anime lists, each ``{"name": ..., "entries": [...]}`` in upstream order."""
        data = self._make_request(ANIME_LISTS_QUERY, {"userId": user_id})
        collection = (data or {}).get("MediaListCollection") or {}
        lists = collection.get("lists") or []
        logger.debug("Fetched %d anime lists for user %s", len(lists), user_id)
        return lists

    def recent_activity(self, user_id: int, page: int = 1, per_page: int = 5) -> list:
        data = self._make_request(ACTIVITY_QUERY, {"userId": user_id, "page": page, "perPage": per_page})
        page_data = (data or {}).get("Page") or {}
        # Unmatched activity kinds come back as empty objects
        return [a for a in page_data.get("activities") or [] if a]


__all__ = ["AniListClient", "AniListError", "AniListNotFound"]
