# animelist/card.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler
from typing import Dict, Optional
from urllib.parse import parse_qs, urlparse

from ..anilist_base import SVG_HEADERS, AniListCardBase, UserNotFound
from ..client import AniListClient
from ..images import inline_images
from .entries import CategorizedLists, categorize_lists
from .layout import COMPACT_ROW, LayoutConfig, LayoutEngine

logger = logging.getLogger(__name__)

# Shared across invocations of a warm serverless instance
_CLIENT = AniListClient()


@dataclass(frozen=True)
class CardData:
    lists: CategorizedLists
    images: Dict[int, str]


class AnimeListCard(AniListCardBase):
    def __init__(self, username: str, query_params: dict, client: AniListClient):
        super().__init__(username, query_params, client)
        self.config = LayoutConfig.from_query(query_params, self.user)
        self.engine = LayoutEngine(self.config)

    def fetch_data(self) -> CardData:
        user = self.client.user(self.user)
        if not user:
            raise UserNotFound(self.user)

        raw_lists = self.client.anime_lists(user["id"])
        lists = categorize_lists(raw_lists, require_poster=self.config.layout == COMPACT_ROW)

        # One fetch per distinct media id, all in flight at once
        urls: Dict[int, str] = {}
        for entry in self.engine.visible_entries(lists):
            urls.setdefault(entry.media_id, entry.image_url)
        encoded = inline_images(list(urls.values()))
        images = dict(zip(urls.keys(), encoded))
        logger.debug("Inlined %d/%d posters for %s", sum(1 for uri in encoded if uri), len(encoded), self.user)
        return CardData(lists, images)

    def render(self, data: CardData) -> str:
        return self.engine.to_svg(data.lists, data.images)


def respond_with_card(handler: BaseHTTPRequestHandler, client: Optional[AniListClient] = None):
    query = parse_qs(urlparse(handler.path).query)
    username = query.get("username", [""])[0]
    card = AnimeListCard(username, query, client or _CLIENT)
    status, svg = card.process()
    handler.send_response(status)
    for name, value in SVG_HEADERS.items():
        handler.send_header(name, value)
    handler.end_headers()
    handler.wfile.write(svg.encode())