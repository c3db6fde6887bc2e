from http.server import BaseHTTPRequestHandler

from anilist_cards import configure_logging
from anilist_cards.animelist import respond_with_card

configure_logging()


class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        respond_with_card(self)
