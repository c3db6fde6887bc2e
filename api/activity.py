from http.server import BaseHTTPRequestHandler

from anilist_cards import configure_logging
from anilist_cards.activity import respond_with_activity

configure_logging()


class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        respond_with_activity(self)
