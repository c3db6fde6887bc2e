import io
import os
import sys
import xml.etree.ElementTree as ET

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

SVG_NS = '{http://www.w3.org/2000/svg}'


def raw_entry(media_id, romaji='', english='', native='', poster=None, score=0, progress=0,
              status='CURRENT', fmt='TV'):
    """An AniList list entry shaped like the GraphQL response."""
    return {
        'status': status,
        'score': score,
        'progress': progress,
        'media': {
            'id': media_id,
            'format': fmt,
            'title': {'romaji': romaji or None, 'english': english or None, 'native': native or None},
            'coverImage': {'large': poster if poster is not None else f'https://img.example/{media_id}.jpg'},
        },
    }


class DummyResponse:
    def __init__(self, payload=b'', content_type='image/jpeg', status=200):
        self.payload = payload
        self.status = status
        self.headers = {'Content-Type': content_type} if content_type else {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def read(self, *args):
        return self.payload


class FakeClient:
    """Stands in for AniListClient; records lookups."""

    def __init__(self, users=None, lists=None, activities=None, error=None):
        self.users = users or {}
        self.lists = lists or []
        self.activities = activities or []
        self.error = error
        self.looked_up = []

    def user(self, username):
        self.looked_up.append(username)
        return self.users.get(username)

    def anime_lists(self, user_id):
        if self.error:
            raise self.error
        return self.lists

    def recent_activity(self, user_id, page=1, per_page=5):
        if self.error:
            raise self.error
        return self.activities[:per_page]


class FakeHandler:
    """Just enough of BaseHTTPRequestHandler for the respond_* helpers."""

    def __init__(self, path):
        self.path = path
        self.status = None
        self.headers = {}
        self.wfile = io.BytesIO()

    def send_response(self, code):
        self.status = code

    def send_header(self, name, value):
        self.headers[name] = value

    def end_headers(self):
        pass

    @property
    def body(self):
        return self.wfile.getvalue().decode()


def parse_svg(text):
    return ET.fromstring(text)


def svg_texts(root):
    return [''.join(node.itertext()) for node in root.iter(SVG_NS + 'text')]


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Patch urlopen with a URL → payload table; payloads that are exceptions get raised."""
    import urllib.request

    calls = []

    def install(table, default=b'img'):
        def fake(req, timeout=None):
            url = getattr(req, 'full_url', req)
            calls.append(url)
            result = table.get(url, default)
            if isinstance(result, Exception):
                raise result
            if isinstance(result, DummyResponse):
                return result
            return DummyResponse(result)

        monkeypatch.setattr(urllib.request, 'urlopen', fake)
        return calls

    return install
