# anilist_base.py

from __future__ import annotations

import logging
import os

from .svg import el, escape_xml, normalize_color, render

# --- SHARED CONFIG ---
API_URL = os.environ.get("ANILIST_API_URL", "https://graphql.anilist.co")
DEFAULT_USER = os.environ.get("ANILIST_DEFAULT_USER", "kenndeclouv")
HTTP_TIMEOUT = float(os.environ.get("ANILIST_HTTP_TIMEOUT", "10"))
CACHE_SECONDS = int(os.environ.get("ANILIST_CACHE_SECONDS", "7200"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

HEADERS = {"User-Agent": "AniList-SVG-Cards/1.0"}
SVG_HEADERS = {
    "Content-Type": "image/svg+xml; charset=utf-8",
    "Cache-Control": f"public, max-age={CACHE_SECONDS}, must-revalidate",
}
FONT_FAMILY = "font-family: 'Segoe UI', Ubuntu, 'Helvetica Neue', sans-serif;"

ERROR_BG = "#23272e"
ERROR_PRIMARY = "#e06c75"

logger = logging.getLogger(__name__)


def configure_logging():
    """Attach a stderr handler to the package logger (Vercel collects stderr)."""
    package_logger = logging.getLogger("anilist_cards")
    if not package_logger.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(stream)
    package_logger.setLevel(LOG_LEVEL)


# --- UTILITIES ---
def render_error_card(message, bg_color="#282c34", primary_color=ERROR_PRIMARY):
    """Fixed 700x150 card with a bold title and the (escaped) message below it."""
    doc = el(
        "svg",
        el("rect", width="100%", height="100%", fill=bg_color, rx=16, ry=16),
        el(
            "text",
            "Oops! An Error Occurred",
            x="50%", y="45%", dominant_baseline="middle", text_anchor="middle",
            font_size=20, fill=primary_color, font_weight="bold",
        ),
        el(
            "text",
            message,
            x="50%", y="60%", dominant_baseline="middle", text_anchor="middle",
            font_size=14, fill="#abb2bf",
        ),
        width=700, height=150, xmlns="http://www.w3.org/2000/svg",
        viewBox="0 0 700 150", style=FONT_FAMILY,
    )
    return render(doc)


class UserNotFound(LookupError):
    """Raised by ``fetch_data`` when the target user does not exist upstream."""

    def __init__(self, username):
        super().__init__(f"User '{username}' Not Found")
        self.username = username


# ==========================================
# THE ABSTRACT BASE CLASS
# ==========================================
class AniListCardBase:
    def __init__(self, username, query_params, client):
        self.user = username or DEFAULT_USER
        self.params = query_params
        self.client = client
        # Error card colors follow the request's palette
        self.bg_color = normalize_color(self._param("bgColor")) or ERROR_BG
        self.primary_color = normalize_color(self._param("primaryColor")) or "#49ACD2"

    def _param(self, name, default=None):
        values = self.params.get(name)
        if not values:
            return default
        return values[0] or default

    def _render_error(self, message, bg_color=None, primary_color=None):
        return render_error_card(message, bg_color or self.bg_color, primary_color or self.primary_color)

    def fetch_data(self):
        """Override this method to fetch data from AniList. Raise UserNotFound for unknown users."""
        raise NotImplementedError

    def render(self, data):
        """Override this method to turn fetched data into a complete SVG document string."""
        raise NotImplementedError

    def process(self):
        """Main execution flow. Returns (status_code, svg)."""
        try:
            data = self.fetch_data()
            return 200, self.render(data)
        except UserNotFound as exc:
            logger.info("AniList user %r not found", exc.username)
            return 404, self._render_error(str(exc))
        except Exception:
            logger.exception("Failed to render card for %r", self.user)
            return 500, self._render_error("Could not fetch data.", ERROR_BG, ERROR_PRIMARY)
