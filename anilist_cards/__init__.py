"""SVG cards for AniList profiles."""

from .anilist_base import AniListCardBase, UserNotFound, configure_logging, escape_xml, normalize_color
from .client import AniListClient, AniListError

__all__ = [
    "AniListCardBase",
    "AniListClient",
    "AniListError",
    "UserNotFound",
    "configure_logging",
    "escape_xml",
    "normalize_color",
]
