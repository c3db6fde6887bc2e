"""Watching / Completed / Planning anime list card."""

from .card import AnimeListCard, respond_with_card
from .entries import CategorizedLists, MediaEntry, MediaTitle, categorize_lists
from .layout import LayoutConfig, LayoutEngine, RenderedSection

__all__ = [
    "AnimeListCard",
    "CategorizedLists",
    "LayoutConfig",
    "LayoutEngine",
    "MediaEntry",
    "MediaTitle",
    "RenderedSection",
    "categorize_lists",
    "respond_with_card",
]
