"""Layout engine: categorized entries + LayoutConfig → one SVG document."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from ..anilist_base import FONT_FAMILY
from ..svg import Element, el, normalize_color, render
from .entries import CATEGORIES, WATCHING, CategorizedLists, MediaEntry

LIST = "list"
GRID = "grid"
COMPACT_ROW = "compact-row"

LAYOUT_ALIASES = {
    "list": LIST,
    "row": LIST,
    "table": LIST,
    "grid": GRID,
    "compact-row": COMPACT_ROW,
    "compact": COMPACT_ROW,
    "row-compact": COMPACT_ROW,
}

EMPTY_MESSAGE = "No anime in this list."
MAX_ROWS = 50

# list / table
BOTTOM_MARGIN = 24
COLUMN_HEADER_OFFSET = 10
COLUMN_HEADER_HEIGHT = 30
POSTER_WIDTH = 48
TITLE_X = 24

# grid
GRID_PADDING = 24
GRID_GAP = 18
GRID_CARD_PADDING = 12
GRID_POSTER_RATIO = 0.65
GRID_TITLE_CHARS = 20
MAX_GRID_COLUMNS = 6

# compact row
TILE_WIDTH = 120
TILE_HEIGHT = 230
TILE_POSTER_HEIGHT = 170
TILE_SPACING = 16
TILE_PADDING = 24
TILE_TITLE_CHARS = 16
TILE_TITLE_GAP = 16


_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def _int_param(query: Mapping, name: str, default: int) -> int:
    """
    Leading integer of the first value of ``name`` ("56px" is 56, "12.5" is 12).

    Missing, non-numeric, zero or negative values mean ``default``.
    """
    raw = (query.get(name) or [""])[0] or ""
    match = _LEADING_INT.match(raw)
    if not match:
        return default
    value = int(match.group())
    return value if value > 0 else default


def _color_param(query: Mapping, name: str, default: str) -> str:
    raw = (query.get(name) or [""])[0]
    return normalize_color(raw) or default


@dataclass(frozen=True)
class LayoutConfig:
    title: str = "Animelist"
    bg_color: str = "#23272e"
    primary_color: str = "#49ACD2"
    accent_color: str = "#49ACD2"
    section_bg: str = "#23272e"
    poster_bg: str = "#49ACD2"
    text_color: str = "#abb2bf"
    width: int = 560
    row_height: int = 56
    header_height: int = 38
    header_font_size: int = 18
    title_font_size: int = 28
    title_margin: int = 32
    section_gap: int = 18
    max_rows: int = 5
    layout: str = LIST
    grid_columns: int = 2
    grid_card_height: int = 240

    @classmethod
    def from_query(cls, query: Mapping, username: str) -> "LayoutConfig":
        """Build a config from ``parse_qs`` output, falling back to defaults per field."""
        defaults = cls()
        raw_layout = (query.get("layout") or [LIST])[0].strip().lower()
        return cls(
            title=(query.get("title") or [""])[0] or f"{username}'s Animelist",
            bg_color=_color_param(query, "bgColor", defaults.bg_color),
            primary_color=_color_param(query, "primaryColor", defaults.primary_color),
            accent_color=_color_param(query, "accentColor", defaults.accent_color),
            section_bg=_color_param(query, "sectionBg", defaults.section_bg),
            poster_bg=_color_param(query, "posterBg", defaults.poster_bg),
            text_color=_color_param(query, "textColor", defaults.text_color),
            width=_int_param(query, "width", defaults.width),
            row_height=_int_param(query, "rowHeight", defaults.row_height),
            header_height=_int_param(query, "headerHeight", defaults.header_height),
            header_font_size=_int_param(query, "headerFontSize", defaults.header_font_size),
            title_font_size=_int_param(query, "titleFontSize", defaults.title_font_size),
            title_margin=_int_param(query, "titleMargin", defaults.title_margin),
            section_gap=_int_param(query, "sectionGap", defaults.section_gap),
            max_rows=min(_int_param(query, "maxRows", defaults.max_rows), MAX_ROWS),
            layout=LAYOUT_ALIASES.get(raw_layout, LIST),
            grid_columns=min(_int_param(query, "gridColumns", defaults.grid_columns), MAX_GRID_COLUMNS),
            grid_card_height=_int_param(query, "gridCardHeight", defaults.grid_card_height),
        )


@dataclass(frozen=True)
class RenderedSection:
    element: Element
    height: float


def format_score(entry: MediaEntry, suffix: str = "", placeholder: str = "-") -> str:
    if not entry.score or entry.score <= 0:
        return placeholder
    return f"⭐ {entry.score:g}{suffix}"


def format_progress(entry: MediaEntry, placeholder: str = "-") -> str:
    if not entry.progress or entry.progress <= 0:
        return placeholder
    return f"Ep {entry.progress}"


def wrap_title(title: str, max_chars: int = GRID_TITLE_CHARS) -> Tuple[str, str]:
    """
    Split a title over two lines at the last space within ``max_chars``.

    Without a usable space the break is hard at ``max_chars``. The second
    line is cut to ``max_chars - 3`` characters plus "...".
    """
    if len(title) <= max_chars:
        return title, ""
    break_at = title.rfind(" ", 0, max_chars + 1)
    if break_at <= 0:
        first, rest = title[:max_chars], title[max_chars:]
    else:
        first, rest = title[:break_at], title[break_at + 1:]
    if len(rest) > max_chars:
        rest = rest[: max_chars - 3] + "..."
    return first, rest


def truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1].rstrip() + "…"


class LayoutEngine:
    """
    Pure layout: ``render(lists, images)`` returns the SVG element tree.

    ``images`` maps media id to a data URI; missing or empty URIs leave the
    poster's ``href`` out. Sections are always stacked Watching, Completed,
    Planning, and every category gets a header even when it is empty.
    """

    def __init__(self, config: LayoutConfig):
        self.config = config

    # --- shared geometry ---

    @property
    def title_height(self) -> float:
        """Vertical extent above the first section."""
        c = self.config
        if c.layout == GRID:
            return c.title_margin + c.title_font_size + c.section_gap
        if c.layout == COMPACT_ROW:
            return c.title_margin + c.title_font_size + TILE_TITLE_GAP
        return c.title_margin + c.title_font_size + COLUMN_HEADER_OFFSET + COLUMN_HEADER_HEIGHT

    @property
    def card_width(self) -> float:
        """Grid card width that exactly fills the canvas between the paddings."""
        c = self.config
        cols = c.grid_columns
        return (c.width - 2 * GRID_PADDING - GRID_GAP * (cols - 1)) / cols

    def grid_positions(self, count: int) -> List[Tuple[int, int]]:
        """Row-major (row, column) slots for the first ``count`` cards."""
        cols = self.config.grid_columns
        return [(i // cols, i % cols) for i in range(count)]

    def visible_entries(self, lists: CategorizedLists) -> List[MediaEntry]:
        """Entries that will actually be drawn, in render order."""
        limit = self.config.max_rows
        if self.config.layout == COMPACT_ROW:
            return list(lists.get(WATCHING, [])[:limit])
        return [entry for category in CATEGORIES for entry in lists.get(category, [])[:limit]]

    # --- entry points ---

    def render(self, lists: CategorizedLists, images: Optional[Mapping[int, str]] = None) -> Element:
        images = images or {}
        if self.config.layout == GRID:
            return self._render_grid(lists, images)
        if self.config.layout == COMPACT_ROW:
            return self._render_compact_row(lists, images)
        return self._render_list(lists, images)

    def to_svg(self, lists: CategorizedLists, images: Optional[Mapping[int, str]] = None) -> str:
        return render(self.render(lists, images))

    # --- helpers ---

    def _document(self, width, height, children) -> Element:
        return el(
            "svg",
            el("rect", width="100%", height="100%", fill=self.config.bg_color, rx=18, ry=18),
            children,
            width=width, height=height, xmlns="http://www.w3.org/2000/svg",
            viewBox=f"0 0 {width} {height}", style=FONT_FAMILY,
        )

    def _title(self, x, y) -> Element:
        c = self.config
        return el(
            "text", c.title,
            x=x, y=y, font_size=c.title_font_size, fill=c.primary_color,
            font_weight="bold", style="letter-spacing:1px;",
        )

    def _section_header(self, category, x, y, width, label_x) -> List[Element]:
        c = self.config
        return [
            el("rect", x=x, y=y, width=width, height=c.header_height, fill=c.section_bg, rx=8),
            el(
                "text", category,
                x=label_x, y=y + c.header_height / 2 + c.header_font_size / 2 - 2,
                font_size=c.header_font_size, fill=c.primary_color, font_weight="bold",
            ),
        ]

    def _stack_sections(self, render_section, lists, images, y) -> Tuple[List[Element], float]:
        """Lay the three sections top to bottom; returns their elements and the final offset."""
        elements = []
        for index, category in enumerate(CATEGORIES):
            if index:
                y += self.config.section_gap
            section = render_section(category, lists.get(category, []), y, images)
            elements.append(section.element)
            y += section.height
        return elements, y

    # --- list / table ---

    def _column_xs(self):
        width = self.config.width
        return width - 240, width - 160, width - 80

    def _render_list(self, lists, images) -> Element:
        c = self.config
        title_y = c.title_margin + c.title_font_size
        band_y = title_y + COLUMN_HEADER_OFFSET
        score_x, progress_x, status_x = self._column_xs()
        label = dict(font_size=15, fill=c.primary_color, font_weight="bold")
        column_header = el(
            "g",
            el("rect", x=0, y=band_y, width=c.width, height=COLUMN_HEADER_HEIGHT, fill=c.section_bg, opacity=0.5),
            el("text", "Title", x=76, y=band_y + 20, **label),
            el("text", "Score", x=score_x, y=band_y + 20, text_anchor="middle", **label),
            el("text", "Progress", x=progress_x, y=band_y + 20, text_anchor="middle", **label),
            el("text", "Status", x=status_x, y=band_y + 20, text_anchor="middle", **label),
            class_="column-header",
        )
        sections, y = self._stack_sections(self._render_list_section, lists, images, self.title_height)
        return self._document(c.width, y + BOTTOM_MARGIN, [self._title(TITLE_X, title_y), column_header, *sections])

    def _render_list_section(self, category, entries, y_start, images) -> RenderedSection:
        c = self.config
        children = self._section_header(category, 0, y_start, c.width, 20)
        y = y_start + c.header_height
        if not entries:
            children.append(el(
                "text", EMPTY_MESSAGE,
                x="50%", y=y + c.row_height / 2 + 5, text_anchor="middle",
                font_size=14, fill=c.text_color, class_="placeholder",
            ))
            y += c.row_height
        else:
            for entry in entries[: c.max_rows]:
                children.append(self._list_row(entry, images.get(entry.media_id), y))
                y += c.row_height
        return RenderedSection(el("g", children, class_="section", data_category=category), y - y_start)

    def _list_row(self, entry: MediaEntry, image: Optional[str], y) -> Element:
        c = self.config
        middle = y + c.row_height / 2
        score_x, progress_x, status_x = self._column_xs()
        cell = dict(y=middle + 5, font_size=14, fill=c.text_color, text_anchor="middle")
        return el(
            "g",
            el("rect", x=0, y=y, width="100%", height=c.row_height, fill=c.poster_bg, opacity=0.12),
            el("rect", x=0, y=y, width=8, height=c.row_height, fill=c.accent_color, rx=4),
            el(
                "image", href=image or None, x=16, y=y + 6,
                width=POSTER_WIDTH, height=c.row_height - 12, preserveAspectRatio="xMidYMid slice",
            ),
            el("text", entry.display_title, x=76, y=middle - 2, font_size=16, fill=c.primary_color, font_weight="bold"),
            el("text", entry.format or "-", x=76, y=middle + 18, font_size=13, fill=c.text_color),
            el("text", format_score(entry, " / 10"), x=score_x, class_="score", **cell),
            el("text", format_progress(entry), x=progress_x, class_="progress", **cell),
            el("text", entry.status or "-", x=status_x, class_="status", **cell),
            class_="entry",
            data_media_id=entry.media_id,
        )

    # --- grid ---

    def _render_grid(self, lists, images) -> Element:
        c = self.config
        sections, y = self._stack_sections(self._render_grid_section, lists, images, self.title_height)
        return self._document(c.width, y + GRID_PADDING, [self._title(GRID_PADDING, c.title_margin), *sections])

    def _render_grid_section(self, category, entries, y_start, images) -> RenderedSection:
        c = self.config
        card_width, card_height = self.card_width, c.grid_card_height
        children = self._section_header(
            category, GRID_PADDING, y_start, c.width - GRID_PADDING * 2, GRID_PADDING + 16
        )
        y = y_start + c.header_height + GRID_GAP
        shown = entries[: c.max_rows]
        if not shown:
            children.append(el(
                "text", EMPTY_MESSAGE,
                x="50%", y=y + card_height / 2, text_anchor="middle",
                font_size=14, fill=c.text_color, class_="placeholder",
            ))
            y += card_height
        else:
            for entry, (row, col) in zip(shown, self.grid_positions(len(shown))):
                x = GRID_PADDING + col * (card_width + GRID_GAP)
                card_y = y + row * (card_height + GRID_GAP)
                children.append(self._grid_card(entry, images.get(entry.media_id), x, card_y))
            rows = math.ceil(len(shown) / c.grid_columns)
            y += rows * card_height + (rows - 1) * GRID_GAP
        return RenderedSection(el("g", children, class_="section", data_category=category), y - y_start)

    def _grid_card(self, entry: MediaEntry, image: Optional[str], x, y) -> Element:
        c = self.config
        width, height = self.card_width, c.grid_card_height
        pad = GRID_CARD_PADDING
        poster_height = height * GRID_POSTER_RATIO
        center = x + width / 2
        line1, line2 = wrap_title(entry.display_title)
        return el(
            "g",
            el("rect", x=x, y=y, width=width, height=height, fill=c.poster_bg, opacity=0.10, rx=12),
            el(
                "image", href=image or None, x=x + pad, y=y + pad,
                width=width - pad * 2, height=poster_height, preserveAspectRatio="xMidYMid slice",
            ),
            el(
                "text",
                el("tspan", line1),
                el("tspan", line2, x=center, dy="1.2em") if line2 else None,
                x=center, y=y + poster_height + 20, font_size=14, fill=c.primary_color,
                font_weight="bold", text_anchor="middle",
            ),
            el(
                "text", format_score(entry, placeholder=""),
                x=x + pad, y=y + height - pad, font_size=12, fill=c.accent_color,
                font_weight="bold", dominant_baseline="middle", class_="score",
            ),
            el(
                "text", format_progress(entry, placeholder=""),
                x=x + width - pad, y=y + height - pad, font_size=12, fill=c.text_color,
                text_anchor="end", dominant_baseline="middle", class_="progress",
            ),
            class_="entry",
            data_media_id=entry.media_id,
        )

    # --- compact row ---

    def _render_compact_row(self, lists, images) -> Element:
        c = self.config
        entries = self.visible_entries(lists)
        slots = max(1, len(entries))
        width = 2 * TILE_PADDING + slots * TILE_WIDTH + (slots - 1) * TILE_SPACING
        tile_y = self.title_height
        height = tile_y + TILE_HEIGHT + TILE_PADDING

        tiles = []
        for index, entry in enumerate(entries):
            x = TILE_PADDING + index * (TILE_WIDTH + TILE_SPACING)
            tiles.append(self._compact_tile(entry, images.get(entry.media_id), x, tile_y))
        if not entries:
            tiles.append(el(
                "g",
                el("rect", x=TILE_PADDING, y=tile_y, width=TILE_WIDTH, height=TILE_HEIGHT,
                   fill=c.poster_bg, opacity=0.10, rx=10),
                self._tile_placeholder(TILE_PADDING, tile_y),
            ))
        title_y = c.title_margin + c.title_font_size
        return self._document(width, height, [self._title(TILE_PADDING, title_y), *tiles])

    def _tile_placeholder(self, x, y) -> Element:
        # Two lines so the message stays inside the tile
        center = x + TILE_WIDTH / 2
        line1, line2 = wrap_title(EMPTY_MESSAGE, TILE_TITLE_CHARS - 2)
        return el(
            "text",
            el("tspan", line1),
            el("tspan", line2, x=center, dy="1.2em") if line2 else None,
            x=center, y=y + TILE_HEIGHT / 2, text_anchor="middle", font_size=11,
            fill=self.config.text_color, class_="placeholder",
        )

    def _compact_tile(self, entry: MediaEntry, image: Optional[str], x, y) -> Element:
        c = self.config
        return el(
            "g",
            el("rect", x=x, y=y, width=TILE_WIDTH, height=TILE_HEIGHT, fill=c.poster_bg, opacity=0.10, rx=10),
            el(
                "image", href=image or None, x=x, y=y,
                width=TILE_WIDTH, height=TILE_POSTER_HEIGHT, preserveAspectRatio="xMidYMid slice",
            ),
            el(
                "text", truncate(entry.display_title, TILE_TITLE_CHARS),
                x=x + TILE_WIDTH / 2, y=y + TILE_POSTER_HEIGHT + 22, font_size=13,
                fill=c.primary_color, font_weight="bold", text_anchor="middle",
            ),
            el(
                "text", format_score(entry, placeholder=""),
                x=x + 8, y=y + TILE_HEIGHT - 14, font_size=12, fill=c.accent_color,
                font_weight="bold", class_="score",
            ),
            el(
                "text", format_progress(entry, placeholder=""),
                x=x + TILE_WIDTH - 8, y=y + TILE_HEIGHT - 14, font_size=12, fill=c.text_color,
                text_anchor="end", class_="progress",
            ),
            class_="entry",
            data_media_id=entry.media_id,
        )


__all__ = [
    "COMPACT_ROW",
    "EMPTY_MESSAGE",
    "GRID",
    "LIST",
    "LayoutConfig",
    "LayoutEngine",
    "RenderedSection",
    "wrap_title",
]
