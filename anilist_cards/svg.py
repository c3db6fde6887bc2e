"""Structured SVG fragments.

Markup is assembled as a tree of ``Element`` values and serialized once by
``render``. Text children and attribute values are escaped during
serialization, and color attributes are normalized when an element is built,
so callers never interpolate raw strings into markup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Union

COLOR_ATTRS = frozenset({"fill", "stroke", "stop-color", "color"})

_HEX_COLOR = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_NAMED_COLOR = re.compile(r"^[a-zA-Z]+$")


def escape_xml(text):
    """Sanitize text for SVG output. Escape exactly once, when inserting into markup."""
    if text is None:
        return ""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("'", "&apos;")
        .replace('"', "&quot;")
    )


def normalize_color(color):
    """
    Turn a user supplied color into something SVG accepts.

    Examples:
        "49ACD2" → "#49ACD2"
        "%23abcdef" → "#abcdef"
        "red", "rgb(1,2,3)", "#fff" → unchanged
    """
    if not color:
        return color
    if color.startswith(("#", "rgb", "hsl", "var(")) or _NAMED_COLOR.match(color):
        return color
    if _HEX_COLOR.match(color):
        return "#" + color
    if color.startswith("%23"):
        return "#" + color[3:]
    return color


def format_number(value) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


Node = Union["Element", str]


@dataclass
class Element:
    tag: str
    attrs: dict = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)

    def __post_init__(self):
        self.attrs = {
            name: normalize_color(value) if name in COLOR_ATTRS and isinstance(value, str) else value
            for name, value in self.attrs.items()
            if value is not None
        }

    def iter(self, tag: str | None = None) -> Iterator["Element"]:
        """Depth-first walk over this element and its descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter(tag)

    def find_all(self, tag: str) -> List["Element"]:
        return list(self.iter(tag))

    @property
    def text(self) -> str:
        """Unescaped text content, including nested tspans."""
        return "".join(child if isinstance(child, str) else child.text for child in self.children)


def _attr_name(name: str) -> str:
    if name.endswith("_"):
        name = name[:-1]
    return name.replace("_", "-")


def _node(child) -> Node:
    return child if isinstance(child, (Element, str)) else str(child)


def el(tag: str, *children, **attrs) -> Element:
    """
    Build an element. Keyword names map to SVG attributes with ``_`` turned
    into ``-`` (``font_size`` → ``font-size``, ``class_`` → ``class``).
    ``None`` children and attributes are dropped.
    """
    flat: List[Node] = []
    for child in children:
        if child is None:
            continue
        if isinstance(child, (list, tuple)):
            flat.extend(_node(c) for c in child if c is not None)
        else:
            flat.append(_node(child))
    return Element(tag, {_attr_name(k): v for k, v in attrs.items()}, flat)


def render(node: Node) -> str:
    if isinstance(node, str):
        return escape_xml(node)
    attrs = "".join(f' {name}="{escape_xml(format_number(value))}"' for name, value in node.attrs.items())
    if not node.children:
        return f"<{node.tag}{attrs}/>"
    inner = "".join(render(child) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


__all__ = ["Element", "el", "render", "escape_xml", "normalize_color", "format_number"]
