"""Rich-text HTML walking.

The editor stores rich notes as the HTML its widget produces (Quill-style:
``<p>``, ``<h1>``-``<h4>``, ``<ul>``/``<ol>``, inline ``<strong>``, ``<em>``,
``<u>``, ``<s>`` and ``<span style="color: ...">``). This module parses that
HTML with the standard library parser into a small node tree and maps it to
export paragraphs or plain text.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from html.parser import HTMLParser
from typing import Dict, List, Optional

from ledgernotes.export.ir import LIST_BULLET, LIST_NUMBER, Paragraph, Run

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)
BLOCK_TAGS = frozenset(
    {
        "blockquote", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "ol", "p", "pre",
        "table", "tr", "ul",
    }
)
HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}
ALIGN_CLASSES = {"ql-align-center": "center", "ql-align-right": "right", "ql-align-justify": "justify"}

_RGB = re.compile(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)$")
_HEX = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass
class HtmlNode:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List["HtmlNode"] = field(default_factory=list)
    data: str = ""

    @property
    def is_text(self) -> bool:
        return self.tag == "#text"

    @property
    def classes(self) -> List[str]:
        return self.attrs.get("class", "").split()

    @property
    def style(self) -> Dict[str, str]:
        return parse_style(self.attrs.get("style", ""))

    def text_content(self) -> str:
        if self.is_text:
            return self.data
        return "".join(child.text_content() for child in self.children)

    def iter_descendants(self, tag: str):
        for child in self.children:
            if child.tag == tag:
                yield child
            yield from child.iter_descendants(tag)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = HtmlNode("#root")
        self._stack = [self.root]

    def handle_starttag(self, tag, attrs):
        node = HtmlNode(tag, {name: value or "" for name, value in attrs})
        self._stack[-1].children.append(node)
        if tag not in VOID_TAGS:
            self._stack.append(node)

    def handle_startendtag(self, tag, attrs):
        self._stack[-1].children.append(HtmlNode(tag, {name: value or "" for name, value in attrs}))

    def handle_endtag(self, tag):
        # Close the nearest matching element; stray end tags are ignored
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                break

    def handle_data(self, data):
        self._stack[-1].children.append(HtmlNode("#text", data=data))


def parse_html(html: Optional[str]) -> HtmlNode:
    """Parse an HTML fragment into a node tree rooted at ``#root``."""
    builder = _TreeBuilder()
    builder.feed(html or "")
    builder.close()
    return builder.root


def parse_style(style: str) -> Dict[str, str]:
    declarations = {}
    for part in style.split(";"):
        if ":" not in part:
            continue
        name, value = part.split(":", 1)
        declarations[name.strip().lower()] = value.strip()
    return declarations


def rgb_to_hex(value: str) -> str:
    """Convert ``rgb(r, g, b)`` (or ``#rgb``/``#rrggbb``) to ``RRGGBB``.

    Unrecognised values map to black.
    """
    value = (value or "").strip()
    match = _RGB.match(value)
    if match:
        r, g, b = (min(int(c), 255) for c in match.groups())
        return f"{r:02X}{g:02X}{b:02X}"
    match = _HEX.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return digits.upper()
    return "000000"


# === Plain text ===


def _collect_text(node: HtmlNode, parts: List[str]) -> None:
    if node.is_text:
        parts.append(node.data)
        return
    if node.tag == "br":
        parts.append("\n")
        return
    block = node.tag in BLOCK_TAGS
    if block:
        parts.append("\n")
    for child in node.children:
        _collect_text(child, parts)
    if block:
        parts.append("\n")


def html_to_text(html: Optional[str]) -> str:
    """De-tagged text with line breaks at block boundaries."""
    parts: List[str] = []
    _collect_text(parse_html(html), parts)
    text = "".join(parts)
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def word_count(html: Optional[str]) -> int:
    return len(html_to_text(html).split())


# === Paragraphs ===


def inline_runs(node: HtmlNode, style: Optional[Run] = None) -> List[Run]:
    """Flatten inline content into styled runs."""
    style = style or Run("")
    if node.is_text:
        return [style.with_text(node.data)] if node.data else []

    tag = node.tag
    if tag in ("strong", "b"):
        style = replace(style, bold=True)
    elif tag in ("em", "i"):
        style = replace(style, italic=True)
    elif tag == "u":
        style = replace(style, underline=True)
    elif tag in ("s", "strike", "del"):
        style = replace(style, strike=True)
    elif tag == "span":
        declarations = node.style
        if declarations.get("color"):
            style = replace(style, color=rgb_to_hex(declarations["color"]))
        if declarations.get("background-color"):
            style = replace(style, highlight=rgb_to_hex(declarations["background-color"]))

    runs: List[Run] = []
    for child in node.children:
        if child.tag in ("ul", "ol"):
            continue  # nested lists become their own paragraphs
        runs.extend(inline_runs(child, style))
    return runs


def _alignment(node: HtmlNode) -> Optional[str]:
    for cls in node.classes:
        if cls in ALIGN_CLASSES:
            return ALIGN_CLASSES[cls]
    return None


def _list_paragraphs(node: HtmlNode) -> List[Paragraph]:
    default_style = LIST_NUMBER if node.tag == "ol" else LIST_BULLET
    paragraphs = []
    for item in node.iter_descendants("li"):
        # Quill 2 marks bullets inside <ol> with data-list
        marker = item.attrs.get("data-list")
        list_style = LIST_BULLET if marker == "bullet" else LIST_NUMBER if marker else default_style
        paragraphs.append(
            Paragraph(runs=inline_runs(item), list_style=list_style, alignment=_alignment(item))
        )
    return paragraphs


def parse_blocks(html: Optional[str]) -> List[Paragraph]:
    """Map top-level HTML nodes to export paragraphs.

    Headings h1-h4 become heading paragraphs, list items become bullet or
    numbered paragraphs, ``<p>`` keeps its inline styling and alignment.
    Other nodes with text fall back to a plain paragraph; nodes without
    text are dropped.
    """
    paragraphs: List[Paragraph] = []
    for node in parse_html(html).children:
        if node.is_text:
            candidates = [Paragraph(runs=[Run(node.data)])]
        elif node.tag in HEADING_TAGS:
            candidates = [
                Paragraph(
                    runs=inline_runs(node),
                    heading=HEADING_TAGS[node.tag],
                    alignment=_alignment(node),
                )
            ]
        elif node.tag in ("ul", "ol"):
            candidates = _list_paragraphs(node)
        elif node.tag == "p":
            candidates = [Paragraph(runs=inline_runs(node), alignment=_alignment(node))]
        else:
            candidates = [Paragraph(runs=[Run(node.text_content())])]

        paragraphs.extend(p for p in candidates if p.text.strip())
    return paragraphs
