"""
Markdown to HTML conversion, heading extraction and slug generation.

A single markdown-it parser is shared by the HTML renderer and the heading
extractor so anchors in the outline always match the ids in the page.
"""

import re
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

HEADING_ATTRS_RE = re.compile(r"\s*\{([^{}]*)\}\s*$")
TEXT_TOKENS = ("text", "text_special", "code_inline")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    anchor: str

    def to_dict(self) -> Dict:
        return asdict(self)


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated slug.

    Whitespace, ``-`` and ``_`` become hyphens, any other non-alphanumeric
    character is dropped, and runs of hyphens collapse:
    ``"API & REST: A Guide"`` -> ``"api-rest-a-guide"``.
    """
    chars = []
    for ch in text.lower():
        if ch.isalnum():
            chars.append(ch)
        elif ch.isspace() or ch in "-_":
            chars.append("-")
    return "-".join(part for part in "".join(chars).split("-") if part)


def _parse_attr_block(block: str) -> Optional[Dict[str, str]]:
    """Parse ``#id .class key=value`` pieces; None if any piece is not an attribute."""
    attrs: Dict[str, str] = {}
    classes: List[str] = []
    pieces = block.split()
    if not pieces:
        return None
    for piece in pieces:
        if piece.startswith("#") and len(piece) > 1:
            attrs["id"] = piece[1:]
        elif piece.startswith(".") and len(piece) > 1:
            classes.append(piece[1:])
        elif "=" in piece and not piece.startswith("="):
            key, value = piece.split("=", 1)
            attrs[key] = value.strip("\"'")
        else:
            return None
    if classes:
        attrs["class"] = " ".join(classes)
    return attrs


def _inline_text(inline_token) -> str:
    return "".join(
        child.content for child in (inline_token.children or []) if child.type in TEXT_TOKENS
    )


def _heading_attrs_rule(state) -> None:
    """Move a trailing ``{#id .class}`` block of a heading onto the heading tag.

    Runs before inline parsing, so only the raw inline source is rewritten.
    """
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        if token.type != "heading_open" or idx + 1 >= len(tokens):
            continue
        inline = tokens[idx + 1]
        match = HEADING_ATTRS_RE.search(inline.content)
        if not match:
            continue
        attrs = _parse_attr_block(match.group(1))
        if attrs is None:
            continue
        inline.content = inline.content[: match.start()].rstrip()
        for key, value in attrs.items():
            token.attrSet(key, value)


def _heading_ids_rule(state) -> None:
    tokens = state.tokens
    for idx, token in enumerate(tokens):
        if token.type != "heading_open" or token.attrGet("id"):
            continue
        if idx + 1 >= len(tokens):
            continue
        slug = slugify(_inline_text(tokens[idx + 1]))
        if slug:
            token.attrSet("id", slug)


def build_parser() -> MarkdownIt:
    """CommonMark plus tables, strikethrough, footnotes, task lists and
    heading attributes."""
    md = MarkdownIt("commonmark", {"html": True})
    md.enable(["table", "strikethrough"])
    md.use(footnote_plugin)
    md.use(tasklists_plugin)
    md.core.ruler.before("inline", "heading_attrs", _heading_attrs_rule)
    md.core.ruler.after("inline", "heading_ids", _heading_ids_rule)
    return md


_md = build_parser()


def parse_tokens(markdown: str, env: Optional[dict] = None) -> list:
    return _md.parse(markdown, env if env is not None else {})


def markdown_to_html(markdown: str) -> str:
    """Render markdown to HTML. Identical input always gives identical output."""
    env: dict = {}
    tokens = _md.parse(markdown, env)
    return _md.renderer.render(tokens, _md.options, env)


def extract_headings(markdown: str, max_level: int = 6) -> List[Heading]:
    """Return the document outline, skipping headings deeper than ``max_level``."""
    tokens = parse_tokens(markdown)
    headings: List[Heading] = []
    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        level = int(token.tag[1:])
        if level > max_level or idx + 1 >= len(tokens):
            continue
        text = _inline_text(tokens[idx + 1])
        anchor = token.attrGet("id") or slugify(text)
        headings.append(Heading(level=level, text=text, anchor=str(anchor)))
    return headings
