"""
Plain-text helpers used by the search index and the template filters.
"""

from htmx_docs.content.markdown_utils import parse_tokens

ELLIPSIS = "..."

# Block tokens whose whole subtree is dropped from the plain text
SKIP_BLOCKS = ("fence", "code_block", "html_block")
# Inline tokens dropped from the plain text
SKIP_INLINE = ("code_inline", "image", "html_inline")
BREAK_INLINE = ("softbreak", "hardbreak")


def strip_markdown(markdown: str) -> str:
    """Convert markdown to a single line of prose for indexing.

    Code (blocks and inline), images and raw HTML are omitted, link text is
    kept and link targets are dropped.
    """
    parts = []
    for token in parse_tokens(markdown):
        if token.type in SKIP_BLOCKS:
            continue
        if token.type == "inline":
            for child in token.children or []:
                if child.type in SKIP_INLINE:
                    continue
                if child.type in BREAK_INLINE:
                    parts.append(" ")
                elif child.type in ("text", "text_special"):
                    parts.append(child.content)
            continue
        if token.nesting == -1:
            # paragraph, heading, cell and list item boundaries
            parts.append("\n")
    return " ".join("".join(parts).split())


def truncate_text(text: str, max_len: int) -> str:
    """Shorten ``text`` to at most ``max_len`` characters at a word boundary.

    The ellipsis marker is appended whenever text was cut; without a space
    before the cut the text is cut hard at ``max_len``.
    """
    if len(text) <= max_len:
        return text
    cut = text[:max_len]
    space = cut.rfind(" ")
    if space != -1:
        cut = cut[:space]
    return f"{cut}{ELLIPSIS}"


def truncate_words(text: str, count: int = 50) -> str:
    words = text.split()
    if len(words) <= count:
        return text
    return " ".join(words[:count]) + ELLIPSIS
