"""Jinja2 environment for full pages, fragments and OOB partials."""

from pathlib import Path
from typing import Any, Dict, Optional

import jinja2

from htmx_docs.content.markdown_utils import slugify
from htmx_docs.content.text import truncate_text, truncate_words

TEMPLATES_DIR = Path(__file__).parent / "html"

PAGE_TEMPLATE = "docs/page.html"
FRAGMENT_TEMPLATE = "docs/fragment.html"


class TemplateRenderer:
    """
    Jinja2 environment over the built-in templates.

    Templates found in ``theme_dir`` take precedence, so a site can replace
    any single template (or add new ones referenced from front matter)
    without copying the whole set.
    """

    def __init__(self, theme_dir: Optional[Path] = None):
        loaders = []
        if theme_dir:
            loaders.append(jinja2.FileSystemLoader(str(theme_dir)))
        loaders.append(jinja2.FileSystemLoader(str(TEMPLATES_DIR)))

        self.env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            autoescape=jinja2.select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_filters()

    def _register_filters(self) -> None:
        self.env.filters["slugify"] = slugify
        self.env.filters["truncate_words"] = truncate_words
        self.env.filters["truncate_text"] = truncate_text

    def has_template(self, name: str) -> bool:
        try:
            self.env.get_template(name)
        except jinja2.TemplateNotFound:
            return False
        return True

    def render(self, name: str, context: Dict[str, Any]) -> str:
        """Render ``name`` with ``context``; errors propagate to the caller."""
        return self.env.get_template(name).render(context)
