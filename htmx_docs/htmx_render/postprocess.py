"""
Post-processing of rendered HTML: HTMX attribute injection and minification.
"""

import logging
from html import escape
from typing import Dict, Optional, Tuple, Union

import htmlmin
from bs4 import BeautifulSoup

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

NAV_LINK_CLASS = "nav-link"

# Defaults for `htmlmin.minify`; user options are merged over these keys only.
HTMLMIN_DEFAULTS: Dict[str, Union[bool, str, Tuple[str, ...]]] = {
    "remove_comments": False,
    "remove_empty_space": False,
    "remove_all_empty_space": False,
    "reduce_empty_attributes": True,
    "reduce_boolean_attributes": False,
    "remove_optional_attribute_quotes": False,
    "convert_charrefs": True,
    "keep_pre": False,
    "pre_tags": ("pre", "textarea"),
    "pre_attr": "pre",
}


def inject_htmx_attrs(html: str, config) -> str:
    """Add the page-level HTMX attributes to a full page.

    With ``boost`` the ``<body>`` gets ``hx-boost``, ``hx-target`` and
    ``hx-swap``; with ``push_url`` every ``a.nav-link`` gets ``hx-push-url``.
    A page without a ``<body>`` only gets the link attributes.
    """
    if not (config.boost or config.push_url):
        return html

    soup = BeautifulSoup(html, "html.parser")

    if config.boost:
        body = soup.find("body")
        if body is not None:
            body["hx-boost"] = "true"
            body["hx-target"] = config.target
            body["hx-swap"] = str(config.swap_strategy)

    if config.push_url:
        for link in soup.select(f"a.{NAV_LINK_CLASS}"):
            link["hx-push-url"] = "true"

    if config.navigation.collapsible_sidebar:
        sidebar = soup.find("nav", id="sidebar")
        if sidebar is not None:
            sidebar["data-collapsible"] = "true"

    return str(soup)


def nav_link_attrs(target: str, swap, push_url: bool) -> str:
    """Attribute string for prev/next links; scrolls to the top after the swap."""
    attrs = (
        f'hx-boost="true" hx-target="{escape(target)}" '
        f'hx-swap="{swap} show:window:top"'
    )
    if push_url:
        attrs += ' hx-push-url="true"'
    return attrs


def preload_hint(path: Optional[str]) -> str:
    """``<link rel="prefetch">`` for the page a reader is likely to open next."""
    if not path:
        return ""
    return f'<link rel="prefetch" href="{escape(path)}" as="document">'


def minify_html(html: str, opts: Optional[Dict] = None) -> str:
    """Minify HTML with htmlmin, merging ``opts`` over the defaults."""
    output_opts = dict(HTMLMIN_DEFAULTS)
    for key, value in (opts or {}).items():
        if key in output_opts:
            output_opts[key] = value
        else:
            logger.warning("htmlmin option '%s' not recognized", key)
    return htmlmin.minify(html, **output_opts)
