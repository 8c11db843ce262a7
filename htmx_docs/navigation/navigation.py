"""
Sidebar and breadcrumb navigation, plus the out-of-band (OOB) swaps that
are appended to fragment responses so one HTMX request can refresh the
sidebar and breadcrumb next to the main content.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from htmx_docs.book.chapters import Chapter, path_to_url

log = logging.getLogger(f"mkdocs.plugins.{__name__}")

SIDEBAR_TEMPLATE = "partials/sidebar-oob.html"
BREADCRUMB_TEMPLATE = "partials/breadcrumb.html"


@dataclass
class NavItem:
    title: str
    path: str
    is_active: bool = False
    children: List["NavItem"] = field(default_factory=list)
    is_expanded: bool = False
    number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Breadcrumb:
    title: str
    path: str
    is_current: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OobUpdates:
    sidebar: Optional[str] = None
    breadcrumb: Optional[str] = None

    def to_html(self) -> str:
        return (self.sidebar or "") + (self.breadcrumb or "")

    def is_empty(self) -> bool:
        return self.sidebar is None and self.breadcrumb is None


def build_nav_items(
    chapters: Iterable[Chapter], active_path: str, hidden_paths: Iterable[str] = ()
) -> List[NavItem]:
    """One flat sidebar entry per non-draft chapter, in document order.

    An item is expanded when it is active or the active URL lies below it,
    which opens ancestor sections in the flat representation.
    """
    hidden = set(hidden_paths)
    items = []
    for chapter in chapters:
        if chapter.path is None:
            continue
        url = path_to_url(chapter.path)
        if url in hidden:
            continue
        is_active = url == active_path
        items.append(
            NavItem(
                title=chapter.name,
                path=url,
                is_active=is_active,
                is_expanded=is_active or active_path.startswith(url),
                number=chapter.dotted_number,
            )
        )
    return items


def build_breadcrumbs(chapter: Chapter, active_path: str) -> List[Breadcrumb]:
    """Home, then the chapter's ancestors, then the chapter itself.

    Ancestor paths are derived from their names, not their real URLs, so
    they only resolve when a section's URL happens to match its title.
    """
    crumbs = [Breadcrumb(title="Home", path="/", is_current=active_path == "/")]
    for parent in chapter.parent_names:
        crumbs.append(
            Breadcrumb(title=parent, path="/" + parent.lower().replace(" ", "-"))
        )
    if active_path != "/":
        crumbs.append(Breadcrumb(title=chapter.name, path=active_path, is_current=True))
    return crumbs


def _render_optional(templates, name: str, context: Dict[str, Any]) -> Optional[str]:
    try:
        return templates.render(name, context)
    except Exception as e:
        log.debug(f"[htmx] OOB template {name} skipped: {e}")
        return None


def render_oob_updates(
    templates,
    chapter: Chapter,
    chapters: List[Chapter],
    active_path: str,
    hidden_paths: Iterable[str] = (),
    breadcrumbs: bool = True,
) -> OobUpdates:
    """Render the sidebar and breadcrumb swaps for one chapter.

    Either part is left out when its template is missing or fails to render.
    """
    updates = OobUpdates()

    items = build_nav_items(chapters, active_path, hidden_paths)
    context: Dict[str, Any] = {
        "sidebar": {"items": [item.to_dict() for item in items], "active_path": active_path},
        "active_path": active_path,
    }
    sidebar_html = _render_optional(templates, SIDEBAR_TEMPLATE, context)
    if sidebar_html is not None:
        updates.sidebar = f'<nav id="sidebar" hx-swap-oob="true">{sidebar_html}</nav>'

    if breadcrumbs:
        crumbs = build_breadcrumbs(chapter, active_path)
        context["breadcrumb"] = {"crumbs": [crumb.to_dict() for crumb in crumbs]}
        breadcrumb_html = _render_optional(templates, BREADCRUMB_TEMPLATE, context)
        if breadcrumb_html is not None:
            updates.breadcrumb = (
                '<nav id="breadcrumb" aria-label="Breadcrumb" hx-swap-oob="true">'
                f"{breadcrumb_html}</nav>"
            )

    return updates
