"""
Turns a ``Book`` into the htmx artifact tree::

    <output_dir>/
        pages/<chapter>.html        full documents
        fragments/<chapter>.html    main content + out-of-band nav swaps
        manifest.json
        search-index.json
        search-index.<scope>.json

One ``BookRenderer`` handles one pass; nothing is shared between passes.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from htmx_docs.book.chapters import Book, Chapter, output_path, path_to_url
from htmx_docs.content.markdown_utils import Heading, extract_headings, markdown_to_html
from htmx_docs.frontmatter.frontmatter import Frontmatter, parse_frontmatter
from htmx_docs.htmx_render.config import HtmxConfig
from htmx_docs.htmx_render.errors import OutputError, TemplateError
from htmx_docs.htmx_render.postprocess import (
    inject_htmx_attrs,
    minify_html,
    nav_link_attrs,
    preload_hint,
)
from htmx_docs.manifest.manifest import Manifest, PageEntry, compute_short_hash
from htmx_docs.navigation.navigation import (
    build_breadcrumbs,
    build_nav_items,
    render_oob_updates,
)
from htmx_docs.search.search_index import SearchIndex, document_for_page
from htmx_docs.templates.templates import FRAGMENT_TEMPLATE, PAGE_TEMPLATE, TemplateRenderer

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

PAGES_DIR = "pages"
FRAGMENTS_DIR = "fragments"
MANIFEST_FILE = "manifest.json"
SEARCH_INDEX_FILE = "search-index.json"


@dataclass
class RenderedChapter:
    chapter: Chapter
    frontmatter: Frontmatter
    url: str
    output_path: str
    page: str
    fragment: str
    markdown: str = ""
    headings: List[Heading] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.frontmatter.title or self.chapter.name

    @property
    def content_hash(self) -> str:
        return compute_short_hash(self.page.encode("utf-8"))


@dataclass
class RenderResult:
    manifest: Manifest
    search_index: Optional[SearchIndex]
    count: int
    written: List[Path] = field(default_factory=list)


class BookRenderer:
    def __init__(
        self,
        book: Book,
        config: HtmxConfig,
        output_dir,
        templates: Optional[TemplateRenderer] = None,
    ):
        self.book = book
        self.config = config
        self.output_dir = Path(output_dir)
        self.templates = templates or TemplateRenderer(config.theme_path)
        self.link_attrs = (
            nav_link_attrs(config.target, config.swap_strategy, config.push_url)
            if config.htmx_enabled
            else ""
        )

    # -------------------------------
    # Pass
    # -------------------------------

    def render(self) -> RenderResult:
        """Render every chapter and write the artifact tree.

        Stops at the first error; files written for earlier chapters stay
        on disk.
        """
        chapters = list(self.book.iter_chapters())
        parsed = self.parse_all(chapters)
        hidden = {
            path_to_url(chapter.path)
            for chapter, entry in zip(chapters, parsed)
            if entry is not None and entry[0].hidden
        }

        manifest = Manifest()
        search_index = None
        if self.config.search.enabled:
            search_index = SearchIndex(self.config.search.index_config())
        result = RenderResult(manifest=manifest, search_index=search_index, count=0)

        logger.info(f"[htmx] Rendering {sum(p is not None for p in parsed)} chapters to {self.output_dir}")

        for idx, chapter in enumerate(chapters):
            if parsed[idx] is None:
                logger.debug(f"[htmx] Skipping draft chapter: {chapter.name}")
                continue
            prev_chapter = chapters[idx - 1] if idx > 0 else None
            next_chapter = chapters[idx + 1] if idx + 1 < len(chapters) else None

            rendered = self.render_chapter(
                chapter, prev_chapter, next_chapter, chapters, parsed[idx], hidden
            )
            manifest.add_page(rendered.url, self.page_entry(rendered))
            result.written.extend(self.write_chapter(rendered))
            result.count += 1

            if search_index is not None and not rendered.frontmatter.no_search:
                search_index.add_document(self.search_document(rendered))

        if self.config.generate_manifest:
            result.written.append(self._write(MANIFEST_FILE, manifest.to_json()))
            logger.info(f"[htmx] Wrote {MANIFEST_FILE} with {len(manifest)} pages")

        if search_index is not None and self.config.search.generate_index:
            result.written.append(self._write(SEARCH_INDEX_FILE, search_index.to_json()))
            for scope in self.config.search.scopes:
                scoped = search_index.filter_by_scope(scope)
                result.written.append(self._write(f"search-index.{scope}.json", scoped.to_json()))
            logger.info(f"[htmx] Wrote {SEARCH_INDEX_FILE} with {len(search_index)} documents")

        return result

    def parse_all(self, chapters: List[Chapter]) -> List[Optional[Tuple[Frontmatter, str]]]:
        """Front matter and body of every chapter, ``None`` for drafts."""
        return [
            None if chapter.is_draft else parse_frontmatter(chapter.content, chapter.path)
            for chapter in chapters
        ]

    # -------------------------------
    # Chapters
    # -------------------------------

    def render_chapter(
        self,
        chapter: Chapter,
        prev_chapter: Optional[Chapter],
        next_chapter: Optional[Chapter],
        chapters: List[Chapter],
        parsed: Optional[Tuple[Frontmatter, str]] = None,
        hidden_paths=(),
    ) -> RenderedChapter:
        """Render the full page and the fragment of one non-draft chapter."""
        frontmatter, body = parsed or parse_frontmatter(chapter.content, chapter.path)
        url = path_to_url(chapter.path)
        headings = extract_headings(body)
        logger.debug(f"[htmx] Rendering {chapter.path} as {url}")

        context = self.build_context(
            chapter, frontmatter, markdown_to_html(body), url, headings,
            prev_chapter, next_chapter, chapters, hidden_paths,
        )

        page_template = frontmatter.template or PAGE_TEMPLATE
        page = self._render_template(page_template, context, chapter)
        fragment = self._render_template(FRAGMENT_TEMPLATE, context, chapter)

        oob = render_oob_updates(
            self.templates, chapter, chapters, url, hidden_paths,
            breadcrumbs=self.config.navigation.breadcrumbs,
        )
        if not oob.is_empty():
            fragment += oob.to_html()

        if self.config.htmx_enabled:
            page = inject_htmx_attrs(page, self.config)
        if self.config.minify_html:
            page = minify_html(page, self.config.htmlmin_opts)
            fragment = minify_html(fragment, self.config.htmlmin_opts)

        return RenderedChapter(
            chapter=chapter,
            frontmatter=frontmatter,
            url=url,
            output_path=output_path(chapter.path),
            page=page,
            fragment=fragment,
            markdown=body,
            headings=headings,
        )

    def build_context(
        self,
        chapter: Chapter,
        frontmatter: Frontmatter,
        html: str,
        url: str,
        headings: List[Heading],
        prev_chapter: Optional[Chapter],
        next_chapter: Optional[Chapter],
        chapters: List[Chapter],
        hidden_paths=(),
    ) -> Dict[str, Any]:
        scope = self.scope_for(frontmatter)
        out = output_path(chapter.path)
        context: Dict[str, Any] = {
            "page": {
                "title": frontmatter.title or chapter.name,
                "description": frontmatter.description,
                "content": html,
                "path": url,
                "source_path": chapter.source_path,
                "scopes": [scope] if scope else [],
                "headings": [heading.to_dict() for heading in headings],
                "meta": {"description": frontmatter.description, **frontmatter.extra},
                "htmx": {"lazy": False, "fragment": f"{FRAGMENTS_DIR}/{out}"},
            },
            "config": {
                "book": asdict(self.book.metadata),
                "htmx": {
                    "enabled": self.config.htmx_enabled,
                    "boost": self.config.boost,
                    "target": self.config.target,
                    "swap_strategy": str(self.config.swap_strategy),
                    "push_url": self.config.push_url,
                    "navigation": asdict(self.config.navigation),
                },
            },
            "prev_page": None,
            "next_page": None,
            "htmx_link_attrs": self.link_attrs,
            "preload": "",
        }

        if self.config.navigation.prev_next:
            context["prev_page"] = _neighbour(prev_chapter)
            context["next_page"] = _neighbour(next_chapter)
            if context["next_page"] and self.config.htmx_enabled:
                context["preload"] = preload_hint(context["next_page"]["path"])

        items = [item.to_dict() for item in build_nav_items(chapters, url, hidden_paths)]
        context["sidebar"] = {"items": items, "active_path": url}
        context["navigation"] = {"items": items}
        context["breadcrumb"] = None
        if self.config.navigation.breadcrumbs:
            crumbs = build_breadcrumbs(chapter, url)
            context["breadcrumb"] = {"crumbs": [crumb.to_dict() for crumb in crumbs]}
        return context

    def _render_template(self, name: str, context: Dict[str, Any], chapter: Chapter) -> str:
        try:
            return self.templates.render(name, context)
        except Exception as e:
            raise TemplateError(name, chapter.path, e) from e

    def scope_for(self, frontmatter: Frontmatter) -> Optional[str]:
        return frontmatter.scope if frontmatter.scope is not None else self.config.default_scope

    # -------------------------------
    # Records
    # -------------------------------

    def page_entry(self, rendered: RenderedChapter) -> PageEntry:
        fm = rendered.frontmatter
        return PageEntry(
            title=rendered.title,
            source=rendered.chapter.source_path or rendered.chapter.path,
            page_path=f"{PAGES_DIR}/{rendered.output_path}",
            fragment_path=f"{FRAGMENTS_DIR}/{rendered.output_path}",
            content_hash=rendered.content_hash,
            scope=self.scope_for(fm),
            authn=str(fm.authn) if fm.authn is not None else None,
            authz=list(fm.authz) if fm.authz is not None else None,
            fallback=fm.fallback,
        )

    def search_document(self, rendered: RenderedChapter):
        return document_for_page(
            path=rendered.url,
            title=rendered.title,
            markdown=rendered.markdown,
            headings=rendered.headings,
            frontmatter=rendered.frontmatter,
            config=self.config.search.index_config(),
            scope=self.scope_for(rendered.frontmatter),
            breadcrumbs=[*rendered.chapter.parent_names, rendered.title],
        )

    # -------------------------------
    # Output
    # -------------------------------

    def write_chapter(self, rendered: RenderedChapter) -> List[Path]:
        written = []
        if self.config.output_mode.writes_pages:
            written.append(self._write(f"{PAGES_DIR}/{rendered.output_path}", rendered.page))
        if self.config.output_mode.writes_fragments:
            written.append(self._write(f"{FRAGMENTS_DIR}/{rendered.output_path}", rendered.fragment))
        return written

    def _write(self, relative: str, text: str) -> Path:
        path = self.output_dir / relative
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputError(path, e) from e
        logger.debug(f"[htmx] Wrote {path}")
        return path


def _neighbour(chapter: Optional[Chapter]) -> Optional[Dict[str, str]]:
    if chapter is None or chapter.is_draft:
        return None
    return {"title": chapter.name, "path": path_to_url(chapter.path)}
