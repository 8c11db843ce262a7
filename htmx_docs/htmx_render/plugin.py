"""
MkDocs plugin that renders the site a second time as an htmx artifact tree
(full pages, swappable fragments, manifest.json, search-index.json) under
``site_dir/<output_dir>``.
"""

import logging
from pathlib import Path
from typing import List, Optional

import mkdocs
from mkdocs.config import config_options as c
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin
from mkdocs.structure.nav import Navigation, Section
from mkdocs.structure.pages import Page
from packaging import version

from htmx_docs.book.chapters import Book, BookMetadata, Chapter
from htmx_docs.htmx_render.config import HtmxConfig
from htmx_docs.htmx_render.errors import ConfigError, OutputError
from htmx_docs.htmx_render.renderer import BookRenderer, RenderResult

logger = logging.getLogger(f"mkdocs.plugins.{__name__}")

MIN_MKDOCS_VERSION = "1.4"


class HtmxRenderPlugin(BasePlugin):
    """Render the MkDocs navigation tree as an htmx documentation book.

    Options mirror ``HtmxConfig``; ``navigation`` and ``search`` are nested
    mappings validated by ``HtmxConfig.from_dict``.
    """

    config_scheme = (
        ('output_dir',        c.Type(str, default="htmx")),
        ('output_mode',       c.Type(str, default="both")),
        ('htmx_enabled',      c.Type(bool, default=True)),
        ('boost',             c.Type(bool, default=True)),
        ('target',            c.Type(str, default="#content")),
        ('swap_strategy',     c.Type(str, default="innerHTML")),
        ('push_url',          c.Type(bool, default=True)),
        ('generate_manifest', c.Type(bool, default=True)),
        ('default_scope',     c.Optional(c.Type(str))),
        ('theme_dir',         c.Optional(c.Type(str))),
        ('minify_html',       c.Type(bool, default=False)),
        ('htmlmin_opts',      c.Type(dict, default={})),
        ('navigation',        c.Type(dict, default={})),
        ('search',            c.Type(dict, default={})),
    )

    def __init__(self):
        super().__init__()
        self.htmx_config: Optional[HtmxConfig] = None
        self.nav: Optional[Navigation] = None
        self.result: Optional[RenderResult] = None

    def on_config(self, config: MkDocsConfig, **kwargs):
        if version.parse(mkdocs.__version__) < version.parse(MIN_MKDOCS_VERSION):
            raise ConfigError(
                f"[htmx] MkDocs {mkdocs.__version__} is not supported, requires {MIN_MKDOCS_VERSION}+"
            )

        options = {key: self.config.get(key) for key, _ in self.config_scheme}
        # theme_dir is relative to mkdocs.yml, like MkDocs' own custom_dir
        theme_dir = options.get("theme_dir")
        config_file = config.get("config_file_path")
        if theme_dir and not Path(theme_dir).is_absolute() and config_file:
            options["theme_dir"] = str(Path(config_file).parent / theme_dir)

        self.htmx_config = HtmxConfig.from_dict(options)
        logger.debug(f"[htmx] Loaded config: {self.htmx_config}")
        return config

    def on_nav(self, nav: Navigation, *, config: MkDocsConfig, files):
        self.nav = nav
        return nav

    def on_post_build(self, *, config: MkDocsConfig) -> None:
        if self.nav is None or self.htmx_config is None:
            return

        book = Book(sections=build_chapters(self.nav.items), metadata=book_metadata(config))
        site_dir = Path(config["site_dir"]).resolve()
        output_dir = (site_dir / self.htmx_config.output_dir).resolve()
        try:
            output_dir.relative_to(site_dir)
        except ValueError as e:
            raise OutputError(output_dir, "resolves outside the site directory") from e

        self.result = BookRenderer(book, self.htmx_config, output_dir).render()
        logger.info(f"[htmx] Rendered {self.result.count} chapters to {output_dir}")


def book_metadata(config) -> BookMetadata:
    theme = config.get("theme")
    language = "en"
    if theme is not None:
        language = theme.get("language") or theme.get("locale") or "en"
    author = config.get("site_author")
    return BookMetadata(
        title=config.get("site_name"),
        description=config.get("site_description"),
        language=str(language),
        authors=[author] if author else [],
    )


def build_chapters(items, parents: Optional[List[str]] = None, prefix: Optional[List[int]] = None) -> List[Chapter]:
    """Chapter tree for the MkDocs navigation.

    Sections become chapters without a path, so they show up in
    breadcrumbs and numbering but never produce output. External links are
    dropped.
    """
    parents = parents or []
    prefix = prefix or []
    chapters = []
    for item in items:
        if isinstance(item, Section):
            number = prefix + [len(chapters) + 1]
            chapters.append(
                Chapter(
                    name=item.title,
                    number=number,
                    parent_names=list(parents),
                    sub_items=build_chapters(item.children, parents + [item.title], number),
                )
            )
        elif isinstance(item, Page):
            src = item.file.src_path.replace("\\", "/")
            chapters.append(
                Chapter(
                    name=item.title or Path(src).stem,
                    content=Path(item.file.abs_src_path).read_text(encoding="utf-8"),
                    path=src,
                    source_path=src,
                    number=prefix + [len(chapters) + 1],
                    parent_names=list(parents),
                )
            )
    return chapters
