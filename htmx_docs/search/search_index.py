"""
search-index.json: one searchable document per page, with optional access
metadata so a search endpoint can hide results the caller may not see.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from htmx_docs.content.markdown_utils import Heading
from htmx_docs.content.text import strip_markdown, truncate_text
from htmx_docs.frontmatter.frontmatter import AuthnLevel, Frontmatter

SEARCH_INDEX_SCHEMA = "htmx-docs:search-index"
SEARCH_INDEX_VERSION = "1.0.0"


@dataclass(frozen=True)
class SearchIndexConfig:
    heading_split_level: int = 3
    include_body: bool = True
    include_auth: bool = True
    max_excerpt_length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "heading_split_level": self.heading_split_level,
            "include_body": self.include_body,
            "include_auth": self.include_auth,
        }
        if self.max_excerpt_length is not None:
            data["max_excerpt_length"] = self.max_excerpt_length
        return data


@dataclass(frozen=True)
class AuthRequirement:
    authn: Optional[AuthnLevel] = None
    authz: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.authn is not None:
            data["authn"] = str(self.authn)
        if self.authz:
            data["authz"] = list(self.authz)
        return data


@dataclass(frozen=True)
class SearchDocument:
    path: str
    title: str
    body: Optional[str] = None
    headings: Tuple[Heading, ...] = ()
    scope: Optional[str] = None
    breadcrumbs: Tuple[str, ...] = ()
    auth: Optional[AuthRequirement] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "title": self.title}
        if self.body is not None:
            data["body"] = self.body
        data["headings"] = [heading.to_dict() for heading in self.headings]
        if self.scope is not None:
            data["scope"] = self.scope
        data["breadcrumbs"] = list(self.breadcrumbs)
        if self.auth is not None:
            data["auth"] = self.auth.to_dict()
        return data


def document_for_page(
    path: str,
    title: str,
    markdown: str,
    headings: List[Heading],
    frontmatter: Frontmatter,
    config: SearchIndexConfig,
    scope: Optional[str] = None,
    breadcrumbs: Optional[List[str]] = None,
) -> SearchDocument:
    """Build the search document for one page from its markdown body."""
    body = None
    if config.include_body:
        body = strip_markdown(markdown)
        if config.max_excerpt_length is not None:
            body = truncate_text(body, config.max_excerpt_length)

    auth = None
    if config.include_auth and frontmatter.has_auth:
        auth = AuthRequirement(
            authn=frontmatter.authn,
            authz=tuple(frontmatter.authz) if frontmatter.authz is not None else None,
        )

    return SearchDocument(
        path=path,
        title=title,
        body=body,
        headings=tuple(h for h in headings if h.level <= config.heading_split_level),
        scope=scope if scope is not None else frontmatter.scope,
        breadcrumbs=tuple(breadcrumbs or ()),
        auth=auth,
    )


class SearchIndex:
    def __init__(
        self,
        config: Optional[SearchIndexConfig] = None,
        documents: Optional[List[SearchDocument]] = None,
        generated_at: Optional[str] = None,
    ):
        self.schema = SEARCH_INDEX_SCHEMA
        self.version = SEARCH_INDEX_VERSION
        self.config = config or SearchIndexConfig()
        self.documents: List[SearchDocument] = list(documents or [])
        self.generated_at = generated_at or datetime.now(timezone.utc).isoformat()

    def __len__(self) -> int:
        return len(self.documents)

    def add_document(self, document: SearchDocument) -> None:
        self.documents.append(document)

    def _derive(self, documents: List[SearchDocument]) -> "SearchIndex":
        return SearchIndex(self.config, documents, generated_at=self.generated_at)

    def filter_by_scope(self, scope: str) -> "SearchIndex":
        """New index with the scope-less documents plus those scoped exactly ``scope``."""
        return self._derive([d for d in self.documents if d.scope is None or d.scope == scope])

    def filter_by_auth(self, level) -> "SearchIndex":
        """New index with the documents a caller at ``level`` may see.

        Documents without auth metadata, or with roles but no level, always
        pass; role checks are left to the server.
        """
        level = AuthnLevel.parse(level)
        kept = [
            d for d in self.documents
            if d.auth is None or d.auth.authn is None or d.auth.authn <= level
        ]
        return self._derive(kept)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "$schema": self.schema,
            "version": self.version,
            "generated_at": self.generated_at,
            "config": self.config.to_dict(),
            "documents": [doc.to_dict() for doc in self.documents],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
