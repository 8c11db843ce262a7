"""
manifest.json: one entry per rendered page, keyed by public URL, for
servers that route requests and enforce the declared access policy.
"""

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from htmx_docs.htmx_render.errors import DuplicatePageError

MANIFEST_SCHEMA = "htmx-docs:manifest"
MANIFEST_VERSION = "1.0.0"


def compute_short_hash(content: bytes) -> str:
    """First 8 hex digits of the SHA-256 of ``content``."""
    return hashlib.sha256(content).hexdigest()[:8]


@dataclass(frozen=True)
class PageEntry:
    title: str
    source: str
    page_path: str
    fragment_path: str
    content_hash: str
    scope: Optional[str] = None
    authn: Optional[str] = None
    authz: Optional[List[str]] = None
    fallback: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "source": self.source,
            "page_path": self.page_path,
            "fragment_path": self.fragment_path,
        }
        for key in ("scope", "authn", "authz", "fallback"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["content_hash"] = self.content_hash
        return data


class Manifest:
    def __init__(self, generated_at: Optional[str] = None):
        self.schema = MANIFEST_SCHEMA
        self.version = MANIFEST_VERSION
        self.generated_at = generated_at or datetime.now(timezone.utc).isoformat()
        self.pages: Dict[str, PageEntry] = {}

    def __len__(self) -> int:
        return len(self.pages)

    def add_page(self, url_path: str, entry: PageEntry) -> None:
        existing = self.pages.get(url_path)
        if existing is not None:
            raise DuplicatePageError(url_path, existing.source, entry.source)
        self.pages[url_path] = entry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "$schema": self.schema,
            "version": self.version,
            "generated_at": self.generated_at,
            "pages": {url: entry.to_dict() for url, entry in self.pages.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
