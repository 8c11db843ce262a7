"""
Per-page front matter: access policy, scope and display overrides read from
a leading YAML block.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml

from htmx_docs.htmx_render.errors import InvalidFrontmatter

log = logging.getLogger(f"mkdocs.plugins.{__name__}")

FM_DELIMITER = "---"


class AuthnLevel(enum.Enum):
    """Required authentication level, ordered by declaration:
    ``PUBLIC < AUTHENTICATED < VERIFIED``."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    VERIFIED = "verified"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other):
        if not isinstance(other, AuthnLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, AuthnLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, AuthnLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, AuthnLevel):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value) -> "AuthnLevel":
        """Accept an ``AuthnLevel`` or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        allowed = ", ".join(level.value for level in cls)
        raise ValueError(f"unknown authentication level {value!r} (expected one of: {allowed})")


@dataclass
class Frontmatter:
    """Per-page policy and metadata. The default is fully public and
    included everywhere."""

    title: Optional[str] = None
    description: Optional[str] = None
    scope: Optional[str] = None
    authn: Optional[AuthnLevel] = None
    authz: Optional[List[str]] = None
    fallback: Optional[str] = None
    template: Optional[str] = None
    no_search: bool = False
    hidden: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_auth(self) -> bool:
        return self.authn is not None or bool(self.authz)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "Frontmatter":
        """Build from a parsed YAML mapping; raises ``ValueError`` on a
        structurally invalid field."""
        fm = cls()
        for key in ("title", "description", "scope", "fallback", "template"):
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string, got {type(value).__name__}")
            setattr(fm, key, value)

        if data.get("authn") is not None:
            fm.authn = AuthnLevel.parse(data["authn"])

        roles = data.get("authz")
        if roles is not None:
            if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
                raise ValueError("'authz' must be a list of role names")
            fm.authz = list(roles)

        for key in ("no_search", "hidden"):
            value = data.get(key, False)
            if value is None:
                continue
            if not isinstance(value, bool):
                raise ValueError(f"'{key}' must be true or false, got {value!r}")
            setattr(fm, key, value)

        known = {
            "title", "description", "scope", "authn", "authz",
            "fallback", "template", "no_search", "hidden",
        }
        fm.extra = {k: v for k, v in data.items() if k not in known}
        return fm


def split_front_matter(source_text: str) -> Tuple[Optional[str], str]:
    """
    Return (yaml_text, body_text). ``yaml_text`` is None when the text does
    not open with the delimiter or the block is never closed; the body is
    then the whole input.
    """
    if not source_text.startswith(FM_DELIMITER):
        return None, source_text
    rest = source_text[len(FM_DELIMITER):]
    end = rest.find("\n" + FM_DELIMITER)
    if end == -1:
        return None, source_text
    yaml_text = rest[:end]
    body = rest[end + len(FM_DELIMITER) + 1:].lstrip()
    return yaml_text, body


def parse_frontmatter(content: str, path) -> Tuple[Frontmatter, str]:
    """Split and parse the leading front matter block of a chapter.

    Raises ``InvalidFrontmatter`` when the block exists but is not a valid
    YAML mapping of the expected fields.
    """
    yaml_text, body = split_front_matter(content)
    if yaml_text is None:
        if content.startswith(FM_DELIMITER):
            log.debug(f"[htmx] {path}: unterminated front matter, treating as content")
        return Frontmatter(), body

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        raise InvalidFrontmatter(path, exc) from exc

    if data is None:
        return Frontmatter(), body
    if not isinstance(data, dict):
        raise InvalidFrontmatter(path, f"expected a mapping, got {type(data).__name__}")

    try:
        fm = Frontmatter.from_mapping(data)
    except ValueError as exc:
        raise InvalidFrontmatter(path, exc) from exc

    if fm.extra:
        log.debug(f"[htmx] {path}: ignoring front matter keys {list(fm.extra)}")
    return fm, body
