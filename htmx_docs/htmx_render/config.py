"""
Per-pass configuration of the htmx renderer.

``HtmxConfig.from_dict`` validates a plain mapping (the plugin's MkDocs
config, or any other source) and raises ``ConfigError`` on anything it does
not understand, before a single chapter is processed.
"""

import enum
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from htmx_docs.htmx_render.errors import ConfigError
from htmx_docs.search.search_index import SearchIndexConfig


class OutputMode(enum.Enum):
    FULL = "full"
    FRAGMENTS = "fragments"
    BOTH = "both"

    @property
    def writes_pages(self) -> bool:
        return self is not OutputMode.FRAGMENTS

    @property
    def writes_fragments(self) -> bool:
        return self is not OutputMode.FULL


class SwapStrategy(enum.Enum):
    INNER_HTML = "innerHTML"
    OUTER_HTML = "outerHTML"
    BEFORE_BEGIN = "beforebegin"
    AFTER_BEGIN = "afterbegin"
    BEFORE_END = "beforeend"
    AFTER_END = "afterend"
    DELETE = "delete"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass
class NavigationConfig:
    breadcrumbs: bool = True
    toc: bool = True
    prev_next: bool = True
    collapsible_sidebar: bool = True


@dataclass
class SearchConfig:
    enabled: bool = True
    generate_index: bool = True
    include_body: bool = True
    heading_split_level: int = 3
    max_excerpt_length: Optional[int] = None
    include_auth: bool = True
    scopes: List[str] = field(default_factory=list)

    def index_config(self) -> SearchIndexConfig:
        return SearchIndexConfig(
            heading_split_level=self.heading_split_level,
            include_body=self.include_body,
            include_auth=self.include_auth,
            max_excerpt_length=self.max_excerpt_length,
        )


@dataclass
class HtmxConfig:
    output_dir: str = "htmx"
    output_mode: OutputMode = OutputMode.BOTH
    htmx_enabled: bool = True
    boost: bool = True
    target: str = "#content"
    swap_strategy: SwapStrategy = SwapStrategy.INNER_HTML
    push_url: bool = True
    generate_manifest: bool = True
    default_scope: Optional[str] = None
    theme_dir: Optional[str] = None
    minify_html: bool = False
    htmlmin_opts: Dict[str, Any] = field(default_factory=dict)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    @property
    def theme_path(self) -> Optional[Path]:
        return Path(self.theme_dir) if self.theme_dir else None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HtmxConfig":
        data = dict(data or {})
        navigation = _section(NavigationConfig, data.pop("navigation", None), "navigation")
        search = _section(SearchConfig, data.pop("search", None), "search")

        _reject_unknown(cls, data, "")
        values: Dict[str, Any] = {}
        for name, value in data.items():
            if value is None and name not in ("default_scope", "theme_dir"):
                continue
            if name == "output_mode":
                values[name] = _choice(OutputMode, value, name)
            elif name == "swap_strategy":
                values[name] = _choice(SwapStrategy, value, name)
            elif name == "htmlmin_opts":
                values[name] = _typed(value, dict, name)
            elif name in ("output_dir", "target", "default_scope", "theme_dir"):
                values[name] = _typed(value, str, name) if value is not None else None
            else:
                values[name] = _typed(value, bool, name)

        config = cls(navigation=navigation, search=search, **values)
        config.validate()
        return config

    def validate(self) -> None:
        out = Path(self.output_dir)
        if not self.output_dir or out.is_absolute() or ".." in out.parts:
            raise ConfigError(
                f"'output_dir' must be a directory inside the site directory, got {self.output_dir!r}"
            )
        if not 1 <= self.search.heading_split_level <= 6:
            raise ConfigError(
                f"'search.heading_split_level' must be between 1 and 6, got {self.search.heading_split_level}"
            )
        if self.search.max_excerpt_length is not None and self.search.max_excerpt_length < 1:
            raise ConfigError("'search.max_excerpt_length' must be a positive integer")
        if self.theme_dir and not Path(self.theme_dir).is_dir():
            raise ConfigError(f"'theme_dir' {self.theme_dir} is not a directory")


def _reject_unknown(cls, data: Mapping[str, Any], prefix: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ConfigError(f"Unknown option(s) {', '.join(prefix + k for k in unknown)}")


def _typed(value, expected, name: str):
    # bool is an int subclass
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"'{name}' must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(f"'{name}' must be of type {expected.__name__}, got {type(value).__name__}")
    return value


def _choice(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"'{name}' must be one of {allowed}, got {value!r}") from None


def _section(cls, data, name: str):
    if data is None:
        return cls()
    if isinstance(data, cls):
        return data
    if not isinstance(data, Mapping):
        raise ConfigError(f"'{name}' must be a mapping, got {type(data).__name__}")
    _reject_unknown(cls, data, f"{name}.")
    values: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data or data[f.name] is None:
            continue
        value = data[f.name]
        key = f"{name}.{f.name}"
        if f.name in ("heading_split_level", "max_excerpt_length"):
            values[f.name] = _typed(value, int, key)
        elif f.name == "scopes":
            if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
                raise ConfigError(f"'{key}' must be a list of strings")
            values[f.name] = list(value)
        else:
            values[f.name] = _typed(value, bool, key)
    return cls(**values)
