"""
Chapter tree model, depth-first linearization and the path/URL mapping.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterable, Iterator, List, Optional, Union


@dataclass
class Chapter:
    """A node of the book tree.

    ``path`` is relative to the docs directory; a chapter without one is a
    draft (or a plain section heading) and never produces output.
    """

    name: str
    content: str = ""
    path: Optional[str] = None
    source_path: Optional[str] = None
    number: Optional[List[int]] = None
    sub_items: List["BookItem"] = field(default_factory=list)
    parent_names: List[str] = field(default_factory=list)

    @property
    def is_draft(self) -> bool:
        return self.path is None

    @property
    def dotted_number(self) -> Optional[str]:
        if not self.number:
            return None
        return ".".join(str(n) for n in self.number)


@dataclass(frozen=True)
class Separator:
    pass


@dataclass(frozen=True)
class PartTitle:
    title: str


BookItem = Union[Chapter, Separator, PartTitle]


@dataclass
class BookMetadata:
    title: Optional[str] = None
    description: Optional[str] = None
    language: str = "en"
    authors: List[str] = field(default_factory=list)


@dataclass
class Book:
    sections: List[BookItem] = field(default_factory=list)
    metadata: BookMetadata = field(default_factory=BookMetadata)

    def iter_chapters(self) -> Iterator[Chapter]:
        return iter_chapters(self.sections)


def iter_chapters(items: Iterable[BookItem]) -> Iterator[Chapter]:
    """Yield every chapter in document order, parents before children.

    Uses an explicit stack of iterators so deep trees never hit the
    recursion limit. Separators and part titles are skipped.
    """
    stack = [iter(items)]
    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
            continue
        if not isinstance(item, Chapter):
            continue
        if item.sub_items:
            stack.append(iter(item.sub_items))
        yield item


def _normalize(path) -> str:
    return str(path).replace("\\", "/")


def path_to_url(path) -> str:
    """Map a docs-relative source path to its public URL.

    ``README.md`` -> ``/``, ``guide/README.md`` -> ``/guide/``,
    ``guide/intro.md`` -> ``/guide/intro``.
    """
    route = str(PurePosixPath(_normalize(path)).with_suffix(""))
    if route == "README":
        return "/"
    if route.endswith("/README"):
        return f"/{route[: -len('/README')]}/"
    return f"/{route}"


def output_path(path, extension: str = ".html") -> str:
    """Output-relative artifact path: the chapter path with a new extension."""
    return str(PurePosixPath(_normalize(path)).with_suffix(extension))
