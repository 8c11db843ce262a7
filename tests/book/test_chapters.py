import pytest

from htmx_docs.book.chapters import (
    Book,
    Chapter,
    PartTitle,
    Separator,
    iter_chapters,
    output_path,
    path_to_url,
)


def make_book():
    deep = Chapter("Deep", path="guide/advanced/deep.md", number=[2, 1, 1])
    advanced = Chapter("Advanced", path="guide/advanced/README.md", number=[2, 1], sub_items=[deep])
    guide = Chapter(
        "Guide",
        path="guide/README.md",
        number=[2],
        sub_items=[advanced, Separator(), Chapter("Draft")],
    )
    return Book(
        sections=[
            PartTitle("Getting started"),
            Chapter("Intro", path="README.md", number=[1]),
            Separator(),
            guide,
            Chapter("Appendix", path="appendix.md"),
        ]
    )


class TestIterChapters:
    def test_depth_first_order(self):
        """Test: Parents come before their children; separators and part titles are skipped."""
        names = [c.name for c in make_book().iter_chapters()]
        assert names == ["Intro", "Guide", "Advanced", "Deep", "Draft", "Appendix"]

    def test_each_chapter_once(self):
        """Test: No chapter is yielded twice."""
        chapters = list(make_book().iter_chapters())
        assert len(chapters) == len({id(c) for c in chapters})

    def test_restartable(self):
        """Test: Each call starts a fresh traversal."""
        book = make_book()
        assert [c.name for c in book.iter_chapters()] == [c.name for c in book.iter_chapters()]

    def test_lazy(self):
        """Test: Chapters are yielded one at a time."""
        gen = iter_chapters(make_book().sections)
        assert next(gen).name == "Intro"
        assert next(gen).name == "Guide"

    def test_empty(self):
        """Test: An empty book yields nothing."""
        assert list(iter_chapters([])) == []

    def test_deep_tree_does_not_recurse(self):
        """Test: Very deep trees do not hit the recursion limit."""
        root = Chapter("0", path="0.md")
        node = root
        for i in range(1, 5000):
            child = Chapter(str(i), path=f"{i}.md")
            node.sub_items.append(child)
            node = child
        assert sum(1 for _ in iter_chapters([root])) == 5000


class TestChapter:
    def test_draft(self):
        """Test: A chapter without a path is a draft."""
        assert Chapter("Draft").is_draft
        assert not Chapter("A", path="a.md").is_draft

    def test_dotted_number(self):
        """Test: Section numbers are joined with dots."""
        assert Chapter("A", number=[1, 2, 3]).dotted_number == "1.2.3"
        assert Chapter("A").dotted_number is None


class TestPathToUrl:
    @pytest.mark.parametrize(
        "path, url",
        [
            ("README.md", "/"),
            ("guide/README.md", "/guide/"),
            ("guide/intro.md", "/guide/intro"),
            ("chapter1.md", "/chapter1"),
            ("guide\\windows.md", "/guide/windows"),
            ("a/b/README.md", "/a/b/"),
        ],
    )
    def test_mapping(self, path, url):
        """Test: Source paths map to clean URLs."""
        assert path_to_url(path) == url

    def test_injective_over_chapter_set(self):
        """Test: Distinct chapters get distinct URLs."""
        paths = [c.path for c in make_book().iter_chapters() if c.path]
        urls = [path_to_url(p) for p in paths]
        assert len(set(urls)) == len(paths)


class TestOutputPath:
    def test_html_extension(self):
        """Test: Output files use the .html extension with forward slashes."""
        assert output_path("guide/intro.md") == "guide/intro.html"
        assert output_path("guide\\README.md") == "guide/README.html"
