import pytest

from htmx_docs.content.markdown_utils import (
    Heading,
    extract_headings,
    markdown_to_html,
    slugify,
)


class TestSlugify:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Hello World", "hello-world"),
            ("API & REST: A Guide", "api-rest-a-guide"),
            ("  Multiple   Spaces  ", "multiple-spaces"),
            ("snake_case_name", "snake-case-name"),
            ("--Already--slugged--", "already-slugged"),
            ("Version 2.0", "version-20"),
            ("", ""),
            ("!!!", ""),
        ],
    )
    def test_examples(self, text, expected):
        """Test: Text is lowercased, punctuation dropped, runs of separators collapsed."""
        assert slugify(text) == expected

    @pytest.mark.parametrize("text", ["Hello World", "API & REST: A Guide", "Ünïcode Títle", "a__b  c"])
    def test_idempotent(self, text):
        """Test: Slugifying a slug changes nothing."""
        once = slugify(text)
        assert slugify(once) == once


class TestMarkdownToHtml:
    def test_headings_get_ids(self):
        """Test: Headings get slug ids."""
        html = markdown_to_html("# Getting Started\n\nText")
        assert '<h1 id="getting-started">Getting Started</h1>' in html
        assert "<p>Text</p>" in html

    def test_explicit_heading_attributes(self):
        """Test: Attribute blocks set the id and classes."""
        html = markdown_to_html("## Install {#setup .wide}\n")
        assert '<h2 id="setup" class="wide">Install</h2>' in html

    def test_braces_that_are_not_attributes_stay(self):
        """Test: Braces that are not an attribute block are kept."""
        html = markdown_to_html("## Use {curly} braces\n")
        assert "{curly} braces" in html

    def test_tables_and_strikethrough(self):
        """Test: GFM tables and strikethrough render."""
        html = markdown_to_html("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~\n")
        assert "<table>" in html
        assert "<td>1</td>" in html
        assert "<s>gone</s>" in html

    def test_task_lists(self):
        """Test: Task lists render as checkboxes."""
        html = markdown_to_html("- [x] done\n- [ ] todo\n")
        assert 'type="checkbox"' in html
        assert "checked" in html

    def test_footnotes(self):
        """Test: Footnotes render."""
        html = markdown_to_html("Claim[^1].\n\n[^1]: Source.\n")
        assert "footnote" in html
        assert "Source." in html

    def test_raw_html_is_kept(self):
        """Test: Raw HTML passes through."""
        html = markdown_to_html('<div class="note">hi</div>\n')
        assert '<div class="note">hi</div>' in html

    def test_deterministic(self):
        """Test: The same input always renders the same output."""
        source = "# A\n\nSome *text* with `code`.\n\n## B {#b}\n"
        assert markdown_to_html(source) == markdown_to_html(source)


class TestExtractHeadings:
    def test_outline_in_document_order(self):
        """Test: Headings come out in document order with plain text."""
        source = "# Intro\n\ntext\n\n## Using `htmx` Today\n\n### Deep\n\n#### Deeper\n"
        headings = extract_headings(source)
        assert headings == [
            Heading(1, "Intro", "intro"),
            Heading(2, "Using htmx Today", "using-htmx-today"),
            Heading(3, "Deep", "deep"),
            Heading(4, "Deeper", "deeper"),
        ]

    def test_max_level(self):
        """Test: Headings deeper than max_level are skipped."""
        headings = extract_headings("# A\n## B\n### C\n", max_level=2)
        assert [h.text for h in headings] == ["A", "B"]

    def test_explicit_id_wins(self):
        """Test: An explicit id replaces the slug."""
        headings = extract_headings("## Install {#setup}\n")
        assert headings == [Heading(2, "Install", "setup")]

    def test_anchors_match_rendered_ids(self):
        """Test: Outline anchors match the ids in the rendered HTML."""
        source = "# One\n\n## Two & Three\n"
        html = markdown_to_html(source)
        for heading in extract_headings(source):
            assert f'id="{heading.anchor}"' in html

    def test_to_dict(self):
        """Test: Headings serialize to plain dicts."""
        assert Heading(2, "T", "t").to_dict() == {"level": 2, "text": "T", "anchor": "t"}
