from htmx_docs.content.text import strip_markdown, truncate_text, truncate_words


class TestStripMarkdown:
    def test_formatting_removed(self):
        """Test: Emphasis and heading markers are removed."""
        assert strip_markdown("# Title\n\nSome **bold** and *em* text.") == "Title Some bold and em text."

    def test_code_is_omitted(self):
        """Test: Code blocks and inline code are left out."""
        source = "Before\n\n```python\nprint('x')\n```\n\n    indented code\n\nUse `inline` here."
        assert strip_markdown(source) == "Before Use here."

    def test_links_keep_text_images_dropped(self):
        """Test: Links keep their text and images disappear."""
        source = "See [the guide](https://example.com/guide) ![logo](logo.png) now."
        assert strip_markdown(source) == "See the guide now."

    def test_raw_html_dropped(self):
        """Test: Raw HTML tags and blocks are dropped."""
        assert strip_markdown("<div>\nhidden\n</div>\n\nVisible <b>bold</b> text") == "Visible bold text"

    def test_line_breaks_become_spaces(self):
        """Test: Line breaks and list items join with spaces."""
        assert strip_markdown("one\ntwo  \nthree\n\n- a\n- b") == "one two three a b"

    def test_empty(self):
        """Test: Empty input gives an empty string."""
        assert strip_markdown("") == ""


class TestTruncateText:
    def test_short_text_unchanged(self):
        """Test: Text within the limit is returned as-is."""
        assert truncate_text("short", 10) == "short"
        assert truncate_text("exactly10!", 10) == "exactly10!"

    def test_cut_at_word_boundary(self):
        """Test: Long text is cut at the last space before the limit."""
        assert truncate_text("This is a long sentence", 10) == "This is a..."

    def test_hard_cut_without_space(self):
        """Test: A single long word is cut hard."""
        assert truncate_text("Supercalifragilistic", 5) == "Super..."

    def test_counts_characters_not_bytes(self):
        """Test: The limit counts characters."""
        assert truncate_text("ééééé ééééé", 7) == "ééééé..."


class TestTruncateWords:
    def test_keeps_first_words(self):
        """Test: Only the first words are kept."""
        assert truncate_words("one two three four", 2) == "one two..."

    def test_short_text_unchanged(self):
        """Test: Text with fewer words is returned as-is."""
        assert truncate_words("one two", 5) == "one two"
