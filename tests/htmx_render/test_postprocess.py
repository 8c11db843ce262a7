import logging

from htmx_docs.htmx_render.config import HtmxConfig
from htmx_docs.htmx_render.postprocess import (
    inject_htmx_attrs,
    minify_html,
    nav_link_attrs,
    preload_hint,
)

PAGE = (
    '<!DOCTYPE html><html><body class="main"><nav id="sidebar">'
    '<a class="nav-link" href="/a">A</a></nav><a href="/ext">Ext</a></body></html>'
)


class TestInjectHtmxAttrs:
    def test_body_attributes(self):
        """Test: The body gets boost, target and swap attributes."""
        html = inject_htmx_attrs(PAGE, HtmxConfig())
        assert 'hx-boost="true"' in html
        assert 'hx-target="#content"' in html
        assert 'hx-swap="innerHTML"' in html
        assert 'class="main"' in html

    def test_custom_target_and_swap(self):
        """Test: Target and swap strategy follow the config."""
        config = HtmxConfig.from_dict({"target": "#main", "swap_strategy": "outerHTML"})
        html = inject_htmx_attrs(PAGE, config)
        assert 'hx-target="#main"' in html
        assert 'hx-swap="outerHTML"' in html

    def test_push_url_only_on_nav_links(self):
        """Test: Only nav links get hx-push-url."""
        html = inject_htmx_attrs(PAGE, HtmxConfig())
        assert html.count('hx-push-url="true"') == 1
        assert '<a href="/ext">Ext</a>' in html

    def test_no_boost(self):
        """Test: hx-boost is left out when boost is off."""
        html = inject_htmx_attrs(PAGE, HtmxConfig.from_dict({"boost": False}))
        assert "hx-boost" not in html
        assert 'hx-push-url="true"' in html

    def test_nothing_to_do(self):
        """Test: The page is unchanged when there is nothing to inject."""
        config = HtmxConfig.from_dict({"boost": False, "push_url": False})
        assert inject_htmx_attrs(PAGE, config) == PAGE

    def test_collapsible_sidebar(self):
        """Test: The sidebar is marked collapsible when configured."""
        html = inject_htmx_attrs(PAGE, HtmxConfig())
        assert 'data-collapsible="true"' in html
        config = HtmxConfig.from_dict({"navigation": {"collapsible_sidebar": False}})
        assert "data-collapsible" not in inject_htmx_attrs(PAGE, config)

    def test_doctype_kept(self):
        """Test: The doctype survives the rewrite."""
        assert inject_htmx_attrs(PAGE, HtmxConfig()).startswith("<!DOCTYPE html>")


class TestNavLinkAttrs:
    def test_with_push_url(self):
        """Test: Link attributes include push-url when enabled."""
        assert nav_link_attrs("#content", "innerHTML", True) == (
            'hx-boost="true" hx-target="#content" hx-swap="innerHTML show:window:top" hx-push-url="true"'
        )

    def test_without_push_url(self):
        """Test: Link attributes skip push-url when disabled."""
        assert "hx-push-url" not in nav_link_attrs("#content", "outerHTML", False)


class TestPreloadHint:
    def test_link(self):
        """Test: A URL gives a prefetch link."""
        assert preload_hint("/chapter/intro") == '<link rel="prefetch" href="/chapter/intro" as="document">'

    def test_empty(self):
        """Test: No URL gives no hint."""
        assert preload_hint(None) == ""


class TestMinifyHtml:
    def test_minify(self):
        """Test: Whitespace is collapsed."""
        result = minify_html("<html><body><p>Hello   World</p></body></html>")
        assert "<html><body><p>Hello World</p></body></html>" in result

    def test_options_merged(self):
        """Test: User options override the defaults."""
        html = "<div><!-- note --><p>x</p></div>"
        assert "<!-- note -->" in minify_html(html)
        assert "<!-- note -->" not in minify_html(html, {"remove_comments": True})

    def test_unknown_option_warns(self, caplog):
        """Test: Unknown htmlmin options are warned about."""
        with caplog.at_level(logging.WARNING, logger="mkdocs.plugins.htmx_docs"):
            minify_html("<p>x</p>", {"bogus": True})
        assert "bogus" in caplog.text
