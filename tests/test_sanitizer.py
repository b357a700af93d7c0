"""Tests for sanitizer.sanitize_html."""

from pagewiki.services.sanitizer import sanitize_html


class TestSanitizeRemovesDangerousMarkup:
    def test_removes_script_tags(self):
        html = sanitize_html("<p>Text</p><script>alert('xss')</script>")
        assert "alert" not in html
        assert "<script" not in html
        assert "<p>Text</p>" in html

    def test_removes_style_tags(self):
        html = sanitize_html("<style>body { color: red; }</style><p>Text</p>")
        assert "color" not in html
        assert html == "<p>Text</p>"

    def test_removes_iframe_with_content(self):
        html = sanitize_html('<p>Real</p><iframe src="https://evil.example">fallback</iframe>')
        assert "fallback" not in html
        assert "iframe" not in html

    def test_removes_svg_with_handlers(self):
        html = sanitize_html('<p>Hello</p><svg onload="alert(1)"><path d="M0 0"/></svg>')
        assert "svg" not in html
        assert "alert" not in html
        assert "Hello" in html

    def test_removes_forms(self):
        html = sanitize_html("<p>Article</p><form action='/x'><input name='q'><button>Go</button></form>")
        assert "form" not in html
        assert "Go" not in html

    def test_removes_html_comments(self):
        html = sanitize_html("<p>Visible</p><!-- hidden comment -->")
        assert "hidden comment" not in html


class TestSanitizeAttributes:
    def test_strips_event_handler_attributes(self):
        html = sanitize_html('<a href="/page" onclick="doSomething()">Link</a>')
        assert html == '<a href="/page">Link</a>'

    def test_strips_inline_style_attribute(self):
        html = sanitize_html('<p style="color:red;font-size:14px">Styled text</p>')
        assert html == "<p>Styled text</p>"

    def test_strips_javascript_href(self):
        html = sanitize_html('<a href="javascript:alert(1)">click</a>')
        assert html == "<a>click</a>"

    def test_strips_mixed_case_javascript_href(self):
        html = sanitize_html('<a href="JaVaScRiPt:alert(1)">click</a>')
        assert "alert" not in html

    def test_strips_javascript_href_hidden_by_whitespace(self):
        html = sanitize_html('<a href="java\tscript:alert(1)">click</a>')
        assert "alert" not in html

    def test_strips_entity_encoded_javascript_href(self):
        html = sanitize_html('<a href="&#106;avascript:alert(1)">click</a>')
        assert "alert" not in html

    def test_strips_data_uri_image(self):
        html = sanitize_html('<img src="data:text/html;base64,PHNjcmlwdD4=" alt="pic">')
        assert "data:" not in html
        assert 'alt="pic"' in html

    def test_keeps_safe_links(self):
        for href in ("https://example.com", "/pages/home-page", "#fn:1", "mailto:me@example.com"):
            html = sanitize_html(f'<a href="{href}">x</a>')
            assert f'href="{href}"' in html

    def test_keeps_footnote_attributes(self):
        html = sanitize_html('<sup id="fnref:1"><a class="footnote-ref" href="#fn:1">1</a></sup>')
        assert 'id="fnref:1"' in html
        assert 'class="footnote-ref"' in html


class TestSanitizePreservesContent:
    def test_normal_content_preserved(self):
        html = "<h1>Title</h1><p>Paragraph <strong>bold</strong> text.</p>"
        assert sanitize_html(html) == html

    def test_unknown_tags_are_unwrapped(self):
        assert sanitize_html("<custom-box>inner text</custom-box>") == "inner text"

    def test_plain_text_unchanged(self):
        assert sanitize_html("home-page") == "home-page"

    def test_empty_string(self):
        assert sanitize_html("") == ""

    def test_idempotent(self):
        html = (
            '<p onclick="x()">A &amp; B<br/>next</p>'
            '<table><thead><tr><th>h</th></tr></thead><tbody><tr><td>1</td></tr></tbody></table>'
            "<script>evil()</script><ul><li>item</li></ul>"
        )
        once = sanitize_html(html)
        assert sanitize_html(once) == once
