from webproxy.fetch.base import FetchResult
from webproxy.rewrite.formatter import (
    escape_html,
    format_plain_text,
    format_unsupported,
    render_content,
)


def _result(content_type: str, body: bytes, final_url: str = "https://site.test/dir/page") -> FetchResult:
    return FetchResult(
        url=final_url,
        final_url=final_url,
        content_type=content_type,
        body=body,
        encoding="utf-8",
        fetched_at="2026-01-01T00:00:00+00:00",
    )


class TestEscaping:
    """Unit tests for plain-content escaping"""

    def test_all_five_characters(self):
        assert escape_html("&<>\"'") == "&amp;&lt;&gt;&quot;&#039;"

    def test_ampersand_escaped_first(self):
        assert escape_html("&lt;") == "&amp;lt;"

    def test_script_rendered_as_text(self):
        out = format_plain_text("<script>alert('x')</script>")
        assert out == "<pre>&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;</pre>"
        assert "<script>" not in out

    def test_unsupported_notice_names_type(self):
        out = format_unsupported("image/png")
        assert out == "<p>Content type: image/png</p><p>Unable to display in proxy frame.</p>"

    def test_unsupported_notice_escapes_type(self):
        assert "<b>" not in format_unsupported("x/<b>")


class TestRenderContent:
    """Dispatch on content type"""

    def test_html_is_rewritten_against_final_url(self):
        out = render_content(_result("text/html; charset=utf-8", b'<a href="next">Next</a>'))
        assert 'data-proxy-href="https://site.test/dir/next"' in out

    def test_html_match_is_case_insensitive(self):
        out = render_content(_result("Text/HTML", b'<img src="a.png">'))
        assert 'data-original-src="https://site.test/dir/a.png"' in out

    def test_plain_text_is_escaped(self):
        out = render_content(_result("text/plain", b"1 < 2 <script>"))
        assert out == "<pre>1 &lt; 2 &lt;script&gt;</pre>"

    def test_other_text_types_are_escaped(self):
        out = render_content(_result("text/css", b"a > b { color: red }"))
        assert out.startswith("<pre>a &gt; b")

    def test_binary_gets_placeholder(self):
        out = render_content(_result("application/pdf", b"%PDF-1.4"))
        assert out == "<p>Content type: application/pdf</p><p>Unable to display in proxy frame.</p>"
