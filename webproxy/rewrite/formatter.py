from webproxy.fetch.base import FetchResult
from webproxy.rewrite.html_rewriter import rewrite_html

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
})

def escape_html(text: str) -> str:
    """Escape the five HTML special characters"""
    return (text or "").translate(_HTML_ESCAPES)

def format_plain_text(text: str) -> str:
    return f"<pre>{escape_html(text)}</pre>"

def format_unsupported(content_type: str) -> str:
    return f"<p>Content type: {escape_html(content_type)}</p><p>Unable to display in proxy frame.</p>"

def render_content(result: FetchResult) -> str:
    """
    Turn a fetch result into markup the front-end can inject.

    HTML is rewritten against the final URL, other text/* types are escaped
    into a <pre> block, anything else gets a placeholder notice.
    """
    content_type = (result.content_type or "").lower()
    if "text/html" in content_type:
        return rewrite_html(result.text, result.final_url)
    if "text/" in content_type:
        return format_plain_text(result.text)
    return format_unsupported(result.content_type)
