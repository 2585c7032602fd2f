"""
URL rewriting for proxied HTML.

Resource references (``src``) are annotated with their resolved absolute URL in
``data-original-src`` and otherwise left alone. Navigational references
(``href``) are resolved and marked so that activating them navigates back
through the proxy with the absolute URL as the new target.

Only the start tags of rewritten elements are re-rendered; everything else in
the document (entities, doctype, void elements, attribute quoting) is emitted
exactly as it was received.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution

from webproxy.core.errors import InvalidInput

logger = logging.getLogger(__name__)

RESOURCE_ATTR = "src"
NAVIGATION_ATTR = "href"
RESOLVED_SRC_ATTR = "data-original-src"
PROXY_HREF_ATTR = "data-proxy-href"
PROXY_ONCLICK = "window.proxyLink(this.dataset.proxyHref); return false;"
POINTER_STYLE = "cursor: pointer;"

_SRC_SKIP_PREFIXES = ("data:", "javascript:")
_HREF_SKIP_PREFIXES = ("#", "javascript:")

_WEB_SCHEMES = ("http", "https")
_FORBIDDEN_HOST_CHARS = set(" \t\r\n%<>\\^|[]\"'`{}")


@dataclass
class RewriteWarning:
    tag: str
    attribute: str
    value: str
    reason: str


@dataclass
class RewriteResult:
    html: str
    warnings: List[RewriteWarning] = field(default_factory=list)


@dataclass(frozen=True)
class RewriteContext:
    base_url: str

    def __post_init__(self):
        try:
            parts = urlsplit(self.base_url)
        except ValueError as e:
            raise InvalidInput(f"Invalid base URL: {self.base_url}", details=str(e)) from e
        if not parts.scheme or not parts.netloc:
            raise InvalidInput(f"Invalid base URL: {self.base_url}", details="base URL must be absolute")

    def resolve(self, value: str) -> str:
        """
        Resolve a reference against the base URL.

        Raises ValueError when the reference (or the combination) is not a
        usable URL: an unterminated IPv6 host, a non-numeric port, or an
        http(s) URL with an empty or malformed host.
        """
        value = value.strip()
        raw = urlsplit(value)
        # "https://" with the base's own scheme would otherwise resolve to the base
        if raw.scheme.lower() in _WEB_SCHEMES and value[len(raw.scheme) + 1:].startswith("//") and not raw.netloc:
            raise ValueError("missing host")

        absolute = urljoin(self.base_url, value)
        parts = urlsplit(absolute)
        # urljoin is lazy about ports; force them to be validated
        parts.port
        if parts.scheme.lower() not in _WEB_SCHEMES:
            return absolute

        host = parts.hostname or ""
        if not host:
            raise ValueError("missing host")
        if _FORBIDDEN_HOST_CHARS & set(host):
            raise ValueError(f"invalid host {host!r}")
        try:
            httpx.URL(absolute)
        except httpx.InvalidURL as e:
            raise ValueError(str(e)) from e
        return absolute


def _has_prefix(value: str, prefixes) -> bool:
    return value.lstrip().lower().startswith(prefixes)


def _add_pointer_style(style: str) -> str:
    style = (style or "").strip()
    if not style:
        return POINTER_STYLE
    if not style.endswith(";"):
        style += ";"
    return f"{style} {POINTER_STYLE}"


def _warn(warnings: List[RewriteWarning], tag, attribute: str, value: str, error: Exception):
    warning = RewriteWarning(tag=tag.name, attribute=attribute, value=value, reason=str(error))
    warnings.append(warning)
    logger.warning("Invalid URL in <%s %s=%r>: %s", tag.name, attribute, value, error)


def _start_tag_end(html: str, start: int) -> int:
    """Index just past the ``>`` closing the start tag that opens at ``start``, or -1."""
    quote = None
    last = ""
    for i in range(start + 1, len(html)):
        ch = html[i]
        if quote:
            if ch == quote:
                quote = None
                last = ch
            continue
        if ch in "\"'" and last == "=":
            quote = ch
        elif ch == ">":
            return i + 1
        if not ch.isspace():
            last = ch
    return -1


def _render_start_tag(tag, self_closing: bool) -> str:
    parts = ["<", tag.name]
    for key, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        if value is None or value == "":
            parts.append(f" {key}")
        else:
            parts.append(f" {key}={EntitySubstitution.substitute_xml(value, make_quoted_attribute=True)}")
    parts.append("/>" if self_closing else ">")
    return "".join(parts)


def _splice(html: str, soup: BeautifulSoup, changed: Dict[int, object]) -> str:
    """
    Write the re-rendered start tags of ``changed`` elements back into the
    original markup. Falls back to re-serializing the whole tree when a tag's
    source position is unknown.
    """
    if not changed:
        return html

    line_starts = [0]
    for line in html.split("\n")[:-1]:
        line_starts.append(line_starts[-1] + len(line) + 1)

    edits: List[Tuple[int, int, str]] = []
    for tag in changed.values():
        if tag.sourceline is None or tag.sourcepos is None or tag.sourceline > len(line_starts):
            logger.debug("No source position for <%s>, re-serializing document", tag.name)
            return str(soup)
        start = line_starts[tag.sourceline - 1] + tag.sourcepos
        end = _start_tag_end(html, start) if html[start:start + 1] == "<" else -1
        if end < 0:
            logger.debug("Start tag of <%s> not found at %d, re-serializing document", tag.name, start)
            return str(soup)
        edits.append((start, end, _render_start_tag(tag, html[end - 2] == "/")))

    pieces = []
    cursor = 0
    for start, end, text in sorted(edits):
        pieces.append(html[cursor:start])
        pieces.append(text)
        cursor = end
    pieces.append(html[cursor:])
    return "".join(pieces)


def rewrite_html_with_report(html: str, base_url: str) -> RewriteResult:
    """
    Rewrite resource and navigational references in an HTML document.

    Elements whose attribute cannot be resolved are skipped and reported in
    ``RewriteResult.warnings``; the rest of the document is still rewritten.
    """
    context = RewriteContext(base_url)
    html = html or ""
    soup = BeautifulSoup(html, "html.parser")
    warnings: List[RewriteWarning] = []
    changed = {}

    for tag in soup.find_all(attrs={RESOURCE_ATTR: True}):
        value = tag.get(RESOURCE_ATTR)
        if not isinstance(value, str) or _has_prefix(value, _SRC_SKIP_PREFIXES):
            continue
        try:
            tag[RESOLVED_SRC_ATTR] = context.resolve(value)
        except ValueError as e:
            _warn(warnings, tag, RESOURCE_ATTR, value, e)
            continue
        changed[id(tag)] = tag

    for tag in soup.find_all(attrs={NAVIGATION_ATTR: True}):
        value = tag.get(NAVIGATION_ATTR)
        if not isinstance(value, str) or _has_prefix(value, _HREF_SKIP_PREFIXES):
            continue
        try:
            absolute = context.resolve(value)
        except ValueError as e:
            _warn(warnings, tag, NAVIGATION_ATTR, value, e)
            continue
        tag[PROXY_HREF_ATTR] = absolute
        tag["onclick"] = PROXY_ONCLICK
        tag["style"] = _add_pointer_style(tag.get("style"))
        changed[id(tag)] = tag

    if warnings:
        logger.info("Rewrote %s with %d skipped attribute(s)", base_url, len(warnings))

    return RewriteResult(html=_splice(html, soup, changed), warnings=warnings)


def rewrite_html(html: str, base_url: str) -> str:
    """Rewrite an HTML document so its links route back through the proxy."""
    return rewrite_html_with_report(html, base_url).html
