"""Sanitize inline HTML used in captions, legend titles and notes.

Allowlist only. Source citations may carry a link, so ``a`` is allowed with
an http(s) ``href``; everything else is limited to inline emphasis.
"""

from __future__ import annotations

import html
import re
from html.parser import HTMLParser
from urllib.parse import urlparse

# Tags allowed in sanitized output. No script, no form, no iframe, no img.
ALLOWED_TAGS = frozenset({"a", "b", "i", "em", "strong", "br", "span", "sup", "sub"})
# tag -> attributes kept for it
ALLOWED_ATTRS = {
    "a": frozenset({"href", "title"}),
    "span": frozenset({"class"}),
}
SAFE_CLASS = re.compile(r"^[a-zA-Z0-9_\-\s]+$")
SAFE_SCHEMES = frozenset({"http", "https"})


def _safe_href(value: str) -> bool:
    return urlparse(value.strip()).scheme.lower() in SAFE_SCHEMES


class _InlineSanitizer(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._out: list[str] = []
        self._open: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        if tag not in ALLOWED_TAGS:
            return
        if tag == "br":
            self._out.append("<br>")
            return
        kept = ALLOWED_ATTRS.get(tag, frozenset())
        parts = [f"<{tag}"]
        for k, v in attrs:
            k = k.lower()
            if k not in kept or v is None:
                continue
            if k == "class" and not SAFE_CLASS.match(v):
                continue
            if k == "href" and not _safe_href(v):
                continue
            parts.append(f' {k}="{html.escape(v, quote=True)}"')
        if tag == "a":
            parts.append(' rel="noopener noreferrer"')
        parts.append(">")
        self._out.append("".join(parts))
        self._open.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag.lower() == "br":
            self._out.append("<br>")

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag not in self._open:
            return
        # Close anything left open inside this element as well.
        while self._open:
            top = self._open.pop()
            self._out.append(f"</{top}>")
            if top == tag:
                break

    def handle_data(self, data: str) -> None:
        self._out.append(html.escape(data))

    def handle_entityref(self, name: str) -> None:
        self._out.append(html.escape(html.unescape("&" + name + ";")))

    def handle_charref(self, name: str) -> None:
        self._out.append(html.escape(html.unescape("&#" + name + ";")))

    def get_result(self) -> str:
        self.close()
        closing = "".join(f"</{t}>" for t in reversed(self._open))
        return "".join(self._out) + closing


def sanitize(html_input: str | None) -> str:
    """Return *html_input* reduced to the inline allowlist.

    Disallowed tags are dropped (their text is kept, escaped). Attributes
    other than ``class`` on span and http(s) ``href``/``title`` on links are
    stripped.
    """
    if not html_input or not html_input.strip():
        return ""
    parser = _InlineSanitizer()
    parser.feed(html_input)
    return parser.get_result()
