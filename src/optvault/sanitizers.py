"""Default text, markup and URL sanitizers.

Hosts usually provide their own; :class:`Sanitizers` bundles the three
callables the validation rules invoke so they can be swapped as a unit.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Any

ALLOWED_PROTOCOLS = frozenset(
    {
        "http", "https", "ftp", "ftps", "mailto", "news", "irc", "gopher",
        "nntp", "feed", "telnet", "mms", "rtsp", "sms", "svn", "tel", "fax",
        "xmpp", "webcal", "urn",
    }
)

_GLOBAL_ATTRS = frozenset({"class", "id", "title", "dir", "lang"})

ALLOWED_TAGS: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "rel", "target", "name"}),
    "abbr": frozenset(),
    "b": frozenset(),
    "blockquote": frozenset({"cite"}),
    "br": frozenset(),
    "cite": frozenset(),
    "code": frozenset(),
    "del": frozenset({"datetime"}),
    "div": frozenset({"align"}),
    "em": frozenset(),
    "h1": frozenset(), "h2": frozenset(), "h3": frozenset(),
    "h4": frozenset(), "h5": frozenset(), "h6": frozenset(),
    "hr": frozenset(),
    "i": frozenset(),
    "img": frozenset({"src", "alt", "width", "height"}),
    "ins": frozenset({"datetime"}),
    "li": frozenset(),
    "ol": frozenset({"start"}),
    "p": frozenset({"align"}),
    "pre": frozenset(),
    "q": frozenset({"cite"}),
    "s": frozenset(),
    "small": frozenset(),
    "span": frozenset(),
    "strong": frozenset(),
    "sub": frozenset(),
    "sup": frozenset(),
    "table": frozenset(),
    "tbody": frozenset(),
    "td": frozenset({"colspan", "rowspan"}),
    "th": frozenset({"colspan", "rowspan", "scope"}),
    "thead": frozenset(),
    "tr": frozenset(),
    "u": frozenset(),
    "ul": frozenset(),
}

_URL_ATTRS = frozenset({"href", "src", "cite"})
# Elements whose text content is discarded along with the tag.
_DROP_CONTENT = frozenset({"script", "style"})

_SCHEME_RX = re.compile(r"^([^/?#:]+):")
_URL_BAD_CHARS_RX = re.compile(r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010ffff]", re.I)
_PHP_FILE_RX = re.compile(r"^[a-z0-9-]+?\.php", re.I)
_CTRL_RX = re.compile(r"[\x00-\x20]+")
_LONE_LT_RX = re.compile(r"<(?![a-zA-Z/!?])")
_SCRIPT_STYLE_RX = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.I | re.S)
_TAG_RX = re.compile(r"<[^>]*>")
_WS_RX = re.compile(r"[\r\n\t ]+")
_OCTET_RX = re.compile(r"%[a-f0-9]{2}", re.I)


def _protocol_allowed(value: str) -> bool:
    match = _SCHEME_RX.match(_CTRL_RX.sub("", value))
    if match is None:
        return True
    return match.group(1).lower() in ALLOWED_PROTOCOLS


class _MarkupFilter(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.out: list[str] = []
        self._dropping = 0

    def _render(self, tag: str, attrs: list[tuple[str, str | None]], close: str) -> str:
        allowed = ALLOWED_TAGS[tag] | _GLOBAL_ATTRS
        parts = [tag]
        for name, value in attrs:
            if name not in allowed:
                continue
            if value is None:
                parts.append(name)
                continue
            if name in _URL_ATTRS and not _protocol_allowed(value):
                continue
            parts.append(f'{name}="{html.escape(value, quote=True)}"')
        return "<" + " ".join(parts) + close + ">"

    def handle_starttag(self, tag, attrs):
        if tag in _DROP_CONTENT:
            self._dropping += 1
        elif not self._dropping and tag in ALLOWED_TAGS:
            self.out.append(self._render(tag, attrs, ""))

    def handle_startendtag(self, tag, attrs):
        if not self._dropping and tag in ALLOWED_TAGS:
            self.out.append(self._render(tag, attrs, " /"))

    def handle_endtag(self, tag):
        if tag in _DROP_CONTENT:
            self._dropping = max(0, self._dropping - 1)
        elif not self._dropping and tag in ALLOWED_TAGS:
            self.out.append(f"</{tag}>")

    def handle_data(self, data):
        if not self._dropping:
            self.out.append(data)

    def handle_entityref(self, name):
        if not self._dropping:
            self.out.append(f"&{name};")

    def handle_charref(self, name):
        if not self._dropping:
            self.out.append(f"&#{name};")


def strip_unsafe_markup(text: str) -> str:
    """Remove tags and attributes that are not on the post-content allow-list."""

    parser = _MarkupFilter()
    parser.feed(text)
    parser.close()
    return "".join(parser.out)


def sanitize_text_field(text: Any) -> str:
    """Reduce *text* to a single line of plain text."""

    if isinstance(text, (dict, list)) or text is None:
        return ""
    filtered = str(text)
    if "<" in filtered:
        filtered = _LONE_LT_RX.sub("&lt;", filtered)
        filtered = _SCRIPT_STYLE_RX.sub("", filtered)
        filtered = _TAG_RX.sub("", filtered)
    filtered = _WS_RX.sub(" ", filtered).strip()
    found = False
    while _OCTET_RX.search(filtered):
        filtered = _OCTET_RX.sub("", filtered)
        found = True
    if found:
        filtered = _WS_RX.sub(" ", filtered).strip()
    return filtered


def sanitize_url(url: Any) -> str:
    """Clean *url* for storage; disallowed protocols yield ``''``."""

    if url is None:
        return ""
    url = str(url).strip()
    if url == "":
        return ""
    url = url.replace(" ", "%20")
    url = _URL_BAD_CHARS_RX.sub("", url)
    if url == "":
        return ""
    if ":" not in url and url[0] not in "/#?" and not _PHP_FILE_RX.match(url):
        url = "http://" + url
    if not _protocol_allowed(url):
        return ""
    return url


@dataclass(frozen=True)
class Sanitizers:
    """The black-box sanitizers used by the validation rules."""

    strip_unsafe_markup: Callable[[str], str] = strip_unsafe_markup
    sanitize_text_field: Callable[[Any], str] = sanitize_text_field
    sanitize_url: Callable[[Any], str] = sanitize_url
