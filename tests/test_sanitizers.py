from __future__ import annotations

from optvault.sanitizers import sanitize_text_field, sanitize_url, strip_unsafe_markup


def test_strip_unsafe_markup_keeps_allowed():
    html = '<p class="lead">Hi <a href="http://example.com" title="t">there</a><br /></p>'
    assert strip_unsafe_markup(html) == html


def test_strip_unsafe_markup_removes_disallowed():
    html = '<p onclick="x">Hi <img src="x.png" onerror="y"></p><style>p{}</style><!-- c -->'
    assert strip_unsafe_markup(html) == '<p>Hi <img src="x.png"></p>'


def test_strip_unsafe_markup_rejects_bad_protocols():
    html = '<a href="javascript:alert(1)">x</a><a href=" JaVaScRiPt:alert(1)">y</a>'
    assert strip_unsafe_markup(html) == "<a>x</a><a>y</a>"


def test_strip_unsafe_markup_keeps_entities():
    assert strip_unsafe_markup("AT&amp;T &#169;") == "AT&amp;T &#169;"


def test_sanitize_text_field():
    assert sanitize_text_field("  hello \n\t world ") == "hello world"
    assert sanitize_text_field("<b>bold</b> text<script>x()</script>") == "bold text"
    assert sanitize_text_field("a < b") == "a &lt; b"
    assert sanitize_text_field("100%20off") == "100off"
    assert sanitize_text_field(12) == "12"
    assert sanitize_text_field(["x"]) == ""


def test_sanitize_url():
    assert sanitize_url("http://example.com/a.png") == "http://example.com/a.png"
    assert sanitize_url(" example.com ") == "http://example.com"
    assert sanitize_url("/uploads/a.png") == "/uploads/a.png"
    assert sanitize_url("http://exa mple.com") == "http://exa%20mple.com"
    assert sanitize_url("mailto:a@b.c") == "mailto:a@b.c"
    assert sanitize_url("javascript:alert(1)") == ""
    assert sanitize_url("http://example.com/<x>") == "http://example.com/x"
    assert sanitize_url("") == ""
