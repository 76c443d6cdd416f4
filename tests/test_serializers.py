from __future__ import annotations

import base64

import pytest

from optvault.errors import SnapshotDecodeError, UnknownCodecError
from optvault.serializers import available_codecs, get_codec
from optvault.serializers.php_codec import dumps, loads

OPTIONS = {
    "logo": "42",
    "title": "Café \"quoted\";",
    "blank": "",
    "body_bg": {"background-color": "#fff", "background-image": ""},
    "sizes": ["12", "px"],
}


def test_available_codecs():
    assert available_codecs() == ["json", "php", "yaml"]
    with pytest.raises(UnknownCodecError):
        get_codec("xml")


@pytest.mark.parametrize("name", ["php", "json", "yaml"])
def test_codec_roundtrip(name):
    codec = get_codec(name)
    blob = codec.encode(OPTIONS)
    base64.b64decode(blob, validate=True)
    assert codec.decode(blob) == OPTIONS


@pytest.mark.parametrize("name", ["php", "json", "yaml"])
def test_empty_map_is_empty_blob(name):
    codec = get_codec(name)
    assert codec.encode({}) == b""
    assert codec.encode(None) == b""
    assert codec.decode(b"") is None


@pytest.mark.parametrize("name", ["php", "json", "yaml"])
@pytest.mark.parametrize("blob", [b"not base64!!", b"abcd", base64.b64encode(b'a:1:{s:1:"a";')])
def test_corrupt_blobs_decode_to_none(name, blob):
    assert get_codec(name).decode(blob) is None


def test_non_map_payload_is_nothing():
    codec = get_codec("php")
    assert codec.decode(base64.b64encode(b's:1:"x";')) is None
    assert codec.decode(base64.b64encode(b'a:1:{i:0;s:1:"x";}')) is None


def test_php_format():
    assert dumps({"a": "x", 3: True, "n": None, "f": 0.5}) == (
        b'a:4:{s:1:"a";s:1:"x";i:3;b:1;s:1:"n";N;s:1:"f";d:0.5;}'
    )
    assert dumps("é") == b's:2:"\xc3\xa9";'


def test_php_reads_host_payload():
    payload = (
        b'a:3:{s:4:"logo";s:2:"42";s:6:"colors";a:2:{i:0;s:4:"#fff";i:1;s:4:"#000";}'
        b's:5:"fonts";a:1:{s:5:"%key%";a:0:{}}}'
    )
    assert loads(payload) == {
        "logo": "42",
        "colors": ["#fff", "#000"],
        "fonts": {"%key%": {}},
    }


@pytest.mark.parametrize(
    "payload",
    [b's:5:"abc";', b"i:x;", b"b:2;", b'O:8:"stdClass":0:{}', b"i:1;i:2;", b'a:1:{N;s:1:"x";}'],
)
def test_php_rejects_malformed(payload):
    with pytest.raises(SnapshotDecodeError):
        loads(payload)


def test_php_limits_nesting_depth():
    loads(b"a:1:{i:0;" * 3 + b"N;" + b"}" * 3)
    deep = b"a:1:{i:0;" * 5000 + b"N;" + b"}" * 5000
    with pytest.raises(SnapshotDecodeError, match="nested deeper"):
        loads(deep)


@pytest.mark.parametrize(
    "name, payload",
    [
        ("php", b"a:1:{i:0;" * 5000 + b"N;" + b"}" * 5000),
        ("json", b"[" * 100000),
    ],
)
def test_deeply_nested_blobs_decode_to_none(name, payload):
    assert get_codec(name).decode(base64.b64encode(payload)) is None
