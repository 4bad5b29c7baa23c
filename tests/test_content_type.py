import time

import pytest

from httpjson.content_type import has_json_content_type
from httpjson.content_type import is_json_content_type
from httpjson.content_type import parse_media_type


@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("application/json", True),
        ("application/json; charset=utf-8", True),
        ("application/ld+json", True),
        ("application/vnd.api+json", True),
        ("APPLICATION/JSON", True),
        ("application/LD+JSON", True),
        ("text/json", False),
        ("application/xml", False),
        ("application/jsonx", False),
        ("application/json-seq", False),
        ("application", False),
        ("application/", False),
        ("application/json/extra", False),
        ("application/json; =broken", False),
        ("", False),
        (None, False),
    ],
)
def test_is_json_content_type(content_type, expected):
    assert is_json_content_type(content_type) is expected


def test_parse_media_type_parameters():
    mt = parse_media_type('application/ld+json; Charset="utf-8"; profile=x')
    assert mt is not None
    assert mt.media_type == "application/ld+json"
    assert mt.suffix == "json"
    assert mt.parameters == {"charset": "utf-8", "profile": "x"}


def test_parse_media_type_without_suffix():
    mt = parse_media_type("text/plain")
    assert mt is not None
    assert mt.suffix is None
    assert mt.parameters == {}


def test_has_json_content_type_reads_header(make_request):
    assert has_json_content_type(make_request(content_type="application/json"))
    assert not has_json_content_type(make_request(content_type="text/json"))
    assert not has_json_content_type(make_request(content_type=None))


def test_has_json_content_type_requires_request():
    with pytest.raises(ValueError):
        has_json_content_type(None)


@pytest.mark.parametrize(
    "value",
    [
        "a/b;x" + " " * 50000 + "\x00",
        "a/b" + " " * 50000 + "\x00",
        "a/b;" + ";" * 50000 + "\x00",
        "a/b;" + "x" * 50000 + "=\x00",
    ],
)
def test_long_malformed_header_is_rejected_quickly(value):
    started = time.perf_counter()
    assert parse_media_type(value) is None
    assert time.perf_counter() - started < 1.0


def test_whitespace_around_parameters():
    mt = parse_media_type("application/json ;  charset=utf-8  ; q=1 ")
    assert mt is not None
    assert mt.parameters == {"charset": "utf-8", "q": "1"}
