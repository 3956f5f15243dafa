import pytest

from oapiware.negotiate import (
    negotiate_content_encoding,
    negotiate_content_type,
    normalize_offer,
    normalize_offers,
)


@pytest.mark.parametrize(
    "accept, offers, expected",
    [
        ("", ["identity", "gzip"], "identity"),
        ("*;q=0", ["identity", "gzip"], ""),
        ("gzip", ["identity", "gzip"], "gzip"),
    ],
)
def test_negotiate_content_encoding(accept, offers, expected):
    headers = {"Accept-Encoding": [accept]}
    assert negotiate_content_encoding(headers, offers) == expected


@pytest.mark.parametrize(
    "accept, offers, default, expected",
    [
        ("text/html, */*;q=0", ["x/y"], "", ""),
        ("text/html, */*", ["x/y"], "", "x/y"),
        ("text/html, image/png", ["text/html", "image/png"], "", "text/html"),
        ("text/html, image/png", ["image/png", "text/html"], "", "image/png"),
        ("text/html, image/png; q=0.5", ["image/png"], "", "image/png"),
        ("text/html, image/png; q=0.5", ["text/html"], "", "text/html"),
        ("text/html, image/png; q=0.5", ["foo/bar"], "", ""),
        ("text/html, image/png; q=0.5", ["image/png", "text/html"], "", "text/html"),
        ("text/html, image/png; q=0.5", ["text/html", "image/png"], "", "text/html"),
        ("text/html;q=0.5, image/png", ["image/png"], "", "image/png"),
        ("text/html;q=0.5, image/png", ["text/html"], "", "text/html"),
        ("text/html;q=0.5, image/png", ["image/png", "text/html"], "", "image/png"),
        ("text/html;q=0.5, image/png", ["text/html", "image/png"], "", "image/png"),
        ("text/html;q=0.5, image/png", ["text/html", "image/png"], "", "image/png"),
        ("image/png, image/*;q=0.5", ["image/jpg", "image/png"], "", "image/png"),
        ("image/png, image/*;q=0.5", ["image/jpg"], "", "image/jpg"),
        ("image/png, image/*;q=0.5", ["image/jpg", "image/gif"], "", "image/jpg"),
        ("image/png, image/*", ["image/jpg", "image/gif"], "", "image/jpg"),
        ("image/png, image/*", ["image/gif", "image/jpg"], "", "image/gif"),
        ("image/png, image/*", ["image/gif", "image/png"], "", "image/png"),
        ("image/png, image/*", ["image/png", "image/gif"], "", "image/png"),
        (
            "application/vnd.google.protobuf;proto=io.prometheus.client.MetricFamily;"
            "encoding=delimited;q=0.7,text/plain;version=0.0.4;q=0.3",
            ["text/plain"],
            "",
            "text/plain",
        ),
        (
            "application/json",
            ["application/json; charset=utf-8", "image/png"],
            "",
            "application/json; charset=utf-8",
        ),
        (
            "application/json; charset=utf-8",
            ["application/json; charset=utf-8", "image/png"],
            "",
            "application/json; charset=utf-8",
        ),
        ("application/json", ["application/vnd.cia.v1+json"], "", ""),
        (
            "text/html, image/gif, image/jpeg, *; q=.2, */*; q=.2",
            ["application/json"],
            "",
            "application/json",
        ),
    ],
)
def test_negotiate_content_type(accept, offers, default, expected):
    headers = {"Accept": [accept]}
    assert negotiate_content_type(headers, offers, default) == expected


def test_negotiate_content_type_no_accept_header():
    offers = ["application/json", "text/xml"]
    assert negotiate_content_type({}, offers, "") == "application/json"


def test_negotiate_content_type_falls_back_to_default():
    headers = {"Accept": ["application/json"]}
    assert negotiate_content_type(headers, ["text/xml"], "text/plain") == "text/plain"


def test_normalize_offer_strips_parameters():
    assert normalize_offer("application/json; charset=utf-8") == "application/json"
    assert normalize_offer("text/plain") == "text/plain"


def test_normalize_offers():
    offers = ["application/json; charset=utf-8", "image/png"]
    assert normalize_offers(offers) == ["application/json", "image/png"]
    assert normalize_offers([]) == []