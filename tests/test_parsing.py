"""Tests for request body parsing."""

import json

import pytest

from quote_relay.errors import ParseError
from quote_relay.parsing import parse_body
from quote_relay.utils.multipart import parse_multipart

BOUNDARY = "----WebKitFormBoundary7MA4YWxkTrZu0gW"


def multipart_body(fields, boundary=BOUNDARY) -> bytes:
    parts = []
    for name, value in fields:
        parts.append(
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n'
            f"\r\n"
            f"{value}\r\n"
        )
    parts.append(f"--{boundary}--\r\n")
    return "".join(parts).encode("utf-8")


def test_json_body():
    """JSON objects map straight onto the form fields."""
    body = json.dumps({"name": "Jo", "email": "jo@x.com", "phone": "+15555550123", "needs": "Home"})
    form = parse_body(body, "application/json")
    assert form.name == "Jo"
    assert form.email == "jo@x.com"
    assert form.phone == "+15555550123"
    assert form.needs == "Home"


def test_json_with_charset_parameter():
    form = parse_body(b'{"name": "Jo"}', "application/json; charset=utf-8")
    assert form.name == "Jo"
    assert form.email is None


@pytest.mark.parametrize("content_type", [
    "Application/JSON; charset=utf-8",
    "APPLICATION/JSON ; charset=UTF-8",
])
def test_json_media_type_is_case_insensitive(content_type):
    form = parse_body(b'{"name": "Jo", "email": "jo@x.com"}', content_type)
    assert form.name == "Jo"
    assert form.email == "jo@x.com"


@pytest.mark.parametrize("body", [b"", b"{not json", b"null-ish"])
def test_malformed_json_raises_parse_error(body):
    """An empty or broken JSON body is a ParseError, never a crash."""
    with pytest.raises(ParseError):
        parse_body(body, "application/json")


def test_json_must_be_an_object():
    with pytest.raises(ParseError):
        parse_body(b'["Jo", "jo@x.com"]', "application/json")


def test_json_non_string_values_are_dropped():
    form = parse_body(b'{"name": 42, "email": "jo@x.com", "phone": null}', "application/json")
    assert form.name is None
    assert form.email == "jo@x.com"
    assert form.phone is None


def test_urlencoded_body():
    body = "name=Jo+Smith&email=jo%40x.com&phone=%2B15555550123&needs=Auto+%26+Home"
    form = parse_body(body, "application/x-www-form-urlencoded")
    assert form.name == "Jo Smith"
    assert form.email == "jo@x.com"
    assert form.phone == "+15555550123"
    assert form.needs == "Auto & Home"


def test_urlencoded_missing_fields_are_none():
    form = parse_body("name=Jo", "application/x-www-form-urlencoded")
    assert form.name == "Jo"
    assert form.email is None
    assert form.needs is None


@pytest.mark.parametrize("content_type", ["text/plain", "", None])
def test_unknown_content_type_falls_back_to_urlencoded(content_type):
    form = parse_body("name=Jo&email=jo%40x.com", content_type)
    assert form.name == "Jo"
    assert form.email == "jo@x.com"


def test_multipart_body():
    """Both fields come back verbatim, with surrounding whitespace trimmed."""
    body = multipart_body([("name", "  Jo Smith "), ("email", "jo@x.com")])
    form = parse_body(body, f"multipart/form-data; boundary={BOUNDARY}")
    assert form.name == "Jo Smith"
    assert form.email == "jo@x.com"
    assert form.phone is None


def test_multipart_quoted_boundary():
    body = multipart_body([("name", "Jo")])
    form = parse_body(body, f'multipart/form-data; boundary="{BOUNDARY}"')
    assert form.name == "Jo"


def test_multipart_without_boundary_raises():
    body = multipart_body([("name", "Jo")])
    with pytest.raises(ParseError):
        parse_body(body, "multipart/form-data")


def test_multipart_keeps_every_value():
    body = multipart_body([("needs", "Auto"), ("needs", "Home"), ("name", "Jo")])
    fields = parse_multipart(body, BOUNDARY)
    assert fields == {"needs": ["Auto", "Home"], "name": ["Jo"]}
    # the form uses the first one
    form = parse_body(body, f"multipart/form-data; boundary={BOUNDARY}")
    assert form.needs == "Auto"


def test_multipart_skips_file_parts():
    body = (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="name"\r\n'
        "\r\n"
        "Jo\r\n"
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="policy"; filename="policy.pdf"\r\n'
        "Content-Type: application/pdf\r\n"
        "\r\n"
    ).encode() + b"%PDF-1.4\x00\xff\xfe binary\r\n" + f"--{BOUNDARY}--\r\n".encode()
    assert parse_multipart(body, BOUNDARY) == {"name": ["Jo"]}


def test_multipart_invalid_utf8_is_replaced():
    body = (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="name"\r\n'
        "\r\n"
    ).encode() + b"Jo\xff\r\n" + f"--{BOUNDARY}--\r\n".encode()
    assert parse_multipart(body, BOUNDARY) == {"name": ["Jo\ufffd"]}


def test_multipart_garbage_raises_parse_error():
    with pytest.raises(ParseError):
        parse_multipart(b"this is not a multipart body", BOUNDARY)


def test_multipart_empty_boundary_raises():
    with pytest.raises(ParseError):
        parse_multipart(multipart_body([("name", "Jo")]), "")


@pytest.mark.parametrize("content_type", [
    f"Multipart/Form-Data; boundary={BOUNDARY}",
    f"MULTIPART/FORM-DATA; boundary={BOUNDARY}",
])
def test_multipart_media_type_is_case_insensitive(content_type):
    body = multipart_body([("name", "Jo"), ("email", "jo@x.com")])
    form = parse_body(body, content_type)
    assert form.name == "Jo"
    assert form.email == "jo@x.com"


def test_multipart_without_closing_boundary_raises():
    """A truncated body is an error rather than a form with its last field missing."""
    body = multipart_body([("name", "Jo"), ("email", "jo@x.com")])
    truncated = body[: -len(f"--{BOUNDARY}--\r\n")]
    with pytest.raises(ParseError):
        parse_multipart(truncated, BOUNDARY)
    with pytest.raises(ParseError):
        parse_body(truncated, f"multipart/form-data; boundary={BOUNDARY}")
