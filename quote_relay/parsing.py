import json
import logging
from typing import Any, Mapping, Optional, Sequence, Union
from urllib.parse import parse_qs

from python_multipart.multipart import parse_options_header

from quote_relay.errors import ParseError
from quote_relay.schemas import FORM_FIELDS, FormSubmission
from quote_relay.utils.multipart import parse_multipart

LOG = logging.getLogger("quote_relay.parsing")

JSON_TYPE = b"application/json"
URLENCODED_TYPE = b"application/x-www-form-urlencoded"
MULTIPART_TYPE = b"multipart/form-data"


def _first(values: Mapping[str, Sequence[str]], key: str) -> Optional[str]:
    found = values.get(key)
    return found[0] if found else None


def _from_json(body: bytes) -> FormSubmission:
    try:
        data: Any = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Malformed JSON body: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("JSON body must be an object")
    # non-string values count as not supplied
    return FormSubmission(**{k: data[k] for k in FORM_FIELDS if isinstance(data.get(k), str)})


def _from_urlencoded(body: bytes) -> FormSubmission:
    values = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
    return FormSubmission(**{k: _first(values, k) for k in FORM_FIELDS})


def _from_multipart(body: bytes, boundary: Optional[bytes]) -> FormSubmission:
    if not boundary:
        raise ParseError("No boundary found in multipart data")
    values = parse_multipart(body, boundary)
    return FormSubmission(**{k: _first(values, k) for k in FORM_FIELDS})


def parse_body(body: Union[bytes, str, None], content_type: Optional[str]) -> FormSubmission:
    """
    Turn a raw request body into a FormSubmission according to its content type.

    JSON and multipart bodies raise ParseError when malformed. Anything that is
    neither is decoded as URL-encoded key/value pairs, which never fails.
    """
    if body is None:
        body = b""
    elif isinstance(body, str):
        body = body.encode("utf-8")
    media_type, options = parse_options_header(content_type or "")
    media_type = media_type.strip().lower()

    if media_type == JSON_TYPE:
        LOG.info("Parsing JSON data")
        return _from_json(body)
    if media_type == MULTIPART_TYPE:
        LOG.info("Parsing multipart form data")
        return _from_multipart(body, options.get(b"boundary"))
    if media_type == URLENCODED_TYPE:
        LOG.info("Parsing URL-encoded data")
    else:
        LOG.info("Unknown content type %r, attempting to parse as URL-encoded", content_type)
    return _from_urlencoded(body)
