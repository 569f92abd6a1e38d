from typing import Dict, List, Optional, Tuple, Union

from python_multipart.exceptions import FormParserError
from python_multipart.multipart import MultipartParser, parse_options_header

from quote_relay.errors import ParseError


class _FieldCollector:
    """Callbacks for MultipartParser; keeps the text value of every form-data part."""

    def __init__(self, charset: str):
        self.charset = charset
        self.fields: Dict[str, List[str]] = {}
        self._headers: List[Tuple[bytes, bytes]] = []
        self._header_name = b""
        self._header_value = b""
        self._name: Optional[str] = None
        self._chunks: List[bytes] = []
        self.finished = False

    def on_part_begin(self) -> None:
        self._headers = []
        self._name = None
        self._chunks = []

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers.append((self._header_name.strip().lower(), self._header_value.strip()))
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        disposition = dict(self._headers).get(b"content-disposition")
        if not disposition:
            return
        kind, options = parse_options_header(disposition)
        # file uploads carry a filename; only plain fields are collected
        if kind != b"form-data" or b"name" not in options or b"filename" in options:
            return
        self._name = options[b"name"].decode(self.charset, errors="replace")

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._name is not None:
            self._chunks.append(data[start:end])

    def on_part_end(self) -> None:
        if self._name is None:
            return
        value = b"".join(self._chunks).decode(self.charset, errors="replace").strip()
        self.fields.setdefault(self._name, []).append(value)

    def on_end(self) -> None:
        self.finished = True

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_end": self.on_end,
        }


def parse_multipart(
    body: Union[bytes, str], boundary: Union[bytes, str], charset: str = "utf-8"
) -> Dict[str, List[str]]:
    """
    Parse a multipart/form-data body into {field name: [values...]}.

    Values are decoded text, trimmed, in the order they appear; a field sent
    more than once keeps every value. Parts with a filename are skipped.
    Raises ParseError on an empty boundary, a malformed stream or a body
    without its closing boundary.
    """
    if isinstance(boundary, str):
        boundary = boundary.encode("latin-1")
    boundary = boundary.strip().strip(b'"')
    if not boundary:
        raise ParseError("No boundary found in multipart data")
    if isinstance(body, str):
        body = body.encode(charset)

    collector = _FieldCollector(charset)
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        parser.write(body)
        parser.finalize()
    except FormParserError as e:
        raise ParseError(f"Malformed multipart body: {e}") from e
    if not collector.finished:
        raise ParseError("Malformed multipart body: missing closing boundary")
    return collector.fields
