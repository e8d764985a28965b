"""Multipart/form-data decoding for uploaded recipe archives."""

import logging
from dataclasses import dataclass, field

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from .errors import MalformedContainer

logger = logging.getLogger(__name__)


@dataclass
class Part:
    """One decoded multipart part."""

    headers: dict[str, str] = field(default_factory=dict)
    data: bytes = b""

    def _disposition_params(self) -> dict[bytes, bytes]:
        _, params = parse_options_header(self.headers.get("content-disposition", ""))
        return params

    @property
    def name(self) -> str | None:
        value = self._disposition_params().get(b"name")
        return value.decode("utf-8", "replace") if value is not None else None

    @property
    def filename(self) -> str | None:
        value = self._disposition_params().get(b"filename")
        return value.decode("utf-8", "replace") if value is not None else None


def boundary_from_content_type(content_type: str | None) -> str | None:
    """Boundary declared in a multipart Content-Type header, if any."""
    if not content_type:
        return None
    mime, params = parse_options_header(content_type)
    if not mime.startswith(b"multipart/"):
        return None
    boundary = params.get(b"boundary")
    return boundary.decode("latin-1") if boundary else None


def parse_parts(body: bytes, boundary: str) -> list[Part]:
    """
    Decode a multipart body into its parts.

    Raises:
        MalformedContainer: the body does not follow the declared boundary
    """
    parts: list[Part] = []
    current: Part | None = None
    chunks: list[bytes] = []
    header_field = bytearray()
    header_value = bytearray()

    def on_part_begin():
        nonlocal current
        current = Part()
        chunks.clear()

    def on_header_field(data, start, end):
        header_field.extend(data[start:end])

    def on_header_value(data, start, end):
        header_value.extend(data[start:end])

    def on_header_end():
        name = bytes(header_field).decode("latin-1").strip().lower()
        current.headers[name] = bytes(header_value).decode("latin-1").strip()
        header_field.clear()
        header_value.clear()

    def on_part_data(data, start, end):
        chunks.append(bytes(data[start:end]))

    def on_part_end():
        current.data = b"".join(chunks)
        parts.append(current)

    callbacks = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as e:
        raise MalformedContainer(f"Invalid multipart body: {e}") from e

    return parts


def extract_file_payload(body: bytes, content_type: str | None) -> bytes:
    """
    Find the uploaded file inside a request body.

    The file is the first part whose Content-Disposition declares a
    filename. Without a multipart boundary the body itself is the file.
    """
    boundary = boundary_from_content_type(content_type)
    if boundary is None:
        return body

    parts = parse_parts(body, boundary)
    for part in parts:
        if part.filename is not None:
            logger.info(f"Found uploaded file '{part.filename}' ({len(part.data)} bytes)")
            return part.data

    raise MalformedContainer(f"No file part among {len(parts)} multipart parts")
