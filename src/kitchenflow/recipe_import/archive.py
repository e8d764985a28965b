"""Paprika archive import.

A .paprikarecipes export is a zip archive. Each entry ending in
.paprikarecipe is itself gzip-compressed JSON holding one recipe.
"""

import gzip
import io
import json
import logging
import zipfile
import zlib

from kitchenflow.config import settings

from .assembler import build_from_archive_entry
from .errors import MalformedContainer, MalformedEntry
from .models import ImportResult
from .multipart import extract_file_payload

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
SINGLE_ENTRY_NAME = "recipe.paprikarecipe"


class ArchiveReader:
    """
    Read recipe entries out of an uploaded payload.

    Accepts a zip archive, or a bare gzip payload (a single exported
    recipe) which is read as a one-entry archive.
    """

    def __init__(self, payload: bytes, suffix: str | None = None):
        self.suffix = (suffix or settings.archive_entry_suffix).lower()
        self._zip: zipfile.ZipFile | None = None
        self._single: bytes | None = None

        if payload[:2] == GZIP_MAGIC:
            self._single = payload
            return

        try:
            self._zip = zipfile.ZipFile(io.BytesIO(payload), "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise MalformedContainer(f"Could not open archive: {e}") from e

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()

    def names(self) -> list[str]:
        """Recipe entry names, in archive order."""
        if self._single is not None:
            return [SINGLE_ENTRY_NAME]
        return [
            info.filename
            for info in self._zip.infolist()
            if not info.is_dir() and info.filename.lower().endswith(self.suffix)
        ]

    def read(self, name: str) -> bytes:
        """Raw (still gzip-compressed) bytes of one entry."""
        if self._single is not None:
            return self._single
        return self._zip.read(name)


def decode_entry(name: str, raw: bytes) -> dict:
    """
    Decompress and decode one entry to its Paprika JSON object.

    Raises:
        MalformedEntry: bad gzip stream, bad JSON, or not a JSON object
    """
    try:
        decompressed = gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as e:
        raise MalformedEntry(name, f"gzip decompression failed: {e}") from e

    try:
        data = json.loads(decompressed.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedEntry(name, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedEntry(name, f"expected a JSON object, got {type(data).__name__}")
    return data


def import_archive(body: bytes, content_type: str | None = None) -> list[ImportResult]:
    """
    Import every recipe of an uploaded Paprika archive.

    Args:
        body: Raw request body (multipart/form-data or the file itself)
        content_type: The request's Content-Type header

    Returns:
        One ImportResult per readable entry, in archive order. Entries
        that fail to decode are logged and left out.

    Raises:
        MalformedContainer: the upload or the archive cannot be opened
    """
    payload = extract_file_payload(body, content_type)

    results = []
    with ArchiveReader(payload) as reader:
        names = reader.names()
        logger.info(f"Archive holds {len(names)} recipe entries")

        for name in names:
            try:
                data = decode_entry(name, reader.read(name))
                results.append(build_from_archive_entry(data))
            except Exception as e:
                logger.warning(f"Skipping archive entry '{name}': {e}")

    logger.info(f"Imported {len(results)}/{len(names)} archive entries")
    return results
