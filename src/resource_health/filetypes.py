"""File type detection from leading magic bytes."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class FileType:
    ext: str
    mime: str


PDF = FileType("pdf", "application/pdf")

SIGNATURES: list[tuple[bytes, FileType]] = [
    (b"%PDF-", PDF),
    (b"\x89PNG\r\n\x1a\n", FileType("png", "image/png")),
    (b"\xff\xd8\xff", FileType("jpg", "image/jpeg")),
    (b"GIF87a", FileType("gif", "image/gif")),
    (b"GIF89a", FileType("gif", "image/gif")),
    (b"PK\x03\x04", FileType("zip", "application/zip")),
    (b"\x1f\x8b", FileType("gz", "application/gzip")),
]

HTML_PREFIX = re.compile(rb"^\s*(?:<!doctype html|<html)", re.IGNORECASE)


def sniff_file_type(data: bytes) -> FileType | None:
    """Return the file type announced by ``data``'s signature, if known."""
    for signature, file_type in SIGNATURES:
        if data.startswith(signature):
            return file_type

    if HTML_PREFIX.match(data[:512]):
        return FileType("html", "text/html")

    return None
