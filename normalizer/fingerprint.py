"""normalizer/fingerprint.py — source document fingerprint (path or URL)."""

from __future__ import annotations

import posixpath
import re

_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*)://", re.IGNORECASE)


def document_fingerprint(path_or_url: str | None) -> str | None:
    """
    Case- and separator-insensitive key of a resolved source file or URL.

      "D:\\Dokumenti\\RS\\PDF\\Zakon o radu.pdf"  → "d:/dokumenti/rs/pdf/zakon o radu.pdf"
      "HTTPS://Site.ba//zakoni/12.pdf"            → "https://site.ba/zakoni/12.pdf"
    """
    if not path_or_url:
        return None
    raw = path_or_url.strip().replace("\\", "/")
    if not raw:
        return None

    m = _SCHEME_RE.match(raw)
    if m:
        scheme = m.group(1)
        rest = re.sub(r"/{2,}", "/", raw[m.end():])
        return f"{scheme}://{rest}".lower()

    norm = posixpath.normpath(raw)
    return norm.lower()


def law_fingerprint(document_path: str | None, source_url: str | None) -> str | None:
    """Resolved path wins over the URL it was downloaded from."""
    return document_fingerprint(document_path) or document_fingerprint(source_url)
