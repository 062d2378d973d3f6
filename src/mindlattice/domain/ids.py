"""Content hashing and id generation.

The store never generates ids; it only validates and stores what callers
hand it. These helpers are what the CLI and services hand it:

- Content hash: SHA-256 hex digest of the UTF-8 content.
- Anchor ids: ``anc_`` + 8 hex chars of SHA-256 of the normalized label.
- Link ids: ``lnk_`` + 8 hex chars of SHA-256 of ``source->target#kind``.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "anchor": re.compile(r"^anc_[0-9a-f]{8}$"),
    "link": re.compile(r"^lnk_[0-9a-f]{8}$"),
}

ID_PREFIXES: dict[str, str] = {
    "anchor": "anc_",
    "link": "lnk_",
}


def normalize_label(label: str) -> str:
    """Normalize a label for id generation.

    Lowercases, applies NFKC normalization, strips punctuation,
    and collapses whitespace.
    """
    text = unicodedata.normalize("NFKC", label.lower())
    text = re.sub(r"[^\w\s]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def content_hash(content: str) -> str:
    """Stable SHA-256 hex digest of *content*."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def generate_anchor_id(label: str) -> str:
    digest = content_hash(normalize_label(label))[:8]
    return f"{ID_PREFIXES['anchor']}{digest}"


def generate_link_id(source: str, target: str, kind: int = 0) -> str:
    digest = content_hash(f"{source}->{target}#{kind}")[:8]
    return f"{ID_PREFIXES['link']}{digest}"


def validate_id(value: str, kind: str) -> bool:
    """Check whether *value* matches the generated-id pattern for *kind*."""
    pattern = ID_PATTERNS.get(kind)
    if pattern is None:
        return False
    return pattern.match(value) is not None
