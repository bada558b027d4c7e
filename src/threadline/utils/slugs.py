"""URL slug helpers for thread titles."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Collection

_NON_WORD = re.compile(r"[^\w-]+")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Lowercase ASCII-ish slug: accents stripped, whitespace turned into hyphens."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _WHITESPACE.sub("-", stripped.lower().strip())
    slug = _NON_WORD.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-") or "thread"


def unique_slug(text: str, taken: Collection[str]) -> str:
    """Return ``slugify(text)``, suffixed ``-1``, ``-2``... until not in ``taken``."""
    base = slugify(text)
    candidate = base
    counter = 1
    while candidate in taken:
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
