"""Slug normalization for news articles and seasons."""

import re
import unicodedata
from typing import Any


def normalize_slug(value: Any) -> str:
    """Convert caller input into a URL-safe slug.

    Args:
        value: Raw slug or title (e.g., "  Temporada 2025 Verão ")

    Returns:
        Normalized slug (e.g., "temporada-2025-verao"), or "" when nothing
        usable remains.
    """
    if value is None:
        return ""

    # Fold accents (é -> e) before dropping non-ascii characters
    normalized = unicodedata.normalize("NFKD", str(value).strip())
    lower = normalized.encode("ascii", "ignore").decode("ascii").lower()

    hyphenated = re.sub(r"\s+", "-", lower)
    cleaned = re.sub(r"[^a-z0-9-]", "", hyphenated)
    collapsed = re.sub(r"-+", "-", cleaned)

    return collapsed.strip("-")


def normalize_lookup_slug(value: str) -> str:
    """Trim and lowercase a slug taken from a public URL path."""
    return (value or "").strip().lower()
