from __future__ import annotations

import re

from .errors import ValidationError


def slugify(text: str) -> str:
    """Convert an admin-entered identifier into a folder name.

    May return an empty string for input without any letters or digits.
    """
    return re.sub(r"[^a-z0-9]+", "-", str(text or "").lower()).strip("-")


def require_slug(text: str, label: str = "ID") -> str:
    slug = slugify(text)
    if not slug:
        raise ValidationError(f"{label} must contain at least one letter or digit.")
    return slug


def safe_segment(value: str, label: str = "ID") -> str:
    """Validate a single path segment taken from a URL."""
    cleaned = str(value or "").strip()
    if not cleaned or cleaned.startswith(".") or "/" in cleaned or "\\" in cleaned:
        raise ValidationError(f"Invalid {label}.")
    return cleaned
