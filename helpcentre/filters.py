from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable

BANNER_PRIORITY = {"error": 0, "caution": 1, "info": 2, "resolved": 3}


def applies_to_country(item: Any, country_code: str) -> bool:
    """True if `item` has no country restriction or lists `country_code`."""
    if not isinstance(item, dict):
        return True
    countries = item.get("countries")
    if not countries:
        return True
    code = str(country_code or "").lower()
    return any(str(c).lower() == code for c in countries)


def filter_by_country(items: Any, country_code: str) -> Any:
    if not isinstance(items, list):
        return items
    return [item for item in items if applies_to_country(item, country_code)]


def _pattern_matches(pattern: str, path: str) -> bool:
    # ":productId" style placeholders match exactly one path segment.
    parts = re.split(r"(:[^/]+)", pattern)
    regex = "".join("[^/]+" if part.startswith(":") else re.escape(part) for part in parts)
    return re.fullmatch(regex, path) is not None


def scope_matches(
    record: dict[str, Any],
    *,
    product_id: str | None = None,
    topic_id: str | None = None,
    path: str | None = None,
) -> bool:
    scope = record.get("scope") or {"type": "global"}
    scope_type = scope.get("type", "global")
    if scope_type == "global":
        return True
    if scope_type == "product":
        return bool(product_id) and product_id in (scope.get("productIds") or [])
    if scope_type == "topic":
        if not (product_id and topic_id):
            return False
        return product_id in (scope.get("productIds") or []) and topic_id in (scope.get("topicIds") or [])
    if scope_type == "page":
        if path is None:
            return False
        return any(_pattern_matches(str(p), path) for p in scope.get("pagePatterns") or [])
    return False


def filter_scoped(
    records: Iterable[dict[str, Any]],
    *,
    product_id: str | None = None,
    topic_id: str | None = None,
    path: str | None = None,
    active_only: bool = False,
) -> list[dict[str, Any]]:
    selected = []
    for record in records:
        if not isinstance(record, dict):
            continue
        if active_only and not record.get("active"):
            continue
        if scope_matches(record, product_id=product_id, topic_id=topic_id, path=path):
            selected.append(record)
    return selected


def sort_banners(banners: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(banners, key=lambda b: BANNER_PRIORITY.get(str(b.get("state")), len(BANNER_PRIORITY)))


def parse_date(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_by_date_desc(notes: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Newest first; notes without a parseable date go last in input order."""
    dated = [(parse_date(n.get("date") if isinstance(n, dict) else None), n) for n in notes]
    with_date = sorted((pair for pair in dated if pair[0] is not None), key=lambda pair: pair[0], reverse=True)
    without = [n for d, n in dated if d is None]
    return [n for _, n in with_date] + without
