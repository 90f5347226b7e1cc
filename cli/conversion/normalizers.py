"""
Field Normalizers

Pure helpers that turn TickTick field values into Org-mode and Denote tokens:
dates, repeat rules, filename slugs and keywords.

Usage:
    from conversion.normalizers import normalize_date, normalize_recurrence, slugify

    normalize_date("2024-01-15T09:00:00+0000")   # '2024-01-15 09:00'
    normalize_recurrence("Every 2 days")          # '+2d'
    slugify("Café déjà vu!")                      # 'cafe-deja-vu'
"""

import logging
import re
import unicodedata
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)

ORG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
DENOTE_ID_FORMAT = "%Y%m%dT%H%M00"

# Order matters: first contained keyword wins
RECURRENCE_KEYWORDS = (
    ("DAILY", "+1d"),
    ("WEEKDAY", ".+1d"),
    ("WEEKLY", "+1w"),
    ("MONTHLY", "+1m"),
    ("YEARLY", "+1y"),
)

NUMBERED_RECURRENCE = re.compile(r"(\d+)\s*(DAY|WEEK|MONTH|YEAR)S?", re.IGNORECASE)
WEEKDAY_RECURRENCE = re.compile(
    r"(EVERY\s)?(\d+\s)?(MONDAY|TUESDAY|WEDNESDAY|THURSDAY|FRIDAY|SATURDAY|SUNDAY)",
    re.IGNORECASE,
)

_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse a TickTick date value.

    Accepts ISO-8601 with a ``Z`` suffix, ``+HH:MM`` or ``+HHMM`` offsets, and
    plain dates. Returns None for empty or unparseable input.
    """
    if not raw or not raw.strip():
        return None

    text = raw.strip()
    if "T" in text or " " in text:
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _COMPACT_OFFSET.sub(r"\1:\2", text)

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Could not parse date value: {raw!r}")
        return None


def format_timestamp(value: datetime) -> str:
    return value.strftime(ORG_TIMESTAMP_FORMAT)


def normalize_date(raw: Optional[str]) -> Optional[str]:
    """
    Convert a TickTick date to Org-mode's ``YYYY-MM-DD HH:MM``.

    The value stays in the zone it was written in. Unparseable input is
    returned unchanged, so callers must not assume the canonical format.
    """
    if not raw or not raw.strip():
        return None

    parsed = parse_timestamp(raw)
    if parsed is None:
        return raw
    return format_timestamp(parsed)


def normalize_recurrence(raw: Optional[str]) -> Optional[str]:
    """
    Convert a TickTick repeat rule to an Org-mode repeater.

    Rules are tried in order: keyword table, "<N> <unit>", weekday names.
    Anything else comes back unchanged.
    """
    if not raw or not raw.strip():
        return None

    upper = raw.upper()
    for keyword, token in RECURRENCE_KEYWORDS:
        if keyword in upper:
            return token

    match = NUMBERED_RECURRENCE.search(raw)
    if match:
        number, unit = match.group(1), match.group(2)
        return f"+{number}{unit[0].lower()}"

    match = WEEKDAY_RECURRENCE.search(raw)
    if match:
        count = match.group(2)
        n = int(count) if count else 1
        return f".+{n}w"

    return raw


def compact_date_token(value: datetime) -> str:
    """Denote identifier for a timestamp, e.g. ``20240115T090000``."""
    return value.strftime(DENOTE_ID_FORMAT)


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def slugify(text: Optional[str]) -> str:
    """Lowercase, accent-free, hyphen-separated title for filenames."""
    if not text:
        return ""
    cleaned = _strip_diacritics(text).lower()
    cleaned = re.sub(r"[\W_]+", "-", cleaned)
    return cleaned.strip("-")


def keywordize(tag: Optional[str]) -> str:
    """Filename keyword: like slugify but with separators removed entirely."""
    if not tag:
        return ""
    cleaned = _strip_diacritics(tag).lower()
    return re.sub(r"[\W_]+", "", cleaned)


def split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def org_tag(tag: str) -> str:
    return re.sub(r"\s+", "_", tag.strip())


def org_tag_annotation(tags: List[str]) -> str:
    """``:a:b:`` for the given tags, or an empty string when none survive."""
    cleaned = [org_tag(tag) for tag in tags if tag and tag.strip()]
    if not cleaned:
        return ""
    return ":" + ":".join(cleaned) + ":"
