import logging
import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .config import (
    CANONICAL_TITLE_LENGTH,
    EXCLUDED_SOURCES,
    EXCLUDED_URL_MARKERS,
    TITLE_SIMILARITY,
    URL_TITLE_SIMILARITY,
)
from .models import VideoRecord


# === 🧽 CANONICAL FORMS ===
def canonicalize_url(url: str) -> str:
    if not url:
        return ""

    normalized = re.sub(r"^http://", "https://", url.strip(), flags=re.IGNORECASE)
    try:
        parts = urlsplit(normalized)
        query = urlencode(sorted(parse_qsl(parts.query, keep_blank_values=True)))
        path = parts.path.rstrip("/")
        return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, query, ""))
    except ValueError:
        return normalized.split("#")[0].rstrip("/")


def url_base(canonical_url: str) -> str:
    return canonical_url.split("?")[0].split("#")[0]


def canonicalize_title(title: str) -> str:
    if not title:
        return ""
    return " ".join(title.lower().split())[:CANONICAL_TITLE_LENGTH]


def title_similarity(title1: str, title2: str) -> float:
    if not title1 or not title2:
        return 0.0
    if title1 == title2:
        return 1.0

    if title1 in title2 or title2 in title1:
        shorter, longer = sorted((title1, title2), key=len)
        return len(shorter) / len(longer)

    words1 = title1.split()
    words2 = title2.split()
    if not words1 or not words2:
        return 0.0

    common = [w for w in words1 if w in words2]
    return len(common) / max(len(words1), len(words2))


# === 🧹 DEDUP ===
def is_excluded(record: VideoRecord) -> bool:
    if record.source.lower() in EXCLUDED_SOURCES:
        return True
    url = record.url.lower()
    return any(marker in url for marker in EXCLUDED_URL_MARKERS)


class _Key:
    __slots__ = ("url", "base", "title")

    def __init__(self, record: VideoRecord):
        self.url = canonicalize_url(record.url)
        self.base = url_base(self.url)
        self.title = canonicalize_title(record.title)


def _matches(new: _Key, existing: _Key) -> bool:
    if new.url and new.url == existing.url:
        return True

    if not new.title or not existing.title:
        return False

    similarity = title_similarity(new.title, existing.title)
    if new.base and new.base == existing.base and similarity > URL_TITLE_SIMILARITY:
        return True
    return similarity > TITLE_SIMILARITY


def is_duplicate(record: VideoRecord, accepted: list[VideoRecord]) -> bool:
    key = _Key(record)
    return any(_matches(key, _Key(existing)) for existing in accepted)


def dedup(records: list[VideoRecord]) -> list[VideoRecord]:
    unique: list[VideoRecord] = []
    keys: list[_Key] = []

    for record in records:
        if not record.url:
            continue
        key = _Key(record)
        if any(_matches(key, existing) for existing in keys):
            continue
        unique.append(record)
        keys.append(key)

    logging.debug(f"DEDUP - {len(records)} -> {len(unique)}")
    return unique
