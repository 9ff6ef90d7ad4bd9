import logging
import math

from .config import VIDEOS_PER_PAGE
from .models import VideoRecord
from .validation import ValidationError


class UnknownSortError(ValidationError):
    pass


def duration_to_seconds(duration_str: str):
    if not duration_str or not isinstance(duration_str, str):
        return 0
    parts = duration_str.strip().split(":")
    try:
        parts = [int(p) for p in parts]
        if len(parts) == 3:
            hours, minutes, seconds = parts
        elif len(parts) == 2:
            hours = 0
            minutes, seconds = parts
        elif len(parts) == 1:
            hours = 0
            minutes = 0
            seconds = parts[0]
        else:
            return 0
        return hours * 3600 + minutes * 60 + seconds
    except ValueError:
        logging.debug(f"Invalid duration format: {duration_str}")
        return 0


def timestamp_from_id(record_id: str) -> int:
    for part in (record_id or "").split("-"):
        if part.isdigit() and int(part) > 1_000_000_000_000:
            return int(part)
    return 0


SORTS = {
    "duration-desc": (lambda v: duration_to_seconds(v.duration), True),
    "duration-asc": (lambda v: duration_to_seconds(v.duration), False),
    "date-desc": (lambda v: timestamp_from_id(v.id), True),
    "date-asc": (lambda v: timestamp_from_id(v.id), False),
    "title-asc": (lambda v: v.title.casefold(), False),
    "title-desc": (lambda v: v.title.casefold(), True),
    "source-asc": (lambda v: v.source.casefold(), False),
}


def check_sort(sort: str):
    if sort and sort != "default" and sort not in SORTS:
        raise UnknownSortError(f"Unknown sort order: {sort}")


def sort_videos(videos: list[VideoRecord], sort: str = "default") -> list[VideoRecord]:
    check_sort(sort)
    if not sort or sort == "default":
        return list(videos)
    key, reverse = SORTS[sort]
    return sorted(videos, key=key, reverse=reverse)


def paginate(videos: list, page: int, per_page: int = VIDEOS_PER_PAGE) -> tuple[list, dict]:
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if per_page < 1:
        raise ValidationError("perPage must be 1 or greater")

    start = (page - 1) * per_page
    info = {
        "page": page,
        "perPage": per_page,
        "totalPages": math.ceil(len(videos) / per_page),
        "totalResults": len(videos),
    }
    return videos[start:start + per_page], info
