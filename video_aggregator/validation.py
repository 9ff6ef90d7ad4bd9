import re

from .config import MAX_QUERY_LENGTH


class ValidationError(ValueError):
    """Raised when a request is rejected before any network work starts."""


DANGEROUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"eval\(", re.IGNORECASE),
    re.compile(r"expression\(", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]


def validate_query(query) -> str:
    if not query or not isinstance(query, str):
        raise ValidationError("A search query is required")

    trimmed = query.strip()
    if not trimmed:
        raise ValidationError("The search query is empty")
    if len(trimmed) > MAX_QUERY_LENGTH:
        raise ValidationError(f"The search query is too long (max {MAX_QUERY_LENGTH} characters)")

    if any(pattern.search(trimmed) for pattern in DANGEROUS_PATTERNS):
        raise ValidationError("Invalid search query")

    return trimmed
