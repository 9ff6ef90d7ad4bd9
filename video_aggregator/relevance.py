import math
import re

from .config import RELAXED_CHAR_RATIO, RELAXED_TOKEN_RATIO, STRICT_TOKEN_RATIO

ID_CODE_RE = re.compile(r"\[([A-Z]+)-(\d+)\]")


def query_tokens(query: str) -> list[str]:
    return query.lower().split()


def required_matches(token_count: int, strict_mode: bool) -> int:
    ratio = STRICT_TOKEN_RATIO if strict_mode else RELAXED_TOKEN_RATIO
    return max(1, math.ceil(round(token_count * ratio, 6)))


def is_relevant(title: str, query: str, strict_mode: bool = True) -> bool:
    if not title or not query:
        return False

    tokens = query_tokens(query)
    if not tokens:
        return False

    title_lower = title.lower()
    if len(tokens) == 1:
        return tokens[0] in title_lower

    matching = sum(1 for token in tokens if token in title_lower)
    return matching >= required_matches(len(tokens), strict_mode)


def character_overlap(title: str, query: str) -> tuple[int, int]:
    title_lower = title.lower()
    chars = [c for c in query.lower() if not c.isspace()]
    return sum(1 for c in chars if c in title_lower), len(chars)


def is_relevant_with_id(title: str, query: str, strict_mode: bool = True) -> bool:
    """Match against titles tagged with a code like ``[ABC-123]``."""
    if not title or not query:
        return False

    query_lower = query.lower().strip()
    if not query_lower:
        return False

    title_lower = title.lower()
    if query_lower in title_lower:
        return True

    code = ID_CODE_RE.search(title)
    if code and query_lower in code.group(1).lower():
        return True

    if is_relevant(title, query, strict_mode):
        return True

    if strict_mode:
        return False

    matched, total = character_overlap(title, query)
    if total == 0:
        return False
    if matched == total:
        return True
    return total >= 2 and matched >= math.ceil(total * RELAXED_CHAR_RATIO)
