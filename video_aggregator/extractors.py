import re
from typing import Callable
from urllib.parse import urljoin, urlparse

from bs4 import Tag

from .config import FALLBACK_TITLE_LENGTH, MIN_TITLE_LENGTH

TITLE_SELECTORS = [
    "h3",
    "h2",
    "h1",
    ".title",
    '[class*="title"]',
    "a",
    ".video-title",
    '[class*="video-title"]',
    '[class*="name"]',
    "span",
    "div",
]

TITLE_ATTRIBUTES = ["title", "alt", "data-title"]

IMAGE_SELECTORS = [
    "img",
    ".thumbnail img",
    '[class*="thumbnail"] img',
    '[class*="thumb"] img',
    ".poster img",
    '[class*="poster"] img',
    ".cover img",
    '[class*="cover"] img',
    ".image img",
    '[class*="image"] img',
    ".pic img",
    '[class*="pic"] img',
    "picture img",
    "picture source",
    ".video-thumbnail img",
    ".video-poster img",
]

IMAGE_ATTRIBUTES = [
    "src",
    "data-src",
    "data-lazy-src",
    "data-original",
    "data-url",
    "data-image",
    "data-thumb",
    "data-thumbnail",
    "data-poster",
    "data-cover",
    "data-img",
    "srcset",
    "data-srcset",
]

BACKGROUND_ATTRIBUTES = ["data-bg", "data-background", "data-bg-image"]

RESULT_BLOCK_CLASSES = ["g", "result", "search-result"]

DURATION_SELECTORS = [".duration", '[class*="duration"]', '[class*="time"]']

KNOWN_ORIGINS = {
    "bilibili.com": "https://www.bilibili.com",
    "douga4.top": "https://av.douga4.top",
    "javmix.tv": "https://javmix.tv",
    "ppp.porn": "https://ppp.porn",
    "jpdmv.com": "https://jpdmv.com",
    "mat6tube.com": "https://mat6tube.com",
}

BACKGROUND_URL_RE = re.compile(r"url\(\s*['\"]?([^'\")]+)['\"]?\s*\)")


def _text(elem: Tag) -> str:
    return elem.get_text(" ", strip=True)


def _attr(elem: Tag, name: str) -> str:
    value = elem.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


# === 🏷️ TITLE ===
def _title_from_descendants(elem: Tag) -> str:
    for selector in TITLE_SELECTORS:
        found = elem.select_one(selector)
        if found is None:
            continue
        text = _text(found)
        if len(text) > MIN_TITLE_LENGTH:
            return text
    return ""


def _title_from_full_text(elem: Tag) -> str:
    text = _text(elem)
    if len(text) > MIN_TITLE_LENGTH:
        return text[:FALLBACK_TITLE_LENGTH]
    return ""


def _title_from_attributes(elem: Tag) -> str:
    for name in TITLE_ATTRIBUTES:
        value = _attr(elem, name)
        if value:
            return value
    return ""


TITLE_STRATEGIES: list[Callable[[Tag], str]] = [
    _title_from_descendants,
    _title_from_full_text,
    _title_from_attributes,
]


def extract_title(elem: Tag | None) -> str:
    if elem is None:
        return ""
    for strategy in TITLE_STRATEGIES:
        title = strategy(elem)
        if title:
            return title
    return ""


# === 🖼️ THUMBNAIL ===
def _probe_image(img: Tag | None) -> str:
    if img is None:
        return ""
    for name in IMAGE_ATTRIBUTES:
        value = _attr(img, name)
        if not value:
            continue
        if "srcset" in name:
            value = value.split(",")[0].strip().split(" ")[0]
        if value and not value.startswith("data:"):
            return value
    return ""


def _from_descendant_images(elem: Tag) -> str:
    for selector in IMAGE_SELECTORS:
        thumbnail = _probe_image(elem.select_one(selector))
        if thumbnail:
            return thumbnail
    return ""


def _from_self(elem: Tag) -> str:
    if elem.name == "img":
        return _probe_image(elem)
    return ""


def _from_parent_image(elem: Tag) -> str:
    parent = elem.parent
    if isinstance(parent, Tag):
        return _probe_image(parent.find("img"))
    return ""


def _from_result_block(elem: Tag) -> str:
    block = elem.find_parent(class_=RESULT_BLOCK_CLASSES)
    if block is not None:
        return _probe_image(block.find("img"))
    return ""


def _background_url(elem: Tag | None) -> str:
    if not isinstance(elem, Tag):
        return ""
    match = BACKGROUND_URL_RE.search(_attr(elem, "style"))
    return match.group(1).strip() if match else ""


def _from_style(elem: Tag) -> str:
    return _background_url(elem)


def _from_parent_style(elem: Tag) -> str:
    return _background_url(elem.parent)


def _from_data_background(elem: Tag) -> str:
    for name in BACKGROUND_ATTRIBUTES:
        value = _attr(elem, name)
        if len(value) > 5:
            return value
    return ""


THUMBNAIL_STRATEGIES: list[Callable[[Tag], str]] = [
    _from_descendant_images,
    _from_self,
    _from_parent_image,
    _from_result_block,
    _from_style,
    _from_parent_style,
    _from_data_background,
]


def _context_origin(elem: Tag | None, base_url: str) -> str:
    link = None
    if elem is not None:
        link = elem if elem.name == "a" else elem.find_parent("a")
    hints = [_attr(link, "href") if link is not None else "", base_url]
    for hint in hints:
        for domain, origin in KNOWN_ORIGINS.items():
            if domain in hint:
                return origin
    if base_url.startswith(("http://", "https://")):
        parsed = urlparse(base_url)
        return f"https://{parsed.netloc}"
    return ""


def normalize_thumbnail(thumbnail: str, elem: Tag | None = None, base_url: str = "") -> str:
    if not thumbnail:
        return ""
    if thumbnail.startswith("//"):
        return "https:" + thumbnail
    if thumbnail.startswith("http://"):
        return "https://" + thumbnail[len("http://"):]
    if thumbnail.startswith("https://"):
        return thumbnail
    origin = _context_origin(elem, base_url)
    return urljoin(origin + "/", thumbnail) if origin else thumbnail


def extract_thumbnail(elem: Tag | None, base_url: str = "") -> str:
    if elem is None:
        return ""
    for strategy in THUMBNAIL_STRATEGIES:
        thumbnail = strategy(elem)
        if thumbnail:
            return normalize_thumbnail(thumbnail, elem, base_url)
    return ""


# === ⏱️ DURATION ===
def extract_duration(elem: Tag | None) -> str:
    if elem is None:
        return ""
    for selector in DURATION_SELECTORS:
        found = elem.select_one(selector)
        if found is not None:
            text = _text(found)
            if text:
                return text

    block = elem.find_parent(class_=RESULT_BLOCK_CLASSES)
    if block is not None:
        found = block.select_one(".duration")
        if found is not None:
            return _text(found)
    return ""
