import logging
import re
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable
from urllib.parse import quote, urljoin

import tldextract
from bs4 import BeautifulSoup, Tag

from .config import (
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_RESULT_CAP,
    FETCH_TIMEOUT,
    MIN_TITLE_LENGTH,
)
from .extractors import extract_duration, extract_thumbnail, extract_title
from .fetcher import FetchFailure, FetchResult, fetch_html, fetch_rendered_html
from .models import AdapterFailure, AdapterOutcome, AdapterSuccess, VideoRecord
from .relevance import ID_CODE_RE, is_relevant, is_relevant_with_id

Fetch = Callable[..., Awaitable[FetchResult]]
HrefResolver = Callable[[Tag], str]

_tld = tldextract.TLDExtract(suffix_list_urls=())


def get_main_domain(url: str) -> str:
    ext = _tld(url)
    if ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return ext.domain.lower()


def encode_query(query: str) -> str:
    return quote(query, safe="")


# === 🔗 HREF RESOLVERS ===
def _href(elem) -> str:
    if not isinstance(elem, Tag):
        return ""
    value = elem.get("href") or ""
    return value.strip() if isinstance(value, str) else ""


def own_href(elem: Tag) -> str:
    return _href(elem)


def descendant_href(elem: Tag) -> str:
    return _href(elem.find("a", href=True))


def parent_href(elem: Tag) -> str:
    parent = elem.parent
    if not isinstance(parent, Tag):
        return ""
    if parent.name == "a":
        return _href(parent)
    return _href(parent.find("a", href=True))


def grandparent_href(elem: Tag) -> str:
    parent = elem.parent
    if not isinstance(parent, Tag):
        return ""
    return parent_href(parent)


def id_href(path_template: str) -> HrefResolver:
    """Build a resolver that synthesizes a link from a ``[ABC-123]`` code in the element text."""

    def resolve(elem: Tag) -> str:
        match = ID_CODE_RE.search(elem.get_text(" ", strip=True))
        if not match:
            return ""
        return path_template.format(id=f"{match.group(1)}-{match.group(2)}")

    return resolve


DEFAULT_RESOLVERS: list[HrefResolver] = [own_href, descendant_href, parent_href]


def own_title(elem: Tag) -> str:
    text = elem.get_text(" ", strip=True)
    if len(text) >= MIN_TITLE_LENGTH:
        return text
    link = elem.find("a")
    if link is not None:
        text = link.get_text(" ", strip=True) or _title_attr(link)
    return text or _title_attr(elem)


def _title_attr(elem: Tag) -> str:
    value = elem.get("title") or ""
    return value.strip() if isinstance(value, str) else ""


# === 🧾 SITE CONFIG ===
@dataclass
class SiteConfig:
    name: str
    base_url: str
    candidate_urls: Callable[[str], list[str]]
    result_selectors: list[str]
    url_pattern: re.Pattern | tuple[str, ...]
    label: str = ""
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    extra_headers: dict = field(default_factory=dict)
    request_headers: Callable[[str], dict] | None = None
    link_href_resolvers: list[HrefResolver] = field(
        default_factory=lambda: list(DEFAULT_RESOLVERS)
    )
    allowed_domains: tuple[str, ...] = ()
    embed_url_transform: Callable[[str], str | None] | None = None
    max_results: int = DEFAULT_RESULT_CAP
    timeout: float = FETCH_TIMEOUT
    mode: str = "search"
    relevance: Callable[[str, str, bool], bool] | None = None
    title_extractor: Callable[[Tag], str] | None = None
    id_thumbnail_template: str = ""
    render_js: bool = False
    enabled: bool = True

    def __post_init__(self):
        if self.mode not in ("search", "listing"):
            raise ValueError(f"Unknown adapter mode: {self.mode}")
        if not self.label:
            self.label = self.name
        if not self.allowed_domains:
            self.allowed_domains = (get_main_domain(self.base_url),)
        if self.relevance is None:
            self.relevance = is_relevant_with_id if self.mode == "listing" else is_relevant
        if self.title_extractor is None:
            self.title_extractor = own_title if self.mode == "listing" else extract_title

    def headers_for(self, query: str) -> dict:
        if self.request_headers is not None:
            return self.request_headers(query)
        headers = {
            "Accept-Language": self.accept_language,
            "Referer": self.base_url.rstrip("/") + "/",
        }
        headers.update(self.extra_headers)
        return headers

    def matches_pattern(self, href: str) -> bool:
        if isinstance(self.url_pattern, re.Pattern):
            return bool(self.url_pattern.search(href))
        return any(part in href for part in self.url_pattern)

    def absolutize(self, href: str) -> str:
        if href.startswith("//"):
            return "https:" + href
        if href.startswith(("http://", "https://")):
            return href
        return urljoin(self.base_url.rstrip("/") + "/", href)

    def is_same_site(self, url: str) -> bool:
        return get_main_domain(url) in self.allowed_domains


# === 🔍 ENGINE ===
class SiteAdapter:
    def __init__(self, config: SiteConfig, fetch: Fetch | None = None):
        self.config = config
        if fetch is not None:
            self._fetch = fetch
        elif config.render_js:
            self._fetch = fetch_rendered_html
        else:
            self._fetch = fetch_html

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def label(self) -> str:
        return self.config.label

    async def search(self, query: str, strict_mode: bool = True) -> list[VideoRecord]:
        outcome = await self.run(query, strict_mode)
        return outcome.records

    async def run(self, query: str, strict_mode: bool = True) -> AdapterOutcome:
        cfg = self.config
        try:
            urls = cfg.candidate_urls(query)
            headers = cfg.headers_for(query)
            last_failure: FetchFailure | None = None
            fetched_any = False

            for attempt, url in enumerate(urls, start=1):
                logging.debug(f"ADAPTER {cfg.name} - trying {attempt}/{len(urls)}: {url}")
                result = await self._fetch(url, headers=headers, timeout=cfg.timeout)
                if not result.ok:
                    last_failure = result
                    continue

                fetched_any = True
                records = self.parse(result.html, query, strict_mode)
                if records:
                    logging.info(
                        f"ADAPTER {cfg.name} - {len(records)} result(s) from {url} "
                        f"(strict={strict_mode})"
                    )
                    return AdapterSuccess(cfg.name, records)
                logging.debug(f"ADAPTER {cfg.name} - nothing usable at {url}")

            if not fetched_any and last_failure is not None:
                return AdapterFailure(
                    cfg.name, last_failure.kind, last_failure.detail, last_failure.status
                )
            return AdapterSuccess(cfg.name, [])
        except Exception as e:
            logging.error(f"ADAPTER ERROR - {cfg.name}: {e.__class__.__name__} - {e}")
            return AdapterFailure(cfg.name, "error", f"{e.__class__.__name__}: {e}")

    def parse(
        self, html: str, query: str, strict_mode: bool = True
    ) -> list[VideoRecord]:
        cfg = self.config
        soup = BeautifulSoup(html, "lxml")
        stamp = int(time.time() * 1000)
        seen: set[str] = set()
        records: list[VideoRecord] = []

        for selector in cfg.result_selectors:
            for elem in soup.select(selector):
                if len(records) >= cfg.max_results:
                    return records

                url = self.resolve_url(elem)
                if not url or url in seen:
                    continue
                seen.add(url)

                title = cfg.title_extractor(elem).strip()
                if len(title) <= MIN_TITLE_LENGTH:
                    continue
                if not cfg.relevance(title, query, strict_mode):
                    continue

                records.append(
                    VideoRecord(
                        id=f"{cfg.name}-{stamp}-{len(records)}",
                        title=title,
                        url=url,
                        source=cfg.name,
                        thumbnail=self.thumbnail_for(elem, title),
                        duration=extract_duration(elem),
                        embed_url=self.embed_url_for(url),
                    )
                )

        return records

    def resolve_url(self, elem: Tag) -> str:
        cfg = self.config
        for resolver in cfg.link_href_resolvers:
            href = resolver(elem)
            if not href:
                continue
            if href.startswith(("javascript:", "#", "mailto:")):
                continue
            if not cfg.matches_pattern(href):
                continue
            url = cfg.absolutize(href)
            if url.startswith(("http://", "https://")) and cfg.is_same_site(url):
                return url
        return ""

    def thumbnail_for(self, elem: Tag, title: str) -> str:
        cfg = self.config
        thumbnail = extract_thumbnail(elem, cfg.base_url)
        if cfg.mode == "listing":
            node = elem
            for _ in range(2):
                if thumbnail or not isinstance(node.parent, Tag):
                    break
                node = node.parent
                thumbnail = extract_thumbnail(node, cfg.base_url)
        if not thumbnail and cfg.id_thumbnail_template:
            match = ID_CODE_RE.search(title)
            if match:
                code = f"{match.group(1)}-{match.group(2)}".lower()
                thumbnail = cfg.id_thumbnail_template.format(id=code)
        if not thumbnail.startswith(("http://", "https://")):
            return ""
        return thumbnail

    def embed_url_for(self, url: str) -> str:
        transform = self.config.embed_url_transform
        if transform is None:
            return url
        return transform(url) or url
