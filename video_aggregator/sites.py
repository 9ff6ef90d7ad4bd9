import logging
import re

from .adapters import (
    SiteAdapter,
    SiteConfig,
    descendant_href,
    encode_query,
    grandparent_href,
    id_href,
    own_href,
    parent_href,
)
from .config import DISABLED_SOURCES, HIGH_VOLUME_RESULT_CAP

VIDEO_PATH_PARTS = ("/video/", "/watch/", "/v/", "/play/", "/movie/", "/embed/")

GENERIC_SELECTORS = [
    'a[href*="/video/"]',
    'a[href*="/watch/"]',
    'a[href*="/v/"]',
    'a[href*="/play/"]',
    'a[href*="/movie/"]',
    'a[href*="/embed/"]',
    ".video-item",
    ".item",
    '[class*="video"]',
    '[class*="item"]',
    ".result-item",
    ".search-result-item",
    "article",
    '[class*="card"]',
    "li a",
    "div a",
]

BVID_RE = re.compile(r"BV[a-zA-Z0-9]+")


def bilibili_embed(url: str) -> str | None:
    match = BVID_RE.search(url)
    if match:
        return f"https://player.bilibili.com/player.html?bvid={match.group(0)}"
    return None


def _jpdmv_urls(query):
    q = encode_query(query)
    return [
        f"https://jpdmv.com/search/{q}",
        f"https://jpdmv.com/search?q={q}",
        f"https://jpdmv.com/?q={q}",
        f"https://jpdmv.com/?search={q}",
    ]


def _javmix_urls(query):
    q = encode_query(query)
    return [
        f"https://javmix.tv/search?q={q}",
        f"https://javmix.tv/search/{q}",
        f"https://javmix.tv/?q={q}",
    ]


def _ppp_urls(query):
    q = encode_query(query)
    return [
        f"https://ppp.porn/pp1/search?q={q}",
        f"https://ppp.porn/pp1/search/{q}",
        f"https://ppp.porn/pp1/?q={q}",
        f"https://ppp.porn/pp1/?search={q}",
        f"https://ppp.porn/search?q={q}",
        f"https://ppp.porn/search/{q}",
    ]


def _mat6tube_urls(query):
    q = encode_query(query)
    return [
        f"https://mat6tube.com/search?q={q}",
        f"https://mat6tube.com/search/{q}",
        f"https://mat6tube.com/?q={q}",
        f"https://mat6tube.com/recent?q={q}",
    ]


# Registration order is the tie-break order of the merged result list.
SITE_CONFIGS = [
    SiteConfig(
        name="ivfree",
        label="IVFree",
        base_url="http://ivfree.asia",
        mode="listing",
        candidate_urls=lambda query: ["http://ivfree.asia/"],
        result_selectors=["h2 a", "h3 a", "h2", "h3", 'a[href*="ivfree.asia"]'],
        url_pattern=re.compile(r".+"),
        link_href_resolvers=[
            own_href,
            descendant_href,
            parent_href,
            grandparent_href,
            id_href("/video/{id}"),
        ],
        id_thumbnail_template="https://ivfree.asia/images/{id}.jpg",
    ),
    SiteConfig(
        name="jpdmv",
        label="JPdmv",
        base_url="https://jpdmv.com",
        candidate_urls=_jpdmv_urls,
        result_selectors=GENERIC_SELECTORS,
        url_pattern=VIDEO_PATH_PARTS,
    ),
    SiteConfig(
        name="bilibili",
        label="Bilibili",
        base_url="https://www.bilibili.com",
        candidate_urls=lambda query: [
            f"https://search.bilibili.com/all?keyword={encode_query(query)}"
        ],
        accept_language="zh-CN,zh;q=0.9,ja;q=0.8,en;q=0.7",
        extra_headers={"Origin": "https://www.bilibili.com"},
        result_selectors=[
            ".video-item",
            ".bili-video-card",
            ".video-card",
            'a[href*="/video/"]',
            ".result-item",
            '[class*="video"]',
        ],
        url_pattern=("/video/",),
        embed_url_transform=bilibili_embed,
        render_js=True,
    ),
    SiteConfig(
        name="douga4",
        label="Douga4",
        base_url="https://av.douga4.top",
        candidate_urls=lambda query: [f"https://av.douga4.top/kw/{encode_query(query)}"],
        result_selectors=[".item", ".video-item", 'a[href*="/video/"]'],
        url_pattern=("/video/",),
    ),
    SiteConfig(
        name="javmix",
        label="Javmix.TV",
        base_url="https://javmix.tv",
        candidate_urls=_javmix_urls,
        result_selectors=GENERIC_SELECTORS,
        url_pattern=VIDEO_PATH_PARTS,
    ),
    SiteConfig(
        name="ppp",
        label="PPP.Porn",
        base_url="https://ppp.porn",
        candidate_urls=_ppp_urls,
        accept_language="zh-TW,zh-CN,zh;q=0.9,ja;q=0.8,en;q=0.7",
        result_selectors=[
            ".video-item",
            ".item",
            'a[href*="/video/"]',
            'a[href*="/watch/"]',
            'a[href*="/v/"]',
            'a[href*="/pp1/"]',
            '[class*="video"]',
            '[class*="item"]',
            ".result-item",
            ".search-result-item",
            "article",
            '[class*="card"]',
        ],
        url_pattern=("/video/", "/watch/", "/v/", "/pp1/"),
    ),
    SiteConfig(
        name="mat6tube",
        label="Mat6tube",
        base_url="https://mat6tube.com",
        candidate_urls=_mat6tube_urls,
        result_selectors=GENERIC_SELECTORS,
        url_pattern=VIDEO_PATH_PARTS,
        max_results=HIGH_VOLUME_RESULT_CAP,
    ),
]


def enabled_configs(configs=None, disabled=None):
    configs = SITE_CONFIGS if configs is None else configs
    disabled = DISABLED_SOURCES if disabled is None else disabled
    return [c for c in configs if c.enabled and c.name.lower() not in disabled]


def build_adapters(configs=None, disabled=None, fetch=None) -> list[SiteAdapter]:
    adapters = [SiteAdapter(c, fetch=fetch) for c in enabled_configs(configs, disabled)]
    logging.debug(f"REGISTRY - {len(adapters)} adapter(s): {[a.name for a in adapters]}")
    return adapters
