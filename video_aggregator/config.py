import os

import psutil
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_fetch_concurrency():
    cores = os.cpu_count() or 4
    ram_gb = psutil.virtual_memory().total // 1_073_741_824
    base = max(4, min(cores * 4, 32))
    if ram_gb >= 16:
        base += 8
    elif ram_gb <= 4:
        base = max(4, base // 2)
    return base


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Fetch
    fetch_timeout: float = Field(30.0, gt=0)
    render_timeout_ms: int = Field(30000, gt=0)
    fetch_concurrency: int = Field(default_factory=get_fetch_concurrency, ge=1)

    # Relevance
    strict_token_ratio: float = Field(1 / 2, gt=0, le=1)
    relaxed_token_ratio: float = Field(1 / 3, gt=0, le=1)
    relaxed_char_ratio: float = Field(1 / 2, gt=0, le=1)

    # Dedup
    url_title_similarity: float = Field(0.8, ge=0, le=1)
    title_similarity: float = Field(0.9, ge=0, le=1)

    # Aggregation
    search_deadline: float = Field(45.0, gt=0)
    related_results_cap: int = Field(20, ge=0)
    disabled_sources: str = ""  # comma-separated site names

    # History
    history_max_entries: int = Field(20, ge=1)
    history_cache_ttl: float = Field(5.0, ge=0)
    history_path: str = "data/recent-searches.json"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    log_level: str = "INFO"

    @property
    def disabled_source_names(self) -> set[str]:
        return {s.strip().lower() for s in self.disabled_sources.split(",") if s.strip()}


settings = Settings()

# === 🌐 FETCH ===
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "ja,en-US;q=0.9"
FETCH_TIMEOUT = settings.fetch_timeout
MAX_REDIRECTS = 5
RENDER_TIMEOUT_MS = settings.render_timeout_ms
FETCH_CONCURRENCY = settings.fetch_concurrency

# === 🧩 EXTRACTION + RELEVANCE ===
MAX_TITLE_LENGTH = 200
MIN_TITLE_LENGTH = 3
FALLBACK_TITLE_LENGTH = 100
DEFAULT_RESULT_CAP = 50
HIGH_VOLUME_RESULT_CAP = 200

STRICT_TOKEN_RATIO = settings.strict_token_ratio
RELAXED_TOKEN_RATIO = settings.relaxed_token_ratio
RELAXED_CHAR_RATIO = settings.relaxed_char_ratio

# === 🧹 DEDUP ===
URL_TITLE_SIMILARITY = settings.url_title_similarity
TITLE_SIMILARITY = settings.title_similarity
CANONICAL_TITLE_LENGTH = 100

EXCLUDED_SOURCES = {"youtube"}
EXCLUDED_URL_MARKERS = ("youtube.com", "youtu.be")

# === 🔍 AGGREGATION ===
SEARCH_DEADLINE = settings.search_deadline
RELATED_RESULTS_CAP = settings.related_results_cap
DISABLED_SOURCES = settings.disabled_source_names
VIDEOS_PER_PAGE = 10

# === 🕘 HISTORY ===
HISTORY_MAX_ENTRIES = settings.history_max_entries
HISTORY_CACHE_TTL = settings.history_cache_ttl
HISTORY_PATH = settings.history_path
HISTORY_DOCUMENT_KEY = "searches"

# === 🛡️ VALIDATION ===
MAX_QUERY_LENGTH = 200

# === 🚀 SERVER ===
HOST = settings.host
PORT = settings.port
LOG_LEVEL = settings.log_level.upper()
