from dataclasses import dataclass, field

from .config import MAX_TITLE_LENGTH


# === 🎬 RECORDS ===
@dataclass
class VideoRecord:
    id: str
    title: str
    url: str
    source: str
    thumbnail: str = ""
    duration: str = ""
    embed_url: str = ""

    def __post_init__(self):
        self.title = self.title.strip()[:MAX_TITLE_LENGTH]
        if not self.embed_url:
            self.embed_url = self.url

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "url": self.url,
            "embedUrl": self.embed_url,
            "source": self.source,
        }


# === 📬 ADAPTER OUTCOMES ===
@dataclass
class AdapterSuccess:
    source: str
    records: list[VideoRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass
class AdapterFailure:
    source: str
    kind: str
    detail: str = ""
    status: int | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def records(self) -> list[VideoRecord]:
        return []


AdapterOutcome = AdapterSuccess | AdapterFailure
