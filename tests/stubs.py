import asyncio

from video_aggregator.fetcher import FetchFailure, FetchSuccess
from video_aggregator.models import AdapterSuccess, VideoRecord


def make_record(url, title="Sample video title", source="stub", **kwargs):
    return VideoRecord(
        id=kwargs.pop("id", f"{source}-1700000000000-0"),
        title=title,
        url=url,
        source=source,
        **kwargs,
    )


class StubAdapter:
    """Adapter double returning canned records, or raising, after an optional delay."""

    def __init__(self, name, records=None, relaxed=None, error=None, delay=0, label=None):
        self.name = name
        self.label = label or name
        self.records = records or []
        self.relaxed = self.records if relaxed is None else relaxed
        self.error = error
        self.delay = delay
        self.calls = []

    async def run(self, query, strict_mode=True):
        self.calls.append((query, strict_mode))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AdapterSuccess(self.name, list(self.records if strict_mode else self.relaxed))


class StubFetch:
    """Fetch double keyed by URL; unknown URLs come back as 404 failures."""

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []

    async def __call__(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        if url in self.pages:
            return FetchSuccess(url, 200, self.pages[url])
        return FetchFailure(url, "not_found", "HTTP 404", 404)
