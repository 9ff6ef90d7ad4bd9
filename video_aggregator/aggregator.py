import asyncio
import logging
import time
from dataclasses import dataclass, field

from .config import RELATED_RESULTS_CAP, SEARCH_DEADLINE
from .dedup import canonicalize_url, dedup, is_excluded
from .models import AdapterFailure, AdapterSuccess, VideoRecord
from .sites import build_adapters


@dataclass
class SiteReport:
    site: str
    count: int
    status: str
    error: str | None = None

    def to_dict(self) -> dict:
        data = {"site": self.site, "count": self.count, "status": self.status}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class AggregateResult:
    strict_results: list[VideoRecord]
    related_results: list[VideoRecord]
    diagnostics: dict = field(default_factory=dict)

    @property
    def results(self) -> list[VideoRecord]:
        return self.strict_results + self.related_results


def placeholder_record(query: str) -> VideoRecord:
    return VideoRecord(
        id=f"test-{int(time.time() * 1000)}-0",
        title=f"Test video: {query}",
        url="https://example.com/test",
        source="test",
        duration="10:00",
    )


def assign_unique_ids(records: list[VideoRecord]) -> list[VideoRecord]:
    taken = {r.id for r in records}
    used: set[str] = set()
    for record in records:
        if record.id in used:
            prefix = record.id.rpartition("-")[0] or record.source
            ordinal = 0
            while f"{prefix}-{ordinal}" in taken:
                ordinal += 1
            record.id = f"{prefix}-{ordinal}"
            taken.add(record.id)
        used.add(record.id)
    return records


def _error_message(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class Aggregator:
    def __init__(
        self,
        adapters=None,
        deadline: float = SEARCH_DEADLINE,
        related_cap: int = RELATED_RESULTS_CAP,
    ):
        self.adapters = build_adapters() if adapters is None else list(adapters)
        self.deadline = deadline
        self.related_cap = related_cap

    async def _run_one(self, adapter, query: str, strict_mode: bool):
        try:
            return await asyncio.wait_for(
                adapter.run(query, strict_mode), timeout=self.deadline
            )
        except asyncio.TimeoutError:
            logging.warning(f"DEADLINE - {adapter.name} exceeded {self.deadline:.0f}s")
            return AdapterFailure(
                adapter.name, "timeout", f"exceeded search deadline of {self.deadline:.0f}s"
            )

    async def fan_out(self, query: str, strict_mode: bool) -> list:
        tasks = [self._run_one(a, query, strict_mode) for a in self.adapters]
        return await asyncio.gather(*tasks, return_exceptions=True)

    def _settle(self, adapter, outcome) -> tuple[list[VideoRecord], SiteReport]:
        name = adapter.name
        label = getattr(adapter, "label", name)

        if isinstance(outcome, BaseException):
            logging.error(f"TASK ERROR - {label}: {type(outcome).__name__}: {outcome}")
            return [], SiteReport(label, 0, "error", _error_message(outcome))

        if isinstance(outcome, AdapterFailure):
            if outcome.kind == "not_found":
                logging.info(f"SITE 404 - {label}: page not found")
            else:
                logging.error(f"SITE ERROR - {label}: {outcome.kind} {outcome.detail}")
            return [], SiteReport(label, 0, "error", outcome.detail or outcome.kind)

        if not isinstance(outcome, AdapterSuccess) or not isinstance(outcome.records, list):
            logging.error(f"TASK FORMAT ERROR - {label}: unexpected result {outcome!r}")
            return [], SiteReport(label, 0, "success")

        records = [r for r in outcome.records if isinstance(r, VideoRecord)]
        return records, SiteReport(label, len(records), "success")

    async def aggregate(self, query: str) -> AggregateResult:
        started = time.monotonic()
        logging.info(f"AGGREGATE - '{query}' across {len(self.adapters)} source(s)")

        strict_raw, relaxed_raw = await asyncio.gather(
            self.fan_out(query, True), self.fan_out(query, False)
        )

        collected: list[VideoRecord] = []
        reports: list[SiteReport] = []
        for adapter, outcome in zip(self.adapters, strict_raw):
            records, report = self._settle(adapter, outcome)
            collected.extend(records)
            reports.append(report)

        allowed = [r for r in collected if not is_excluded(r)]
        strict_results = dedup(allowed)
        strict_urls = {canonicalize_url(r.url) for r in strict_results}

        related: list[VideoRecord] = []
        for adapter, outcome in zip(self.adapters, relaxed_raw):
            records, _ = self._settle(adapter, outcome)
            related.extend(
                r
                for r in records
                if not is_excluded(r) and canonicalize_url(r.url) not in strict_urls
            )
        related_results = dedup(related)[: self.related_cap]

        after_dedup = len(strict_results)
        success = sum(1 for r in reports if r.status == "success" and r.count > 0)
        zero = sum(1 for r in reports if r.status == "success" and r.count == 0)
        errors = sum(1 for r in reports if r.status == "error")

        logging.info(
            f"SUMMARY - success {success}, error {errors}, zero {zero} | "
            f"{len(collected)} -> {len(strict_results)} strict, {len(related_results)} related"
        )

        if not strict_results:
            logging.warning(f"FALLBACK - no results for '{query}', returning placeholder")
            strict_results = [placeholder_record(query)]

        assign_unique_ids(strict_results + related_results)

        diagnostics = {
            "totalBeforeDedup": len(collected),
            "totalAfterDedup": after_dedup,
            "successSites": success,
            "errorSites": errors,
            "zeroResultSites": zero,
            "siteResults": [r.to_dict() for r in reports],
            "durationMs": int((time.monotonic() - started) * 1000),
        }
        return AggregateResult(strict_results, related_results, diagnostics)


async def aggregate(query: str, adapters=None) -> AggregateResult:
    return await Aggregator(adapters).aggregate(query)
