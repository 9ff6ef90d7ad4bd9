# === 📦 IMPORTS ===
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .aggregator import Aggregator
from .config import HOST, LOG_LEVEL, PORT, VIDEOS_PER_PAGE
from .fetcher import close_fetcher
from .history import SearchHistory
from .logs import reset_clock, setup_logging
from .sites import SITE_CONFIGS, enabled_configs
from .sorting import check_sort, paginate, sort_videos
from .validation import ValidationError, validate_query

# === ℹ️ LOGGING ===
setup_logging(LOG_LEVEL)

# === 🧠 SHARED STATE ===
search_history = SearchHistory()


def get_history() -> SearchHistory:
    return search_history


def get_aggregator() -> Aggregator:
    return Aggregator()


# === 🧾 SCHEMAS ===
class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    sort: str = "default"
    page: int | None = Field(None, ge=1)
    per_page: int = Field(VIDEOS_PER_PAGE, alias="perPage", ge=1, le=100)


# === 🚀 FASTAPI ROUTES ===
@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.info("=== SERVICE STARTING ===")
    yield
    await close_fetcher()
    logging.info("=== SERVICE STOPPED ===")


app = FastAPI(title="Video Search Aggregator", lifespan=lifespan)


@app.exception_handler(ValidationError)
async def validation_error_handler(_: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    logging.info(f"REQUEST REJECTED - {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def internal_error_handler(_: Request, exc: Exception):
    logging.exception(f"INTERNAL ERROR - {exc.__class__.__name__}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Search failed. Please wait a moment and try again."},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/search")
async def search(
    body: SearchRequest,
    history: SearchHistory = Depends(get_history),
    aggregator: Aggregator = Depends(get_aggregator),
):
    reset_clock()
    query = validate_query(body.query)
    check_sort(body.sort)
    logging.info(f"=== STARTING SEARCH: '{query}' ===")

    await history.record(query)

    result = await aggregator.aggregate(query)
    videos = sort_videos(result.results, body.sort)

    payload = {"debug": result.diagnostics}
    if body.page is not None:
        videos, payload["pagination"] = paginate(videos, body.page, body.per_page)

    payload["results"] = [v.to_dict() for v in videos]
    logging.info(
        f"RESULTS - {len(result.strict_results)} strict, "
        f"{len(result.related_results)} related, {len(payload['results'])} returned"
    )
    return payload


@app.get("/api/recent-searches")
async def recent_searches(history: SearchHistory = Depends(get_history)):
    try:
        searches = await history.recent()
    except Exception as e:
        logging.error(f"HISTORY ERROR - {e.__class__.__name__}: {e}")
        return JSONResponse(
            status_code=500, content={"error": "Failed to load recent searches"}
        )

    return JSONResponse(
        content={"searches": [{"query": s["query"]} for s in searches]},
        headers={"Cache-Control": "public, max-age=10"},
    )


@app.get("/api/sources")
def sources():
    active = {c.name for c in enabled_configs()}
    return {
        "sources": [
            {"name": c.name, "label": c.label, "enabled": c.name in active}
            for c in SITE_CONFIGS
        ]
    }


def run():
    uvicorn.run("video_aggregator.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()
