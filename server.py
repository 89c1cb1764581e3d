"""
JobScout — FastAPI Backend
=========================================
Flow:
  1. POST /api/scrape  → search each requested listing site, enrich the top
                         results with career page + HR email, stream progress
                         as server-sent events
  2. GET  /api/health  → liveness probe
Routes are served both with and without the /api prefix.
"""

from __future__ import annotations

import datetime
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from scout_pipeline.browser import SessionPool
from scout_pipeline.config import get_settings
from scout_pipeline.errors import ProcessLaunchError, ScrapeValidationError
from scout_pipeline.events import MEDIA_TYPE, stream_frames
from scout_pipeline.logging_config import setup_logging
from scout_pipeline.orchestrator import Orchestrator, validate_request

# ─────────────────────────────────────────────
#  Config
# ─────────────────────────────────────────────
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = logging.getLogger("scout_pipeline.server")

pool = SessionPool(settings)
orchestrator = Orchestrator(pool, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Job scraper service starting on port %d", settings.port)
    yield
    # Browser process goes away with the server; nothing is persisted.
    await pool.close()
    logger.info("Job scraper service stopped")


app = FastAPI(title="JobScout", version="1.0.0", lifespan=lifespan)
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])

router = APIRouter()


# ─────────────────────────────────────────────
#  Scrape (streamed)
# ─────────────────────────────────────────────
@router.post("/scrape")
async def scrape(req: Request):
    """Validate, make sure the browser is up, then stream the pipeline."""
    try:
        data = await req.json()
    except ValueError:
        # Malformed JSON and bodies that are not UTF-8 both land here.
        data = None

    try:
        scrape_request = validate_request(data, settings)
    except ScrapeValidationError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    try:
        await pool.acquire()
    except ProcessLaunchError as exc:
        logger.error("Scraping error: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Failed to scrape jobs", "details": str(exc)})

    return StreamingResponse(
        stream_frames(orchestrator.run(scrape_request)),
        media_type=MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


# ─────────────────────────────────────────────
#  Health
# ─────────────────────────────────────────────
@router.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "browser": pool.is_running,
    }


app.include_router(router)
app.include_router(router, prefix="/api")


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Failed to scrape jobs", "details": str(exc)})


# ─────────────────────────────────────────────
#  Entry-point
# ─────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host=settings.host, port=settings.port)
