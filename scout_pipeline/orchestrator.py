from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable, Dict, Optional

from langgraph.graph import END, StateGraph
from langgraph.types import StreamWriter
from pydantic import ValidationError

from .browser import SessionPool
from .config import Settings
from .enrichment import CareerPageEnricher
from .errors import ScraperError, ScrapeValidationError
from .events import complete_event, progress_event
from .extractors import Extractor, registry
from .state import JobRecord, PipelineState, ScrapeRequest

logger = logging.getLogger(__name__)

# Source searches share the 10-60% band; enrichment starts at 60.
SEARCH_START = 10
SEARCH_SPAN = 50
ENRICH_PERCENT = 60


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    where = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{where}: {message}" if where else message


def validate_request(payload: Any, settings: Settings) -> ScrapeRequest:
    """Turn a raw JSON body into a ScrapeRequest or raise ScrapeValidationError."""
    if not isinstance(payload, dict):
        raise ScrapeValidationError("Request body must be a JSON object")

    keywords = payload.get("keywords")
    if not isinstance(keywords, str) or not keywords.strip():
        raise ScrapeValidationError("Keywords are required")

    data = dict(payload)
    if "maxResults" not in data and "max_results" not in data:
        data["maxResults"] = settings.default_max_results

    try:
        request = ScrapeRequest.model_validate(data)
    except ValidationError as exc:
        raise ScrapeValidationError(_describe(exc)) from exc

    unknown = [src for src in request.sources if src not in registry.known_sources()]
    if unknown:
        raise ScrapeValidationError(f"Unknown sources: {', '.join(unknown)}")
    return request


class Orchestrator:
    """
    Runs one scrape request as a small state graph:

        dispatch (once per source) -> merge -> enrich -> finalize

    Progress goes out through LangGraph's custom stream; ``run`` yields the
    events in the order they were written.
    """

    def __init__(
        self,
        pool: SessionPool,
        settings: Settings,
        extractor_factory: Optional[Callable[[str], Any]] = None,
        enricher: Optional[CareerPageEnricher] = None,
    ):
        self.pool = pool
        self.settings = settings
        self._make_extractor = extractor_factory or self._default_extractor
        self.enricher = enricher or CareerPageEnricher(pool, settings)
        self.graph = self._compile()

    def _default_extractor(self, source: str) -> Extractor:
        return Extractor(registry.get(source), self.pool, self.settings)

    # ------------------------------------------------------------------
    # Graph nodes
    # ------------------------------------------------------------------
    async def _dispatch(self, state: PipelineState, writer: StreamWriter) -> Dict[str, Any]:
        request = state["request"]
        pending = state["pending_sources"]
        source, rest = pending[0], pending[1:]
        total = state["source_count"]
        done = total - len(pending)

        label = registry.get(source).label
        writer(progress_event(f"Searching {label}...", SEARCH_START + SEARCH_SPAN * done // total))

        cap = state["per_source_cap"]
        try:
            extractor = self._make_extractor(source)
            jobs = await extractor.extract(request.keywords, state["location"], 0, limit=cap)
        except ScraperError as exc:
            logger.error("Error scraping %s: %s", source, exc)
            return {"pending_sources": rest, "error_trace": [f"{source}: {exc}"]}
        except Exception as exc:
            logger.exception("Unexpected error scraping %s", source)
            return {"pending_sources": rest, "error_trace": [f"{source}: {exc}"]}

        return {"pending_sources": rest, "source_batches": [list(jobs)[:cap]]}

    @staticmethod
    def _route_after_dispatch(state: PipelineState) -> str:
        return "dispatch" if state.get("pending_sources") else "merge"

    async def _merge(self, state: PipelineState) -> Dict[str, Any]:
        cap = state["per_source_cap"]
        merged = [job for batch in state.get("source_batches", []) for job in batch[:cap]]
        return {"jobs": merged[: state["request"].max_results]}

    async def _enrich(self, state: PipelineState, writer: StreamWriter) -> Dict[str, Any]:
        writer(progress_event("Finding career pages...", ENRICH_PERCENT))

        jobs = state.get("jobs", [])
        for job in jobs[: self.settings.enrich_limit]:
            await self._enrich_job(job)
        return {"jobs": jobs}

    async def _enrich_job(self, job: JobRecord) -> None:
        try:
            career_url = await self.enricher.find_career_page(job.company)
            updates = {"career_page_url": career_url}
            if career_url:
                updates["hr_email"] = await self.enricher.find_hr_email(career_url)
        except Exception:
            logger.exception("Error enriching job %s (%s)", job.id, job.company)
            return

        for name, value in updates.items():
            setattr(job, name, value)
        job.status = "enriched"

    async def _finalize(self, state: PipelineState, writer: StreamWriter) -> Dict[str, Any]:
        jobs = state.get("jobs", [])
        logger.info("Scrape finished: %d jobs, %d failed sources", len(jobs), len(state.get("error_trace", [])))
        writer(progress_event("Complete!", 100))
        writer(complete_event(jobs))
        return {"jobs": jobs}

    def _compile(self):
        workflow = StateGraph(PipelineState)

        workflow.add_node("dispatch", self._dispatch)
        workflow.add_node("merge", self._merge)
        workflow.add_node("enrich", self._enrich)
        workflow.add_node("finalize", self._finalize)

        workflow.set_entry_point("dispatch")
        workflow.add_conditional_edges(
            "dispatch",
            self._route_after_dispatch,
            {"dispatch": "dispatch", "merge": "merge"},
        )
        workflow.add_edge("merge", "enrich")
        workflow.add_edge("enrich", "finalize")
        workflow.add_edge("finalize", END)

        return workflow.compile()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def initial_state(self, request: ScrapeRequest) -> PipelineState:
        return {
            "request": request,
            "location": request.location or self.settings.default_location,
            "per_source_cap": request.per_source_cap,
            "source_count": len(request.sources),
            "pending_sources": list(request.sources),
            "source_batches": [],
            "jobs": [],
            "error_trace": [],
        }

    async def run(self, request: ScrapeRequest) -> AsyncIterator[Dict[str, Any]]:
        """Yield progress events, ending with the single ``complete`` event."""
        logger.info(
            "Scrape started: %r in %s from %s (max %d)",
            request.keywords, request.location or self.settings.default_location,
            ", ".join(request.sources), request.max_results,
        )
        config = {"recursion_limit": len(request.sources) + 10}
        async for event in self.graph.astream(self.initial_state(request), config=config, stream_mode="custom"):
            yield event
