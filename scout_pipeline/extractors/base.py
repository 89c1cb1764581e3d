"""
Shared extraction flow for every listing site.

A source is pure configuration (SourceConfig): where to search and which CSS
selectors pull fields out of one result card. Extractor runs the same
navigate → wait → parse sequence for all of them, so adding a site never
touches the orchestrator.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..browser import SessionPool
from ..config import Settings
from ..errors import ExtractionError, ExtractionTimeout, ProcessLaunchError, ScrapeValidationError
from ..state import JobRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldRule:
    """
    How to read one field from a card.

    selectors are tried in order and the first non-empty value wins.
    attr=None reads the element text; otherwise the named attribute
    (href values are made absolute against the page URL).
    """
    selectors: Tuple[str, ...]
    attr: Optional[str] = None


@dataclass(frozen=True)
class SourceConfig:
    name: str
    label: str
    build_url: Callable[[str, str, int], str]
    card_selector: str
    fields: Mapping[str, FieldRule]
    required: Tuple[str, ...] = ("title", "company")
    # Cards whose text contains any of these are ads, not postings.
    exclude_markers: Tuple[str, ...] = ()
    # Use the requested location when the card carries none.
    location_fallback: bool = False
    # Source-specific fields copied onto the record (e.g. experience).
    extra_fields: Tuple[str, ...] = ()


def _read_field(card, rule: FieldRule, page_url: str) -> Optional[str]:
    for selector in rule.selectors:
        element = card.select_one(selector)
        if element is None:
            continue
        if rule.attr is None:
            value = element.get_text(" ", strip=True)
        else:
            value = element.get(rule.attr)
            if value and rule.attr == "href":
                value = urljoin(page_url, value)
        if value:
            return value.strip()
    return None


def parse_cards(html: str, page_url: str, source: SourceConfig) -> List[Dict[str, Optional[str]]]:
    """Project every result card in ``html`` into a flat dict of field values."""
    soup = BeautifulSoup(html, "html.parser")
    rows = []

    for card in soup.select(source.card_selector):
        if source.exclude_markers:
            text = card.get_text(" ", strip=True)
            if any(marker in text for marker in source.exclude_markers):
                continue

        row = {name: _read_field(card, rule, page_url) for name, rule in source.fields.items()}
        if not all(row.get(name) for name in source.required):
            continue
        rows.append(row)

    return rows


def build_records(
    rows: List[Dict[str, Optional[str]]],
    source: SourceConfig,
    location: str,
) -> List[JobRecord]:
    stamp = int(time.time() * 1000)
    records = []

    for index, row in enumerate(rows):
        values = dict(
            id=f"{source.name}-{stamp}-{index}",
            title=row["title"],
            company=row["company"],
            location=row.get("location") or (location if source.location_fallback else None),
            job_url=row.get("job_url") or "",
            posted_date=row.get("posted_date"),
            source=source.name,
            status="scraped",
        )
        for name in source.extra_fields:
            values[name] = row.get(name)
        records.append(JobRecord(**values))

    return records


class Extractor:
    """Runs one search against one source inside its own page session."""

    def __init__(self, source: SourceConfig, pool: SessionPool, settings: Settings):
        self.source = source
        self.pool = pool
        self.settings = settings

    async def extract(
        self,
        keywords: str,
        location: str,
        page_offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[JobRecord]:
        """
        Search the source and return its postings in page order.

        Args:
            keywords: Search text, must be non-empty
            location: Region to search in
            page_offset: Zero-based results page
            limit: Keep at most this many records

        Raises:
            ExtractionTimeout: the results list never rendered
            ExtractionError: navigation or parsing failed
        """
        if not keywords or not keywords.strip():
            raise ScrapeValidationError("Keywords are required")

        url = self.source.build_url(keywords.strip(), location, page_offset)
        logger.info("[%s] searching %s", self.source.name, url)

        try:
            async with self.pool.page_session(user_agent=self.settings.user_agent) as page:
                html, page_url = await self._render(page, url)
        except (ExtractionError, ProcessLaunchError):
            raise
        except Exception as exc:
            raise ExtractionError(self.source.name, str(exc)) from exc

        records = build_records(parse_cards(html, page_url, self.source), self.source, location)
        logger.info("[%s] parsed %d postings", self.source.name, len(records))

        if limit is not None:
            records = records[:limit]
        return records

    async def _render(self, page: Page, url: str) -> Tuple[str, str]:
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.settings.navigation_timeout_ms)
        except PlaywrightTimeoutError:
            # Busy pages rarely go idle; the cards are usually there anyway.
            logger.warning("[%s] network did not settle within %dms", self.source.name, self.settings.navigation_timeout_ms)

        try:
            await page.wait_for_selector(self.source.card_selector, timeout=self.settings.results_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise ExtractionTimeout(
                self.source.name,
                f"no element matched {self.source.card_selector!r} within {self.settings.results_timeout_ms}ms",
            ) from exc

        return await page.content(), page.url
