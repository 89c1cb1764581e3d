"""Exception hierarchy for the scrape/enrich pipeline."""

from __future__ import annotations


class ScraperError(Exception):
    """Base exception for pipeline failures."""


class ScrapeValidationError(ScraperError):
    """The incoming scrape request is missing or has invalid fields."""


class ProcessLaunchError(ScraperError):
    """The shared headless browser could not be started."""


class ExtractionError(ScraperError):
    """A single source failed to produce results."""

    def __init__(self, source: str, message: str = ""):
        self.source = source
        super().__init__(f"[{source}] {message}" if message else f"[{source}] extraction failed")


class ExtractionTimeout(ExtractionError):
    """The results container never appeared on the source's search page."""


class EnrichmentError(ScraperError):
    """Career page or contact email lookup failed for one job."""
