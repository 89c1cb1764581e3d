"""Scrape job listings from several sites and enrich them with company contacts."""

from .config import Settings, get_settings
from .errors import (
    EnrichmentError,
    ExtractionError,
    ExtractionTimeout,
    ProcessLaunchError,
    ScrapeValidationError,
    ScraperError,
)
from .state import JobRecord, ScrapeRequest

__all__ = [
    "Settings",
    "get_settings",
    "EnrichmentError",
    "ExtractionError",
    "ExtractionTimeout",
    "ProcessLaunchError",
    "ScrapeValidationError",
    "ScraperError",
    "JobRecord",
    "ScrapeRequest",
]
