from urllib.parse import quote

from .base import FieldRule, SourceConfig
from .registry import register

PAGE_SIZE = 25


def build_search_url(keywords: str, location: str, page_offset: int = 0) -> str:
    return (
        "https://www.linkedin.com/jobs/search/"
        f"?keywords={quote(keywords, safe='')}"
        f"&location={quote(location, safe='')}"
        f"&start={page_offset * PAGE_SIZE}"
    )


LINKEDIN = register(SourceConfig(
    name="linkedin",
    label="LinkedIn",
    build_url=build_search_url,
    card_selector=".base-card",
    fields={
        "title": FieldRule((".base-search-card__title",)),
        "company": FieldRule((".base-search-card__subtitle",)),
        "location": FieldRule((".job-search-card__location",)),
        "job_url": FieldRule(("a.base-card__full-link",), attr="href"),
        "posted_date": FieldRule(("time",), attr="datetime"),
    },
    # Guest search cards without a link can't be opened, so they are useless.
    required=("title", "company", "job_url"),
))
