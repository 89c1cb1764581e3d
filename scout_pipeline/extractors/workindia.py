from urllib.parse import quote

from .base import FieldRule, SourceConfig
from .registry import register


def build_search_url(keywords: str, location: str, page_offset: int = 0) -> str:
    city = quote(location.strip().lower().replace(" ", "-"), safe="")
    return f"https://www.workindia.in/jobs-in-{city}/?query={quote(keywords, safe='')}&page={page_offset + 1}"


WORKINDIA = register(SourceConfig(
    name="workindia",
    label="WorkIndia",
    build_url=build_search_url,
    card_selector="div.JobCard, div.job-card",
    fields={
        "title": FieldRule(("h2", "span.job-title")),
        "company": FieldRule(("span.company-name", "p.company")),
        "job_url": FieldRule(("a.job-link", "a[href]"), attr="href"),
    },
    # Cards only carry the city in the page URL.
    location_fallback=True,
))
