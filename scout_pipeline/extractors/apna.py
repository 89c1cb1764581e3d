from urllib.parse import quote

from .base import FieldRule, SourceConfig
from .registry import register


def build_search_url(keywords: str, location: str, page_offset: int = 0) -> str:
    return (
        "https://apna.co/jobs?search=true"
        f"&text={quote(keywords, safe='')}"
        "&location_id=any"
        f"&location_identifier={quote(location, safe='')}"
        f"&page={page_offset + 1}"
    )


APNA = register(SourceConfig(
    name="apna",
    label="Apna",
    build_url=build_search_url,
    card_selector='div.JobCard, div[data-testid="job-card"]',
    fields={
        "title": FieldRule(("h3.JobTitle", "h2")),
        "company": FieldRule(("p.CompanyName", "p.title")),
        "location": FieldRule(("span.LocationText", "p.location")),
        "job_url": FieldRule(("a[href]",), attr="href"),
    },
    exclude_markers=("Promoted", "Sponsored"),
))
