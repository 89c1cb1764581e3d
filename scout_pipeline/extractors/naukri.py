import re
from urllib.parse import quote

from .base import FieldRule, SourceConfig
from .registry import register


def _slug(text: str) -> str:
    return quote(re.sub(r"\s+", "-", text.strip()), safe="")


def build_search_url(keywords: str, location: str, page_offset: int = 0) -> str:
    """Naukri encodes the search in the path: /python-developer-jobs-in-pune?page=1"""
    return f"https://www.naukri.com/{_slug(keywords)}-jobs-in-{_slug(location)}?page={page_offset + 1}"


NAUKRI = register(SourceConfig(
    name="naukri",
    label="Naukri.com",
    build_url=build_search_url,
    card_selector=".srp-jobtuple-wrapper, article.jobTuple",
    fields={
        "title": FieldRule((".title",)),
        "company": FieldRule((".comp-name", ".companyInfo a")),
        "location": FieldRule((".location", ".locWdth")),
        "experience": FieldRule((".expwdth", ".experience")),
        "job_url": FieldRule(("a.title", "a[href]"), attr="href"),
        "posted_date": FieldRule((".job-post-day", ".jobTupleFooter span")),
    },
    extra_fields=("experience",),
))
