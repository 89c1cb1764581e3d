import math
import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Fields every serialised job carries, even when left at their defaults.
CORE_FIELDS = {"id", "title", "company", "location", "job_url", "posted_date", "source", "status"}


class JobRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="<source>-<epoch millis>-<card index>; unique within one response.")
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: Optional[str] = None
    job_url: str = Field(description="Posting URL as found on the source page; may be empty for Naukri-like sources.")
    posted_date: Optional[str] = Field(None, description="Source-specific, passed through untouched.")
    source: str
    status: str = Field("scraped", description="'scraped' until enrichment ran, then 'enriched'.")
    experience: Optional[str] = None
    career_page_url: Optional[str] = None
    hr_email: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """camelCase dict; optional fields appear only once something set them."""
        return self.model_dump(by_alias=True, include=CORE_FIELDS | self.model_fields_set)


class ScrapeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    keywords: str = Field(min_length=1)
    location: Optional[str] = None
    sources: List[str] = Field(min_length=1)
    max_results: int = Field(20, gt=0)

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Keywords are required")
        return v

    @field_validator("location")
    @classmethod
    def blank_location_is_default(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @field_validator("sources")
    @classmethod
    def normalize_sources(cls, v):
        seen = []
        for src in v:
            key = str(src).strip().lower()
            if key and key not in seen:
                seen.append(key)
        if not seen:
            raise ValueError("At least one source is required")
        return seen

    @property
    def per_source_cap(self) -> int:
        return math.ceil(self.max_results / len(self.sources))


class PipelineState(TypedDict, total=False):
    request: ScrapeRequest
    location: str
    per_source_cap: int
    source_count: int
    pending_sources: List[str]
    source_batches: Annotated[List[List[JobRecord]], operator.add]
    jobs: List[JobRecord]
    error_trace: Annotated[List[str], operator.add]
