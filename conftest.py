"""
Pytest fixtures shared by the JobScout test suite.

No test touches a real browser: pages and the session pool are replaced by
small in-memory fakes that record what the code under test asked for.
"""

from contextlib import asynccontextmanager

import pytest

from scout_pipeline.config import Settings
from scout_pipeline.state import JobRecord


class FakePage:
    """Stands in for a Playwright Page."""

    def __init__(self, html="", url="https://example.test/search", goto_exc=None, wait_exc=None, content_exc=None):
        self.html = html
        self.url = url
        self.goto_exc = goto_exc
        self.wait_exc = wait_exc
        self.content_exc = content_exc
        self.visited = []
        self.waited_for = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_exc is not None:
            raise self.goto_exc

    async def wait_for_selector(self, selector, timeout=None):
        self.waited_for.append({"selector": selector, "timeout": timeout})
        if self.wait_exc is not None:
            raise self.wait_exc

    async def content(self):
        if self.content_exc is not None:
            raise self.content_exc
        return self.html


class FakePool:
    """Hands out queued FakePages and counts open/close like SessionPool."""

    def __init__(self, pages=(), acquire_exc=None):
        self.pages = list(pages)
        self.acquire_exc = acquire_exc
        self.opened = 0
        self.closed = 0
        self.user_agents = []
        self.acquired = 0
        self.shut_down = False

    @property
    def is_running(self):
        return self.acquired > 0 and not self.shut_down

    async def acquire(self):
        self.acquired += 1
        if self.acquire_exc is not None:
            raise self.acquire_exc
        return object()

    @asynccontextmanager
    async def page_session(self, user_agent=None):
        if self.acquire_exc is not None:
            raise self.acquire_exc
        self.user_agents.append(user_agent)
        page = self.pages.pop(0) if self.pages else FakePage()
        self.opened += 1
        try:
            yield page
        finally:
            self.closed += 1

    async def close(self):
        self.shut_down = True


class StubExtractor:
    """Returns ``count`` synthetic jobs (ignoring limit) or raises ``exc``."""

    def __init__(self, source, count=0, exc=None):
        self.source = source
        self.count = count
        self.exc = exc
        self.calls = []

    async def extract(self, keywords, location, page_offset=0, limit=None):
        self.calls.append({"keywords": keywords, "location": location, "page_offset": page_offset, "limit": limit})
        if self.exc is not None:
            raise self.exc
        return [make_job(self.source, i) for i in range(self.count)]


class StubEnricher:
    """Deterministic career page / email lookups."""

    def __init__(self, career_url="https://{slug}.example/careers", email="hr@{slug}.example", fail_for=()):
        self.career_url = career_url
        self.email = email
        self.fail_for = set(fail_for)
        self.companies = []

    async def find_career_page(self, company_name):
        self.companies.append(company_name)
        if company_name in self.fail_for:
            raise RuntimeError(f"search exploded for {company_name}")
        if self.career_url is None:
            return None
        return self.career_url.format(slug=company_name.lower().replace(" ", "-"))

    async def find_hr_email(self, career_page_url):
        if not career_page_url or self.email is None:
            return None
        slug = career_page_url.split("//", 1)[1].split(".", 1)[0]
        return self.email.format(slug=slug)


def make_job(source, index):
    return JobRecord(
        id=f"{source}-1700000000000-{index}",
        title=f"Backend Engineer {index}",
        company=f"{source.title()} Co {index}",
        location="Bengaluru",
        job_url=f"https://{source}.example/jobs/{index}",
        posted_date=None,
        source=source,
        status="scraped",
    )


@pytest.fixture
def settings():
    """Settings with defaults, independent of the developer's environment."""
    return Settings()


@pytest.fixture
def fake_pool():
    return FakePool


@pytest.fixture
def fake_page():
    return FakePage


@pytest.fixture
def stub_extractors():
    """Factory: build {source: StubExtractor} and the matching extractor_factory."""

    def build(**outcomes):
        extractors = {}
        for source, outcome in outcomes.items():
            if isinstance(outcome, Exception):
                extractors[source] = StubExtractor(source, exc=outcome)
            else:
                extractors[source] = StubExtractor(source, count=outcome)
        return extractors, extractors.__getitem__

    return build


@pytest.fixture
def stub_enricher():
    return StubEnricher
