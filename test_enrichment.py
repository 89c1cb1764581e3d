import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from scout_pipeline.enrichment import (
    CareerPageEnricher,
    first_result_link,
    pick_contact_email,
    visible_text,
)
from scout_pipeline.errors import ProcessLaunchError

SEARCH_HTML = """
<div id="search">
  <div class="g"><a href="https://careers.acme.com/">Careers at Acme</a></div>
  <div class="g"><a href="https://acme.com/about">About</a></div>
</div>
"""

CAREER_HTML = """
<html><head><script>var x = "bot@tracker.io";</script></head>
<body>
  <p>Questions? info@acme.com or press@acme.com</p>
  <footer>Send CVs to Talent.Team@Acme.com</footer>
</body></html>
"""


@pytest.mark.parametrize(
    "text, expected",
    [
        ("contact info@acme.com or hr@acme.com", "hr@acme.com"),
        ("info@acme.com, press@acme.com", "info@acme.com"),
        ("write to sales@jobs.acme.io today", "sales@jobs.acme.io"),
        ("RECRUITMENT@ACME.COM", "RECRUITMENT@ACME.COM"),
        ("no addresses here", None),
        ("", None),
    ],
)
def test_pick_contact_email(text, expected):
    assert pick_contact_email(text) == expected


def test_visible_text_drops_scripts():
    text = visible_text(CAREER_HTML)
    assert "bot@tracker.io" not in text
    assert "Talent.Team@Acme.com" in text


def test_first_result_link():
    assert first_result_link(SEARCH_HTML) == "https://careers.acme.com/"
    assert first_result_link("<div class='g'><a href='/url?q=https://x.io'>x</a></div>") == "https://www.google.com/url?q=https://x.io"
    assert first_result_link("<p>nothing</p>") is None


@pytest.mark.asyncio
async def test_find_career_page_searches_company(settings, fake_pool, fake_page):
    page = fake_page(html=SEARCH_HTML)
    pool = fake_pool([page])
    enricher = CareerPageEnricher(pool, settings)

    url = await enricher.find_career_page("Acme Corp")

    assert url == "https://careers.acme.com/"
    assert page.visited[0]["url"] == "https://www.google.com/search?q=Acme%20Corp%20careers"
    assert page.visited[0]["timeout"] == 15000
    assert pool.opened == pool.closed == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "page_kwargs",
    [
        {"goto_exc": PlaywrightTimeoutError("Timeout 15000ms exceeded")},
        {"goto_exc": RuntimeError("net::ERR_CONNECTION_RESET")},
        {"html": "<p>no results</p>"},
    ],
)
async def test_find_career_page_degrades_to_none(settings, fake_pool, fake_page, page_kwargs):
    pool = fake_pool([fake_page(**page_kwargs)])
    assert await CareerPageEnricher(pool, settings).find_career_page("Acme") is None
    assert pool.closed == pool.opened


@pytest.mark.asyncio
async def test_find_career_page_survives_launch_failure(settings, fake_pool):
    pool = fake_pool(acquire_exc=ProcessLaunchError("no chromium"))
    assert await CareerPageEnricher(pool, settings).find_career_page("Acme") is None


@pytest.mark.asyncio
async def test_find_hr_email_prefers_role_address(settings, fake_pool, fake_page):
    page = fake_page(html=CAREER_HTML)
    pool = fake_pool([page])

    email = await CareerPageEnricher(pool, settings).find_hr_email("https://careers.acme.com/")

    assert email == "Talent.Team@Acme.com"
    assert page.visited[0]["url"] == "https://careers.acme.com/"


@pytest.mark.asyncio
async def test_find_hr_email_none_without_url(settings, fake_pool):
    pool = fake_pool()
    assert await CareerPageEnricher(pool, settings).find_hr_email(None) is None
    assert pool.opened == 0


@pytest.mark.asyncio
async def test_find_hr_email_none_on_navigation_failure(settings, fake_pool, fake_page):
    pool = fake_pool([fake_page(goto_exc=PlaywrightTimeoutError("Timeout 15000ms exceeded"))])
    assert await CareerPageEnricher(pool, settings).find_hr_email("https://careers.acme.com/") is None
    assert pool.closed == 1
