"""
Best-effort company enrichment: career page URL and a contact email.

Neither lookup raises. Anything that goes wrong (timeouts, no search result,
unreachable page) is logged and reported as None.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup

from .browser import SessionPool
from .config import Settings
from .errors import EnrichmentError

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.google.com/search?q={query}"
FIRST_RESULT_SELECTOR = "div.g a[href]"

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
ROLE_EMAIL_RE = re.compile(r"hr|careers|recruitment|jobs|talent", re.IGNORECASE)

NON_VISIBLE_TAGS = ("script", "style", "noscript", "template")


def visible_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NON_VISIBLE_TAGS):
        tag.decompose()
    body = soup.body or soup
    return body.get_text(" ", strip=True)


def extract_emails(text: str) -> List[str]:
    return EMAIL_RE.findall(text or "")


def pick_contact_email(text: str) -> Optional[str]:
    """First role-looking address (hr@, careers@, ...), else the first address, else None."""
    emails = extract_emails(text)
    if not emails:
        return None
    for email in emails:
        if ROLE_EMAIL_RE.search(email):
            return email
    return emails[0]


def first_result_link(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    link = soup.select_one(FIRST_RESULT_SELECTOR)
    if link is None:
        return None
    href = link.get("href", "").strip()
    return urljoin("https://www.google.com/", href) if href else None


class CareerPageEnricher:
    """Looks up career pages and HR contacts using the shared browser."""

    def __init__(self, pool: SessionPool, settings: Settings):
        self.pool = pool
        self.settings = settings

    async def _fetch(self, url: str) -> str:
        try:
            async with self.pool.page_session(user_agent=self.settings.user_agent) as page:
                await page.goto(url, wait_until="networkidle", timeout=self.settings.enrich_timeout_ms)
                return await page.content()
        except Exception as exc:
            raise EnrichmentError(f"{url}: {exc}") from exc

    async def find_career_page(self, company_name: str) -> Optional[str]:
        if not company_name or not company_name.strip():
            return None

        url = SEARCH_URL.format(query=quote(f"{company_name.strip()} careers", safe=""))
        try:
            career_url = first_result_link(await self._fetch(url))
        except EnrichmentError as exc:
            logger.warning("Career page search failed for %r: %s", company_name, exc)
            return None

        logger.debug("Career page for %r: %s", company_name, career_url)
        return career_url

    async def find_hr_email(self, career_page_url: Optional[str]) -> Optional[str]:
        if not career_page_url:
            return None

        try:
            text = visible_text(await self._fetch(career_page_url))
        except EnrichmentError as exc:
            logger.warning("Email search failed for %s: %s", career_page_url, exc)
            return None

        return pick_contact_email(text)
