import logging
from typing import Protocol

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from app.exceptions.custom import FetchError, FetchTimeoutError
from app.schemas.lookup import FetchedDocument

logger = logging.getLogger(__name__)

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
_ACCEPT_LANGUAGE = "vi-VN,vi;q=0.9,en-US;q=0.8,en;q=0.7"

# Needed for Chromium inside containers without a user namespace
_CHROMIUM_ARGS = ("--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage")


def build_profile_url(base_url: str, phone: str) -> str:
    return f"{base_url.rstrip('/')}/{phone}"


class PageFetcher(Protocol):
    """Obtains the profile document for a normalized phone number.

    Implementations raise ``FetchError`` (or ``FetchTimeoutError``) and never
    retry on their own.
    """

    name: str

    async def fetch(self, phone: str) -> FetchedDocument: ...


class StaticPageFetcher:
    name = "static"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        user_agent: str,
        timeout: float = 10.0,
    ):
        self._client = client
        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout = timeout

    async def fetch(self, phone: str) -> FetchedDocument:
        url = build_profile_url(self._base_url, phone)
        headers = {
            "User-Agent": self._user_agent,
            "Accept": _ACCEPT,
            "Accept-Language": _ACCEPT_LANGUAGE,
            "Accept-Encoding": "gzip, deflate",
        }
        try:
            # httpx decodes gzip/deflate bodies transparently
            resp = await self._client.get(
                url,
                headers=headers,
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(
                f"Timed out after {self._timeout:g}s fetching {url}", phone=phone
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", phone=phone) from exc
        except httpx.InvalidURL as exc:
            raise FetchError(f"Cannot request {url!r}: {exc}", phone=phone) from exc

        if resp.status_code >= 500:
            raise FetchError(
                f"Upstream returned HTTP {resp.status_code} for {url}", phone=phone
            )
        if resp.status_code >= 400:
            # 4xx bodies may still hold the not-found wording
            logger.info("Upstream returned HTTP %d for %s", resp.status_code, url)

        return FetchedDocument(url=url, html=resp.text)


class RenderedPageFetcher:
    """Loads the profile in a throwaway headless Chromium.

    Each call launches its own browser and closes it before returning, on
    every path.
    """

    name = "rendered"

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 15.0,
        settle_delay: float = 4.0,
    ):
        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout = timeout
        self._settle_delay = settle_delay

    async def fetch(self, phone: str) -> FetchedDocument:
        url = build_profile_url(self._base_url, phone)
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(headless=True, args=list(_CHROMIUM_ARGS))
                try:
                    page = await browser.new_page(user_agent=self._user_agent)
                    await page.goto(
                        url,
                        wait_until="networkidle",
                        timeout=self._timeout * 1000,
                    )
                    await page.wait_for_timeout(self._settle_delay * 1000)
                    title = await page.title()
                    html = await page.content()
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as exc:
            raise FetchTimeoutError(
                f"Timed out after {self._timeout:g}s rendering {url}", phone=phone
            ) from exc
        except PlaywrightError as exc:
            raise FetchError(f"Browser failed on {url}: {exc.message}", phone=phone) from exc

        return FetchedDocument(
            url=url,
            html=html,
            title=title,
            dom=BeautifulSoup(html, "html.parser"),
        )
