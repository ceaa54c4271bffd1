from typing import Dict, Protocol

import httpx
from loguru import logger

from .config import Settings
from .errors import (
    FetchTimeoutError,
    NetworkError,
    RequestSetupError,
    ResolverError,
    UpstreamError,
    classify_http_error,
)
from .extractor import DOWNLOAD_BUTTON_SELECTOR, PLACEHOLDER_HREFS, SCRAMBLED_ATTR
from .models import PageContent


# Runs inside the page: true once the button carries a usable link
BUTTON_READY_JS = """
([selector, attr, placeholders]) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    const href = (el.getAttribute('href') || '').trim().toLowerCase().replace(/ /g, '');
    if (href && !placeholders.includes(href)) return true;
    return !!(el.getAttribute(attr) || '').trim();
}
"""


def browser_headers(user_agent: str) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Referer": "https://www.mediafire.com/",
    }


class PageFetcher(Protocol):
    async def fetch(self, page_url: str) -> PageContent:
        ...


class StaticFetcher:
    """Single GET of the file page, no script execution."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def fetch(self, page_url: str) -> PageContent:
        logger.info(f"Fetching MediaFire page: {page_url}")
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.settings.request_timeout,
                headers=browser_headers(self.settings.user_agent),
            ) as client:
                resp = await client.get(page_url)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = classify_http_error(e)
            logger.warning(f"Page fetch failed ({error.kind}): {e}")
            raise error from e

        return PageContent(url=str(resp.url), html=resp.text, status_code=resp.status_code)


class DynamicFetcher:
    """Render the page in a throwaway headless Chromium and wait for the button.

    Every call gets its own Playwright driver and browser; both are torn down
    on every exit path, timeouts and errors included.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    async def fetch(self, page_url: str) -> PageContent:
        try:
            from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeoutError
        except ImportError as e:
            raise RequestSetupError(f"Playwright module not installed: {e}") from e

        timeout_ms = int(self.settings.browser_timeout * 1000)
        logger.info(f"Rendering MediaFire page in headless browser: {page_url}")

        try:
            p = await async_playwright().start()
        except Exception as e:
            raise RequestSetupError(f"Failed to start Playwright driver: {e}") from e

        try:
            try:
                browser = await p.chromium.launch(
                    headless=True,
                    args=["--no-sandbox", "--disable-setuid-sandbox"],
                )
            except Exception as e:
                raise RequestSetupError(f"Failed to launch browser: {e}") from e

            try:
                return await self._render(browser, page_url, timeout_ms, PlaywrightTimeoutError)
            finally:
                await browser.close()
        finally:
            await p.stop()

    async def _render(self, browser, page_url: str, timeout_ms: int, timeout_error) -> PageContent:
        timeout_s = f"{self.settings.browser_timeout:g}s"
        try:
            context = await browser.new_context(
                user_agent=self.settings.user_agent,
                extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
            )
            page = await context.new_page()

            try:
                response = await page.goto(page_url, timeout=timeout_ms, wait_until="domcontentloaded")
            except timeout_error as e:
                logger.warning(f"Timed out navigating to {page_url}")
                raise FetchTimeoutError(f"timeout: navigation did not finish after {timeout_s}") from e
            if response is not None and response.status >= 400:
                raise UpstreamError(response.status, f"Navigation to {page_url} returned {response.status}")

            try:
                await page.wait_for_function(
                    BUTTON_READY_JS,
                    arg=[DOWNLOAD_BUTTON_SELECTOR, SCRAMBLED_ATTR, sorted(PLACEHOLDER_HREFS)],
                    timeout=timeout_ms,
                )
            except timeout_error as e:
                logger.warning(f"Timed out waiting for download button on {page_url}")
                raise FetchTimeoutError(f"timeout: download button not ready after {timeout_s}") from e

            html = await page.content()
            return PageContent(
                url=page.url,
                html=html,
                status_code=response.status if response is not None else 200,
                rendered=True,
            )
        except ResolverError:
            raise
        except Exception as e:
            logger.warning(f"Browser navigation failed: {e}")
            raise classify_browser_error(e) from e


def classify_browser_error(exc: Exception) -> ResolverError:
    # Playwright reports network failures as plain errors with net::ERR_* messages
    if "net::" in str(exc):
        return NetworkError(str(exc))
    return classify_http_error(exc)


def build_fetcher(settings: Settings) -> PageFetcher:
    if settings.render_mode == "dynamic":
        return DynamicFetcher(settings)
    return StaticFetcher(settings)
