"""
Headless browser document fetcher.

One DocumentFetcher is opened per run and handed to every roster and profile
fetch, so tests can swap in a fake and timeouts/headers are set in one place.
"""

from playwright.async_api import (
    async_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
DEFAULT_TIMEOUT_MS = 30000


class FetchError(Exception):
    """Network failure, timeout or non-success HTTP status for a document."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class DocumentFetcher:
    """Fetches rendered HTML through a shared Chromium context."""

    def __init__(self, user_agent: str = USER_AGENT, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.user_agent = user_agent
        self.timeout_ms = timeout_ms
        self._playwright = None
        self._browser = None
        self._context = None

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=True)
            self._context = await self._browser.new_context(user_agent=self.user_agent)
        except BaseException:
            # __aexit__ never runs when __aenter__ fails
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def fetch(self, url: str) -> str:
        if self._context is None:
            raise RuntimeError("DocumentFetcher used outside of 'async with'")

        page = None
        try:
            page = await self._context.new_page()
            response = await page.goto(url, wait_until='domcontentloaded', timeout=self.timeout_ms)
            if response is None:
                raise FetchError(url, "no response")
            if not response.ok:
                raise FetchError(url, f"HTTP {response.status}")
            return await page.content()
        except PlaywrightTimeoutError:
            raise FetchError(url, f"timed out after {self.timeout_ms}ms") from None
        except PlaywrightError as e:
            raise FetchError(url, str(e)) from e
        finally:
            if page is not None:
                await self._close_page(page, url)

    async def _close_page(self, page, url: str):
        # Close failures never replace the fetch result
        try:
            await page.close()
        except PlaywrightError as e:
            print(f"    ⚠️  Could not close page for {url}: {e}")
