"""
Direct Playwright Client
========================

Launches Playwright in-process with one browser, one context and one page.
The context carries the frontend ``base_url`` so scenarios can navigate with
relative paths (``await page.goto("/menu")``).

Usage:
    from pizza_ui_tests.playwright_client import PlaywrightClient

    async with PlaywrightClient(base_url="http://localhost:5173") as client:
        await client.page.goto("/")
"""

from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from pizza_ui_tests.config import settings


class PlaywrightClient:
    """
    Direct Playwright client with full API access.

    Example:
        async with PlaywrightClient() as client:
            await client.page.goto("/menu")
    """

    def __init__(
        self,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout: Optional[int] = None,
        base_url: Optional[str] = None,
    ):
        """
        Initialize Playwright client.

        Args:
            browser_type: Browser to use (chromium, firefox, webkit)
            headless: Run in headless mode (None = PLAYWRIGHT_HEADLESS setting)
            timeout: Default timeout in milliseconds (None = UI_TIMEOUT_MS setting)
            base_url: Base URL for relative navigation (None = UI_BASE_URL setting)
        """
        self.browser_type = browser_type or settings.browser_type
        self.headless = settings.playwright_headless if headless is None else headless
        self.timeout = timeout or settings.timeout_ms
        self.base_url = base_url or settings.base_url

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def connect(self):
        """Launch the browser and open the default context and page."""
        self._playwright = await async_playwright().start()

        if self.browser_type == 'firefox':
            self._browser = await self._playwright.firefox.launch(headless=self.headless)
        elif self.browser_type == 'webkit':
            self._browser = await self._playwright.webkit.launch(headless=self.headless)
        else:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)

        self._context = await self._browser.new_context(base_url=self.base_url)
        self._context.set_default_timeout(self.timeout)

        self._page = await self._context.new_page()

    async def close(self):
        """Close all connections and cleanup resources."""
        if self._page:
            await self._page.close()
            self._page = None

        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def page(self) -> Page:
        """Get the default page."""
        if not self._page:
            raise RuntimeError("Client not connected or page not created")
        return self._page
