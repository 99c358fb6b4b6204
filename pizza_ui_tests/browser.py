"""Thin wrapper around direct Playwright for ergonomic assertions."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Pattern

import anyio
from playwright.async_api import Locator, Page, TimeoutError as PlaywrightTimeout


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


def _compile(pattern: str | Pattern[str], flags: int = 0) -> Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)


class Browser:
    """Convenience wrapper over a Playwright page.

    Actions raise ``ToolError`` when Playwright cannot perform them; the
    ``expect_*`` and ``wait_for_*`` helpers raise ``AssertionError`` so a
    failing UI check reads as a test failure.
    """

    def __init__(self, page: Page, timeout: float = 10.0) -> None:
        self._page = page
        self.timeout = timeout
        self.current_url: str | None = None

    @property
    def page(self) -> Page:
        return self._page

    # ---- navigation -------------------------------------------------------------
    async def goto(self, path: str, wait_until: str = "load") -> Dict[str, Any]:
        """Navigate to ``path`` (relative to the context base URL)."""
        try:
            response = await self._page.goto(path, wait_until=wait_until)
        except PlaywrightTimeout as exc:
            raise ToolError(name="goto", payload={"path": path, "wait_until": wait_until}, message=str(exc))
        self.current_url = self._page.url
        return {"url": self.current_url, "status": response.status if response else None}

    async def wait_for_url(self, pattern: str | Pattern[str]) -> str:
        """Wait until the page URL matches ``pattern`` (regular expression)."""
        regex = _compile(pattern)
        try:
            await self._page.wait_for_url(regex, timeout=self.timeout * 1000)
        except PlaywrightTimeout as exc:
            raise AssertionError(
                f"URL {self._page.url} did not match {regex.pattern} within {self.timeout}s"
            ) from exc
        self.current_url = self._page.url
        return self.current_url

    async def expect_title(self, pattern: str | Pattern[str]) -> str:
        regex = _compile(pattern, re.IGNORECASE)
        deadline = anyio.current_time() + self.timeout
        title = ""
        while anyio.current_time() <= deadline:
            title = await self._page.title()
            if regex.search(title):
                return title
            await anyio.sleep(0.2)
        raise AssertionError(f"Page title '{title}' does not match {regex.pattern}")

    # ---- actions ----------------------------------------------------------------
    async def click(self, locator: Locator, description: str) -> None:
        try:
            await locator.click()
        except Exception as exc:
            raise ToolError(name="click", payload={"target": description}, message=str(exc))
        self.current_url = self._page.url

    async def click_role(self, role: str, name: str) -> None:
        await self.click(self._page.get_by_role(role, name=name), f"{role}[name={name!r}]")

    async def click_text(self, text: str) -> None:
        await self.click(self._page.get_by_text(text), f"text={text!r}")

    async def fill_placeholder(self, placeholder: str, value: str) -> None:
        try:
            await self._page.get_by_placeholder(placeholder).fill(value)
        except Exception as exc:
            raise ToolError(name="fill", payload={"placeholder": placeholder, "value": value}, message=str(exc))

    async def fill_label(self, label: str, value: str) -> None:
        try:
            await self._page.get_by_label(label).fill(value)
        except Exception as exc:
            raise ToolError(name="fill", payload={"label": label, "value": value}, message=str(exc))

    async def select_label(self, label: str) -> None:
        """Select the option with visible ``label`` in the page's combobox."""
        try:
            await self._page.get_by_role("combobox").select_option(label=label)
        except Exception as exc:
            raise ToolError(name="select", payload={"label": label}, message=str(exc))

    def row_button(self, row_text: str, button: str) -> Locator:
        """Button ``button`` inside the table row containing ``row_text``."""
        return self._page.locator("tr", has_text=row_text).get_by_role("button", name=button)

    # ---- assertions -------------------------------------------------------------
    async def expect_visible(self, locator: Locator, description: str) -> None:
        try:
            await locator.wait_for(state="visible", timeout=self.timeout * 1000)
        except PlaywrightTimeout as exc:
            raise AssertionError(f"{description} not visible within {self.timeout}s") from exc

    async def expect_heading(self, name: str) -> None:
        await self.expect_visible(self._page.get_by_role("heading", name=name), f"heading {name!r}")

    async def expect_link(self, name: str) -> None:
        await self.expect_visible(self._page.get_by_role("link", name=name), f"link {name!r}")

    async def expect_text(self, text: str) -> None:
        await self.expect_visible(self._page.get_by_text(text), f"text {text!r}")

    async def expect_count(self, locator: Locator, expected: int, description: str) -> int:
        """Poll until ``locator`` resolves to exactly ``expected`` elements."""
        deadline = anyio.current_time() + self.timeout
        count = 0
        while anyio.current_time() <= deadline:
            count = await locator.count()
            if count == expected:
                return count
            await anyio.sleep(0.2)
        raise AssertionError(f"Expected {expected} x {description}, found {count}")

    async def text(self, selector: str) -> str:
        """Get text content of element."""
        try:
            text = await self._page.text_content(selector, timeout=5000)
            return text or ""
        except Exception as exc:
            raise ToolError(name="text", payload={"selector": selector}, message=str(exc))

    async def wait_for_text(self, selector: str, expected: str, interval: float = 0.25) -> str:
        """Poll for text content until it contains the expected substring.

        Visibility is not required, so this also works for modals that are
        still animating in.
        """
        deadline = anyio.current_time() + self.timeout
        last_error: ToolError | None = None

        while anyio.current_time() <= deadline:
            try:
                content = await self.text(selector)
            except ToolError as exc:
                content = ""
                last_error = exc
            if expected in content:
                return content
            await anyio.sleep(interval)

        if last_error:
            raise AssertionError(
                f"Timed out waiting for '{expected}' in selector '{selector}'. Last error: {last_error}"
            ) from last_error
        raise AssertionError(f"Timed out waiting for '{expected}' in selector '{selector}'")
