"""Install the mock JWT Pizza backend into a Playwright page.

Usage:
    state = await install_app_mocks(page, seed_login_as="diner")
    await page.goto("/diner-dashboard")

Every ``/api/`` request the page makes is answered by ``MockPizzaApi``;
requests the mock does not know fall through to the network.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Optional

from playwright.async_api import Page, Route

from pizza_ui_tests.mock_pizza_api import MockPizzaApi, MockPizzaState

logger = logging.getLogger(__name__)

API_URL_PATTERN = re.compile(r"/api/")

# Preline's HSStaticMethods is missing outside the real bundle, and
# animations make visibility checks flaky.
STABILITY_INIT_SCRIPT = """
(() => {
  window.HSStaticMethods = window.HSStaticMethods || { autoInit: () => {} };
  const addStyle = () => {
    const style = document.createElement('style');
    style.innerHTML = `*, *::before, *::after { transition-duration: 0s !important; animation-duration: 0s !important; }`;
    document.head.appendChild(style);
  };
  if (document.head) {
    addStyle();
  } else {
    document.addEventListener('DOMContentLoaded', addStyle);
  }
})();
"""


def seed_token_script(token: str) -> str:
    return f"localStorage.setItem('token', {json.dumps(token)});"


class PageRouteMock:
    """Playwright route handler that answers requests from a ``MockPizzaApi``."""

    def __init__(self, api: MockPizzaApi) -> None:
        self.api = api
        self.handled = 0

    async def __call__(self, route: Route) -> None:
        req = route.request
        response = self.api.handle(req.method, req.url, req.headers, req.post_data)
        if response is None:
            await route.fallback()
            return
        self.handled += 1
        await route.fulfill(
            status=response.status,
            content_type="application/json",
            body=response.body,
        )


async def install_app_mocks(
    page: Page,
    state: Optional[MockPizzaState] = None,
    seed_login_as: Optional[str] = None,
) -> MockPizzaState:
    """Route the page's backend calls to a fresh (or given) mock state.

    Args:
        page: Page to install the mocks into (before the first navigation)
        state: Mock state to serve; a seeded one is created when omitted
        seed_login_as: "diner", "franchisee" or "admin" to start logged in

    Returns:
        The mock state, for assertions on what the UI changed
    """
    state = state if state is not None else MockPizzaState.seeded()

    await page.add_init_script(script=STABILITY_INIT_SCRIPT)

    if seed_login_as:
        token = state.token_for(seed_login_as)
        await page.add_init_script(script=seed_token_script(token))
        logger.debug("Seeding localStorage token for %s", seed_login_as)

    await page.route(API_URL_PATTERN, PageRouteMock(MockPizzaApi(state)))
    return state
