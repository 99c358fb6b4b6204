import sys
import threading
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pizza_ui_tests.browser import Browser
from pizza_ui_tests.config import settings
from pizza_ui_tests.coverage import IstanbulCoverageCollector
from pizza_ui_tests.mock_pizza_api import MockPizzaApi, MockPizzaState, create_mock_api_app
from pizza_ui_tests.playwright_client import PlaywrightClient
from pizza_ui_tests.route_mocks import install_app_mocks


# ============================================================================
# Mock backend fixtures
# ============================================================================

@pytest.fixture()
def mock_state():
    """Fresh seeded mock state with a fixed clock."""
    return MockPizzaState.seeded(today=lambda: "2026-03-14")


@pytest.fixture()
def mock_api(mock_state):
    return MockPizzaApi(mock_state)


@pytest.fixture()
def mock_api_client(mock_state):
    """Flask test client for the mock API app."""
    app = create_mock_api_app(mock_state)
    with app.test_client() as client:
        yield client


@pytest.fixture(scope='function')
def mock_pizza_api_server(mock_state):
    """Fixture that provides a running mock JWT Pizza API server.

    Usage:
        def test_something(mock_pizza_api_server):
            httpx.get(f"{mock_pizza_api_server.url}/api/order/menu")
    """
    from werkzeug.serving import make_server

    class MockServer:
        def __init__(self, host='127.0.0.1', port=0):
            self.app = create_mock_api_app(mock_state)
            self.server = make_server(host, port, self.app, threaded=True)
            self.thread = None

        def start(self):
            self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
            self.thread.start()

        def stop(self):
            self.server.shutdown()
            if self.thread:
                self.thread.join(timeout=5)

        @property
        def url(self):
            return f"http://{self.server.host}:{self.server.server_port}"

    server = MockServer()
    server.start()

    yield server

    server.stop()


# ============================================================================
# Browser fixtures
# ============================================================================

@pytest.fixture(scope='session')
def frontend_available():
    """Skip browser scenarios when the JWT Pizza frontend is not running."""
    try:
        httpx.get(settings.base_url, timeout=3.0)
    except httpx.HTTPError as exc:
        pytest.skip(f"JWT Pizza frontend not reachable at {settings.base_url}: {exc}")
    return settings.base_url


@pytest_asyncio.fixture()
async def playwright_client(frontend_available):
    """Create a Playwright client instance."""
    async with PlaywrightClient(base_url=frontend_available) as client:
        yield client


@pytest_asyncio.fixture()
async def browser(playwright_client):
    """Create a Browser instance with the Playwright page."""
    return Browser(playwright_client.page, timeout=settings.timeout_ms / 1000)


@pytest_asyncio.fixture()
async def app_mocks(playwright_client):
    """Install the mock backend into the scenario page.

    Usage:
        async def test_dashboard(browser, app_mocks):
            state = await app_mocks(seed_login_as="diner")

    When UI_COLLECT_COVERAGE is set, coverage is written on every unload and
    for the last document at teardown.
    """
    page = playwright_client.page
    collector = None
    if settings.collect_coverage:
        collector = IstanbulCoverageCollector(settings.coverage_dir)
        await collector.attach(page)

    async def _install(seed_login_as=None, state=None):
        return await install_app_mocks(page, state=state, seed_login_as=seed_login_as)

    yield _install

    if collector is not None:
        await collector.collect(page)
