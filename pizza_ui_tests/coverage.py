"""Collect istanbul coverage from the instrumented frontend.

When the app is built with vite-plugin-istanbul it exposes
``window.__coverage__``. Each document's counters are written to
``<coverage_dir>/<uuid>.json`` so ``npx nyc report`` can merge the runs:
on every unload through an exposed binding, and once more for the final
document when the scenario ends.
"""
from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import Page

logger = logging.getLogger(__name__)

COVERAGE_EXPRESSION = "() => window.__coverage__ || null"

COVERAGE_BINDING = "__collectIstanbulCoverage"

# Full navigations replace window.__coverage__, so hand it over before unload
UNLOAD_SCRIPT = f"""
window.addEventListener('beforeunload', () => {{
  if (window.__coverage__) {{
    window.{COVERAGE_BINDING}(JSON.stringify(window.__coverage__));
  }}
}});
"""


class IstanbulCoverageCollector:
    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    async def attach(self, page: Page) -> None:
        """Write coverage for every document the page unloads."""
        await page.expose_function(COVERAGE_BINDING, self._receive)
        await page.add_init_script(UNLOAD_SCRIPT)

    def _receive(self, payload: Optional[str]) -> None:
        if payload:
            self.write(json.loads(payload))

    async def collect(self, page: Page) -> Optional[Path]:
        """Dump the page's coverage object; returns the written file, if any."""
        if page.is_closed():
            return None
        coverage = await page.evaluate(COVERAGE_EXPRESSION)
        if not coverage:
            logger.debug("No window.__coverage__ on %s (app not instrumented?)", page.url)
            return None
        return self.write(coverage)

    def write(self, coverage: Dict[str, Any]) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{uuid.uuid4()}.json"
        path.write_text(json.dumps(coverage), encoding="utf-8")
        logger.info("Wrote frontend coverage for %d files to %s", len(coverage), path)
        return path
