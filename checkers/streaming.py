from __future__ import annotations

from collections.abc import AsyncIterator

from checkers.base import BaseChecker


class StreamChecker(BaseChecker):
    """Reads and verifies one timestamp at a time.

    Only the previously accepted item is held, and the run stops at the
    first violation without reading the rest of the page.
    """

    approach = "streaming"

    async def _read_page(self, page, selectors: list[str]) -> AsyncIterator[str]:
        for selector in selectors:
            yield await page.locator(selector).first.inner_text()
