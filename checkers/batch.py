from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from checkers.base import BaseChecker
from core.models import CheckResult

log = logging.getLogger(__name__)


class BatchChecker(BaseChecker):
    """Reads every needed timestamp on a page at once, then verifies them.

    Extraction within a page is concurrent.  Results are taken from the
    tasks by position, so verification follows the page order whatever
    order the reads finish in.  If one read fails the rest are cancelled.
    All timestamps read during a run are kept in memory.
    """

    approach = "batch"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._collected: list[str] = []

    @property
    def collected(self) -> list[str]:
        return list(self._collected)

    async def check(self, page) -> CheckResult:
        self._collected = []
        return await super().check(page)

    async def _read_page(self, page, selectors: list[str]) -> AsyncIterator[str]:
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(page.locator(selector).first.inner_text())
                for selector in selectors
            ]
        timestamps = [task.result() for task in tasks]
        log.debug("Extracted %d timestamps from page", len(timestamps))

        self._collected.extend(timestamps)
        for timestamp in timestamps:
            yield timestamp
