from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import aclosing

from checkers.paginator import Paginator, first_error
from config.settings import settings
from core import telemetry
from core.models import (
    CheckResult,
    PaginationOutcome,
    RunState,
    RunStatus,
    Violation,
)
from core.timestamps import compare

log = logging.getLogger(__name__)


def build_timestamp_selectors(
    items_per_page: int,
    processed_items: int,
    items_to_check: int,
    template: str | None = None,
) -> list[str]:
    """Selectors for the timestamps still needed from the current page, in page order."""
    if template is None:
        template = settings.TIMESTAMP_SELECTOR
    count = max(0, min(items_per_page, items_to_check - processed_items))
    return [template.format(index=i) for i in range(count)]


class BaseChecker(ABC):
    """Walks the listing page by page and verifies it is newest-first.

    Subclasses only decide how the timestamps of one page are read; they
    are verified here one at a time, in page order.  Stopping early
    (violation, rate limit, no more pages) is a normal return; any other
    exception is caught here and turned into a failed verdict.
    """

    approach: str

    def __init__(
        self,
        paginator: Paginator | None = None,
        items_to_check: int | None = None,
        items_per_page: int | None = None,
        selector_template: str | None = None,
    ) -> None:
        if items_to_check is None:
            items_to_check = settings.ITEMS_TO_CHECK
        if items_per_page is None:
            items_per_page = settings.ITEMS_PER_PAGE
        if selector_template is None:
            selector_template = settings.TIMESTAMP_SELECTOR
        self._paginator = paginator or Paginator()
        self._items_to_check = items_to_check
        self._items_per_page = items_per_page
        self._selector_template = selector_template

    @abstractmethod
    def _read_page(self, page, selectors: list[str]) -> AsyncIterator[str]:
        """Yield the timestamp text behind each selector, in selector order."""
        ...

    def _verify_item(
        self, state: RunState, timestamp: str
    ) -> tuple[RunState, Violation | None]:
        result = compare(
            timestamp,
            state.previous_timestamp,
            state.previous_minutes,
            position=state.processed_items + 1,
        )
        if not result.is_ordered:
            return state, result.violation
        return state.accept(timestamp, result.current_minutes), None

    async def check(self, page) -> CheckResult:
        log.info("--- Using %s approach ---", self.approach)
        start = time.perf_counter()

        state = RunState()
        status = RunStatus.COMPLETED
        violation: Violation | None = None
        error: str | None = None

        try:
            while state.processed_items < self._items_to_check:
                selectors = build_timestamp_selectors(
                    self._items_per_page,
                    state.processed_items,
                    self._items_to_check,
                    self._selector_template,
                )
                async with aclosing(self._read_page(page, selectors)) as timestamps:
                    async for timestamp in timestamps:
                        state, violation = self._verify_item(state, timestamp)
                        if violation is not None:
                            break
                if violation is not None:
                    status = RunStatus.VIOLATION
                    break

                if state.processed_items < self._items_to_check:
                    outcome = await self._paginator.advance(page)
                    if outcome is not PaginationOutcome.ADVANCED:
                        log.info("Navigation stopped (%s) - ending early", outcome.value)
                        status = RunStatus.from_outcome(outcome)
                        break
        except Exception as e:
            log.exception("Error while checking timestamps")
            status = RunStatus.FAULT
            cause = first_error(e)
            error = str(cause) or type(cause).__name__

        result = CheckResult(
            approach=self.approach,
            is_ordered=status not in (RunStatus.VIOLATION, RunStatus.FAULT),
            processed_items=state.processed_items,
            items_to_check=self._items_to_check,
            status=status,
            duration_seconds=telemetry.elapsed_since(start),
            violation=violation,
            error=error,
        )
        telemetry.report(result)
        return result
