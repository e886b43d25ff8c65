"""Page navigation for the checked listing.

This is the only place that talks to the site across a navigation.  The
site blocks rapid sequential page loads with a 403 after an unpredictable
number of requests; that and every other navigation failure is reported
as a ``PaginationOutcome`` so callers can stop and keep what they have.
"""

from __future__ import annotations

import asyncio
import logging

from config.settings import settings
from core.models import PaginationOutcome

log = logging.getLogger(__name__)


def first_error(exc: BaseException) -> BaseException:
    """The first leaf exception of a (possibly nested) exception group."""
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return exc


class RateLimiter:
    """Enforces a minimum delay between consecutive navigations."""

    def __init__(self, delay_seconds: float) -> None:
        self._delay = delay_seconds
        self._lock = asyncio.Lock()
        self._last_navigation: float | None = None

    async def wait(self) -> None:
        loop = asyncio.get_running_loop()
        async with self._lock:
            if self._last_navigation is not None:
                remaining = self._delay - (loop.time() - self._last_navigation)
            else:
                remaining = 0.0
            if remaining > 0:
                log.debug("Pacing navigation for %.2fs", remaining)
                await asyncio.sleep(remaining)
            self._last_navigation = loop.time()


class Paginator:
    def __init__(
        self,
        next_selector: str | None = None,
        url_fragment: str | None = None,
        rate_limit_status: int | None = None,
        delay_seconds: float | None = None,
    ) -> None:
        if next_selector is None:
            next_selector = settings.NEXT_PAGE_SELECTOR
        if url_fragment is None:
            url_fragment = settings.RESPONSE_URL_FRAGMENT
        if rate_limit_status is None:
            rate_limit_status = settings.RATE_LIMIT_STATUS
        self._next_selector = next_selector
        self._url_fragment = url_fragment
        self._rate_limit_status = rate_limit_status
        if delay_seconds is None:
            delay_seconds = settings.NAVIGATION_DELAY
        self._limiter = RateLimiter(delay_seconds) if delay_seconds > 0 else None

    def _matches(self, response) -> bool:
        return self._url_fragment in response.url

    async def advance(self, page) -> PaginationOutcome:
        try:
            next_link = page.locator(self._next_selector)
            if await next_link.count() == 0:
                log.info("No next page link found (%s)", self._next_selector)
                return PaginationOutcome.NO_MORE_PAGES

            if self._limiter is not None:
                await self._limiter.wait()

            async with page.expect_response(self._matches) as response_info:
                async with asyncio.TaskGroup() as tg:
                    tg.create_task(next_link.click())
                    tg.create_task(page.wait_for_load_state("networkidle"))
            response = await response_info.value

            if response is not None and response.status == self._rate_limit_status:
                log.warning(
                    "Detected rate limit (%d) loading %s", response.status, response.url
                )
                return PaginationOutcome.RATE_LIMITED

            return PaginationOutcome.ADVANCED
        except Exception as e:
            log.warning("Error getting next page: %s", first_error(e))
            return PaginationOutcome.NAVIGATION_ERROR
