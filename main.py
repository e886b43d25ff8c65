"""Feed order checker — entry point."""

from __future__ import annotations

import asyncio
import logging
import tracemalloc

from playwright.async_api import async_playwright

from checkers.base import BaseChecker
from checkers.batch import BatchChecker
from checkers.streaming import StreamChecker
from config.settings import settings
from core.models import CheckResult

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
log = logging.getLogger(__name__)


async def run_in_isolated_context(browser, checker: BaseChecker) -> CheckResult:
    """Run ``checker`` against a fresh context so runs share no session state."""
    context = await browser.new_context()
    try:
        page = await context.new_page()
        await page.goto(settings.TARGET_URL)
        return await checker.check(page)
    finally:
        await context.close()


async def run_checks(checkers: list[BaseChecker] | None = None) -> list[CheckResult]:
    checkers = checkers or [BatchChecker(), StreamChecker()]
    results: list[CheckResult] = []

    # Heap tracing lets each approach report its own peak
    started_tracing = not tracemalloc.is_tracing()
    if started_tracing:
        tracemalloc.start()

    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=settings.HEADLESS)
            try:
                for checker in checkers:
                    tracemalloc.reset_peak()
                    try:
                        result = await run_in_isolated_context(browser, checker)
                    except Exception as e:
                        log.error("%s check failed to start: %s", checker.approach, e)
                        continue
                    results.append(result)
                    log.info(
                        "%s result: %s (%s%s)",
                        result.approach.capitalize(),
                        result.is_ordered,
                        result.status.value,
                        ", partial" if result.partial else "",
                    )
                    if result.violation is not None:
                        log.info("Violation: %s", result.violation.describe())
            finally:
                log.info("Browser closing.")
                await browser.close()
    finally:
        if started_tracing:
            tracemalloc.stop()

    return results


def cli() -> None:
    try:
        asyncio.run(run_checks())
    except KeyboardInterrupt:
        log.info("Interrupted by user")
    except Exception as e:
        log.error("An error occurred: %s", e)


if __name__ == "__main__":
    cli()
