"""
Shared pytest fixtures for the feed order checker tests.

Provides a deterministic stand-in for a Playwright page:
- pages of raw timestamps addressed by ``item-{index}`` selectors
- a ``#next`` link whose navigations follow a scripted list of statuses
- extraction delays that finish later items first
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import pytest

from checkers.batch import BatchChecker
from checkers.paginator import Paginator
from checkers.streaming import StreamChecker

ITEM_TEMPLATE = "item-{index}"
NEXT_SELECTOR = "#next"
HOST = "example.test"


class FakeResponse:
    def __init__(self, url, status):
        self.url = url
        self.status = status


class FakeTimestampLocator:
    def __init__(self, page, index):
        self._page = page
        self._index = index

    @property
    def first(self):
        return self

    async def count(self):
        return 1 if self._index < len(self._page.current_items) else 0

    async def inner_text(self):
        page = self._page
        page.in_flight += 1
        page.max_in_flight = max(page.max_in_flight, page.in_flight)
        try:
            # Later positions resolve first so completion order differs from page order
            await asyncio.sleep((len(page.current_items) - self._index) * 0.001)
            page.reads.append(self._index)
            return page.current_items[self._index]
        finally:
            page.in_flight -= 1


class FakeNextLink:
    def __init__(self, page):
        self._page = page

    @property
    def first(self):
        return self

    async def count(self):
        return 0 if self._page.on_last_page else 1

    async def click(self):
        page = self._page
        step = page.navigations.pop(0) if page.navigations else 200
        page.clicks += 1
        if isinstance(step, Exception):
            raise step
        if step != page.rate_limit_status:
            page.page_index += 1
        page.deliver(FakeResponse(f"https://{HOST}/newest?p={page.page_index + 1}", step))


class FakeResponseInfo:
    def __init__(self, future):
        self._future = future

    @property
    def value(self):
        return self._future


class FakePage:
    def __init__(self, pages, navigations=None, rate_limit_status=403):
        self.pages = [list(p) for p in pages]
        self.navigations = list(navigations or [])
        self.rate_limit_status = rate_limit_status
        self.page_index = 0
        self.clicks = 0
        self.reads = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._response_waiters = []
        self.url = f"https://{HOST}/newest"

    @property
    def current_items(self):
        return self.pages[self.page_index]

    @property
    def on_last_page(self):
        return self.page_index >= len(self.pages) - 1

    def locator(self, selector):
        if selector == NEXT_SELECTOR:
            return FakeNextLink(self)
        return FakeTimestampLocator(self, int(selector.split("-", 1)[1]))

    def deliver(self, response):
        for predicate, future in self._response_waiters:
            if not future.done() and predicate(response):
                future.set_result(response)

    @asynccontextmanager
    async def expect_response(self, predicate):
        future = asyncio.get_running_loop().create_future()
        waiter = (predicate, future)
        self._response_waiters.append(waiter)
        try:
            yield FakeResponseInfo(future)
            await asyncio.wait_for(future, timeout=1.0)
        finally:
            self._response_waiters.remove(waiter)

    async def goto(self, url):
        self.url = url

    async def wait_for_load_state(self, state="load"):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def make_page():
    def _make(pages, navigations=None):
        return FakePage(pages, navigations)

    return _make


@pytest.fixture
def paginator():
    return Paginator(
        next_selector=NEXT_SELECTOR,
        url_fragment=HOST,
        rate_limit_status=403,
        delay_seconds=0,
    )


@pytest.fixture
def make_checker(paginator):
    def _make(cls, items_to_check, items_per_page=30):
        return cls(
            paginator=paginator,
            items_to_check=items_to_check,
            items_per_page=items_per_page,
            selector_template=ITEM_TEMPLATE,
        )

    return _make


@pytest.fixture(params=[BatchChecker, StreamChecker], ids=["batch", "streaming"])
def checker_cls(request):
    return request.param
