"""Retry-until-true polling and the conditions scenarios wait on."""

import asyncio
import inspect

from failures import NotYet, TimeoutExceeded
from locators import find, find_all


async def wait_for(predicate, timeout_ms: int, poll_interval_ms: int = 100, message: str | None = None):
    """Poll ``predicate`` until it returns a truthy value and return that value.

    Raising from the predicate counts as "not yet"; elements that detach or
    re-render between polls must not end the wait early. Only the elapsed
    budget does, and the last error seen is attached to the TimeoutExceeded.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    interval = max(poll_interval_ms, 1) / 1000
    last_error = None
    last_value = None
    while True:
        try:
            value = predicate()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            last_error = e
        else:
            if value:
                return value
            last_value = value
        remaining = deadline - loop.time()
        if remaining <= 0:
            raise TimeoutExceeded(
                message or "Condition was not met",
                timeout_ms=timeout_ms,
                last_error=last_error,
                last_value=last_value,
            ) from last_error
        await asyncio.sleep(min(interval, remaining))


def url_is(page, url: str):
    async def check():
        if page.url == url:
            return True
        raise NotYet(f"url is {page.url!r}, want {url!r}")
    return check


def element_located(page, locator):
    async def check():
        return await find(page, locator)
    return check


def element_visible(page, locator):
    async def check():
        element = await find(page, locator)
        if await element.is_visible():
            return element
        raise NotYet(f"{locator} is present but not visible")
    return check


def no_matches(page, locator):
    async def check():
        matches = await find_all(page, locator)
        if not matches:
            return True
        raise NotYet(f"{len(matches)} element(s) still match {locator}")
    return check


def text_equals(page, locator, expected: str):
    async def check():
        element = await find(page, locator)
        actual = (await element.inner_text()).strip()
        if actual == expected:
            return element
        raise NotYet(f"{locator} reads {actual!r}, want {expected!r}")
    return check


def dialog_present(watcher, since: int = 0):
    def check():
        if len(watcher.seen) > since:
            return watcher.seen[since] or True
        raise NotYet("no dialog has opened yet")
    return check
