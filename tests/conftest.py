"""Shared fakes for the journey runner tests.

Nothing here starts a browser:
- make_element: a Playwright-locator-shaped mock for a single element
- FakeSession: a BrowserSession stand-in whose elements are keyed by Locator
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from failures import ElementNotFound, NotYet, TimeoutExceeded
from run_config import RunConfig


def make_element(text: str = "", visible: bool = True, box: dict | None = None) -> MagicMock:
    el = MagicMock()
    el.inner_text = AsyncMock(return_value=text)
    el.is_visible = AsyncMock(return_value=visible)
    el.click = AsyncMock()
    el.fill = AsyncMock()
    el.bounding_box = AsyncMock(return_value=box)
    el.scroll_into_view_if_needed = AsyncMock()
    el.element_handle = AsyncMock(return_value=MagicMock(name="handle"))
    el.evaluate = AsyncMock()
    return el


def quiet_config(**overrides) -> RunConfig:
    values = dict(
        short_timeout_ms=200,
        long_timeout_ms=300,
        poll_interval_ms=10,
        settle_ms=0,
        screenshot_delay_ms=0,
    )
    values.update(overrides)
    return RunConfig(**values)


class FakeSession:
    """Implements the BrowserSession surface scenarios use, without polling."""

    def __init__(self, elements: dict | None = None, config: RunConfig | None = None):
        self.config = config or quiet_config()
        self.elements = elements or {}
        self.page = MagicMock()
        self.page.url = "about:blank"
        self.dialogs = MagicMock()
        self.dialogs.accept_next.return_value = 0
        self.calls: list[tuple] = []
        self.verbose = False

    def url(self, path: str = "/") -> str:
        return self.config.url(path)

    async def goto(self, path: str = "/") -> None:
        self.calls.append(("goto", path))
        self.page.url = self.url(path)

    async def ensure_at(self, path: str = "/") -> None:
        if self.page.url != self.url(path):
            await self.goto(path)

    async def find(self, locator):
        found = self.elements.get(locator)
        if not found:
            raise ElementNotFound(locator)
        return found[0] if isinstance(found, list) else found

    async def find_all(self, locator) -> list:
        found = self.elements.get(locator, [])
        return list(found) if isinstance(found, list) else [found]

    async def pause(self, ms=None) -> None:
        self.calls.append(("pause", ms))

    async def wait_for_url(self, path: str, timeout_ms=None):
        self.calls.append(("wait_for_url", path))
        self.page.url = self.url(path)
        return True

    async def wait_for_element(self, locator, timeout_ms=None):
        self.calls.append(("wait_for_element", locator))
        return await self.find(locator)

    async def wait_for_visible(self, locator, timeout_ms=None):
        self.calls.append(("wait_for_visible", locator))
        return await self.find(locator)

    async def wait_for_text(self, locator, expected: str, timeout_ms=None):
        """Checks once; a mismatch times out straight away."""
        self.calls.append(("wait_for_text", locator, expected))
        element = await self.find(locator)
        actual = (await element.inner_text()).strip()
        if actual != expected:
            seen = NotYet(f"{locator} reads {actual!r}, want {expected!r}")
            raise TimeoutExceeded(f"{locator} never read {expected!r}", timeout_ms or 0, last_error=seen)
        return element

    async def wait_for_absent(self, locator, timeout_ms=None, message=None):
        self.calls.append(("wait_for_absent", locator))
        return True

    async def wait_for_dialog(self, since=0, timeout_ms=None):
        self.calls.append(("wait_for_dialog", since))
        return "Are you sure?"


@pytest.fixture
def fake_session():
    return FakeSession()
