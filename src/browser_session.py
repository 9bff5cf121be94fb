from contextlib import asynccontextmanager

from playwright.async_api import async_playwright

from failures import SessionLifecycleError
from locators import find, find_all
from run_config import RunConfig
from waits import dialog_present, element_located, element_visible, no_matches, text_equals, url_is, wait_for


class DialogWatcher:
    """Records page dialogs; accepts one when armed and dismisses the rest.

    A dialog left unhandled blocks the click that opened it, so the decision
    has to be made inside the handler rather than after the click returns.
    """

    def __init__(self, page, verbose: bool = False):
        self.seen: list[str] = []
        self.verbose = verbose
        self._accept_next = False
        page.on("dialog", self._on_dialog)

    def accept_next(self) -> int:
        self._accept_next = True
        return len(self.seen)

    async def _on_dialog(self, dialog) -> None:
        self.seen.append(dialog.message)
        if self._accept_next:
            self._accept_next = False
            if self.verbose:
                print(f"→ Accepting {dialog.type} dialog: {dialog.message}")
            await dialog.accept()
        else:
            if self.verbose:
                print(f"⚠️ Dismissing unexpected {dialog.type} dialog: {dialog.message}")
            await dialog.dismiss()


class BrowserSession:
    def __init__(self, config: RunConfig, playwright, browser, context, page):
        self.config = config
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self.dialogs = DialogWatcher(page, verbose=config.verbose)
        self.stopped = False

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def url(self, path: str = "/") -> str:
        return self.config.url(path)

    async def goto(self, path: str = "/") -> None:
        target = self.url(path)
        if self.verbose:
            print(f"→ Navigating to {target}")
        await self.page.goto(target, timeout=60000)

    async def ensure_at(self, path: str = "/") -> None:
        if self.page.url != self.url(path):
            await self.goto(path)

    async def find(self, locator):
        return await find(self.page, locator)

    async def find_all(self, locator) -> list:
        return await find_all(self.page, locator)

    async def pause(self, ms: int | None = None) -> None:
        await self.page.wait_for_timeout(self.config.settle_ms if ms is None else ms)

    async def _wait(self, condition, timeout_ms: int | None, message: str):
        timeout_ms = self.config.short_timeout_ms if timeout_ms is None else timeout_ms
        return await wait_for(condition, timeout_ms, self.config.poll_interval_ms, message)

    async def wait_for_url(self, path: str, timeout_ms: int | None = None):
        target = self.url(path)
        return await self._wait(url_is(self.page, target), timeout_ms, f"URL never became {target}")

    async def wait_for_element(self, locator, timeout_ms: int | None = None):
        return await self._wait(element_located(self.page, locator), timeout_ms, f"Never located {locator}")

    async def wait_for_visible(self, locator, timeout_ms: int | None = None):
        return await self._wait(element_visible(self.page, locator), timeout_ms, f"Never saw {locator}")

    async def wait_for_text(self, locator, expected: str, timeout_ms: int | None = None):
        return await self._wait(text_equals(self.page, locator, expected), timeout_ms, f"{locator} never read {expected!r}")

    async def wait_for_absent(self, locator, timeout_ms: int | None = None, message: str | None = None):
        return await self._wait(no_matches(self.page, locator), timeout_ms, message or f"{locator} never went away")

    async def wait_for_dialog(self, since: int = 0, timeout_ms: int | None = None):
        return await self._wait(dialog_present(self.dialogs, since), timeout_ms, "No dialog appeared")

    async def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        errors = []
        for closer in (self.browser.close, self.playwright.stop):
            try:
                await closer()
            except Exception as e:
                errors.append(e)
        if self.verbose:
            print("→ Browser session closed")
        if errors:
            raise SessionLifecycleError(f"Browser session did not stop cleanly: {errors[0]}") from errors[0]


async def start(config: RunConfig) -> BrowserSession:
    playwright = None
    browser = None
    try:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(headless=config.headless, args=config.launch_args())
        context = await browser.new_context(
            viewport={"width": config.window_width, "height": config.window_height},
            ignore_https_errors=config.ignore_certificate_errors,
        )
        page = await context.new_page()
    except Exception as e:
        for closer in (browser and browser.close, playwright and playwright.stop):
            if closer:
                try:
                    await closer()
                except Exception:
                    continue
        raise SessionLifecycleError(f"Could not start browser session: {e}") from e
    if config.verbose:
        mode = "headless" if config.headless else "headful"
        print(f"→ Chromium started ({mode}, {config.window_width}x{config.window_height})")
    return BrowserSession(config, playwright, browser, context, page)


async def stop(session: BrowserSession) -> None:
    await session.stop()


@asynccontextmanager
async def browser_session(config: RunConfig):
    session = await start(config)
    try:
        yield session
    finally:
        await stop(session)
