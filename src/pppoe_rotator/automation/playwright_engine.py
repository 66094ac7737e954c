from typing import Optional

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext

_CHROMIUM_ARGS = ["--no-sandbox", "--disable-dev-shm-usage"]


class PlaywrightEngine:
    def __init__(self):
        self._pw = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    def start(self, headless: bool = True) -> None:
        self._pw = sync_playwright().start()
        self._browser = self._pw.chromium.launch(headless=headless, args=_CHROMIUM_ARGS)
        self._context = self._browser.new_context(ignore_https_errors=True)
        self._page = self._context.new_page()

    def stop(self) -> None:
        if self._context:
            self._context.close()
        if self._browser:
            self._browser.close()
        if self._pw:
            self._pw.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._pw = None

    def goto(self, url: str, wait_until: str = "load") -> None:
        assert self._page is not None
        self._page.goto(url, wait_until=wait_until)

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        assert self._page is not None
        locator = self._page.locator(selector).first
        if clear:
            locator.fill("")
        locator.type(value)

    def press(self, selector: str, key: str) -> None:
        assert self._page is not None
        self._page.locator(selector).first.press(key)

    def click(self, selector: str) -> None:
        assert self._page is not None
        self._page.locator(selector).first.click()

    def wait_for(self, selector: str, timeout_ms: int = 15000) -> None:
        assert self._page is not None
        self._page.wait_for_selector(selector, timeout=timeout_ms)

    def text(self, selector: str) -> str:
        assert self._page is not None
        return self._page.locator(selector).first.inner_text()

    def value(self, selector: str) -> str:
        assert self._page is not None
        return self._page.locator(selector).first.input_value()

