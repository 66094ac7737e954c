import time
from typing import Optional, Tuple

try:
    from selenium import webdriver
    from selenium.common.exceptions import NoSuchElementException
    from selenium.webdriver.common.by import By
    from selenium.webdriver.common.keys import Keys
    from selenium.webdriver.chrome.options import Options as ChromeOptions
    SELENIUM_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    SELENIUM_AVAILABLE = False

XPATH_PREFIX = "xpath="


class SeleniumEngine:
    def __init__(self, remote_url: Optional[str] = None):
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium is not installed. Install with: pip install .[automation-selenium]")
        self.remote_url = remote_url
        self._driver = None

    def start(self, headless: bool = True) -> None:
        options = ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        if self.remote_url:
            self._driver = webdriver.Remote(command_executor=self.remote_url, options=options)
        else:
            self._driver = webdriver.Chrome(options=options)

    def stop(self) -> None:
        if self._driver:
            self._driver.quit()
            self._driver = None

    @staticmethod
    def _locator(selector: str) -> Tuple[str, str]:
        if selector.startswith(XPATH_PREFIX):
            return By.XPATH, selector[len(XPATH_PREFIX):]
        return By.CSS_SELECTOR, selector

    def _find(self, selector: str):
        assert self._driver is not None
        return self._driver.find_element(*self._locator(selector))

    def goto(self, url: str, wait_until: str = "load") -> None:
        assert self._driver is not None
        self._driver.get(url)

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        elem = self._find(selector)
        if clear:
            elem.clear()
        elem.send_keys(value)

    def press(self, selector: str, key: str) -> None:
        elem = self._find(selector)
        elem.send_keys(getattr(Keys, key.upper(), key))

    def click(self, selector: str) -> None:
        self._find(selector).click()

    def wait_for(self, selector: str, timeout_ms: int = 15000) -> None:
        # Simple polling; users can replace with WebDriverWait if desired
        end = time.time() + timeout_ms / 1000.0
        while time.time() < end:
            try:
                self._find(selector)
                return
            except NoSuchElementException:
                time.sleep(0.1)
        raise TimeoutError(f"Timeout waiting for selector: {selector}")

    def text(self, selector: str) -> str:
        return self._find(selector).text

    def value(self, selector: str) -> str:
        return self._find(selector).get_attribute("value") or ""

