"""
Playwright-backed page interaction layer.

``BrowserSession`` wraps one Playwright page. Every call blocks until it
succeeds or its timeout expires, and Playwright errors are translated into the
``PageError`` family so callers never depend on Playwright's exception types.
A session belongs to one thread of control and is never shared.
"""
import logging
import os
from contextlib import contextmanager
from typing import Iterator, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout
from playwright.sync_api import sync_playwright

from .config import config
from .errors import ClickIntercepted, ElementNotFound, PageError, StaleReference, TimedOut
from .locators import Locator

logger = logging.getLogger(__name__)

_STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "element was detached",
    "execution context was destroyed",
)
_INTERCEPT_MARKERS = ("intercepts pointer events", "other element would receive the click")


def _translate(exc: PlaywrightError, action: str) -> PageError:
    message = str(exc).splitlines()[0] if str(exc) else exc.__class__.__name__
    lowered = str(exc).lower()
    if any(m in lowered for m in _INTERCEPT_MARKERS):
        return ClickIntercepted(f"{action}: {message}")
    if any(m in lowered for m in _STALE_MARKERS):
        return StaleReference(f"{action}: {message}")
    if isinstance(exc, PlaywrightTimeout):
        return TimedOut(f"{action}: {message}")
    return PageError(f"{action}: {message}")


@contextmanager
def _guard(action: str):
    try:
        yield
    except PlaywrightError as e:
        raise _translate(e, action) from e


class BrowserSession:
    """Blocking page operations with explicit timeouts (seconds)."""

    def __init__(self, page, default_timeout: Optional[float] = None):
        self.page = page
        self.default_timeout = default_timeout or config.DEFAULT_WAIT_SECONDS

    def _ms(self, timeout: Optional[float]) -> float:
        return (timeout if timeout is not None else self.default_timeout) * 1000

    # Navigation

    def goto(self, url: str, timeout: Optional[float] = None) -> None:
        logger.info("Navigating to URL: %s", url)
        with _guard(f"goto {url}"):
            self.page.goto(url, timeout=self._ms(timeout or config.PAGE_LOAD_TIMEOUT_SECONDS),
                           wait_until="domcontentloaded")
        logger.info("Navigated to: %s", self.page.url)

    @property
    def current_url(self) -> str:
        return self.page.url

    # Lookup

    def find_one(self, locator: Locator, root=None):
        """First match under ``root`` (or the page); raises ElementNotFound."""
        with _guard(f"find {locator}"):
            handle = (root or self.page).query_selector(locator.selector)
        if handle is None:
            raise ElementNotFound(f"No element matches {locator}")
        return handle

    def find_all(self, locator: Locator, root=None) -> list:
        with _guard(f"find all {locator}"):
            return (root or self.page).query_selector_all(locator.selector)

    # Waits

    def wait_for(self, locator: Locator, timeout: Optional[float] = None):
        """Wait until ``locator`` matches a visible element and return it."""
        with _guard(f"wait for {locator}"):
            handle = self.page.wait_for_selector(locator.selector, state="visible",
                                                 timeout=self._ms(timeout))
        if handle is None:
            raise ElementNotFound(f"No element matches {locator}")
        return handle

    def wait_for_all(self, locator: Locator, timeout: Optional[float] = None) -> list:
        """Wait for at least one visible match, then return every visible match."""
        self.wait_for(locator, timeout=timeout)
        with _guard(f"collect {locator}"):
            return [h for h in self.page.query_selector_all(locator.selector) if h.is_visible()]

    def wait_visible(self, handle, timeout: Optional[float] = None):
        with _guard("wait visible"):
            handle.wait_for_element_state("visible", timeout=self._ms(timeout))
        return handle

    def wait_clickable(self, handle, timeout: Optional[float] = None):
        with _guard("wait clickable"):
            handle.wait_for_element_state("visible", timeout=self._ms(timeout))
            handle.wait_for_element_state("enabled", timeout=self._ms(timeout))
        return handle

    def wait_gone(self, locator: Locator, timeout: Optional[float] = None) -> bool:
        """Wait for ``locator`` to be hidden or detached; False on timeout."""
        try:
            with _guard(f"wait gone {locator}"):
                self.page.wait_for_selector(locator.selector, state="hidden", timeout=self._ms(timeout))
            return True
        except TimedOut:
            logger.warning("Element still visible after timeout: %s", locator)
            return False

    # Interaction

    def click(self, handle, timeout: Optional[float] = None) -> None:
        with _guard("click"):
            handle.click(timeout=self._ms(timeout))
        logger.debug("Clicked on element")

    def click_via_script(self, handle) -> None:
        with _guard("script click"):
            handle.evaluate("el => el.click()")
        logger.debug("Clicked element using JavaScript")

    def type_text(self, handle, value: str, submit: bool = False, timeout: Optional[float] = None) -> None:
        with _guard("type"):
            handle.fill("", timeout=self._ms(timeout))
            handle.fill(value, timeout=self._ms(timeout))
            if submit:
                handle.press("Enter", timeout=self._ms(timeout))
        logger.debug("Typed text: %s", value)

    def read_text(self, handle) -> str:
        with _guard("read text"):
            return (handle.inner_text() or "").strip()

    def read_attribute(self, handle, name: str) -> Optional[str]:
        with _guard(f"read attribute {name}"):
            return handle.get_attribute(name)

    def scroll_into_view(self, handle) -> None:
        # Centered so the sticky header does not cover the element
        with _guard("scroll into view"):
            handle.evaluate("el => el.scrollIntoView({block: 'center', inline: 'nearest'})")

    def scroll_to_bottom(self) -> None:
        with _guard("scroll to bottom"):
            self.page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
        logger.debug("Scrolled to page bottom")

    def screenshot(self, path: str) -> Optional[str]:
        """Save a full-page screenshot; returns None if the page is gone."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        try:
            with _guard("screenshot"):
                self.page.screenshot(path=path, full_page=True)
        except PageError as e:
            logger.error("Failed to capture screenshot: %s", e)
            return None
        logger.info("Screenshot saved: %s", path)
        return path


@contextmanager
def open_session(headless: Optional[bool] = None, browser_name: Optional[str] = None) -> Iterator[BrowserSession]:
    """Launch a fresh browser and yield a session owned by the caller."""
    is_headless = config.HEADLESS if headless is None else headless
    browser_name = browser_name or config.BROWSER

    launch_args: List[str] = ["--disable-notifications", "--disable-popup-blocking"]
    if is_headless:
        launch_args += ["--disable-dev-shm-usage", "--no-sandbox", "--disable-gpu"]

    with sync_playwright() as p:
        browser_type = getattr(p, browser_name, None)
        if browser_type is None:
            logger.warning("Unknown browser: %s. Defaulting to chromium", browser_name)
            browser_type = p.chromium

        launch_kwargs = {"headless": is_headless, "slow_mo": config.SLOW_MO_MS}
        if browser_type is p.chromium:
            launch_kwargs["args"] = launch_args
        browser = browser_type.launch(**launch_kwargs)
        logger.info(">>> Browser launched: %s (headless=%s)", browser_name, is_headless)

        context = browser.new_context(viewport=config.VIEWPORT, locale="en-US")
        context.set_default_timeout(config.DEFAULT_WAIT_SECONDS * 1000)
        context.set_default_navigation_timeout(config.PAGE_LOAD_TIMEOUT_SECONDS * 1000)
        page = context.new_page()
        try:
            yield BrowserSession(page)
        finally:
            context.close()
            browser.close()
            logger.info(">>> Browser closed")
