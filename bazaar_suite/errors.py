"""
Exception taxonomy for the suite.

Page-layer failures (``PageError`` and its subclasses) are raised by
``BrowserSession``. The collector, verifier and action driver wrap them in
their own errors before they reach a scenario.
"""


class BazaarError(Exception):
    """Base class for every error raised by bazaar_suite."""


class PageError(BazaarError):
    """An interaction with the browser page failed."""


class ElementNotFound(PageError):
    """A locator (or every locator of a chain) resolved to nothing."""


class TimedOut(PageError):
    """A wait for visibility, clickability or disappearance expired."""


class StaleReference(PageError):
    """The element was detached from the DOM between locate and use."""


class ClickIntercepted(PageError):
    """Another element received the click (sticky header, overlay)."""


class CollectionFailed(BazaarError):
    """Scrolling or card enumeration failed; the collection run is aborted."""


class VerificationInconclusive(BazaarError):
    """No comparable values were available to verify an ordering."""


class ActionFailed(BazaarError):
    """A filter/sort step could not be completed."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed: {cause}")
