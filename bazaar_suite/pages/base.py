"""
Shared page-object behaviour: locator chains, click fallback, suggestions.
"""
import logging
from enum import Enum
from typing import Sequence

from ..config import config
from ..errors import ClickIntercepted, ElementNotFound, PageError, TimedOut
from ..locators import LocatorChain, css, xpath

logger = logging.getLogger(__name__)


class ClickStrategy(str, Enum):
    STANDARD = "standard"
    SCRIPT = "script"


DEFAULT_CLICK_SEQUENCE = (ClickStrategy.STANDARD, ClickStrategy.SCRIPT)

LOADING_SPINNER = xpath("//div[contains(@class,'loading') or contains(@class,'spinner')]")

APPLY_FILTERS = LocatorChain(
    "Apply Filters button",
    xpath("//button[@type='submit'][contains(.,'Apply filters')]"),
    css("button[type='submit'].bg-primary-surface"),
    xpath("//button[@type='submit' and contains(@class,'rounded-lg')]"),
)


class BasePage:
    def __init__(self, session):
        self.session = session
        logger.debug("%s initialized", type(self).__name__)

    def resolve(self, chain: LocatorChain, clickable: bool = True):
        return chain.resolve(self.session, clickable=clickable, timeout=config.LOCATOR_WAIT_SECONDS)

    def click(self, handle, strategies: Sequence[ClickStrategy] = DEFAULT_CLICK_SEQUENCE) -> ClickStrategy:
        """
        Click ``handle`` with each strategy in turn until one succeeds.

        Only interception and timeouts move on to the next strategy; the last
        failure is re-raised when every strategy has been tried.
        """
        self.session.scroll_into_view(handle)
        last_error = None
        for strategy in strategies:
            try:
                if strategy is ClickStrategy.STANDARD:
                    self.session.click(handle)
                else:
                    self.session.click_via_script(handle)
            except (ClickIntercepted, TimedOut) as e:
                logger.warning("%s click failed (%s), falling back", strategy.value, e)
                last_error = e
                continue
            if strategy is not ClickStrategy.STANDARD:
                logger.info("Clicked element using %s click", strategy.value)
            return strategy
        raise last_error

    def choose_suggestion(self, suggestions_locator, wanted: str, allow_partial: bool = False) -> str:
        """
        Pick the suggestion whose text equals ``wanted`` (case-insensitive).

        With ``allow_partial`` a suggestion containing ``wanted`` is the second
        choice. Otherwise the first suggestion is used and a warning logged.
        Returns the text of the clicked suggestion.
        """
        wanted_cmp = wanted.strip().lower()
        try:
            suggestions = self.session.wait_for_all(suggestions_locator, timeout=config.DEFAULT_WAIT_SECONDS)
        except TimedOut as e:
            raise ElementNotFound(f"No suggestions appeared for {wanted!r}") from e
        logger.info("Found %d suggestions for %r", len(suggestions), wanted)

        texts = []
        for suggestion in suggestions:
            try:
                texts.append(self.session.read_text(suggestion).strip())
            except PageError:
                texts.append("")

        choice = next((i for i, t in enumerate(texts) if t.lower() == wanted_cmp), None)
        if choice is None and allow_partial:
            choice = next((i for i, t in enumerate(texts) if wanted_cmp in t.lower()), None)
        if choice is None:
            if not suggestions:
                raise ElementNotFound(f"No suggestions appeared for {wanted!r}")
            logger.warning("No exact match for %r, selecting first: %r", wanted, texts[0])
            choice = 0

        self.click(suggestions[choice])
        logger.info("Selected suggestion: %s", texts[choice])
        return texts[choice]

    def wait_for_page_to_load(self) -> None:
        self.session.wait_gone(LOADING_SPINNER, timeout=config.DEFAULT_WAIT_SECONDS)

    def click_apply_filters(self) -> None:
        logger.info("Clicking Apply Filters button")
        self.click(self.resolve(APPLY_FILTERS))
        logger.info("Applied filters")
