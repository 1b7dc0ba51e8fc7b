"""
Home page: keyword search, location and distance.
"""
import logging

from ..locators import LocatorChain, css, xpath, xpath_literal
from .base import BasePage

logger = logging.getLogger(__name__)

SEARCH_BOX = LocatorChain(
    "search box",
    css("input[placeholder='Search for anything']"),
    xpath("//input[@placeholder='Search for anything' and @autocomplete='new-first-name']"),
    css("input.peer.w-full.bg-transparent"),
)

LOCATION_INPUT = LocatorChain(
    "location input",
    css("input[name='location']"),
    css("input[role='combobox'][name='location']"),
    css("input.peer.w-full.bg-transparent[name='location']"),
)

SUGGESTIONS = css("div.font-medium")


def distance_button(distance: str) -> LocatorChain:
    value = distance.strip()
    literal = xpath_literal(value)
    return LocatorChain(
        f"distance button {value!r}",
        css(f"button[role='radio'][aria-label='{value}']"),
        xpath(f"//button[@role='radio'][normalize-space(text())={literal}]"),
        xpath(f"//button[@role='radio'][contains(.,{literal})]"),
    )


class HomePage(BasePage):
    def search_product(self, keyword: str) -> None:
        logger.info("Searching for product: %s", keyword)
        box = self.resolve(SEARCH_BOX, clickable=False)
        self.session.type_text(box, keyword, submit=True)
        logger.info("Searched for: %s", keyword)

    def set_location(self, location: str) -> str:
        logger.info("Setting location: %s", location)
        field = self.resolve(LOCATION_INPUT)
        self.click(field)
        self.session.type_text(field, location)
        logger.info("Typed location: %s", location)
        return self.choose_suggestion(SUGGESTIONS, location, allow_partial=True)

    def scroll_to_distance_section(self) -> None:
        # Distance radios sit at the bottom of the filter panel
        self.session.scroll_to_bottom()

    def set_distance(self, distance: str) -> None:
        logger.info("Setting distance: %s", distance)
        self.click(self.resolve(distance_button(distance)))
        logger.info("Clicked distance button: %s", distance)

    def search_with_filters(self, keyword: str, location: str, distance: str) -> None:
        logger.info("Starting search flow - keyword: %s, location: %s, distance: %s",
                    keyword, location, distance)
        self.search_product(keyword)
        self.set_location(location)
        self.scroll_to_distance_section()
        self.set_distance(distance)
        self.click_apply_filters()
        logger.info("Search with filters completed")
