"""
Filter panel (condition, price range, negotiability) and the sort menu.
"""
import logging

from ..locators import LocatorChain, css, text, xpath, xpath_literal
from ..models import SortOrder
from .base import BasePage

logger = logging.getLogger(__name__)

CONDITION_INPUT = LocatorChain("condition input", css("input[name='condition']"))
CONDITION_SUGGESTIONS = css("div.font-medium")
PRICE_FROM_INPUT = LocatorChain("price-from input", css("input[name='priceFrom']"))
PRICE_TO_INPUT = LocatorChain("price-to input", css("input[name='priceTo']"))

SORT_DROPDOWN = LocatorChain(
    "sort dropdown",
    css("button[aria-label='Sorting-label'][aria-haspopup='dialog']"),
    xpath("//button[@aria-label='Sorting-label']"),
    xpath("//button[contains(normalize-space(.),'Recent') and .//*[name()='svg' "
          "and contains(@class,'lucide-chevron-down')]]"),
)


def negotiable_button(value: str) -> LocatorChain:
    literal = xpath_literal(value.strip())
    return LocatorChain(
        f"negotiable option {value.strip()!r}",
        xpath(f"//button[@role='radio' and @aria-label={literal}]"),
        xpath(f"//button[@role='radio'][normalize-space(.)={literal}]"),
        text(value.strip()),
    )


def sort_option(display_text: str) -> LocatorChain:
    literal = xpath_literal(display_text)
    return LocatorChain(
        f"sort option {display_text!r}",
        xpath(f"//button[contains(@class,'flex') and contains(@class,'items-center')]"
              f"[.//span[contains(@class,'font-medium') and normalize-space(text())={literal}]]"),
        xpath(f"//button[.//span[normalize-space(text())={literal}]]"),
        text(display_text),
    )


class FilterPage(BasePage):
    def set_condition(self, condition: str) -> str:
        if not condition or not condition.strip():
            logger.info("No condition specified, skipping")
            return ""
        logger.info("Setting condition: %s", condition)
        field = self.resolve(CONDITION_INPUT)
        # Script click: the sticky header overlaps this combobox
        self.session.scroll_into_view(field)
        self.session.click_via_script(field)
        self.session.type_text(field, condition.strip())
        return self.choose_suggestion(CONDITION_SUGGESTIONS, condition)

    def set_price_range(self, min_price: str, max_price: str) -> None:
        has_min = bool(min_price and min_price.strip())
        has_max = bool(max_price and max_price.strip())
        if not has_min and not has_max:
            logger.info("No price range specified, skipping")
            return
        logger.info("Setting price range: %s to %s", min_price, max_price)

        if has_min:
            field = self.resolve(PRICE_FROM_INPUT)
            self.session.scroll_into_view(field)
            self.session.type_text(field, min_price.strip())
            logger.info("Set price from: %s", min_price)
        if has_max:
            field = self.resolve(PRICE_TO_INPUT)
            self.session.scroll_into_view(field)
            self.session.type_text(field, max_price.strip())
            logger.info("Set price to: %s", max_price)

    def set_negotiable(self, negotiable: str) -> None:
        if not negotiable or not negotiable.strip():
            logger.info("No negotiable filter specified, skipping")
            return
        logger.info("Setting negotiable: %s", negotiable)
        self.click(self.resolve(negotiable_button(negotiable)))
        logger.info("Set negotiable to: %s", negotiable)

    def apply_sort_order(self, sort_order: SortOrder) -> None:
        logger.info("Applying sort order: %s", sort_order.display_text)
        self.wait_for_page_to_load()
        self.click(self.resolve(SORT_DROPDOWN))
        logger.info("Opened sort dropdown")
        self.click(self.resolve(sort_option(sort_order.display_text)))
        self.wait_for_page_to_load()
        logger.info("Selected: %s", sort_order.display_text)
