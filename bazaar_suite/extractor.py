"""
Field extraction from a single rendered listing card.
"""
import logging
from typing import Dict, Optional

from .errors import PageError, StaleReference
from .locators import Locator, xpath
from .models import NA, ListingRecord
from .utils import clean_text

logger = logging.getLogger(__name__)


# Locators relative to one card
FIELD_LOCATORS: Dict[str, Locator] = {
    "title": xpath(".//a[contains(@class,'heading-h6') and contains(@class,'break-words')]"),
    "description": xpath(".//p[contains(@class,'hidden') and contains(@class,'cursor-pointer') "
                         "and contains(@class,'break-words')]"),
    "price": xpath(".//span[contains(@class,'text-sm') and contains(@class,'font-semibold')]"),
    "condition": xpath(".//span[contains(@class,'inline-flex')]//span[contains(@class,'leading-none')]"),
    "posted_date": xpath(".//span[contains(@class,'block') and contains(@class,'text-xs') "
                         "and contains(@class,'text-nowrap') and contains(normalize-space(.),'ago')]"),
    "seller_name": xpath(".//a[contains(@class,'paragraph-secondary-regular') and contains(@class,'truncate')]"),
}


class RecordExtractor:
    """
    Turns a card handle into a ``ListingRecord``.

    ``extract`` never raises. Each field is read on its own, so one broken
    field only costs that field. If the card goes stale part-way through,
    fields already read are kept and the rest become ``N/A`` without touching
    the detached handle again.
    """

    def __init__(self, session, field_locators: Optional[Dict[str, Locator]] = None, visible_timeout: float = 5):
        self.session = session
        self.field_locators = field_locators or FIELD_LOCATORS
        self.visible_timeout = visible_timeout

    def extract(self, card) -> ListingRecord:
        values: Dict[str, str] = {}

        try:
            self.session.wait_visible(card, timeout=self.visible_timeout)
        except StaleReference:
            logger.warning("Stale card, skipping")
            return ListingRecord()
        except Exception as e:
            logger.debug("Visibility wait: %s", e)

        stale = False
        for name, locator in self.field_locators.items():
            if stale:
                values[name] = NA
                continue
            try:
                values[name] = self._read(card, locator)
            except StaleReference:
                logger.debug("Card went stale while reading %s", name)
                stale = True
                values[name] = NA
            except PageError as e:
                logger.debug("Field %s unreadable: %s", name, e)
                values[name] = NA
            except Exception as e:
                logger.warning("Unexpected error reading %s: %s", name, e)
                values[name] = NA

        return ListingRecord(**values)

    def _read(self, card, locator: Locator) -> str:
        element = self.session.find_one(locator, root=card)
        return clean_text(self.session.read_text(element)) or NA
