"""
Search results page: the virtualized card list.
"""
import logging
from typing import Dict, List, Optional

from ..collector import CollectionResult, IncrementalCollector
from ..errors import PageError
from ..extractor import RecordExtractor
from ..locators import Locator, LocatorChain, css, xpath
from ..models import SortSpec, VerificationReport
from ..verifier import verify
from .base import BasePage

logger = logging.getLogger(__name__)

PRODUCT_CARDS = LocatorChain(
    "product cards",
    xpath("//div[@data-index and contains(@class,'w-full') and contains(@class,'mb-3')]"),
    css("div.group.bg-white.rounded-\\[12px\\]"),
)

# Page-wide locators for reading a rendered column without scrolling
RENDERED_FIELDS: Dict[str, Locator] = {
    "price": xpath("//span[contains(@class,'text-sm') and contains(@class,'font-semibold')]"),
    "title": xpath("//a[contains(@class,'heading-h6') and contains(@class,'break-words')]"),
}


class ResultsPage(BasePage):
    """Implements the collector's ListingSurface on top of a live session."""

    def __init__(self, session, extractor: Optional[RecordExtractor] = None):
        super().__init__(session)
        self.extractor = extractor or RecordExtractor(session)

    def cards(self) -> list:
        self.wait_for_page_to_load()
        found = PRODUCT_CARDS.resolve_all(self.session)
        logger.info("Found %d product cards", len(found))
        return found

    def position_of(self, card) -> Optional[int]:
        raw = self.session.read_attribute(card, "data-index")
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.debug("Ignoring non-numeric data-index %r", raw)
            return None

    def load_more(self) -> None:
        self.session.scroll_to_bottom()
        self.wait_for_page_to_load()

    def product_count(self) -> int:
        try:
            return len(self.cards())
        except PageError:
            return 0

    def rendered_values(self, field: str) -> List[str]:
        """Text of every rendered ``field`` element in page order."""
        locator = RENDERED_FIELDS.get(field)
        if locator is None:
            raise KeyError(f"No page-level locator for field {field!r}")
        self.wait_for_page_to_load()
        values = []
        for element in self.session.find_all(locator):
            try:
                values.append(self.session.read_text(element))
            except PageError as e:
                logger.debug("Could not read %s element: %s", field, e)
        logger.info("Found %d %s elements on page", len(values), field)
        return values

    def verify_sorted(self, spec: SortSpec) -> VerificationReport:
        return verify(self.rendered_values(spec.field), spec)

    def extract_products(
        self,
        target_count: int,
        max_rounds: Optional[int] = None,
        no_progress_limit: Optional[int] = None,
    ) -> CollectionResult:
        logger.info("Extracting up to %d products using virtual scroll", target_count)
        collector = IncrementalCollector(self, self.extractor)
        return collector.run(target_count, max_rounds, no_progress_limit)
