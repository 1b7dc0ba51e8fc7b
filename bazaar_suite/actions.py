"""
Filter/Sort action driver.

Turns one scenario's parameters into the sequence of page interactions that
configures the results list. Each step is named; a page-layer failure inside
a step surfaces as ``ActionFailed(step, cause)``.
"""
import logging
from typing import Callable, List, Optional, Tuple

from .errors import ActionFailed, PageError
from .pages import FilterPage, HomePage
from .reporting import RunReport
from .testdata import ScenarioParams

logger = logging.getLogger(__name__)


class FilterSortDriver:
    def __init__(self, session, report: Optional[RunReport] = None, scenario: str = "scenario"):
        self.session = session
        self.home = HomePage(session)
        self.filters = FilterPage(session)
        self.report = report
        self.scenario = scenario

    def steps(self, params: ScenarioParams) -> List[Tuple[str, str, Callable[[], object]]]:
        """(step name, description, action) for every step the params call for."""
        plan = [("search", f"Searched for: {params.keyword}",
                 lambda: self.home.search_product(params.keyword))]
        if params.location:
            plan.append(("location", f"Set location: {params.location}",
                         lambda: self.home.set_location(params.location)))
        if params.distance:
            plan.append(("distance", f"Set distance: {params.distance}",
                         lambda: (self.home.scroll_to_distance_section(),
                                  self.home.set_distance(params.distance))))
        if params.condition:
            plan.append(("condition", f"Set condition: {params.condition}",
                         lambda: self.filters.set_condition(params.condition)))
        if params.price_from or params.price_to:
            plan.append(("price_range", f"Set price range: {params.price_from} to {params.price_to}",
                         lambda: self.filters.set_price_range(params.price_from, params.price_to)))
        if params.negotiable:
            plan.append(("negotiable", f"Set negotiable: {params.negotiable}",
                         lambda: self.filters.set_negotiable(params.negotiable)))
        plan.append(("apply_filters", "Applied filters", self.filters.click_apply_filters))
        sort = params.sort
        plan.append(("sort", f"Sorted by: {sort.display_text}",
                     lambda: self.filters.apply_sort_order(sort)))
        return plan

    def apply(self, params: ScenarioParams) -> None:
        logger.info("Applying scenario: %s", params.describe())
        for step, description, action in self.steps(params):
            self.run_step(step, description, action)

    def run_step(self, step: str, description: str, action: Callable[[], object]):
        logger.info("Step %s", step)
        try:
            result = action()
        except PageError as e:
            if self.report:
                self.report.fail(self.scenario, f"{step} failed: {e}")
            raise ActionFailed(step, e) from e
        if self.report:
            self.report.pass_(self.scenario, description)
        return result
