"""
Scenario orchestration: configure the results page, verify the sort,
collect listings and write them out.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .actions import FilterSortDriver
from .collector import CollectionResult
from .config import config
from .errors import BazaarError
from .export import format_results_table, output_csv_path, save_records_csv
from .models import VerificationReport
from .pages import ResultsPage
from .reporting import RunReport
from .session import BrowserSession, open_session
from .testdata import ScenarioParams
from .utils import run_timestamp

logger = logging.getLogger(__name__)


@dataclass
class ScenarioOutcome:
    name: str
    passed: bool = False
    verification: Optional[VerificationReport] = None
    collection: Optional[CollectionResult] = None
    csv_path: Optional[str] = None
    error: Optional[str] = None
    screenshot: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.collection.records) if self.collection else 0


def run_scenario(
    session: BrowserSession,
    params: ScenarioParams,
    name: str,
    report: RunReport,
    target_count: Optional[int] = None,
    max_rounds: Optional[int] = None,
    no_progress_limit: Optional[int] = None,
    output_dir: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ScenarioOutcome:
    """
    Run one scenario end to end on ``session``.

    Page and core errors propagate; ``run_isolated`` turns them into a failed
    outcome with a screenshot.
    """
    target_count = config.TARGET_COUNT if target_count is None else target_count
    output_dir = output_dir or config.OUTPUT_DIR
    outcome = ScenarioOutcome(name=name)

    report.info(name, f"Test data: {params.describe()}")
    session.goto(base_url or config.BASE_URL)
    report.pass_(name, "Navigated to HamroBazaar")

    FilterSortDriver(session, report=report, scenario=name).apply(params)

    results = ResultsPage(session)
    spec = params.sort.sort_spec
    if spec is None:
        report.skip(name, f"No ordering to verify for sort {params.sort.display_text!r}")
        verified = True
    else:
        outcome.verification = results.verify_sorted(spec)
        verified = outcome.verification.matches
        if outcome.verification.inconclusive:
            report.fail(name, f"Sort verification inconclusive: {outcome.verification.summary()}")
        elif verified:
            report.pass_(name, f"Sort verified: {outcome.verification.summary()}")
        else:
            report.fail(name, f"Sort verification failed: {outcome.verification.summary()}")

    outcome.collection = results.extract_products(target_count, max_rounds, no_progress_limit)
    count = outcome.record_count
    if count == 0:
        report.fail(name, "No products extracted")
    else:
        report.pass_(name, f"Extracted {count} products ({outcome.collection.stop_reason.value})")

    outcome.csv_path = save_records_csv(
        outcome.collection.records,
        output_csv_path(output_dir, prefix=f"Search_Result_{name}" if name else "Search_Result"),
    )
    report.pass_(name, f"Saved to: {outcome.csv_path}")
    print(format_results_table(outcome.collection.records,
                               heading=f"SEARCH RESULTS ({params.sort.display_text})"))

    outcome.passed = verified and count > 0
    return outcome


def run_isolated(
    params: ScenarioParams,
    name: str,
    report: RunReport,
    headless: Optional[bool] = None,
    **kwargs,
) -> ScenarioOutcome:
    """Run one scenario in a browser session of its own."""
    with open_session(headless=headless) as session:
        try:
            return run_scenario(session, params, name, report, **kwargs)
        except BazaarError as e:
            shot = session.screenshot(os.path.join(config.SCREENSHOT_DIR, f"{name}_{run_timestamp()}.png"))
            report.fail(name, f"Test failed: {e}", screenshot=shot)
            logger.exception("Scenario %s failed", name)
            return ScenarioOutcome(name=name, passed=False, error=str(e), screenshot=shot)


def run_scenarios(
    scenarios: Sequence[Tuple[str, ScenarioParams]],
    report: RunReport,
    workers: int = 1,
    **kwargs,
) -> List[ScenarioOutcome]:
    """Run scenarios, each in its own session; ``workers`` > 1 runs them in parallel."""
    if workers <= 1:
        return [run_isolated(params, name, report, **kwargs) for name, params in scenarios]

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scenario") as pool:
        futures = [pool.submit(run_isolated, params, name, report, **kwargs) for name, params in scenarios]
        return [f.result() for f in futures]
