#!/usr/bin/env python3
"""
Tests for the filter/sort driver, scenario test data and the run report.
"""
import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from bazaar_suite.actions import FilterSortDriver
from bazaar_suite.errors import ActionFailed, ElementNotFound
from bazaar_suite.models import SortOrder
from bazaar_suite.reporting import RunReport, Status
from bazaar_suite.testdata import ScenarioParams, get_scenario, read_scenarios

BUNDLED_TESTDATA = Path(__file__).resolve().parent.parent / "testdata" / "testdata.csv"


def full_params():
    return ScenarioParams(
        keyword="Car",
        location="Kathmandu",
        distance="25 km",
        condition="Used",
        price_from="100000",
        price_to="10000000",
        negotiable="Any",
        sort_order="High to Low (Price)",
    )


@pytest.fixture
def driver():
    d = FilterSortDriver(MagicMock(name="session"), report=RunReport(), scenario="car")
    d.home = MagicMock(name="home")
    d.filters = MagicMock(name="filters")
    return d


# FilterSortDriver

def test_every_configured_step_is_planned(driver):
    names = [name for name, _, _ in driver.steps(full_params())]
    assert names == ["search", "location", "distance", "condition", "price_range",
                     "negotiable", "apply_filters", "sort"]


def test_blank_parameters_are_skipped(driver):
    names = [name for name, _, _ in driver.steps(ScenarioParams(keyword="Monitor"))]
    assert names == ["search", "apply_filters", "sort"]


def test_apply_drives_the_pages(driver):
    driver.apply(full_params())

    driver.home.search_product.assert_called_once_with("Car")
    driver.home.set_location.assert_called_once_with("Kathmandu")
    driver.home.set_distance.assert_called_once_with("25 km")
    driver.filters.set_condition.assert_called_once_with("Used")
    driver.filters.set_price_range.assert_called_once_with("100000", "10000000")
    driver.filters.set_negotiable.assert_called_once_with("Any")
    driver.filters.click_apply_filters.assert_called_once_with()
    driver.filters.apply_sort_order.assert_called_once_with(SortOrder.HIGH_TO_LOW)
    assert [e.status for e in driver.report.events] == [Status.PASS] * 8


def test_failed_step_is_named_and_stops_the_flow(driver):
    cause = ElementNotFound("Unable to locate location input")
    driver.home.set_location.side_effect = cause

    with pytest.raises(ActionFailed) as excinfo:
        driver.apply(full_params())

    assert excinfo.value.step == "location"
    assert excinfo.value.cause is cause
    assert "location failed" in str(excinfo.value)
    driver.home.set_distance.assert_not_called()
    driver.filters.apply_sort_order.assert_not_called()
    assert driver.report.failed_scenarios() == ["car"]


# Test data

def test_unknown_sort_label_is_rejected_on_load(tmp_path):
    with pytest.raises(ValidationError):
        ScenarioParams(keyword="Monitor", sort_order="Cheapest first")

    path = tmp_path / "data.csv"
    path.write_text(
        "Search keyword,Sort Order\n"
        "Monitor,Low to High (Price)\n"
        "Car,Nearest\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="row 1"):
        read_scenarios(str(path))


def test_scenario_params_accept_csv_headers():
    params = ScenarioParams.model_validate({
        "Search keyword": " Book ",
        "Location and distance": "Lalitpur",
        "Distance from location": "5 km",
        "Quality": "Brand New",
        "Pricing from": "100",
        "Pricing to": "1500",
        "Negotiable": "Negotiable",
        "Sort Order": "a to z",
    })
    assert params.keyword == "Book"
    assert params.sort is SortOrder.A_TO_Z
    assert "price=100-1500" in params.describe()


def test_blank_sort_means_recent():
    params = ScenarioParams(keyword="Monitor")
    assert params.sort is SortOrder.RECENT
    assert params.sort.sort_spec is None


def test_read_scenarios_keeps_blank_cells_as_text(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(
        "Search keyword,Location and distance,Distance from location,Quality,"
        "Pricing from,Pricing to,Negotiable,Sort Order\n"
        "Monitor,New Road,10 km,,,,,Low to High (Price)\n",
        encoding="utf-8",
    )
    (row,) = read_scenarios(str(path))
    assert row.condition == ""
    assert row.price_from == ""
    assert row.sort is SortOrder.LOW_TO_HIGH


def test_bundled_testdata_parses():
    rows = read_scenarios(str(BUNDLED_TESTDATA))
    assert [r.keyword for r in rows] == ["Monitor", "Car", "Book"]
    assert get_scenario(str(BUNDLED_TESTDATA), 2).sort is SortOrder.A_TO_Z
    with pytest.raises(IndexError):
        get_scenario(str(BUNDLED_TESTDATA), 3)


# Run report

def test_report_tracks_failures_per_scenario(tmp_path):
    report = RunReport("nightly")
    report.pass_("a", "ok")
    report.fail("b", "broken", screenshot="b.png")
    report.warning("a", "slow")

    assert not report.passed
    assert report.failed_scenarios() == ["b"]
    assert [e.status for e in report.for_scenario("a")] == [Status.PASS, Status.WARNING]

    path = report.save_json(str(tmp_path / "out" / "report.json"))
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    assert payload["name"] == "nightly"
    assert payload["passed"] is False
    assert payload["events"][1]["status"] == "FAIL"
    assert payload["events"][1]["screenshot"] == "b.png"


def test_report_reads_are_consistent_while_workers_log():
    report = RunReport()

    def worker(n):
        for i in range(200):
            if i % 50 == 0:
                report.fail(f"w{n}", f"event {i}")
            else:
                report.pass_(f"w{n}", f"event {i}")
            report.failed_scenarios()
            report.for_scenario(f"w{n}")

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(worker, range(4)))

    assert len(report.snapshot()) == 800
    assert report.failed_scenarios() == ["w0", "w1", "w2", "w3"]
    assert len(report.for_scenario("w2")) == 200

    copy = report.snapshot()
    copy.clear()
    assert len(report.events) == 800
