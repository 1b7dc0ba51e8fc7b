#!/usr/bin/env python3
"""
Tests for CSV export and the console results table.
"""
import pytest

from bazaar_suite.export import (
    CSV_COLUMNS,
    format_results_table,
    load_records_csv,
    output_csv_path,
    save_records_csv,
)
from bazaar_suite.models import NA, ListingRecord

HEADER = "SN,Title,Description,Price,Condition,Ad_Posted_Date,Seller_Name"


def read_raw(path):
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def test_header_and_quoting_are_exact(tmp_path):
    out = tmp_path / "results.csv"
    record = ListingRecord(
        title='Dell 24", IPS',
        price="Rs. 15,000",
        condition="Used",
        posted_date="2 days ago",
        seller_name="Ram",
    )
    save_records_csv([record], str(out))

    assert read_raw(out) == (
        f"{HEADER}\n"
        '1,"Dell 24"", IPS",N/A,"Rs. 15,000",Used,2 days ago,Ram\n'
    )


def test_empty_export_writes_header_only(tmp_path):
    out = tmp_path / "empty.csv"
    save_records_csv([], str(out))
    assert read_raw(out) == f"{HEADER}\n"
    assert load_records_csv(str(out)) == []


def test_round_trip_preserves_awkward_text(tmp_path):
    records = [
        ListingRecord(title="Sofa, 3 seater", description='Says "like new"\nPickup only',
                      price="Rs 45,000", condition="Used", posted_date="1 hour ago", seller_name="Sita"),
        ListingRecord(title="Plain", description=NA, price=NA, condition=NA, posted_date=NA, seller_name=NA),
        ListingRecord(title="Unicode रू", price="रू 1,20,000"),
    ]
    out = tmp_path / "nested" / "dir" / "results.csv"
    save_records_csv(records, str(out))

    assert load_records_csv(str(out)) == records


def test_load_rejects_foreign_csv(tmp_path):
    out = tmp_path / "other.csv"
    out.write_text("a,b\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_records_csv(str(out))


def test_load_orders_by_serial_number(tmp_path):
    out = tmp_path / "shuffled.csv"
    out.write_text(
        f"{HEADER}\n"
        "10,Ten,,,,,\n"
        "2,Two,,,,,\n",
        encoding="utf-8",
    )
    assert [r.title for r in load_records_csv(str(out))] == ["Two", "Ten"]


def test_output_path_uses_prefix_and_timestamp(tmp_path):
    path = output_csv_path(str(tmp_path), prefix="Search_Result_Monitor", timestamp="2025-01-31_14-05-09")
    assert path.endswith("Search_Result_Monitor_2025-01-31_14-05-09.csv")
    assert path.startswith(str(tmp_path))


def test_results_table_lists_every_record():
    records = [ListingRecord(title="Monitor A", price="Rs 100"), ListingRecord(title="Monitor B")]
    table = format_results_table(records, heading="SEARCH RESULTS")
    assert "TOP 2 PRODUCTS" in table
    assert "Monitor A" in table and "Monitor B" in table


def test_results_table_truncates_long_titles():
    table = format_results_table([ListingRecord(title="x" * 80)])
    assert "x" * 37 + "..." in table
    assert "x" * 41 not in table


def test_columns_constant():
    assert ",".join(CSV_COLUMNS) == HEADER
