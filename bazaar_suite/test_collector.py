#!/usr/bin/env python3
"""
Tests for the incremental collector, driven by the simulated listing surface.
"""
from unittest.mock import MagicMock

import pytest

from bazaar_suite.collector import CollectionState, IncrementalCollector, StopReason
from bazaar_suite.errors import CollectionFailed, PageError, TimedOut
from bazaar_suite.extractor import RecordExtractor
from bazaar_suite.fakes import FakeCard, FakeSession, SimulatedListingSurface, make_items
from bazaar_suite.models import NA, ListingRecord


@pytest.fixture
def extractor():
    return RecordExtractor(FakeSession())


def titles(records):
    return [r.title for r in records]


def test_collects_exactly_target_when_rounds_suffice(extractor):
    surface = SimulatedListingSurface(make_items(50), window=10, step=5)
    result = IncrementalCollector(surface, extractor).run(50, max_rounds=30, no_progress_limit=3)

    assert result.stop_reason is StopReason.TARGET_REACHED
    assert titles(result.records) == [f"Monitor {i}" for i in range(50)]
    assert result.rounds_elapsed == 8
    assert surface.load_more_calls == 8


def test_hard_ceiling_bounds_the_number_of_loads(extractor):
    surface = SimulatedListingSurface(make_items(50), window=10, step=5)
    result = IncrementalCollector(surface, extractor).run(50, max_rounds=2, no_progress_limit=3)

    assert result.stop_reason is StopReason.HARD_CEILING
    assert len(result) == 20
    assert surface.load_more_calls == 2


def test_zero_rounds_scans_once_without_loading(extractor):
    surface = SimulatedListingSurface(make_items(50), window=10)
    result = IncrementalCollector(surface, extractor).run(50, max_rounds=0)

    assert result.stop_reason is StopReason.HARD_CEILING
    assert len(result) == 10
    assert surface.load_more_calls == 0


def test_stops_after_consecutive_rounds_without_progress(extractor):
    surface = SimulatedListingSurface(make_items(5), window=10)
    result = IncrementalCollector(surface, extractor).run(50, max_rounds=30, no_progress_limit=3)

    assert result.stop_reason is StopReason.NO_PROGRESS
    assert len(result) == 5
    assert surface.load_more_calls == 3


def test_target_truncates_mid_scan(extractor):
    surface = SimulatedListingSurface(make_items(50), window=10)
    records = IncrementalCollector(surface, extractor).collect(7)

    assert titles(records) == [f"Monitor {i}" for i in range(7)]
    assert surface.load_more_calls == 0


@pytest.mark.parametrize("target", [0, -3])
def test_non_positive_target_returns_nothing(extractor, target):
    surface = SimulatedListingSurface(make_items(10), window=10)
    result = IncrementalCollector(surface, extractor).run(target)

    assert result.records == []
    assert result.stop_reason is StopReason.TARGET_REACHED
    assert surface.renders == 0


def test_invalid_limits_are_rejected(extractor):
    collector = IncrementalCollector(SimulatedListingSurface(make_items(3), window=3), extractor)
    with pytest.raises(ValueError):
        collector.collect(5, max_rounds=-1)
    with pytest.raises(ValueError):
        collector.collect(5, no_progress_limit=0)


def test_no_duplicates_and_no_untitled_records(extractor):
    items = make_items(50)
    del items[3]["title"]
    surface = SimulatedListingSurface(items, window=10, step=3, stale_once={5, 12}, reverse_render=True)
    result = IncrementalCollector(surface, extractor).run(100, max_rounds=40, no_progress_limit=3)

    assert result.stop_reason is StopReason.NO_PROGRESS
    assert NA not in titles(result.records)
    assert len(set(titles(result.records))) == len(result.records)
    assert titles(result.records) == [f"Monitor {i}" for i in range(50) if i != 3]


def test_stale_card_is_picked_up_on_a_later_scan(extractor):
    surface = SimulatedListingSurface(make_items(20), window=10, step=5, stale_once={2, 7})
    records = IncrementalCollector(surface, extractor).collect(20)

    # card 2 scrolls out before it can be retried, card 7 is still visible
    assert "Monitor 2" not in titles(records)
    assert "Monitor 7" in titles(records)


def test_records_come_back_in_position_order(extractor):
    surface = SimulatedListingSurface(make_items(30), window=10, step=4, reverse_render=True)
    records = IncrementalCollector(surface, extractor).collect(30)

    assert titles(records) == [f"Monitor {i}" for i in range(30)]


def test_collection_is_idempotent_on_a_static_page(extractor):
    surface = SimulatedListingSurface(make_items(20), window=20, step=0)
    collector = IncrementalCollector(surface, extractor)

    first = collector.collect(30, no_progress_limit=2)
    second = collector.collect(30, no_progress_limit=2)
    assert first == second
    assert len(first) == 20


def test_collection_is_repeatable_across_fresh_surfaces(extractor):
    runs = [
        IncrementalCollector(SimulatedListingSurface(make_items(40), window=8, step=3), extractor).collect(25)
        for _ in range(2)
    ]
    assert runs[0] == runs[1]
    assert len(runs[0]) == 25


def test_unindexed_cards_are_deduplicated_by_title(extractor):
    surface = SimulatedListingSurface(make_items(20), window=10, step=5, indexed=False)
    result = IncrementalCollector(surface, extractor).run(100, max_rounds=10, no_progress_limit=2)

    assert titles(result.records) == [f"Monitor {i}" for i in range(20)]
    assert result.stop_reason is StopReason.NO_PROGRESS


def test_load_failure_becomes_collection_failed(extractor):
    surface = SimulatedListingSurface(make_items(50), window=10, fail_on_load=2)
    with pytest.raises(CollectionFailed) as excinfo:
        IncrementalCollector(surface, extractor).collect(50)
    assert isinstance(excinfo.value.__cause__, PageError)


def test_enumeration_failure_becomes_collection_failed(extractor):
    surface = MagicMock()
    surface.cards.side_effect = TimedOut("cards never rendered")
    with pytest.raises(CollectionFailed):
        IncrementalCollector(surface, extractor).collect(5)


class MixedSurface:
    """First render shows one card without a data-index, later renders the indexed list."""

    def __init__(self, items):
        self.items = items
        self.renders = 0

    def cards(self):
        self.renders += 1
        if self.renders == 1:
            return [FakeCard(None, self.items[5])]
        return [FakeCard(i, self.items[i]) for i in range(5)]

    def position_of(self, card):
        return card.index

    def load_more(self):
        pass


def test_unindexed_ordinals_never_shadow_real_positions(extractor):
    surface = MixedSurface(make_items(6))
    records = IncrementalCollector(surface, extractor).collect(6, max_rounds=5, no_progress_limit=2)

    assert titles(records) == ["Monitor 0", "Monitor 1", "Monitor 2", "Monitor 3", "Monitor 4", "Monitor 5"]


def test_keys_are_namespaced_by_indexing():
    state = CollectionState()
    state.accumulated[state.indexed_key(0)] = ListingRecord(title="a")
    assert state.next_ordinal() == (1, 0)
    state.unindexed_titles.add("b")
    assert state.next_ordinal() == (1, 1)
    assert state.indexed_key(7) < state.next_ordinal()
