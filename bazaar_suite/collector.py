"""
Incremental collection of listings from a virtualized result list.

Only a window of cards exists in the DOM at any time and more appear after a
scroll-triggered fetch. The collector rescans the window after every scroll,
keys each card by its position and keeps the first successful extraction for
each key. It stops on exactly one of three conditions:

* ``TARGET_REACHED``  - enough records accumulated;
* ``NO_PROGRESS``     - ``no_progress_limit`` consecutive rounds added nothing;
* ``HARD_CEILING``    - ``max_rounds`` load-more actions already performed.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Set, Tuple

from .config import config
from .errors import CollectionFailed, PageError
from .models import ListingRecord

logger = logging.getLogger(__name__)


class ListingSurface(Protocol):
    """What the collector needs from the results page."""

    def cards(self) -> list: ...

    def position_of(self, card) -> Optional[int]: ...

    def load_more(self) -> None: ...


class StopReason(str, Enum):
    TARGET_REACHED = "target_reached"
    NO_PROGRESS = "no_progress"
    HARD_CEILING = "hard_ceiling"


# Indexed cards are keyed (0, data-index); unindexed cards (1, first-seen ordinal),
# so an ordinal never collides with a real position and sorts after every one.
PositionKey = Tuple[int, int]


@dataclass
class CollectionState:
    """Accumulator owned by a single collect() call."""

    accumulated: Dict[PositionKey, ListingRecord] = field(default_factory=dict)
    unindexed_titles: Set[str] = field(default_factory=set)
    no_progress_streak: int = 0
    rounds_elapsed: int = 0
    stop_reason: Optional[StopReason] = None

    @staticmethod
    def indexed_key(position: int) -> PositionKey:
        return (0, position)

    def next_ordinal(self) -> PositionKey:
        return (1, len(self.unindexed_titles))

    def finalize(self) -> List[ListingRecord]:
        return [self.accumulated[k] for k in sorted(self.accumulated)]


@dataclass
class CollectionResult:
    records: List[ListingRecord]
    stop_reason: StopReason
    rounds_elapsed: int

    def __len__(self) -> int:
        return len(self.records)


class IncrementalCollector:
    def __init__(self, surface: ListingSurface, extractor):
        self.surface = surface
        self.extractor = extractor

    def collect(
        self,
        target_count: int,
        max_rounds: Optional[int] = None,
        no_progress_limit: Optional[int] = None,
    ) -> List[ListingRecord]:
        """Up to ``target_count`` records in ascending position order."""
        return self.run(target_count, max_rounds, no_progress_limit).records

    def run(
        self,
        target_count: int,
        max_rounds: Optional[int] = None,
        no_progress_limit: Optional[int] = None,
    ) -> CollectionResult:
        max_rounds = config.MAX_ROUNDS if max_rounds is None else max_rounds
        no_progress_limit = config.NO_PROGRESS_LIMIT if no_progress_limit is None else no_progress_limit
        if max_rounds < 0:
            raise ValueError(f"max_rounds must be >= 0, got {max_rounds}")
        if no_progress_limit < 1:
            raise ValueError(f"no_progress_limit must be >= 1, got {no_progress_limit}")

        state = CollectionState()
        if target_count <= 0:
            state.stop_reason = StopReason.TARGET_REACHED
            return CollectionResult([], state.stop_reason, 0)

        logger.info("Collecting up to %d products (max rounds %d, no-progress limit %d)",
                    target_count, max_rounds, no_progress_limit)

        while state.stop_reason is None:
            added = self._scan(state, target_count)
            state.stop_reason = self._check_stop(state, added, target_count, max_rounds, no_progress_limit)
            if state.stop_reason is None:
                self._load_more(state)

        records = state.finalize()
        logger.info("Collection complete: %d products in %d scrolls (%s)",
                    len(records), state.rounds_elapsed, state.stop_reason.value)
        return CollectionResult(records, state.stop_reason, state.rounds_elapsed)

    def _scan(self, state: CollectionState, target_count: int) -> int:
        """Extract every not-yet-seen visible card; returns how many were added."""
        try:
            visible = self.surface.cards()
        except PageError as e:
            raise CollectionFailed(f"Unable to enumerate product cards: {e}") from e

        before = len(state.accumulated)
        logger.info("Scroll %d: %d visible cards, %d extracted so far",
                    state.rounds_elapsed + 1, len(visible), before)

        for card in visible:
            if len(state.accumulated) >= target_count:
                break
            try:
                position = self.surface.position_of(card)
            except PageError as e:
                logger.debug("Card position unreadable, skipping: %s", e)
                continue
            if position is not None and state.indexed_key(position) in state.accumulated:
                continue

            record = self.extractor.extract(card)
            if not record.is_valid:
                continue

            if position is None:
                if record.title in state.unindexed_titles:
                    continue
                key = state.next_ordinal()
                state.unindexed_titles.add(record.title)
            else:
                key = state.indexed_key(position)
            state.accumulated[key] = record
            logger.info("Extracted [%d/%d] index=%s: %s",
                        len(state.accumulated), target_count, position, record.title)

        return len(state.accumulated) - before

    def _check_stop(
        self,
        state: CollectionState,
        added: int,
        target_count: int,
        max_rounds: int,
        no_progress_limit: int,
    ) -> Optional[StopReason]:
        if len(state.accumulated) >= target_count:
            logger.info("Reached target of %d products", target_count)
            return StopReason.TARGET_REACHED

        if added == 0:
            state.no_progress_streak += 1
            logger.info("No new products this scroll (%d/%d attempts)",
                        state.no_progress_streak, no_progress_limit)
            if state.no_progress_streak >= no_progress_limit:
                logger.info("No more new products after %d attempts, stopping", no_progress_limit)
                return StopReason.NO_PROGRESS
        else:
            state.no_progress_streak = 0

        if state.rounds_elapsed >= max_rounds:
            logger.warning("Hit the ceiling of %d scrolls with %d/%d products",
                           max_rounds, len(state.accumulated), target_count)
            return StopReason.HARD_CEILING
        return None

    def _load_more(self, state: CollectionState) -> None:
        try:
            self.surface.load_more()
        except PageError as e:
            raise CollectionFailed(
                f"Loading more products failed after {state.rounds_elapsed} scrolls: {e}"
            ) from e
        state.rounds_elapsed += 1
