"""
In-memory stand-ins for the page layer, used by the unit tests.

``SimulatedListingSurface`` behaves like the virtualized results list: only
``window`` items are rendered at a time, every ``load_more`` shifts the window
by ``step``, and each enumeration returns freshly rendered card objects.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from .errors import ElementNotFound, PageError, StaleReference
from .extractor import FIELD_LOCATORS


class FakeCard:
    """A rendered card; reads fail once ``stale_after`` reads have happened."""

    def __init__(self, index: Optional[int], fields: Dict[str, str], stale_after: Optional[int] = None,
                 broken: bool = False):
        self.index = index
        self.fields = dict(fields)
        self.stale_after = stale_after
        self.broken = broken
        self.reads = 0

    def touch(self) -> None:
        if self.broken:
            raise RuntimeError("renderer crashed")
        if self.stale_after is not None and self.reads >= self.stale_after:
            raise StaleReference(f"card {self.index} detached")
        self.reads += 1


class FakeElement:
    def __init__(self, card: FakeCard, field: str):
        self.card = card
        self.field = field


class FakeSession:
    """Card-level subset of BrowserSession backed by FakeCard objects."""

    def __init__(self):
        self._field_by_locator = {loc: name for name, loc in FIELD_LOCATORS.items()}

    def wait_visible(self, handle, timeout=None):
        if isinstance(handle, FakeCard) and handle.broken:
            raise RuntimeError("renderer crashed")
        return handle

    def find_one(self, locator, root=None):
        card: FakeCard = root
        card.touch()
        name = self._field_by_locator.get(locator)
        if name is None or name not in card.fields:
            raise ElementNotFound(f"No element matches {locator}")
        return FakeElement(card, name)

    def read_text(self, handle: FakeElement) -> str:
        handle.card.touch()
        return handle.card.fields[handle.field]

    def read_attribute(self, handle, name):
        if name == "data-index" and isinstance(handle, FakeCard):
            return None if handle.index is None else str(handle.index)
        return None


def make_items(count: int, start_price: int = 1000, price_step: int = 500) -> List[Dict[str, str]]:
    return [
        {
            "title": f"Monitor {i}",
            "description": f"Listing number {i}",
            "price": f"Rs. {start_price + i * price_step:,}",
            "condition": "Used" if i % 2 else "Brand New",
            "posted_date": f"{i + 1} days ago",
            "seller_name": f"Seller {i % 7}",
        }
        for i in range(count)
    ]


class SimulatedListingSurface:
    def __init__(
        self,
        items: Sequence[Dict[str, str]],
        window: int,
        step: Optional[int] = None,
        indexed: bool = True,
        stale_once: Iterable[int] = (),
        reverse_render: bool = False,
        fail_on_load: Optional[int] = None,
    ):
        self.items = list(items)
        self.window = window
        self.step = window if step is None else step
        self.indexed = indexed
        self.stale_once = set(stale_once)
        self.reverse_render = reverse_render
        self.fail_on_load = fail_on_load
        self.offset = 0
        self.load_more_calls = 0
        self.renders = 0

    def cards(self) -> List[FakeCard]:
        self.renders += 1
        visible = []
        for i in range(self.offset, min(self.offset + self.window, len(self.items))):
            stale_after = None
            if i in self.stale_once:
                self.stale_once.discard(i)
                stale_after = 0
            visible.append(FakeCard(i if self.indexed else None, self.items[i], stale_after=stale_after))
        if self.reverse_render and self.renders % 2 == 0:
            visible.reverse()
        return visible

    def position_of(self, card: FakeCard) -> Optional[int]:
        return card.index

    def load_more(self) -> None:
        self.load_more_calls += 1
        if self.fail_on_load is not None and self.load_more_calls >= self.fail_on_load:
            raise PageError("page navigated away")
        last_start = max(0, len(self.items) - self.window)
        self.offset = min(self.offset + self.step, last_start)
