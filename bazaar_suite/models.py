"""
Data models for scraped listings and sort verification.
"""
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import VerificationInconclusive


# Value stored for any field that could not be read from a card
NA = "N/A"

# Record attribute -> output CSV column
FIELD_COLUMNS: Dict[str, str] = {
    "title": "Title",
    "description": "Description",
    "price": "Price",
    "condition": "Condition",
    "posted_date": "Ad_Posted_Date",
    "seller_name": "Seller_Name",
}


@dataclass
class ListingRecord:
    """One listing card scraped from the search results."""

    title: str = NA
    description: str = NA
    price: str = NA          # raw text, e.g. "Rs 1,50,000"
    condition: str = NA
    posted_date: str = NA    # relative, e.g. "3 days ago"
    seller_name: str = NA

    @property
    def is_valid(self) -> bool:
        """Only records with a readable title are kept."""
        return bool(self.title) and self.title != NA

    def value_of(self, name: str) -> str:
        if name not in FIELD_COLUMNS:
            raise KeyError(f"Unknown listing field: {name!r}")
        return getattr(self, name)

    def to_row(self, sn: int) -> Dict[str, Any]:
        row: Dict[str, Any] = {"SN": sn}
        for name, column in FIELD_COLUMNS.items():
            row[column] = getattr(self, name)
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ListingRecord":
        values = {}
        for name, column in FIELD_COLUMNS.items():
            value = row.get(column)
            values[name] = NA if value is None else str(value)
        return cls(**values)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


class Direction(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class ValueDomain(str, Enum):
    NUMERIC = "numeric"
    LEXICOGRAPHIC = "lexicographic-caseInsensitive"


@dataclass(frozen=True)
class SortSpec:
    """How one rendered sequence is expected to be ordered."""

    direction: Direction
    domain: ValueDomain
    field: str = "price"

    @property
    def label(self) -> str:
        return f"{self.field} {self.domain.value} {self.direction.value}"


PRICE_ASCENDING = SortSpec(Direction.ASCENDING, ValueDomain.NUMERIC, "price")
PRICE_DESCENDING = SortSpec(Direction.DESCENDING, ValueDomain.NUMERIC, "price")
TITLE_A_TO_Z = SortSpec(Direction.ASCENDING, ValueDomain.LEXICOGRAPHIC, "title")


class SortOrder(Enum):
    """Sort options offered by the results page, keyed by their menu label."""

    LOW_TO_HIGH = "Low to High (Price)"
    HIGH_TO_LOW = "High to Low (Price)"
    A_TO_Z = "A to Z"
    RECENT = "Recent"

    @property
    def display_text(self) -> str:
        return self.value

    @property
    def sort_spec(self) -> Optional[SortSpec]:
        """Ordering to verify after the sort is applied; Recent has none."""
        return {
            SortOrder.LOW_TO_HIGH: PRICE_ASCENDING,
            SortOrder.HIGH_TO_LOW: PRICE_DESCENDING,
            SortOrder.A_TO_Z: TITLE_A_TO_Z,
        }.get(self)

    @classmethod
    def from_label(cls, value: Optional[str]) -> "SortOrder":
        """Case-insensitive lookup by menu label; blank means Recent."""
        if value is None or not value.strip():
            return cls.RECENT
        wanted = value.strip().lower()
        for order in cls:
            if order.value.lower() == wanted:
                return order
        raise ValueError(f"No SortOrder found for value: {value!r}")


class Verdict(str, Enum):
    SORTED = "sorted"
    OUT_OF_ORDER = "out_of_order"
    EMPTY = "empty"
    INCONCLUSIVE = "inconclusive"


@dataclass
class VerificationReport:
    """Outcome of checking one rendered sequence against a SortSpec."""

    spec: SortSpec
    observed: List[Any] = field(default_factory=list)
    expected: List[Any] = field(default_factory=list)
    matches: bool = True
    first_mismatch_index: Optional[int] = None
    verdict: Verdict = Verdict.EMPTY
    raw_count: int = 0

    @property
    def inconclusive(self) -> bool:
        return self.verdict is Verdict.INCONCLUSIVE

    @property
    def excluded_count(self) -> int:
        return self.raw_count - len(self.observed)

    def ensure_conclusive(self) -> "VerificationReport":
        """Raise VerificationInconclusive when nothing could be compared."""
        if self.inconclusive:
            raise VerificationInconclusive(
                f"No comparable values for {self.spec.label} "
                f"({self.raw_count} rendered, all excluded)"
            )
        return self

    def summary(self) -> str:
        if self.verdict is Verdict.OUT_OF_ORDER:
            i = self.first_mismatch_index
            return (
                f"{self.spec.label}: NOT sorted, first mismatch at index {i} "
                f"(observed {self.observed[i]!r}, expected {self.expected[i]!r})"
            )
        return f"{self.spec.label}: {self.verdict.value} ({len(self.observed)} values)"
