"""
Scenario test data loaded from CSV.
"""
import logging
from typing import List

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import SortOrder

logger = logging.getLogger(__name__)


class ScenarioParams(BaseModel):
    """One row of the test-data CSV."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    keyword: str = Field(alias="Search keyword")
    location: str = Field("", alias="Location and distance")
    distance: str = Field("", alias="Distance from location")
    condition: str = Field("", alias="Quality")
    price_from: str = Field("", alias="Pricing from")
    price_to: str = Field("", alias="Pricing to")
    negotiable: str = Field("", alias="Negotiable")
    sort_order: str = Field("", alias="Sort Order")

    @field_validator("sort_order")
    @classmethod
    def _known_sort_label(cls, value: str) -> str:
        SortOrder.from_label(value)
        return value

    @property
    def sort(self) -> SortOrder:
        return SortOrder.from_label(self.sort_order)

    def describe(self) -> str:
        parts = [f"keyword={self.keyword}"]
        for name in ("location", "distance", "condition", "negotiable"):
            value = getattr(self, name)
            if value:
                parts.append(f"{name}={value}")
        if self.price_from or self.price_to:
            parts.append(f"price={self.price_from}-{self.price_to}")
        parts.append(f"sort={self.sort.display_text}")
        return " | ".join(parts)


def read_scenarios(path: str) -> List[ScenarioParams]:
    """All data rows of the CSV at ``path`` (first row is the header)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_filter=False, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    logger.info("CSV Headers: %s", ", ".join(df.columns))
    if df.empty:
        logger.warning("CSV file is empty: %s", path)
        return []
    rows = []
    for i, rec in enumerate(df.to_dict(orient="records")):
        try:
            rows.append(ScenarioParams.model_validate(rec))
        except ValidationError as e:
            raise ValueError(f"{path}: invalid scenario at row {i}: {e}") from e
    logger.info("Successfully read %d rows from CSV: %s", len(rows), path)
    return rows


def get_scenario(path: str, row_index: int = 0) -> ScenarioParams:
    rows = read_scenarios(path)
    if not 0 <= row_index < len(rows):
        raise IndexError(f"Invalid row index: {row_index}. Available rows: {len(rows)}")
    return rows[row_index]
