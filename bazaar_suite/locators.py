"""
Locator strategies and ordered fallback chains.

HamroBazaar's markup changes often, so each control is described by a small
list of alternative locators. A ``LocatorChain`` tries them in order and the
first one that resolves wins.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .errors import ElementNotFound, PageError

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    CSS = "css"
    XPATH = "xpath"
    TEXT = "text"


@dataclass(frozen=True)
class Locator:
    strategy: Strategy
    value: str

    @property
    def selector(self) -> str:
        """Playwright selector string, e.g. ``xpath=//button``."""
        return f"{self.strategy.value}={self.value}"

    def __str__(self) -> str:
        return self.selector


def css(value: str) -> Locator:
    return Locator(Strategy.CSS, value)


def xpath(value: str) -> Locator:
    return Locator(Strategy.XPATH, value)


def text(value: str) -> Locator:
    return Locator(Strategy.TEXT, value)


def xpath_literal(value: str) -> str:
    """Quote a value for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


class LocatorChain:
    """Ordered locator alternatives for one control; first success wins."""

    def __init__(self, name: str, *locators: Locator):
        if not locators:
            raise ValueError(f"LocatorChain {name!r} needs at least one locator")
        self.name = name
        self.locators: Tuple[Locator, ...] = tuple(locators)

    def __iter__(self):
        return iter(self.locators)

    def __len__(self) -> int:
        return len(self.locators)

    def __repr__(self) -> str:
        return f"LocatorChain({self.name!r}, {len(self.locators)} strategies)"

    def resolve(self, session, clickable: bool = False, timeout: Optional[float] = None):
        """
        Return the handle of the first locator that becomes visible.

        With ``clickable`` the handle must also pass ``wait_clickable``.
        Raises ElementNotFound once every strategy is exhausted.
        """
        failures: List[str] = []
        for i, locator in enumerate(self.locators, 1):
            try:
                handle = session.wait_for(locator, timeout=timeout)
                if clickable:
                    handle = session.wait_clickable(handle, timeout=timeout)
            except PageError as e:
                failures.append(f"{locator}: {e}")
                if i < len(self.locators):
                    logger.warning("%s: strategy %d/%d failed (%s), trying next",
                                   self.name, i, len(self.locators), locator)
                continue
            logger.info("%s: found using strategy %d/%d (%s)", self.name, i, len(self.locators), locator)
            return handle

        logger.error("%s: all %d locator strategies failed", self.name, len(self.locators))
        raise ElementNotFound(
            f"Unable to locate {self.name}; tried " + "; ".join(failures)
        )

    def resolve_all(self, session) -> list:
        """Return the handles of the first locator that matches anything, else []."""
        for locator in self.locators:
            handles = session.find_all(locator)
            if handles:
                return handles
        return []
