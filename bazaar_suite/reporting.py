"""
Run report: pass/fail/info events per scenario.
"""
import json
import logging
import os
import threading
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .utils import now_iso

logger = logging.getLogger(__name__)


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    INFO = "INFO"
    WARNING = "WARNING"
    SKIP = "SKIP"


class ReportEvent(BaseModel):
    scenario: str
    status: Status
    message: str
    ts: str = Field(default_factory=now_iso)
    screenshot: Optional[str] = None


class RunReport:
    """Collects events from every scenario of one run; safe across worker threads."""

    def __init__(self, name: str = "bazaar-suite"):
        self.name = name
        self.started = now_iso()
        self.events: List[ReportEvent] = []
        self._lock = threading.Lock()

    def log(self, scenario: str, status: Status, message: str, screenshot: Optional[str] = None) -> ReportEvent:
        event = ReportEvent(scenario=scenario, status=status, message=message, screenshot=screenshot)
        with self._lock:
            self.events.append(event)
        level = logging.ERROR if status is Status.FAIL else logging.WARNING if status is Status.WARNING else logging.INFO
        logger.log(level, "[%s] %s: %s", scenario, status.value, message)
        return event

    def pass_(self, scenario: str, message: str) -> ReportEvent:
        return self.log(scenario, Status.PASS, message)

    def fail(self, scenario: str, message: str, screenshot: Optional[str] = None) -> ReportEvent:
        return self.log(scenario, Status.FAIL, message, screenshot=screenshot)

    def info(self, scenario: str, message: str) -> ReportEvent:
        return self.log(scenario, Status.INFO, message)

    def warning(self, scenario: str, message: str) -> ReportEvent:
        return self.log(scenario, Status.WARNING, message)

    def skip(self, scenario: str, message: str) -> ReportEvent:
        return self.log(scenario, Status.SKIP, message)

    def snapshot(self) -> List[ReportEvent]:
        """Copy of the events recorded so far."""
        with self._lock:
            return list(self.events)

    def for_scenario(self, scenario: str) -> List[ReportEvent]:
        return [e for e in self.snapshot() if e.scenario == scenario]

    def failed_scenarios(self) -> List[str]:
        return sorted({e.scenario for e in self.snapshot() if e.status is Status.FAIL})

    @property
    def passed(self) -> bool:
        return not self.failed_scenarios()

    def save_json(self, path: str) -> str:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        payload = {
            "name": self.name,
            "started": self.started,
            "finished": now_iso(),
            "passed": self.passed,
            "events": [e.model_dump(mode="json") for e in self.snapshot()],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info(">>> Report saved to %s", path)
        return path
