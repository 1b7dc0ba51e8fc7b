"""
Utility functions for logging, timestamps and text/price normalization.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional


def init_logger(
    name: str = "bazaar_suite",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "bazaar_suite.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def run_timestamp(moment: Optional[datetime] = None) -> str:
    """Timestamp used in output file names, e.g. 2025-01-31_14-05-09."""
    return (moment or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")


def clean_text(s: Optional[str]) -> str:
    """Clean and normalize text by removing extra whitespace."""
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def parse_magnitude(raw) -> Optional[float]:
    """
    Parse a rendered price into a number.

    Every character that is not a digit or a decimal point is dropped
    ("Rs 1,50,000" -> 150000.0). Returns None when nothing is left or the
    remainder is not a valid number ("1.2.3").
    """
    if raw is None:
        return None
    digits = re.sub(r"[^0-9.]", "", str(raw))
    if not digits:
        return None
    try:
        return float(digits)
    except ValueError:
        return None


def shorten(text: str, width: int = 40) -> str:
    """Truncate text for console tables."""
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."
