"""
HamroBazaar UI Test Suite Package
"""
from .models import (
    NA,
    ListingRecord,
    SortOrder,
    SortSpec,
    Direction,
    ValueDomain,
    Verdict,
    VerificationReport,
)
from .errors import (
    BazaarError,
    PageError,
    ElementNotFound,
    TimedOut,
    StaleReference,
    ClickIntercepted,
    CollectionFailed,
    VerificationInconclusive,
    ActionFailed,
)
from .extractor import RecordExtractor
from .collector import IncrementalCollector, CollectionResult, StopReason
from .verifier import verify, verify_records
from .export import save_records_csv, load_records_csv
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "NA",
    "ListingRecord",
    "SortOrder",
    "SortSpec",
    "Direction",
    "ValueDomain",
    "Verdict",
    "VerificationReport",
    "BazaarError",
    "PageError",
    "ElementNotFound",
    "TimedOut",
    "StaleReference",
    "ClickIntercepted",
    "CollectionFailed",
    "VerificationInconclusive",
    "ActionFailed",
    "RecordExtractor",
    "IncrementalCollector",
    "CollectionResult",
    "StopReason",
    "verify",
    "verify_records",
    "save_records_csv",
    "load_records_csv",
    "init_logger",
    "now_iso",
]
