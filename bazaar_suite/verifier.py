"""
Sort-order verification.

The expected order is always computed, never assumed: the observed values are
copied, stable-sorted under the comparator the ``SortSpec`` implies, and
compared index by index with what the page rendered.
"""
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .models import NA, Direction, ListingRecord, SortSpec, ValueDomain, VerificationReport, Verdict
from .utils import parse_magnitude

logger = logging.getLogger(__name__)


def _lexicographic_key(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == NA:
        return None
    return text.lower()


def sort_key(spec: SortSpec) -> Callable[[Any], Any]:
    """Key function for ``spec``; returns None for values that cannot be compared."""
    if spec.domain is ValueDomain.NUMERIC:
        return parse_magnitude
    return _lexicographic_key


def comparable_values(observed: Iterable[Any], spec: SortSpec) -> List[Tuple[Any, Any]]:
    """(raw value, key) pairs in rendered order, skipping values without a key."""
    key = sort_key(spec)
    pairs = []
    for value in observed:
        k = key(value)
        if k is None:
            logger.debug("Excluding %r from %s comparison", value, spec.domain.value)
            continue
        pairs.append((value, k))
    return pairs


def verify(observed: Sequence[Any], spec: SortSpec) -> VerificationReport:
    """
    Check whether ``observed`` is already ordered as ``spec`` requires.

    An empty sequence is vacuously sorted. A non-empty sequence in which no
    value can be compared is reported as inconclusive with ``matches=False``:
    no comparable data is not proof of a correct ordering.
    """
    observed = list(observed)
    report = VerificationReport(spec=spec, raw_count=len(observed))

    if not observed:
        logger.info("%s: nothing rendered, treating as sorted", spec.label)
        report.verdict = Verdict.EMPTY
        return report

    pairs = comparable_values(observed, spec)
    if not pairs:
        logger.warning("%s: none of %d values could be compared", spec.label, len(observed))
        report.matches = False
        report.verdict = Verdict.INCONCLUSIVE
        return report

    # sorted() is stable in both directions; reverse keeps ties in rendered order
    expected = sorted(pairs, key=lambda p: p[1], reverse=spec.direction is Direction.DESCENDING)

    report.observed = [raw for raw, _ in pairs]
    report.expected = [raw for raw, _ in expected]
    report.first_mismatch_index = next(
        (i for i, (o, e) in enumerate(zip(pairs, expected)) if o[1] != e[1]),
        None,
    )
    report.matches = report.first_mismatch_index is None
    report.verdict = Verdict.SORTED if report.matches else Verdict.OUT_OF_ORDER

    _log_comparison(report, [k for _, k in pairs], [k for _, k in expected])
    return report


def verify_records(records: Iterable[ListingRecord], spec: SortSpec) -> VerificationReport:
    """Verify the ``spec.field`` values of already collected records."""
    return verify([r.value_of(spec.field) for r in records], spec)


def comparison_frame(report: VerificationReport, observed_keys=None, expected_keys=None) -> pd.DataFrame:
    """Index / Original / Expected / Result table for human triage."""
    key = sort_key(report.spec)
    observed_keys = observed_keys if observed_keys is not None else [key(v) for v in report.observed]
    expected_keys = expected_keys if expected_keys is not None else [key(v) for v in report.expected]
    return pd.DataFrame({
        "Index": range(1, len(report.observed) + 1),
        "Original": report.observed,
        "Expected": report.expected,
        "Result": ["MATCH" if o == e else "MISMATCH" for o, e in zip(observed_keys, expected_keys)],
    })


def _log_comparison(report: VerificationReport, observed_keys, expected_keys) -> None:
    frame = comparison_frame(report, observed_keys, expected_keys)
    logger.info("SORT VERIFICATION: %s", report.spec.label)
    for line in frame.to_string(index=False).splitlines():
        logger.info(line)
    if report.excluded_count:
        logger.info("%d rendered values had nothing comparable and were excluded", report.excluded_count)
    if report.matches:
        logger.info("VERIFICATION PASSED - %s", report.summary())
    else:
        logger.warning("VERIFICATION FAILED - %s", report.summary())
