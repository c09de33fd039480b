"""
Tracking status lifecycle for leads accepted into tracking.

The status set is closed. Externally sourced strings always pass through
normalize_tracking_status() before they are trusted. Transition legality is
left to the calling workflow; only terminality is decided here.
"""
from enum import Enum
from typing import Any


class TrackingStatus(str, Enum):
    NEW = 'NEW'
    LINK_ONLY = 'LINK_ONLY'
    SCORED = 'SCORED'
    SHORTLISTED = 'SHORTLISTED'
    READY_TO_APPLY = 'READY_TO_APPLY'
    APPLIED = 'APPLIED'
    REJECTED = 'REJECTED'
    ARCHIVED = 'ARCHIVED'


TRACKING_STATUSES = tuple(s.value for s in TrackingStatus)

TERMINAL_STATUSES = frozenset({
    TrackingStatus.APPLIED.value,
    TrackingStatus.REJECTED.value,
    TrackingStatus.ARCHIVED.value,
})


def _clean(status: Any) -> str:
    if status is None:
        return ''
    return str(status).strip().upper()


def normalize_tracking_status(status: Any, fallback: Any = 'NEW') -> str:
    """
    Return the canonical status, or the (normalized) fallback when unrecognized.

    An unrecognized fallback resolves to NEW.
    """
    s = _clean(status)
    if s in TRACKING_STATUSES:
        return s
    fb = _clean(fallback)
    return fb if fb in TRACKING_STATUSES else TrackingStatus.NEW.value


def is_terminal_tracking_status(status: Any) -> bool:
    return _clean(status) in TERMINAL_STATUSES


def compute_system_status(
    final_score: float,
    reject_triggered: bool,
    shortlist_threshold: float = 75,
    archive_threshold: float = 55,
) -> str:
    """Map a final 0-100 score to the status a freshly scored lead should carry."""
    if reject_triggered:
        return TrackingStatus.REJECTED.value
    if final_score >= shortlist_threshold:
        return TrackingStatus.SHORTLISTED.value
    if final_score < archive_threshold:
        return TrackingStatus.ARCHIVED.value
    return TrackingStatus.SCORED.value
