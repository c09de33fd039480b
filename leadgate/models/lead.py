"""
Canonical Lead Item — the one record shape every source adapter produces.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class LeadSource(str, Enum):
    """Provenance tag of a lead."""
    MANUAL = 'manual'
    GMAIL = 'gmail'
    RSS = 'rss'
    VONAGE = 'vonage'


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _as_str(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class LeadItem:
    """
    Normalized lead handed to the ingestion sink and the scoring engine.

    url/title/company are never None; missing values degrade to ''.
    raw keeps the channel's original payload for audit and replay.
    """
    source: LeadSource
    received_at: str = field(default_factory=utc_now_iso)
    url: str = ''
    title: str = ''
    company: str = ''
    raw: Optional[Union[str, Dict[str, Any]]] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, 'source', LeadSource(self.source))
        object.__setattr__(self, 'url', _as_str(self.url))
        object.__setattr__(self, 'title', _as_str(self.title))
        object.__setattr__(self, 'company', _as_str(self.company))
        if self.meta is None:
            object.__setattr__(self, 'meta', {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source.value,
            'received_at': self.received_at,
            'url': self.url,
            'title': self.title,
            'company': self.company,
            'raw': self.raw,
            'meta': dict(self.meta),
        }
