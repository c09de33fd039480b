"""
Lead ingestion — one adapter per channel, all producing canonical LeadItems.
"""
from typing import Dict, Type

from leadgate.ingest.base import SourceAdapter, get_adapter as _get_adapter, get_source_info
from leadgate.ingest.gmail import GmailSource
from leadgate.ingest.manual import ManualSource
from leadgate.ingest.rss import RssSource
from leadgate.ingest.sink import IngestSink, IngestSinkError, CallableSink, HttpIngestSink
from leadgate.ingest.vonage import VonageSource


# ── Adapter registry ─────────────────────────────────────────────────────────

ADAPTERS: Dict[str, Type[SourceAdapter]] = {
    'manual': ManualSource,
    'gmail': GmailSource,
    'rss': RssSource,
    'vonage': VonageSource,
}


def get_adapter(source: str, sink: IngestSink = None) -> SourceAdapter:
    """Instantiate the registered adapter for a source name (case-insensitive)."""
    return _get_adapter(ADAPTERS, source, sink=sink)
