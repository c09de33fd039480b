"""
Source adapter contract.

Every ingestion channel implements SourceAdapter.build_item() and returns a
canonical LeadItem. Channel-specific parsing lives in the concrete adapter
classes; callers only see the uniform interface.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from leadgate.ingest.sink import IngestSink
from leadgate.models.lead import LeadItem

logger = logging.getLogger('ingest.base')


class SourceAdapter(ABC):
    """
    Base class for all source adapters.

    Adapters never validate beyond string coercion: missing fields become ''.
    ingest() forwards the built item to the sink once and propagates failure.
    """
    source: str = ''
    method: str = ''

    # Metadata — shown by get_source_info()
    description: str = ''
    supports_batch: bool = False

    def __init__(self, sink: Optional[IngestSink] = None):
        self.sink = sink

    @abstractmethod
    def build_item(self, *args, **kwargs) -> LeadItem:
        """Map channel-native fields to one LeadItem stamped with the current time."""
        ...

    def ingest(self, *args, **kwargs) -> Dict[str, Any]:
        """Build one item and hand it to the sink."""
        if self.sink is None:
            raise ValueError(f"No ingestion sink configured for source '{self.source}'")
        item = self.build_item(*args, **kwargs)
        logger.debug("Forwarding %s item to sink (url=%s)", self.source, item.url,
                     extra={'source': self.source})
        return self.sink.ingest(item)


def get_adapter(source_adapters: Dict[str, Type[SourceAdapter]], source: str,
                sink: Optional[IngestSink] = None) -> SourceAdapter:
    """Look up and instantiate the adapter for a source."""
    key = str(source or '').strip().lower()
    adapter_cls = source_adapters.get(key)
    if not adapter_cls:
        raise ValueError(f"No adapter registered for source '{source}'")
    return adapter_cls(sink=sink)


def get_source_info(source_adapters: Dict[str, Type[SourceAdapter]]) -> Dict[str, Any]:
    """
    Serialize the adapter registry into a JSON-friendly dict.

    Returns: { "gmail": { "method": "gmail_poll", "description": "...", "batch": true }, ... }
    """
    return {
        source: {
            'method': cls.method,
            'description': cls.description or '',
            'batch': bool(cls.supports_batch),
        }
        for source, cls in source_adapters.items()
    }
