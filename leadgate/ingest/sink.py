"""
Ingestion sink — the downstream collaborator that dedupes and persists leads.

Adapters call sink.ingest(item) exactly once per item. No retry happens here;
a failing sink surfaces as IngestSinkError to the adapter's caller.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import requests

from leadgate.config import INGEST_SINK_URL, INGEST_SINK_TOKEN, INGEST_SINK_TIMEOUT
from leadgate.models.lead import LeadItem

logger = logging.getLogger('ingest.sink')


class IngestSinkError(RuntimeError):
    """Raised when the ingestion sink fails to accept a lead."""
    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class IngestSink(ABC):
    """Accepts one canonical LeadItem and returns an opaque processing summary."""

    @abstractmethod
    def ingest(self, item: LeadItem) -> Dict[str, Any]:
        ...


class CallableSink(IngestSink):
    """Wraps a plain function, e.g. an in-process ingestion pipeline."""

    def __init__(self, fn: Callable[[LeadItem], Dict[str, Any]]):
        self.fn = fn

    def ingest(self, item: LeadItem) -> Dict[str, Any]:
        try:
            return self.fn(item)
        except IngestSinkError:
            raise
        except Exception as e:
            logger.error("Sink callable failed for %s lead %s: %s", item.source.value, item.url, e,
                         extra={'source': item.source.value})
            raise IngestSinkError(str(e)) from e


class HttpIngestSink(IngestSink):
    """
    POSTs the lead as JSON to an ingestion endpoint.

    Usage:
        sink = HttpIngestSink('https://worker.example.com/ingest', token='...')
        summary = sink.ingest(item)
    """

    def __init__(self, url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = url or INGEST_SINK_URL
        if not self.url:
            raise ValueError("INGEST_SINK_URL not set and no url given")
        self.token = token if token is not None else INGEST_SINK_TOKEN
        self.timeout = timeout or INGEST_SINK_TIMEOUT
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def ingest(self, item: LeadItem) -> Dict[str, Any]:
        try:
            resp = self.session.post(
                self.url, json=item.to_dict(), headers=self._headers(), timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Ingest request failed for %s lead %s: %s", item.source.value, item.url, e,
                         extra={'source': item.source.value})
            raise IngestSinkError(f"Ingest request failed: {e}") from e

        if not resp.ok:
            logger.error("Ingest sink returned %s for %s lead %s: %s",
                         resp.status_code, item.source.value, item.url, resp.text[:300],
                         extra={'source': item.source.value})
            raise IngestSinkError(
                f"Ingest sink returned {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )

        try:
            summary = resp.json()
        except ValueError:
            summary = {'status_code': resp.status_code, 'body': resp.text[:300]}

        logger.info("Ingested %s lead %s", item.source.value, item.url or '(no url)',
                    extra={'source': item.source.value})
        return summary
