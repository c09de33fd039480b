"""
Manual source — UI paste and manual job-description submission.
"""
import logging
from typing import Any, Dict, List, Optional

from leadgate.ingest.base import SourceAdapter
from leadgate.models.lead import LeadItem, LeadSource
from leadgate.text import safe_text

logger = logging.getLogger('ingest.manual')


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


class ManualSource(SourceAdapter):
    """
    Leads typed or pasted by a user.

    The batch variant attaches a cleaned JD to an existing job record: url,
    title and company come from that record, and its job_key and status are
    threaded into meta so the sink can correlate with the earlier lead.
    """
    source = LeadSource.MANUAL.value
    method = 'ui_paste'
    description = 'UI paste + manual JD submission'
    supports_batch = True

    def build_item(self, url: Any = '', title: Any = '', company: Any = '',
                   raw: Optional[Any] = None) -> LeadItem:
        return LeadItem(
            source=LeadSource.MANUAL,
            url=url,
            title=title,
            company=company,
            raw=None if raw is None else str(raw),
            meta={'method': self.method},
        )

    def build_items_from_manual_jd(self, job_key: Any = None, jd_text: Any = None,
                                   existing: Any = None, body: Any = None,
                                   url: Any = None, title: Any = None,
                                   company: Any = None) -> List[LeadItem]:
        record = _as_dict(existing)
        key = safe_text(job_key)
        item = LeadItem(
            source=LeadSource.MANUAL,
            url=url or record.get('job_url'),
            title=title or record.get('role_title'),
            company=company or record.get('company'),
            raw={
                'jobKey': key,
                'jdText': '' if jd_text is None else str(jd_text),
                'body': body if body else {},
            },
            meta={
                'method': 'manual_jd',
                'job_key': key or None,
                'existing_status': record.get('status') or None,
            },
        )
        logger.debug("Built manual JD item for job_key=%s", key or '(none)',
                     extra={'source': self.source, 'job_key': key})
        return [item]
