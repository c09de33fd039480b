"""
Gmail source — leads found by the email poller.

Also turns raw Gmail API messages (format=full) into the flat email records
the poll batch consumes. Fetching and OAuth are the poller's job, not ours.
"""
import base64
import binascii
import logging
from typing import Any, Dict, List

from leadgate.ingest.base import SourceAdapter
from leadgate.ingest.common import extract_urls, strip_html
from leadgate.models.lead import LeadItem, LeadSource
from leadgate.text import safe_text

logger = logging.getLogger('ingest.gmail')


# ── Gmail API message parsing ────────────────────────────────────────────────

def _get_header(payload: Dict[str, Any], name: str) -> str:
    headers = payload.get('headers')
    if not isinstance(headers, list):
        return ''
    for h in headers:
        if isinstance(h, dict) and str(h.get('name') or '').lower() == name.lower():
            return safe_text(h.get('value'))
    return ''


def decode_base64url(data: str) -> str:
    s = str(data or '')
    padded = s + '=' * (-len(s) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode('utf-8', errors='replace')
    except (binascii.Error, ValueError):
        logger.warning("Undecodable base64url body part (%d chars)", len(s))
        return ''


def _collect_bodies(part: Any, out: Dict[str, List[str]]):
    if not isinstance(part, dict):
        return
    mime = str(part.get('mimeType') or '').lower()
    body = part.get('body') if isinstance(part.get('body'), dict) else {}
    data = body.get('data')
    if data:
        decoded = decode_base64url(data)
        if mime == 'text/plain':
            out['text'].append(decoded)
        elif mime == 'text/html':
            out['html'].append(decoded)
    children = part.get('parts')
    if isinstance(children, list):
        for child in children:
            _collect_bodies(child, out)


def parse_gmail_message(message: Any) -> Dict[str, Any]:
    """
    Flatten a Gmail API message into an email record.

    Returns: {id, thread_id, from, subject, body, html, urls}
    body is the text/plain content, or the stripped HTML when there is none.
    """
    msg = message if isinstance(message, dict) else {}
    payload = msg.get('payload') if isinstance(msg.get('payload'), dict) else {}

    parts = {'text': [], 'html': []}
    _collect_bodies(payload, parts)
    text = '\n'.join(parts['text']).strip()
    html_body = '\n'.join(parts['html']).strip()
    stripped = strip_html(html_body)

    return {
        'id': safe_text(msg.get('id'), 240),
        'thread_id': safe_text(msg.get('threadId'), 240),
        'from': _get_header(payload, 'From'),
        'subject': _get_header(payload, 'Subject'),
        'body': text or stripped,
        'html': html_body,
        'urls': extract_urls(f"{text}\n{stripped}"),
    }


# ── Adapter ──────────────────────────────────────────────────────────────────

class GmailSource(SourceAdapter):
    """Email poller leads. raw keeps the email's id, sender, subject and body."""
    source = LeadSource.GMAIL.value
    method = 'gmail_poll'
    description = 'Polled Gmail label — one lead per email'
    supports_batch = True

    def build_item(self, email_id: Any = '', sender: Any = '', subject: Any = '',
                   body: Any = '', url: Any = '', title: Any = '',
                   company: Any = '') -> LeadItem:
        return LeadItem(
            source=LeadSource.GMAIL,
            url=url,
            title=title,
            company=company,
            raw={
                'emailId': safe_text(email_id),
                'from': safe_text(sender),
                'subject': safe_text(subject),
                'body': '' if body is None else str(body),
            },
            meta={'method': self.method},
        )

    def build_items_from_poll(self, poll_result: Any) -> List[LeadItem]:
        """
        One item per email record in a poll result.

        Accepts {"emails": [...]} or a bare list. Records that are not dicts are
        skipped; missing fields default to '' (urls to []). When a record has no
        url of its own the first of its urls is used.
        """
        if isinstance(poll_result, dict):
            records = poll_result.get('emails')
        else:
            records = poll_result
        if not isinstance(records, list):
            return []

        items = []
        for record in records:
            if not isinstance(record, dict):
                continue
            urls = record.get('urls') if isinstance(record.get('urls'), list) else []
            urls = [safe_text(u) for u in urls if safe_text(u)]
            url = record.get('url') or (urls[0] if urls else '')

            item = self.build_item(
                email_id=record.get('id') or record.get('emailId'),
                sender=record.get('from'),
                subject=record.get('subject'),
                body=record.get('body'),
                url=url,
                title=record.get('title'),
                company=record.get('company'),
            )
            item.meta['thread_id'] = safe_text(record.get('thread_id') or record.get('threadId'))
            item.meta['urls'] = urls
            items.append(item)

        logger.info("Built %d items from %d polled emails", len(items), len(records),
                    extra={'source': self.source})
        return items
