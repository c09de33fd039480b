"""
Vonage source — WhatsApp messages delivered by the Vonage inbound webhook.

extract_webhook_fields() digs the message text, sender, message id and media
record out of the several payload shapes Vonage sends; build_items_from_webhook()
turns them into leads. Media-only messages (no text, no subject) produce no
lead.
"""
import logging
import re
import time
from typing import Any, Dict, List, Optional

from leadgate.ingest.base import SourceAdapter
from leadgate.ingest.common import extract_first_url
from leadgate.models.lead import LeadItem, LeadSource
from leadgate.text import safe_text

logger = logging.getLogger('ingest.vonage')

DEFAULT_TITLE = 'WhatsApp Job Lead'

_MEDIA_TYPE_ALIASES = {
    'file': 'document', 'document': 'document', 'doc': 'document', 'pdf': 'document',
    'image': 'image', 'photo': 'image', 'picture': 'image',
    'video': 'video',
    'audio': 'audio', 'voice': 'audio',
    'sticker': 'sticker',
}


# ── Payload extraction ───────────────────────────────────────────────────────

def _dig(payload: Any, *path: str) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _first_text(values, max_len: int) -> str:
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (str, int, float)):
            continue
        s = safe_text(v, max_len)
        if s:
            return s
    return ''


def normalize_media_type(value: Any) -> str:
    s = safe_text(value, 80).lower()
    return _MEDIA_TYPE_ALIASES.get(s, s)


def pick_message_text(payload: Any) -> str:
    paths = [
        ('text',), ('caption',), ('body',), ('message_text',),
        ('content', 'text'), ('content', 'caption'),
        ('message', 'content', 'text'), ('message', 'content', 'caption'),
        ('message', 'text'), ('message', 'caption'),
        ('file', 'caption'), ('document', 'caption'), ('image', 'caption'),
        ('message', 'file', 'caption'), ('message', 'document', 'caption'),
        ('message', 'image', 'caption'),
        ('whatsapp', 'text'), ('data', 'text'),
    ]
    return _first_text((_dig(payload, *p) for p in paths), 20000)


def pick_message_type(payload: Any) -> str:
    paths = [
        ('message_type',), ('messageType',), ('type',),
        ('message', 'message_type'), ('message', 'messageType'), ('message', 'type'),
        ('content', 'type'),
    ]
    return normalize_media_type(_first_text((_dig(payload, *p) for p in paths), 80))


def pick_sender(payload: Any) -> str:
    paths = [('from',), ('sender',), ('msisdn',), ('phone',), ('message', 'from'), ('whatsapp', 'from')]
    return _first_text((_dig(payload, *p) for p in paths), 500)


def pick_message_id(payload: Any) -> str:
    """Provider message id, or a wa-<sender>-<epoch ms> fallback."""
    paths = [('message_uuid',), ('messageUuid',), ('message_id',), ('messageId',), ('uuid',), ('id',)]
    found = _first_text((_dig(payload, *p) for p in paths), 240)
    if found:
        return found
    sender = re.sub(r'[^a-zA-Z0-9]', '', pick_sender(payload))[:40] or 'anon'
    return f'wa-{sender}-{int(time.time() * 1000)}'


def _media_record(candidate: Any, fallback_type: str = '') -> Optional[Dict[str, Any]]:
    if not isinstance(candidate, dict):
        return None
    url = _first_text((candidate.get(k) for k in (
        'url', 'media_url', 'mediaUrl', 'link', 'href', 'download_url', 'downloadUrl', 'file_url')), 4000)
    mime_type = _first_text((candidate.get(k) for k in ('mime_type', 'mimetype', 'content_type')), 120).lower()
    file_name = _first_text((candidate.get(k) for k in ('name', 'filename', 'file_name')), 240)
    caption = _first_text((candidate.get(k) for k in ('caption', 'title')), 20000)
    size_bytes = None
    for k in ('size', 'file_size', 'fileSize', 'bytes'):
        try:
            size_bytes = max(0, int(float(candidate[k])))
            break
        except (KeyError, TypeError, ValueError, OverflowError):
            continue
    media_type = normalize_media_type(
        _first_text((candidate.get(k) for k in ('type', 'message_type', 'kind')), 80) or fallback_type)

    if not (url or mime_type or file_name or media_type or caption) and size_bytes is None:
        return None
    return {
        'present': True,
        'type': media_type or normalize_media_type(fallback_type) or 'unknown',
        'url': url,
        'mime_type': mime_type,
        'file_name': file_name,
        'caption': caption,
        'size_bytes': size_bytes,
    }


def pick_media(payload: Any) -> Dict[str, Any]:
    """First media attachment found in the payload, or a present=False record."""
    type_hint = pick_message_type(payload)
    candidates = [
        ('document', ('file',)), ('document', ('document',)), ('image', ('image',)),
        ('video', ('video',)), ('audio', ('audio',)), ('sticker', ('sticker',)),
        ('document', ('message', 'file')), ('document', ('message', 'document')),
        ('image', ('message', 'image')), ('video', ('message', 'video')),
        ('audio', ('message', 'audio')),
        ('document', ('content', 'file')), ('document', ('content', 'document')),
        ('image', ('content', 'image')), ('video', ('content', 'video')),
        ('audio', ('content', 'audio')),
        (type_hint, ('media',)), (type_hint, ('message', 'media')), (type_hint, ('content', 'media')),
    ]
    for media_type, path in candidates:
        rec = _media_record(_dig(payload, *path), media_type or type_hint)
        if rec:
            return rec

    if type_hint in ('document', 'image', 'video', 'audio'):
        rec = _media_record(payload, type_hint)
        if rec:
            return rec

    return {
        'present': False, 'type': type_hint, 'url': '', 'mime_type': '',
        'file_name': '', 'caption': '', 'size_bytes': None,
    }


def extract_webhook_fields(payload: Any, raw_body: Any = '') -> Dict[str, Any]:
    """
    Map a raw inbound Vonage payload to build_items_from_webhook() keyword args.

    Usage:
        fields = extract_webhook_fields(request_json, raw_body=request_text)
        items = VonageSource().build_items_from_webhook(**fields)
    """
    p = payload if isinstance(payload, dict) else {}
    media = pick_media(p)
    subject = _first_text((p.get('subject'), p.get('title')), 300)
    return {
        'body': {'text': pick_message_text(p), 'subject': subject},
        'raw_body': '' if raw_body is None else str(raw_body),
        'message_id': pick_message_id(p),
        'sender': pick_sender(p),
        'media_url': media['url'],
        'media_detected': bool(media['present']),
        'media_caption': safe_text(media['caption'], 500),
    }


# ── Adapter ──────────────────────────────────────────────────────────────────

class VonageSource(SourceAdapter):
    """WhatsApp chat leads. Single items keep the message text as raw."""
    source = LeadSource.VONAGE.value
    method = 'whatsapp_webhook'
    description = 'Vonage WhatsApp inbound webhook'
    supports_batch = True

    def build_item(self, message: Any = '', sender: Any = '', url: Any = '',
                   title: Any = '', company: Any = '') -> LeadItem:
        return LeadItem(
            source=LeadSource.VONAGE,
            url=url,
            title=title,
            company=company,
            raw='' if message is None else str(message),
            meta={'from': safe_text(sender), 'method': self.method},
        )

    def build_items_from_webhook(self, body: Any = None, raw_body: Any = '', message_id: Any = '',
                                 sender: Any = '', media_url: Any = '', media_detected: Any = False,
                                 media_caption: Any = '') -> List[LeadItem]:
        """
        Zero or one item from a parsed webhook body.

        An item is built only when the body carries message text (text, message
        or body key) or a subject. The url is the media url, else the first URL
        in the message text.
        """
        b = body if isinstance(body, dict) else {}
        message_text = _first_text((b.get('text'), b.get('message'), b.get('body')), 20000)
        subject = safe_text(b.get('subject'), 300)

        if not message_text and not subject:
            logger.info("Webhook %s has no text or subject (media=%s), no lead built",
                        safe_text(message_id) or '(no id)', bool(media_detected),
                        extra={'source': self.source})
            return []

        media = safe_text(media_url, 4000)
        detected = '' if media else extract_first_url(message_text)

        item = LeadItem(
            source=LeadSource.VONAGE,
            url=media or detected,
            title=subject or DEFAULT_TITLE,
            company='',
            raw={
                'message': message_text,
                'from': safe_text(sender),
                'messageId': safe_text(message_id),
                'rawBody': '' if raw_body is None else str(raw_body),
                'media_detected': bool(media_detected),
                'media_caption': safe_text(media_caption),
            },
            meta={
                'method': self.method,
                'provider': 'vonage',
                'media_url': media or None,
                'url_detected': bool(detected),
            },
        )
        return [item]
