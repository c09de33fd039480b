"""
RSS source — items from polled job feeds (RSS 2.0 and Atom).

Feeds are fetched by the poller; parse_feed_items() only reads the document
it is given and never goes to the network.
"""
import io
import logging
from typing import Any, Dict, List

import feedparser

from leadgate.ingest.base import SourceAdapter
from leadgate.ingest.common import strip_html
from leadgate.models.lead import LeadItem, LeadSource
from leadgate.text import safe_text

logger = logging.getLogger('ingest.rss')

SUMMARY_MAX_CHARS = 3000


def _entry_summary(entry) -> str:
    desc = entry.get('summary') or entry.get('description') or ''
    if not desc and entry.get('content'):
        desc = entry['content'][0].get('value') or ''
    return desc


def parse_feed_items(xml: Any) -> List[Dict[str, str]]:
    """
    Pull {title, link, summary} records out of an RSS or Atom document.

    link is the entry's alternate link. Records with neither title, link nor
    summary are dropped.
    """
    data = xml if isinstance(xml, bytes) else str(xml or '').encode('utf-8')
    feed = feedparser.parse(io.BytesIO(data))
    if feed.get('bozo') and not feed.entries:
        logger.warning("Unparseable feed document: %s", feed.get('bozo_exception'))

    items = []
    for entry in getattr(feed, 'entries', []) or []:
        items.append({
            'title': (entry.get('title') or '').strip(),
            'link': (entry.get('link') or '').strip(),
            'summary': strip_html(_entry_summary(entry))[:SUMMARY_MAX_CHARS],
        })
    return [x for x in items if x['link'] or x['summary'] or x['title']]


# ── Adapter ──────────────────────────────────────────────────────────────────

class RssSource(SourceAdapter):
    """Feed items. raw keeps the feed URL and the item description."""
    source = LeadSource.RSS.value
    method = 'rss_poll'
    description = 'Polled RSS/Atom job feeds'
    supports_batch = False

    def build_item(self, feed_url: Any = '', item_url: Any = '', title: Any = '',
                   description: Any = '', company: Any = '') -> LeadItem:
        return LeadItem(
            source=LeadSource.RSS,
            url=item_url,
            title=title,
            company=company,
            raw={
                'feedUrl': safe_text(feed_url),
                'description': '' if description is None else str(description),
            },
            meta={'method': self.method},
        )

    def build_items_from_feed(self, feed_url: Any, xml: Any, company: Any = '') -> List[LeadItem]:
        """Parse an already-fetched feed document and build one item per entry."""
        records = parse_feed_items(xml)
        items = [
            self.build_item(
                feed_url=feed_url,
                item_url=rec['link'],
                title=rec['title'],
                description=rec['summary'],
                company=company,
            )
            for rec in records
        ]
        logger.info("Parsed %d feed items from %s", len(items), safe_text(feed_url) or '(unknown feed)',
                    extra={'source': self.source})
        return items
