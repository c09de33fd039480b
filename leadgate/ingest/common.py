"""
Helpers shared by source adapters: URL extraction, HTML stripping, hostnames.
"""
import re
from typing import List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from leadgate.text import safe_text

_URL_RE = re.compile(r'https?://[^\s"\'<>)\]]+', re.IGNORECASE)
_TRAILING_PUNCT_RE = re.compile(r'[),.;]+$')
_BLOCK_TAGS = ['p', 'div', 'li', 'tr', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6']


def unique(values) -> List[str]:
    seen = set()
    out = []
    for v in values:
        s = str(v or '').strip()
        if not s or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out


def extract_urls(text) -> List[str]:
    """All distinct http(s) URLs in text, trailing punctuation trimmed."""
    found = (_TRAILING_PUNCT_RE.sub('', m).strip() for m in _URL_RE.findall(str(text or '')))
    return unique(found)


def extract_first_url(text) -> str:
    urls = extract_urls(safe_text(text, 40000))
    return safe_text(urls[0], 2000) if urls else ''


def strip_html(markup) -> str:
    """Visible text of an HTML fragment, one line per block element."""
    soup = BeautifulSoup(str(markup or ''), 'html.parser')
    for tag in soup(['script', 'style']):
        tag.decompose()
    for br in soup.find_all('br'):
        br.replace_with('\n')
    for block in soup.find_all(_BLOCK_TAGS):
        block.append('\n')
    lines = [' '.join(line.split()) for line in soup.get_text().split('\n')]
    return '\n'.join(line for line in lines if line)


def domain_from_url(url) -> str:
    s = safe_text(url, 2000)
    if not s:
        return ''
    try:
        return (urlparse(s).hostname or '').strip().lower()
    except ValueError:
        return ''
