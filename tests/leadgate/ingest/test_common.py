"""Tests for leadgate.ingest.common — shared extraction helpers."""
import pytest

from leadgate.ingest.common import (
    domain_from_url,
    extract_first_url,
    extract_urls,
    strip_html,
    unique,
)


class TestExtractUrls:

    def test_trims_trailing_punctuation_and_dedupes(self):
        text = 'See https://jobs.example.com/1, and (https://jobs.example.com/2). Again: https://jobs.example.com/1'
        assert extract_urls(text) == ['https://jobs.example.com/1', 'https://jobs.example.com/2']

    def test_no_urls(self):
        assert extract_urls(None) == []
        assert extract_urls('nothing here') == []

    def test_first_url(self):
        assert extract_first_url('apply: http://a.example.com/x then https://b.example.com') == 'http://a.example.com/x'
        assert extract_first_url('') == ''


class TestStripHtml:

    def test_keeps_line_breaks(self):
        markup = '<style>p{}</style><p>Senior&nbsp;Dev</p><ul><li>Python</li><li>Rust</li></ul>'
        assert strip_html(markup) == 'Senior Dev\nPython\nRust'

    def test_none(self):
        assert strip_html(None) == ''


class TestDomainFromUrl:

    @pytest.mark.parametrize('url, expected', [
        ('https://Jobs.Example.com/path?q=1', 'jobs.example.com'),
        ('http://example.com:8080', 'example.com'),
        ('not a url', ''),
        ('', ''),
        (None, ''),
    ])
    def test_hostname(self, url, expected):
        assert domain_from_url(url) == expected


class TestSmallHelpers:

    def test_unique(self):
        assert unique([' a ', 'a', None, '', 'b']) == ['a', 'b']

