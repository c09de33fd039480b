"""Tests for leadgate.ingest.vonage — WhatsApp webhook payloads."""
import re

import pytest

from leadgate.ingest.vonage import (
    VonageSource,
    extract_webhook_fields,
    normalize_media_type,
    pick_media,
    pick_message_id,
    pick_message_text,
    pick_sender,
)
from leadgate.models.lead import LeadSource


def _items_for(payload, raw_body=''):
    return VonageSource().build_items_from_webhook(**extract_webhook_fields(payload, raw_body=raw_body))


class TestPayloadExtraction:

    def test_flat_text_message(self):
        payload = {'message_type': 'text', 'text': 'hello', 'from': '447700900000', 'message_uuid': 'uuid-1'}
        assert pick_message_text(payload) == 'hello'
        assert pick_sender(payload) == '447700900000'
        assert pick_message_id(payload) == 'uuid-1'

    def test_nested_content_text(self):
        payload = {'message': {'content': {'text': 'Nested hi'}}, 'msisdn': '123'}
        assert pick_message_text(payload) == 'Nested hi'
        assert pick_sender(payload) == '123'

    def test_non_string_sender_is_skipped(self):
        assert pick_sender({'from': {'number': '1'}, 'msisdn': '555'}) == '555'

    def test_message_id_fallback(self):
        assert re.match(r'^wa-447700-\d+$', pick_message_id({'from': '+44 7700'}))
        assert re.match(r'^wa-anon-\d+$', pick_message_id({}))

    @pytest.mark.parametrize('raw, expected', [
        ('PDF', 'document'), ('file', 'document'), ('voice', 'audio'),
        ('photo', 'image'), ('video', 'video'), ('text', 'text'), (None, ''),
    ])
    def test_normalize_media_type(self, raw, expected):
        assert normalize_media_type(raw) == expected

    def test_pick_media_document(self):
        media = pick_media({'file': {
            'url': 'https://cdn.example.com/cv.pdf', 'name': 'cv.pdf', 'size': '2048', 'caption': 'My CV',
        }})
        assert media['present'] is True
        assert media['type'] == 'document'
        assert media['url'] == 'https://cdn.example.com/cv.pdf'
        assert media['file_name'] == 'cv.pdf'
        assert media['size_bytes'] == 2048
        assert media['caption'] == 'My CV'

    def test_pick_media_absent(self):
        media = pick_media({'message_type': 'text', 'text': 'hi'})
        assert media['present'] is False
        assert media['url'] == ''

    def test_extract_webhook_fields(self):
        fields = extract_webhook_fields(
            {'text': 'hi', 'subject': 'Referral', 'from': '1', 'message_uuid': 'u'}, raw_body='{"text":"hi"}',
        )
        assert fields == {
            'body': {'text': 'hi', 'subject': 'Referral'},
            'raw_body': '{"text":"hi"}',
            'message_id': 'u',
            'sender': '1',
            'media_url': '',
            'media_detected': False,
            'media_caption': '',
        }


class TestBuildItemsFromWebhook:

    def test_text_message_builds_one_item(self):
        items = _items_for({
            'message_type': 'text',
            'text': 'Great role https://jobs.example.com/9 apply now',
            'from': '447700900000',
            'message_uuid': 'uuid-1',
        })
        assert len(items) == 1
        item = items[0]
        assert item.source is LeadSource.VONAGE
        assert item.url == 'https://jobs.example.com/9'
        assert item.title == 'WhatsApp Job Lead'
        assert item.company == ''
        assert item.raw['message'] == 'Great role https://jobs.example.com/9 apply now'
        assert item.raw['from'] == '447700900000'
        assert item.raw['messageId'] == 'uuid-1'
        assert item.meta == {
            'method': 'whatsapp_webhook',
            'provider': 'vonage',
            'media_url': None,
            'url_detected': True,
        }

    def test_media_only_payload_yields_nothing(self):
        payload = {
            'message_type': 'image',
            'image': {'url': 'https://cdn.example.com/a.jpg'},
            'from': '447700900000',
            'message_uuid': 'uuid-2',
        }
        fields = extract_webhook_fields(payload)
        assert fields['media_detected'] is True
        assert VonageSource().build_items_from_webhook(**fields) == []

    def test_subject_only_builds_item(self):
        items = VonageSource().build_items_from_webhook(body={'subject': 'Referral'})
        assert len(items) == 1
        assert items[0].title == 'Referral'
        assert items[0].url == ''
        assert items[0].meta['url_detected'] is False

    def test_media_url_wins_over_text_url(self):
        item = VonageSource().build_items_from_webhook(
            body={'text': 'see https://a.example.com/job'},
            media_url='https://cdn.example.com/f.pdf', media_detected=True, media_caption='JD',
        )[0]
        assert item.url == 'https://cdn.example.com/f.pdf'
        assert item.meta['media_url'] == 'https://cdn.example.com/f.pdf'
        assert item.meta['url_detected'] is False
        assert item.raw['media_detected'] is True
        assert item.raw['media_caption'] == 'JD'

    def test_message_key_alias(self):
        assert VonageSource().build_items_from_webhook(body={'message': 'hi'})[0].raw['message'] == 'hi'

    def test_caption_counts_as_text(self):
        items = _items_for({'file': {'url': 'https://cdn.example.com/cv.pdf', 'caption': 'My CV'}})
        assert len(items) == 1
        assert items[0].url == 'https://cdn.example.com/cv.pdf'

    @pytest.mark.parametrize('body', [None, {}, {'text': '   '}, 'text'])
    def test_empty_bodies(self, body):
        assert VonageSource().build_items_from_webhook(body=body) == []


class TestBuildItem:

    def test_keeps_message_as_raw(self):
        item = VonageSource().build_item(message='hi there', sender='447700900000', url='', title='t')
        assert item.raw == 'hi there'
        assert item.meta == {'from': '447700900000', 'method': 'whatsapp_webhook'}
