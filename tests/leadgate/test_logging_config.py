"""Tests for logging setup and the lead-context JSON formatter."""
import json
import logging
from unittest.mock import MagicMock, patch

import pytest

import leadgate.logging_config as logging_config_mod
from leadgate.config import NOISY_LOGGERS
from leadgate.ingest.manual import ManualSource
from leadgate.ingest.rss import RssSource
from leadgate.ingest.sink import CallableSink, IngestSinkError
from leadgate.logging_config import configure_logging, JSONFormatter
from leadgate.scoring.pipeline import run_scoring_pipeline


@pytest.fixture(autouse=True)
def _reset_root_logger():
    root = logging.getLogger()
    original_level = root.level
    original_handlers = root.handlers[:]
    yield
    root.setLevel(original_level)
    root.handlers = original_handlers


def _json_lines(err):
    return [json.loads(line) for line in err.strip().splitlines() if line.startswith('{')]


class TestConfigureLogging:

    def test_defaults_come_from_leadgate_config(self):
        with patch.object(logging_config_mod, 'LOG_LEVEL', 'debug'):
            configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_explicit_level_wins_and_unknown_falls_back_to_info(self):
        configure_logging(level='warning')
        assert logging.getLogger().level == logging.WARNING
        configure_logging(level='NONSENSE')
        assert logging.getLogger().level == logging.INFO

    def test_http_client_loggers_listed_in_config_are_quieted(self):
        configure_logging()
        assert 'urllib3' in NOISY_LOGGERS
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_reconfiguring_replaces_the_handler(self):
        configure_logging(log_format='json')
        configure_logging(log_format='text')
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:

    def _record(self, name, msg, args=(), **extra):
        record = logging.LogRecord(
            name=name, level=logging.WARNING, pathname='', lineno=0,
            msg=msg, args=args, exc_info=None,
        )
        record.__dict__.update(extra)
        return record

    def test_component_is_the_logger_family(self):
        parsed = json.loads(JSONFormatter().format(self._record('ingest.sink', 'sink returned %s', (502,))))
        assert parsed['component'] == 'ingest'
        assert parsed['message'] == 'sink returned 502'
        assert 'source' not in parsed
        assert 'exception' not in parsed

    def test_lead_context_fields_are_lifted(self):
        record = self._record('ingest.manual', 'built', source='manual', job_key='jk-1', stage='')
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['source'] == 'manual'
        assert parsed['job_key'] == 'jk-1'
        assert 'stage' not in parsed


class TestLeadContextInLogs:
    """Adapters and the pipeline tag their log lines with source / stage."""

    def test_rss_batch_log_carries_source(self, capsys, mock_sink):
        configure_logging(level='INFO', log_format='json')
        RssSource(sink=mock_sink).build_items_from_feed('https://board.test/feed', '<rss></rss>')
        lines = [e for e in _json_lines(capsys.readouterr().err) if e['logger'] == 'ingest.rss']
        assert lines and lines[-1]['source'] == 'rss'
        assert lines[-1]['component'] == 'ingest'

    def test_failed_stage_log_carries_stage(self, capsys):
        configure_logging(level='INFO', log_format='json')
        with pytest.raises(RuntimeError):
            run_scoring_pipeline({'role_title': 'Backend Engineer'}, {},
                                 on_ai_reason=MagicMock(side_effect=RuntimeError('llm down')))
        errors = [e for e in _json_lines(capsys.readouterr().err) if e['level'] == 'ERROR']
        assert errors[-1]['stage'] == 'ai_reason'
        assert errors[-1]['component'] == 'scoring'

    def test_sink_failure_log_carries_source(self, capsys):
        configure_logging(level='INFO', log_format='json')
        sink = CallableSink(MagicMock(side_effect=KeyError('db')))
        with pytest.raises(IngestSinkError):
            ManualSource(sink=sink).ingest(url='https://x.test/1')
        errors = [e for e in _json_lines(capsys.readouterr().err) if e['level'] == 'ERROR']
        assert errors[-1]['source'] == 'manual'
