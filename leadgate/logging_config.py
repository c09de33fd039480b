"""
Logging setup for processes embedding leadgate.

Call configure_logging() once at startup. Text output is meant for a terminal,
JSON output for a log aggregator. Adapters and the scoring pipeline attach
lead context via `extra=` (source, stage, job_key); the JSON formatter lifts
those onto the entry so one lead can be followed across log lines.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from leadgate.config import LOG_CONTEXT_FIELDS, LOG_FORMAT, LOG_LEVEL, NOISY_LOGGERS

TEXT_FORMAT = '[%(asctime)s] %(levelname)s %(name)s — %(message)s'


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, logger, component, lead context, message."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            # ingest / scoring
            'component': record.name.split('.', 1)[0],
            'message': record.getMessage(),
        }
        for key in LOG_CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value not in (None, ''):
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level=None, log_format=None):
    """
    Install a single stderr handler on the root logger.

    level and log_format default to LOG_LEVEL / LOG_FORMAT from leadgate.config.
    An unknown level name falls back to INFO; any format other than "json" is text.
    Re-running replaces the handler instead of stacking another one.
    """
    level_name = str(level or LOG_LEVEL).upper()
    resolved = getattr(logging, level_name, None)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    root = logging.getLogger()
    root.setLevel(resolved)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    if str(log_format or LOG_FORMAT).lower() == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
