"""
Centralized configuration — env vars and channel constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# Record attributes passed via `extra=` that JSON logs carry as top-level keys
LOG_CONTEXT_FIELDS = ['source', 'stage', 'job_key']

# HTTP client loggers, quieted to WARNING (the sink logs its own failures)
NOISY_LOGGERS = [
    'urllib3',
    'requests',
    'charset_normalizer',
]

# ── Ingestion sink ───────────────────────────────────────────────────────────
INGEST_SINK_URL = os.getenv('INGEST_SINK_URL')
INGEST_SINK_TOKEN = os.getenv('INGEST_SINK_TOKEN')
INGEST_SINK_TIMEOUT = float(os.getenv('INGEST_SINK_TIMEOUT', '15'))

# ── Scoring ──────────────────────────────────────────────────────────────────
SCORING_CONFIG_PATH = os.getenv('SCORING_CONFIG_PATH')

# ── Lead sources ─────────────────────────────────────────────────────────────
LEAD_SOURCES = [
    'manual',
    'gmail',
    'rss',
    'vonage',
]

# ── Scoring pipeline stage definitions ───────────────────────────────────────
SCORING_STAGES = [
    'heuristic',
    'ai_extract',
    'ai_reason',
    'evidence_upsert',
]
