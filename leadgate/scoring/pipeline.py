"""
Scoring pipeline — heuristic gate, then the AI stages a passing lead goes through.

Stage order (SCORING_STAGES): heuristic → ai_extract → ai_reason → evidence_upsert.

The AI stages are callables supplied by the caller (an LLM client, an evidence
store); this module only sequences them and records per-stage metrics. A lead
rejected by the heuristic gate never reaches them.

Usage:
    result = run_scoring_pipeline(
        {'role_title': 'Backend Engineer', 'jd_clean': jd},
        {'targets': targets},
        on_ai_reason=lambda ctx: reasoner.score(ctx['heuristic'], ctx['extracted']),
    )
"""
import logging
import math
import time
from typing import Any, Callable, Dict, Optional

from leadgate.config import SCORING_STAGES
from leadgate.scoring.heuristics import ScoringContext, evaluate
from leadgate.text import clamp_int

logger = logging.getLogger('scoring.pipeline')

MAX_STAGE_TOKENS = 5_000_000
MAX_ERROR_CHARS = 400
MAX_NOTE_CHARS = 500

STATUS_COMPLETED = 'COMPLETED'
STATUS_REJECTED_HEURISTIC = 'REJECTED_HEURISTIC'


def _now_ms() -> int:
    return int(time.time() * 1000)


# ── Stage metrics ────────────────────────────────────────────────────────────

def _init_stage(stage: str) -> Dict[str, Any]:
    ts = _now_ms()
    return {
        'stage': stage,
        'status': 'skipped',
        'started_at': ts,
        'finished_at': ts,
        'latency_ms': 0,
        'error': None,
        'tokens_in': 0,
        'tokens_out': 0,
        'tokens_total': 0,
    }


def _usage_tokens(usage: Dict[str, Any], *keys: str) -> int:
    for key in keys:
        if usage.get(key):
            return clamp_int(usage[key], 0, MAX_STAGE_TOKENS)
    return 0


def _stage_done(metric: Dict[str, Any], status: str, started_at: int,
                error: Any = None, usage: Any = None) -> Dict[str, Any]:
    end = _now_ms()
    usage = usage if isinstance(usage, dict) else {}
    return {
        **metric,
        'status': status,
        'started_at': started_at,
        'finished_at': end,
        'latency_ms': max(0, end - started_at),
        'error': str(error)[:MAX_ERROR_CHARS] if error else None,
        'tokens_in': _usage_tokens(usage, 'input_tokens', 'tokens_in'),
        'tokens_out': _usage_tokens(usage, 'output_tokens', 'tokens_out'),
        'tokens_total': _usage_tokens(usage, 'total_tokens', 'tokens_total'),
    }


def _unwrap(result: Any) -> Any:
    """Callbacks may return {'data': ..., 'usage': ...} or the payload itself."""
    if isinstance(result, dict) and result.get('data') is not None:
        return result['data']
    return result


def _usage_of(result: Any, payload: Any = None) -> Optional[Dict[str, Any]]:
    if isinstance(result, dict):
        usage = result.get('usage') or result.get('meta')
        if usage:
            return usage
    if isinstance(payload, dict) and payload.get('_meta'):
        return payload['_meta']
    return None


def _run_stage(stages: Dict[str, Dict[str, Any]], stage: str, fn: Callable, *args,
               record_usage: bool = True) -> Any:
    started = _now_ms()
    try:
        result = fn(*args)
    except Exception as e:
        stages[stage] = _stage_done(stages[stage], 'failed', started, error=e)
        logger.error("Scoring stage '%s' FAILED: %s", stage, e, extra={'stage': stage})
        raise
    payload = _unwrap(result)
    usage = _usage_of(result, payload) if record_usage else None
    stages[stage] = _stage_done(stages[stage], 'ok', started, usage=usage)
    return payload


def _finish(started_at: int, **fields) -> Dict[str, Any]:
    finished_at = _now_ms()
    return {
        'ok': True,
        **fields,
        'started_at': started_at,
        'finished_at': finished_at,
        'total_latency_ms': max(0, finished_at - started_at),
    }


# ── Public API ───────────────────────────────────────────────────────────────

def run_scoring_pipeline(lead_context: Any, options: Any = None,
                         on_ai_extract: Optional[Callable[[], Any]] = None,
                         on_ai_reason: Optional[Callable[[Dict[str, Any]], Any]] = None,
                         on_evidence_upsert: Optional[Callable[[Dict[str, Any]], Any]] = None,
                         ) -> Dict[str, Any]:
    """
    Score one lead end to end.

    The heuristic gate always runs. On rejection the run short-circuits with
    final_status REJECTED_HEURISTIC and the AI stages stay 'skipped'.
    Otherwise on_ai_extract (optional) runs, then on_ai_reason (required),
    then on_evidence_upsert (optional). A failing callback marks its stage
    'failed' and the exception propagates.

    Returns: dict with ok, final_status, short_circuit, heuristic, extracted,
             scoring, evidence, stages, started_at, finished_at, total_latency_ms
    """
    started_at = _now_ms()
    stages = {stage: _init_stage(stage) for stage in SCORING_STAGES}

    heuristic_started = _now_ms()
    ctx = ScoringContext.from_input(lead_context)
    heuristic = evaluate(ctx, options).to_dict()
    stages['heuristic'] = _stage_done(
        stages['heuristic'], 'ok' if heuristic['passed'] else 'rejected', heuristic_started)

    if not heuristic['passed']:
        logger.info("Lead '%s' rejected by heuristics: %s",
                    ctx.role_title or '(untitled)', ', '.join(heuristic['reasons']))
        return _finish(
            started_at,
            final_status=STATUS_REJECTED_HEURISTIC,
            short_circuit=True,
            heuristic=heuristic,
            extracted=None,
            scoring=None,
            evidence=None,
            stages=stages,
        )

    extracted = None
    if callable(on_ai_extract):
        extracted = _run_stage(stages, 'ai_extract', on_ai_extract)

    if not callable(on_ai_reason):
        raise ValueError("run_scoring_pipeline requires an on_ai_reason callback")

    scoring = _run_stage(stages, 'ai_reason', on_ai_reason,
                         {'heuristic': heuristic, 'extracted': extracted})

    evidence = None
    if callable(on_evidence_upsert):
        evidence = _run_stage(stages, 'evidence_upsert', on_evidence_upsert,
                              {'heuristic': heuristic, 'extracted': extracted, 'scoring': scoring},
                              record_usage=False)

    result = _finish(
        started_at,
        final_status=STATUS_COMPLETED,
        short_circuit=False,
        heuristic=heuristic,
        extracted=extracted,
        scoring=scoring,
        evidence=evidence,
        stages=stages,
    )
    logger.info("Scoring pipeline completed in %dms (best_target=%s)",
                result['total_latency_ms'], heuristic['best_target_id'])
    return result


def _as_ms(value: Any, default: Optional[int]) -> Optional[int]:
    try:
        n = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(n):
        return default
    return int(n)


def build_scoring_run_meta(**fields) -> Dict[str, Any]:
    """Normalize a scoring run record for storage. Unknown keys are dropped."""
    reasons = fields.get('heuristic_reasons')
    stages = fields.get('stages')
    return {
        'job_key': str(fields.get('job_key') or '').strip(),
        'source': str(fields.get('source') or '').strip().upper() or 'UNKNOWN',
        'started_at': _as_ms(fields.get('started_at'), _now_ms()),
        'finished_at': _as_ms(fields.get('finished_at'), None),
        'ok': bool(fields.get('ok')),
        'final_status': str(fields.get('final_status') or STATUS_COMPLETED).strip().upper(),
        'short_circuit': bool(fields.get('short_circuit')),
        'heuristic_reasons': list(reasons) if isinstance(reasons, (list, tuple)) else [],
        'note': str(fields.get('note') or '').strip()[:MAX_NOTE_CHARS],
        'stages': stages if isinstance(stages, dict) else {},
    }
