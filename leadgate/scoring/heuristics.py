"""
Heuristic gate — decides whether a lead is worth pursuing and which target fits.

Three independent checks, all evaluated so every applicable reason is reported:
  1. Low signal:   no role title and a job description shorter than min_jd_chars
  2. Blocklist:    any blocked keyword in title + description
  3. Target match: best target signal below min_target_signal

Target signal (0-100) is a weighted sum of role-token overlap, must/nice keyword
hits, seniority and location preference matches. Weights come from the scoring
config. Evaluation is pure: same inputs, same result.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from leadgate.scoring.config import load_scoring_config
from leadgate.text import (
    clamp_int,
    normalize_list,
    normalize_text,
    round_half_up,
    score_keyword_overlap,
    to_words,
)

logger = logging.getLogger('scoring.heuristics')

MAX_REPORTED_BLOCKED = 5
MIN_ROLE_TOKEN_LEN = 3


def _str_field(data: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return str(value).strip()
    return ''


def _list_field(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return list(value) if isinstance(value, (list, tuple)) else []


# ── Input structs ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringContext:
    """Per-evaluation view of a lead. Built fresh, never persisted."""
    role_title: str = ''
    location: str = ''
    seniority: str = ''
    jd_clean: str = ''

    @classmethod
    def from_input(cls, data: Any) -> 'ScoringContext':
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return cls()
        return cls(
            role_title=_str_field(data, 'role_title'),
            location=_str_field(data, 'location'),
            seniority=_str_field(data, 'seniority'),
            jd_clean=_str_field(data, 'jd_clean'),
        )


@dataclass(frozen=True)
class TargetProfile:
    """A configured role definition a lead is scored against."""
    id: Any
    name: str = ''
    primary_role: str = ''
    must: List[Any] = field(default_factory=list)
    nice: List[Any] = field(default_factory=list)
    seniority_pref: str = ''
    location_pref: str = ''
    reject: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional['TargetProfile']:
        """None when data is not a mapping or carries no usable id."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            return None
        target_id = data.get('id')
        if target_id is None or (isinstance(target_id, str) and not target_id.strip()):
            return None
        return cls(
            id=target_id,
            name=_str_field(data, 'name'),
            primary_role=_str_field(data, 'primaryRole', 'primary_role'),
            must=_list_field(data, 'must'),
            nice=_list_field(data, 'nice'),
            seniority_pref=_str_field(data, 'seniorityPref', 'seniority_pref'),
            location_pref=_str_field(data, 'locationPref', 'location_pref'),
            reject=_list_field(data, 'reject'),
        )


@dataclass(frozen=True)
class ScoringOptions:
    """Effective thresholds after defaults and clamping."""
    min_jd_chars: int = 120
    min_target_signal: int = 20
    blocked_keywords: List[str] = field(default_factory=list)
    targets: List[Any] = field(default_factory=list)

    @classmethod
    def from_options(cls, options: Any) -> 'ScoringOptions':
        opts = options if isinstance(options, dict) else {}
        defaults = load_scoring_config().get('heuristics', {})

        min_jd = opts.get('min_jd_chars')
        if min_jd is None:
            min_jd = defaults.get('min_jd_chars', 120)
        min_signal = opts.get('min_target_signal')
        if min_signal is None:
            min_signal = defaults.get('min_target_signal', 20)
        blocked = opts.get('blocked_keywords')
        if blocked is None:
            blocked = defaults.get('blocked_keywords') or []
        targets = opts.get('targets')

        return cls(
            min_jd_chars=clamp_int(min_jd, 60, 2000),
            min_target_signal=clamp_int(min_signal, 0, 100),
            blocked_keywords=normalize_list(blocked),
            targets=list(targets) if isinstance(targets, (list, tuple)) else [],
        )

    def echo(self) -> Dict[str, Any]:
        return {
            'min_jd_chars': self.min_jd_chars,
            'min_target_signal': self.min_target_signal,
            'blocked_keywords': list(self.blocked_keywords),
        }


# ── Result ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringResult:
    """Verdict of one evaluation. reasons is empty iff passed."""
    passed: bool
    reasons: List[str]
    best_target_id: Any
    best_target_signal: Optional[int]
    config: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'passed': self.passed,
            'reasons': list(self.reasons),
            'best_target_id': self.best_target_id,
            'best_target_signal': self.best_target_signal,
            'config': dict(self.config),
        }


# ── Checks ───────────────────────────────────────────────────────────────────

def should_reject_low_signal(ctx: ScoringContext, min_jd_chars: int) -> bool:
    if normalize_text(ctx.role_title):
        return False
    return len(normalize_text(ctx.jd_clean)) < min_jd_chars


def find_blocked_keywords(ctx: ScoringContext, blocked_keywords: Any) -> List[str]:
    text = normalize_text(f"{ctx.role_title}\n{ctx.jd_clean}")
    if not text:
        return []
    return [kw for kw in normalize_list(blocked_keywords) if kw in text]


def score_target_signal(ctx: Any, target: Any, weights: Optional[Dict[str, Any]] = None) -> int:
    """Weighted 0-100 match between a lead context and one target profile."""
    ctx = ScoringContext.from_input(ctx)
    profile = TargetProfile.from_dict(target)
    if profile is None:
        return 0
    w = weights or load_scoring_config().get('weights', {})

    role_text = normalize_text(ctx.role_title)
    jd_text = normalize_text(ctx.jd_clean)
    seniority_text = normalize_text(ctx.seniority)
    location_text = normalize_text(ctx.location)

    score = 0
    role_max = w.get('role_max', 50)
    role_tokens = [t for t in to_words(profile.primary_role or profile.name) if len(t) >= MIN_ROLE_TOKEN_LEN]
    if role_tokens:
        role_hits = sum(1 for t in role_tokens if t in role_text or t in jd_text)
        score += clamp_int(round_half_up(role_hits / len(role_tokens) * role_max), 0, role_max)

    must_hits = score_keyword_overlap(jd_text, profile.must)
    score += clamp_int(must_hits * w.get('must_per_hit', 8), 0, w.get('must_max', 24))

    nice_hits = score_keyword_overlap(jd_text, profile.nice)
    score += clamp_int(nice_hits * w.get('nice_per_hit', 3), 0, w.get('nice_max', 12))

    seniority = normalize_text(profile.seniority_pref)
    if seniority and (seniority in seniority_text or seniority in jd_text):
        score += w.get('seniority', 8)

    location = normalize_text(profile.location_pref)
    if location and (location in location_text or location in jd_text):
        score += w.get('location', 6)

    return clamp_int(score, 0, 100)


def pick_best_target(ctx: Any, targets: Any,
                     weights: Optional[Dict[str, Any]] = None) -> Optional[Tuple[Any, int]]:
    """
    (target_id, signal) of the highest-signal target, or None.

    Ties keep the first target seen (strict > comparison). Entries without an
    id are skipped.
    """
    ctx = ScoringContext.from_input(ctx)
    best = None
    for row in (targets if isinstance(targets, (list, tuple)) else []):
        profile = TargetProfile.from_dict(row)
        if profile is None:
            continue
        signal = score_target_signal(ctx, profile, weights)
        if best is None or signal > best[1]:
            best = (profile.id, signal)
    return best


def find_target_rejects(jd_text: Any, target: Any, limit: int = 10) -> List[str]:
    """The target's own reject keywords present in the job description."""
    profile = TargetProfile.from_dict(target)
    if profile is None:
        return []
    low = str(jd_text or '').lower()
    matches = []
    for kw in profile.reject:
        k = str(kw or '').strip().lower()
        if k and k in low and k not in matches:
            matches.append(k)
    return matches[:limit]


# ── Public API ───────────────────────────────────────────────────────────────

def evaluate(lead_context: Any, options: Any = None) -> ScoringResult:
    """
    Run the heuristic gate for one lead.

    Args:
        lead_context: mapping with optional role_title, location, seniority, jd_clean
        options:      mapping with optional min_jd_chars, min_target_signal,
                      blocked_keywords, targets

    Returns:
        ScoringResult — never raises on malformed input.
    """
    ctx = ScoringContext.from_input(lead_context)
    cfg = ScoringOptions.from_options(options)

    reasons = []
    if should_reject_low_signal(ctx, cfg.min_jd_chars):
        reasons.append(f"missing_core_text(min_jd_chars={cfg.min_jd_chars})")

    blocked = find_blocked_keywords(ctx, cfg.blocked_keywords)
    if blocked:
        reasons.append(f"blocked_keywords({','.join(blocked[:MAX_REPORTED_BLOCKED])})")

    best = pick_best_target(ctx, cfg.targets)
    if best is not None and best[1] < cfg.min_target_signal:
        reasons.append(f"low_target_signal({best[1]}<{cfg.min_target_signal})")

    result = ScoringResult(
        passed=not reasons,
        reasons=reasons,
        best_target_id=best[0] if best else None,
        best_target_signal=best[1] if best else None,
        config=cfg.echo(),
    )
    logger.debug("Heuristic verdict passed=%s best=%s reasons=%s",
                 result.passed, result.best_target_id, reasons)
    return result
