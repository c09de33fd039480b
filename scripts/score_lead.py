#!/usr/bin/env python3
"""
Run the heuristic gate on a lead from the command line.

Reads a lead context JSON (role_title, location, seniority, jd_clean) and an
optional options JSON (targets, min_jd_chars, min_target_signal,
blocked_keywords), prints the verdict as JSON.

Usage:
    python scripts/score_lead.py lead.json
    python scripts/score_lead.py lead.json --options options.json
    python scripts/score_lead.py lead.json --targets targets.json --min-signal 30
    cat lead.json | python scripts/score_lead.py -

Exit code is 0 when the lead passes, 1 when it is rejected.
"""
import sys
import os
import json
import argparse
import logging

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leadgate.logging_config import configure_logging
from leadgate.models.tracking import compute_system_status
from leadgate.scoring.config import load_scoring_config
from leadgate.scoring.heuristics import evaluate

logger = logging.getLogger('scripts.score_lead')


def _read_json(path):
    if path == '-':
        return json.load(sys.stdin)
    with open(path, 'r') as f:
        return json.load(f)


def build_options(args):
    options = _read_json(args.options) if args.options else {}
    if not isinstance(options, dict):
        raise ValueError(f"Options file must hold a JSON object: {args.options}")
    if args.targets:
        options['targets'] = _read_json(args.targets)
    if args.min_jd_chars is not None:
        options['min_jd_chars'] = args.min_jd_chars
    if args.min_signal is not None:
        options['min_target_signal'] = args.min_signal
    if args.block:
        options['blocked_keywords'] = list(options.get('blocked_keywords') or []) + args.block
    return options


def main(argv=None):
    parser = argparse.ArgumentParser(description='Score one lead against target profiles')
    parser.add_argument('lead', help='Lead context JSON file, or - for stdin')
    parser.add_argument('--options', help='Options JSON file')
    parser.add_argument('--targets', help='Target profiles JSON file (list)')
    parser.add_argument('--min-jd-chars', type=int, dest='min_jd_chars')
    parser.add_argument('--min-signal', type=int, dest='min_signal')
    parser.add_argument('--block', action='append', default=[], help='Extra blocked keyword (repeatable)')
    parser.add_argument('--score', type=float,
                        help='Final 0-100 score; also print the tracking status it maps to')
    args = parser.parse_args(argv)

    configure_logging()

    lead = _read_json(args.lead)
    result = evaluate(lead, build_options(args)).to_dict()

    if args.score is not None:
        thresholds = load_scoring_config().get('status_thresholds', {})
        result['system_status'] = compute_system_status(
            args.score,
            reject_triggered=not result['passed'],
            shortlist_threshold=thresholds.get('shortlist', 75),
            archive_threshold=thresholds.get('archive', 55),
        )

    print(json.dumps(result, indent=2))
    logger.info("Lead %s (best_target=%s)", 'passed' if result['passed'] else 'rejected',
                result['best_target_id'])
    return 0 if result['passed'] else 1


if __name__ == '__main__':
    sys.exit(main())
