"""
Scoring config (YAML with hardcoded fallback).

The YAML ships next to this module; SCORING_CONFIG_PATH points elsewhere.
Keys missing from the file fall back to the defaults one by one.
"""
import copy
import logging
import os

import yaml

from leadgate.config import SCORING_CONFIG_PATH

logger = logging.getLogger('scoring.config')

_scoring_config = None


def _default_config():
    """Hardcoded fallback if YAML is missing."""
    return {
        'version': 'default',
        'heuristics': {
            'min_jd_chars': 120,
            'min_target_signal': 20,
            'blocked_keywords': [],
        },
        'weights': {
            'role_max': 50,
            'must_per_hit': 8,
            'must_max': 24,
            'nice_per_hit': 3,
            'nice_max': 12,
            'seniority': 8,
            'location': 6,
        },
        'status_thresholds': {
            'shortlist': 75,
            'archive': 55,
        },
    }


def _merge(defaults, loaded):
    merged = copy.deepcopy(defaults)
    if not isinstance(loaded, dict):
        return merged
    for key, value in loaded.items():
        if isinstance(merged.get(key), dict):
            # Sections stay mappings; a null or scalar section keeps its defaults
            if isinstance(value, dict):
                merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_scoring_config():
    """Load scoring config from YAML, with in-memory cache and hardcoded fallback."""
    global _scoring_config
    if _scoring_config is not None:
        return _scoring_config

    config_path = SCORING_CONFIG_PATH or os.path.join(os.path.dirname(__file__), 'scoring_config.yaml')
    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
        _scoring_config = _merge(_default_config(), loaded)
        logger.info("Config loaded from YAML (version=%s)", _scoring_config.get('version', '?'))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("YAML config not usable (%s), using defaults", e)
        _scoring_config = _default_config()

    return _scoring_config


def reset_scoring_config():
    """Drop the cached config so the next load re-reads the file."""
    global _scoring_config
    _scoring_config = None
