from leadgate.scoring.heuristics import (
    ScoringContext,
    ScoringOptions,
    ScoringResult,
    TargetProfile,
    evaluate,
    find_target_rejects,
    pick_best_target,
    score_target_signal,
)
from leadgate.scoring.pipeline import build_scoring_run_meta, run_scoring_pipeline
