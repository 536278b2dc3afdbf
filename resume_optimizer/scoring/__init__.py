from .score_model import (
    ScoreResult,
    ScoreWeights,
    clamp_score,
    compute_score,
    heuristic_base_score,
    is_valid_score,
    item_points,
    load_score_weights,
    section_scores,
)

__all__ = [
    "ScoreResult",
    "ScoreWeights",
    "clamp_score",
    "compute_score",
    "heuristic_base_score",
    "is_valid_score",
    "item_points",
    "load_score_weights",
    "section_scores",
]
