"""
Posture scoring models.

A trained model (learned weights) is preferred; the closed-form heuristic takes over
for the whole session when the trained model cannot be loaded.
"""

from zen.scoring.base import ScoringModel, round_half_up
from zen.scoring.fallback import HeuristicScoringModel
from zen.scoring.loader import ModelSelection, load_trained_model, select_scoring_model
from zen.scoring.trained import DenseScoringModel, EstimatorScoringModel

__all__ = [
	"ScoringModel",
	"round_half_up",
	"HeuristicScoringModel",
	"DenseScoringModel",
	"EstimatorScoringModel",
	"ModelSelection",
	"load_trained_model",
	"select_scoring_model",
]
