"""
Survey Selection Pipeline

Staged survey selection for turning simulated light cones into mock
catalogs with a survey's footprint and depth.
"""

__version__ = "0.1.0"

from .survey_config import ConfigurationError, UnknownSurvey
from .records import Position, ModelRecord, ObservedProperties
from .geometry import SkyRectangle, Footprint, FieldOfViewRange
from .stages import SelectionStage, FILTER_STAGES
from .strategy import SelectionStrategy, SurveyParameters, SurveyStrategy
from .dispatcher import (
    compute_range, filter_by_position, filter_by_model,
    filter_by_position_and_model, filter_by_observed,
    evaluate_candidate, Decision,
)
from .registry import SurveyRegistry, ActiveSurvey, default_registry, get_registry, resolve_survey
from .batch import select_candidates, select_distributed, partition_indices, SelectionResult
from .selection_run import SelectionRun
