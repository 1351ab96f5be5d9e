"""
Stage Dispatcher Module

Routes stage-specific requests to a selection strategy and runs the
per-candidate pipeline in stage order with early rejection.

The strategy is always passed explicitly; nothing here reads or writes
module-level state, so any number of strategies may be evaluated
concurrently.
"""

from dataclasses import dataclass
from functools import singledispatch
from typing import Callable, Optional

import numpy as np

from .geometry import FieldOfViewRange
from .records import ModelRecord, ObservedProperties, Position
from .stages import (
    ModelRequest, ObservedRequest, PositionModelRequest, PositionRequest,
    RangeRequest, SelectionStage,
)


@singledispatch
def dispatch(request, strategy):
    """
    Evaluate one stage request against a strategy.

    Parameters
    ----------
    request : RangeRequest, PositionRequest, ModelRequest,
              PositionModelRequest or ObservedRequest
        Stage-specific request carrying exactly that stage's inputs
    strategy : SelectionStrategy
        Survey selection logic

    Returns
    -------
    FieldOfViewRange or bool or numpy.ndarray
        The range for a range request, otherwise the accept decision(s)
    """
    raise TypeError(f"Unsupported selection request: {type(request).__name__}")


@dispatch.register
def _(request: RangeRequest, strategy):
    return strategy.field_of_view()


@dispatch.register
def _(request: PositionRequest, strategy):
    return strategy.accept_position(request.position)


@dispatch.register
def _(request: ModelRequest, strategy):
    return strategy.accept_model(request.model)


@dispatch.register
def _(request: PositionModelRequest, strategy):
    return strategy.accept_position_model(request.position, request.model)


@dispatch.register
def _(request: ObservedRequest, strategy):
    return strategy.accept_observed(request.observed)


def _as_decision(value):
    # scalar candidates give a plain bool, batches a boolean array
    decision = np.asarray(value, dtype=bool)
    return bool(decision) if decision.ndim == 0 else decision


def compute_range(strategy) -> FieldOfViewRange:
    """Stage 1: bounding range of the survey; call once per run."""
    fov = dispatch(RangeRequest(), strategy)
    if not isinstance(fov, FieldOfViewRange):
        raise TypeError(
            f"Strategy {strategy!r} returned {type(fov).__name__} from its range query, "
            f"expected FieldOfViewRange"
        )
    return fov


def filter_by_position(strategy, position: Position):
    """Stage 2: reject candidates outside the survey footprint."""
    return _as_decision(dispatch(PositionRequest(position), strategy))


def filter_by_model(strategy, model: ModelRecord):
    """Stage 3: model-only cuts such as a minimum stellar mass."""
    return _as_decision(dispatch(ModelRequest(model), strategy))


def filter_by_position_and_model(strategy, position: Position, model: ModelRecord):
    """Stage 4: conservative joint proxy cut ahead of the observables."""
    return _as_decision(dispatch(PositionModelRequest(position, model), strategy))


def filter_by_observed(strategy, observed: ObservedProperties):
    """Stage 5: authoritative cut on the computed observables."""
    return _as_decision(dispatch(ObservedRequest(observed), strategy))


@dataclass(frozen=True)
class Decision:
    """Outcome of the pipeline for one candidate."""
    accepted: bool
    rejected_at: Optional[SelectionStage] = None
    observed: Optional[ObservedProperties] = None

    def __bool__(self):
        return self.accepted


def evaluate_candidate(
    strategy,
    position: Position,
    model: ModelRecord,
    observe: Callable[[Position, ModelRecord], ObservedProperties],
) -> Decision:
    """
    Run stages 2-5 for a single candidate.

    Stages are evaluated strictly in order and the first rejection is
    final. ``observe`` computes the candidate's apparent properties and is
    only called once the candidate has passed the position-and-model stage.

    Parameters
    ----------
    strategy : SelectionStrategy
        Survey selection logic
    position : Position
        Candidate position (scalar fields)
    model : ModelRecord
        Candidate model properties (scalar fields)
    observe : callable
        Sky-property collaborator, ``observe(position, model)``

    Returns
    -------
    Decision
        Acceptance flag, the rejecting stage if any, and the observables
        if they were computed
    """
    if not filter_by_position(strategy, position):
        return Decision(False, SelectionStage.POSITION_FILTER)
    if not filter_by_model(strategy, model):
        return Decision(False, SelectionStage.MODEL_FILTER)
    if not filter_by_position_and_model(strategy, position, model):
        return Decision(False, SelectionStage.POSITION_MODEL_FILTER)

    observed = observe(position, model)
    if not filter_by_observed(strategy, observed):
        return Decision(False, SelectionStage.OBSERVED_FILTER, observed)
    return Decision(True, None, observed)
