"""
Batch Selection Module

Vectorized evaluation of the selection stages over arrays of candidates,
plus the rank decomposition used to spread a candidate list over MPI
processes.

Each stage is evaluated only on the survivors of the previous stage, so the
per-candidate short-circuit semantics of
:func:`~survey_selection.dispatcher.evaluate_candidate` carry over to
batches.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict

import numpy as np

from .dispatcher import (
    filter_by_model, filter_by_observed, filter_by_position,
    filter_by_position_and_model,
)
from .mpi_setup import reduce_stage_counts
from .records import ModelRecord, ObservedProperties, Position
from .stages import SelectionStage


@dataclass
class SelectionResult:
    """
    Outcome of a batch selection.

    Attributes
    ----------
    selected : numpy.ndarray of bool
        Keep/reject flag per input candidate
    stage_counts : dict
        Number of candidates still accepted after each stage, keyed by
        SelectionStage; the RANGE_QUERY entry holds the input size
    """
    selected: np.ndarray
    stage_counts: Dict[SelectionStage, int] = field(default_factory=dict)

    @property
    def n_selected(self) -> int:
        return int(np.count_nonzero(self.selected))

    def rejected_by(self, stage: SelectionStage) -> int:
        """Number of candidates rejected at ``stage``."""
        stages = list(SelectionStage)
        i = stages.index(stage)
        if i == 0:
            return 0
        return self.stage_counts[stages[i - 1]] - self.stage_counts[stage]


def _survivors(decision, n):
    # a stage may answer with a scalar for the whole batch
    return np.broadcast_to(np.asarray(decision, dtype=bool), (n,))


def select_candidates(
    strategy,
    positions: Position,
    model: ModelRecord,
    observe: Callable[[Position, ModelRecord], ObservedProperties],
) -> SelectionResult:
    """
    Select a batch of candidates.

    Parameters
    ----------
    strategy : SelectionStrategy
        Survey selection logic
    positions : Position
        Candidate positions with array fields of length N
    model : ModelRecord
        Candidate model properties with array fields of length N
    observe : callable
        Sky-property collaborator, called once with the subset of
        candidates that passed the position-and-model stage (possibly
        empty); must return array-valued ObservedProperties of that length

    Returns
    -------
    SelectionResult
        Selection mask over the N inputs and per-stage survivor counts
    """
    n = len(positions)
    if len(model) not in (0, n):
        raise ValueError(f"Position and model batches differ in length: {n} != {len(model)}")

    alive = np.arange(n)
    counts = {SelectionStage.RANGE_QUERY: n}

    alive = alive[_survivors(filter_by_position(strategy, positions), n)]
    counts[SelectionStage.POSITION_FILTER] = alive.size

    keep = _survivors(filter_by_model(strategy, model.take(alive)), alive.size)
    alive = alive[keep]
    counts[SelectionStage.MODEL_FILTER] = alive.size

    keep = _survivors(
        filter_by_position_and_model(strategy, positions.take(alive), model.take(alive)),
        alive.size,
    )
    alive = alive[keep]
    counts[SelectionStage.POSITION_MODEL_FILTER] = alive.size

    observed = observe(positions.take(alive), model.take(alive))
    keep = _survivors(filter_by_observed(strategy, observed), alive.size)
    alive = alive[keep]
    counts[SelectionStage.OBSERVED_FILTER] = alive.size

    selected = np.zeros(n, dtype=bool)
    selected[alive] = True
    return SelectionResult(selected=selected, stage_counts=counts)


def partition_indices(n, rank=0, size=1):
    """
    Contiguous share of ``n`` candidates for one MPI rank.

    Parameters
    ----------
    n : int
        Total number of candidates
    rank : int, optional
        MPI rank (default: 0)
    size : int, optional
        Total number of MPI processes (default: 1)

    Returns
    -------
    numpy.ndarray
        Indices of the candidates assigned to ``rank``; the shares of all
        ranks are disjoint and cover ``range(n)``

    Examples
    --------
    >>> partition_indices(10, rank=1, size=3)
    array([4, 5, 6])
    """
    if size < 1 or not 0 <= rank < size:
        raise ValueError(f"Invalid rank {rank} for {size} processes")
    return np.array_split(np.arange(n), size)[rank]


def select_distributed(strategy, positions, model, observe, rank=0, size=1, comm=None):
    """
    Select this rank's share of a candidate batch.

    Returns the local SelectionResult together with the indices it refers
    to. If ``comm`` is given, stage counts are summed over all ranks.
    """
    indices = partition_indices(len(positions), rank, size)
    result = select_candidates(strategy, positions.take(indices), model.take(indices), observe)

    print(f"Rank {rank}: selected {result.n_selected} of {indices.size} candidates")

    result.stage_counts = reduce_stage_counts(comm, size, result.stage_counts)
    return indices, result
