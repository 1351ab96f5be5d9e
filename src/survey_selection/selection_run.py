"""Run driver binding one survey to a selection run.

A SelectionRun is created once, before any candidate is generated: loading
the configuration and activating the survey either succeed completely or
raise ConfigurationError, so a misconfigured run never starts evaluating
candidates.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from .batch import SelectionResult, select_candidates, select_distributed
from .geometry import FieldOfViewRange
from .records import ModelRecord, ObservedProperties, Position
from .registry import ActiveSurvey, SurveyRegistry, default_registry
from .stages import SelectionStage
from .survey_config import SurveyConfigLoader


class SelectionRun:
    """A configured selection run with its active survey."""

    def __init__(self, active: ActiveSurvey, config: Optional[Dict[str, Any]] = None, rank: int = 0):
        self.active = active
        self.config = config or {}
        self.rank = rank

    @classmethod
    def from_config(cls, config: Union[str, Path, Dict[str, Any]],
                    registry: Optional[SurveyRegistry] = None, rank: int = 0) -> "SelectionRun":
        """Load a run configuration and activate its survey.

        Args:
            config: Path to a run configuration YAML file or parsed dictionary
            registry: Registry to resolve the survey in. Defaults to a fresh
                registry with the built-in surveys; extra definition files
                from the configuration are loaded into it.
            rank: MPI rank, used for log messages

        Returns:
            SelectionRun with a frozen field of view

        Raises:
            ConfigurationError: If the configuration is invalid
            UnknownSurvey: If the configured survey is not registered
        """
        merged = SurveyConfigLoader().load_run_config(config)
        if registry is None:
            registry = default_registry()

        for definition_file in merged["selection"]["definitions"]:
            n_loaded = registry.load_definitions(definition_file)
            if rank == 0:
                print(f"Loaded {n_loaded} survey definitions from {definition_file}")

        active = registry.activate(merged["selection"]["survey"])
        if rank == 0:
            print(f"Activated survey '{active.strategy.name}'")
        return cls(active, merged, rank)

    @property
    def strategy(self):
        return self.active.strategy

    @property
    def field_of_view(self) -> FieldOfViewRange:
        return self.active.field_of_view

    @property
    def chunk_size(self) -> int:
        return self.config.get("execution", {}).get("chunk_size", 100000)

    def select(self, positions: Position, model: ModelRecord,
               observe: Callable[[Position, ModelRecord], ObservedProperties]) -> SelectionResult:
        """Select a batch of candidates with the active survey.

        The batch is processed in chunks of ``execution.chunk_size``
        candidates; ``observe`` is called once per chunk.
        """
        n = len(positions)
        selected = np.zeros(n, dtype=bool)
        counts = {stage: 0 for stage in SelectionStage}

        for start in range(0, n, self.chunk_size):
            chunk = np.arange(start, min(start + self.chunk_size, n))
            result = select_candidates(self.strategy, positions.take(chunk), model.take(chunk), observe)
            selected[chunk] = result.selected
            for stage, count in result.stage_counts.items():
                counts[stage] += count

        return SelectionResult(selected=selected, stage_counts=counts)

    def select_distributed(self, positions, model, observe, size=1, comm=None):
        """Select this rank's share of a batch; see :func:`select_distributed`."""
        return select_distributed(self.strategy, positions, model, observe, self.rank, size, comm)

    def summary(self) -> str:
        """Human readable description of the active survey."""
        fov = self.field_of_view
        lines = [
            f"Survey: {self.strategy.name}",
            f"  distance range: {fov.dc[0]:g} - {fov.dc[1]:g} Mpc",
            f"  RA range: {fov.ra[0]:g} - {fov.ra[1]:g} deg" + (" (wraps)" if fov.wraps else ""),
            f"  Dec range: {fov.dec[0]:g} - {fov.dec[1]:g} deg",
        ]
        return "\n".join(lines)
