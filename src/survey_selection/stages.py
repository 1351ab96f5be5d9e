"""Selection stages and their stage-specific request types."""

from dataclasses import dataclass
from enum import Enum

from .records import ModelRecord, ObservedProperties, Position


class SelectionStage(Enum):
    """Ordered phases of the selection protocol, cheapest first."""
    RANGE_QUERY = 1
    POSITION_FILTER = 2
    MODEL_FILTER = 3
    POSITION_MODEL_FILTER = 4
    OBSERVED_FILTER = 5

    @property
    def order(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


FILTER_STAGES = (
    SelectionStage.POSITION_FILTER,
    SelectionStage.MODEL_FILTER,
    SelectionStage.POSITION_MODEL_FILTER,
    SelectionStage.OBSERVED_FILTER,
)


@dataclass(frozen=True)
class RangeRequest:
    """Ask a strategy for its field-of-view range."""
    stage = SelectionStage.RANGE_QUERY


@dataclass(frozen=True)
class PositionRequest:
    position: Position
    stage = SelectionStage.POSITION_FILTER


@dataclass(frozen=True)
class ModelRequest:
    model: ModelRecord
    stage = SelectionStage.MODEL_FILTER


@dataclass(frozen=True)
class PositionModelRequest:
    position: Position
    model: ModelRecord
    stage = SelectionStage.POSITION_MODEL_FILTER


@dataclass(frozen=True)
class ObservedRequest:
    observed: ObservedProperties
    stage = SelectionStage.OBSERVED_FILTER
