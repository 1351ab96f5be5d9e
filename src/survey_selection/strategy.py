"""
Selection Strategy Module

Defines the five-stage contract every survey implements and the
parameter-driven template used by all built-in surveys.

Stage methods must be pure functions of their arguments: strategies are
shared read-only between workers once a run has started.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .geometry import FieldOfViewRange, Footprint
from .photometry import proxy_magnitude
from .survey_config import ConfigurationError

DEFAULT_MASS_FIELDS = ("mstars_disk", "mstars_bulge")


class SelectionStrategy(ABC):
    """
    Survey selection logic, one instance per survey.

    Subclasses must implement :meth:`field_of_view`. The filter stages
    default to accepting every candidate; override only the stages the
    survey restricts.
    """

    name = "unnamed"

    @abstractmethod
    def field_of_view(self) -> FieldOfViewRange:
        """Return the tightest known bounding range of the survey."""

    def accept_position(self, position):
        return True

    def accept_model(self, model):
        return True

    def accept_position_model(self, position, model):
        return True

    def accept_observed(self, observed):
        return True

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


@dataclass(frozen=True)
class SurveyParameters:
    """
    Complete description of a survey for :class:`SurveyStrategy`.

    Parameters
    ----------
    name : str
        Survey identifier
    field_of_view : FieldOfViewRange
        Bounding range in comoving distance, RA and Dec
    footprint : Footprint
        Union of RA/Dec rectangles observed by the survey
    min_mass : float
        Minimum stellar mass in solar masses, inclusive
    mag_limit : float
        Apparent magnitude limit applied to the computed observables
    proxy_margin : float, optional
        Tolerance added to ``mag_limit`` for the proxy magnitude cut
    z_max : float, optional
        Maximum observed redshift; None for no redshift cut
    mass_fields : tuple of str, optional
        Model properties summed into the stellar mass
    mass_to_light : float, optional
        Mass-to-light ratio used for the proxy magnitude
    description : str, optional
        Human readable summary
    """
    name: str
    field_of_view: FieldOfViewRange
    footprint: Footprint
    min_mass: float
    mag_limit: float
    proxy_margin: float = 2.0
    z_max: Optional[float] = None
    mass_fields: Tuple[str, ...] = DEFAULT_MASS_FIELDS
    mass_to_light: float = 1.0
    description: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ConfigurationError("Survey name must not be empty")
        if self.proxy_margin < 0:
            raise ConfigurationError(
                f"Survey '{self.name}': proxy margin must be non-negative, got {self.proxy_margin}"
            )
        if self.mass_to_light <= 0:
            raise ConfigurationError(
                f"Survey '{self.name}': mass-to-light ratio must be positive, got {self.mass_to_light}"
            )
        if self.z_max is not None and self.z_max < 0:
            raise ConfigurationError(f"Survey '{self.name}': z_max must be non-negative")
        if not self.mass_fields:
            raise ConfigurationError(f"Survey '{self.name}': at least one mass field is required")
        for rect in self.footprint:
            if not self.field_of_view.covers(rect):
                raise ConfigurationError(
                    f"Survey '{self.name}': footprint rectangle {rect.name or rect.ra + rect.dec} "
                    f"extends beyond the field of view"
                )

    @property
    def proxy_mag_limit(self) -> float:
        return self.mag_limit + self.proxy_margin


class SurveyStrategy(SelectionStrategy):
    """
    Five-stage selection driven entirely by :class:`SurveyParameters`.

    1. range query: the configured field of view
    2. position: inside the field of view and inside one of the footprint
       rectangles
    3. model: stellar mass at least ``min_mass``
    4. position and model: proxy magnitude, with comoving distance standing
       in for luminosity distance, at or brighter than ``mag_limit + proxy_margin``
    5. observed: apparent magnitude at or brighter than ``mag_limit`` and,
       if configured, observed redshift at or below ``z_max``
    """

    def __init__(self, parameters: SurveyParameters):
        self.parameters = parameters
        self.name = parameters.name

    def field_of_view(self) -> FieldOfViewRange:
        return self.parameters.field_of_view

    def accept_position(self, position):
        return self.parameters.field_of_view.contains(position) & self.parameters.footprint.contains(
            position.ra, position.dec
        )

    def accept_model(self, model):
        return model.mass(self.parameters.mass_fields) >= self.parameters.min_mass

    def accept_position_model(self, position, model):
        mag = proxy_magnitude(
            model.mass(self.parameters.mass_fields),
            position.dc,
            self.parameters.mass_to_light,
        )
        return mag <= self.parameters.proxy_mag_limit

    def accept_observed(self, observed):
        accepted = np.asarray(observed.mag) <= self.parameters.mag_limit
        if self.parameters.z_max is not None:
            accepted = accepted & (np.asarray(observed.zobs) <= self.parameters.z_max)
        return accepted
