"""
Survey Geometry Module

Sky rectangles, footprints and the field-of-view range of a survey.

A right-ascension interval whose lower bound is numerically larger than its
upper bound denotes the wedge that wraps across 0/360 degrees, e.g.
``(330, 30)`` covers 330..360 and 0..30. All bounds are inclusive.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .survey_config import ConfigurationError


def ra_in_interval(ra, lower, upper):
    """
    Test right ascensions against an interval with wrap-around support.

    Parameters
    ----------
    ra : float or numpy.ndarray
        Right ascension(s) in degrees
    lower, upper : float
        Interval bounds in degrees; ``lower > upper`` wraps across 0/360

    Returns
    -------
    bool or numpy.ndarray
        Elementwise membership
    """
    ra = np.asarray(ra)
    if lower <= upper:
        return (ra >= lower) & (ra <= upper)
    return (ra >= lower) | (ra <= upper)


def ra_width(lower, upper):
    """Angular width in degrees of an RA interval, honouring wrap-around."""
    if lower <= upper:
        return upper - lower
    return 360.0 - lower + upper


def _interval_area(ra, dec):
    # solid angle of an RA/Dec rectangle on the sphere, in deg^2
    width = np.radians(ra_width(*ra))
    band = np.sin(np.radians(dec[1])) - np.sin(np.radians(dec[0]))
    return float(width * band * (180.0 / np.pi) ** 2)


def _check_ra(ra, what):
    if not all(0.0 <= bound <= 360.0 for bound in ra):
        raise ConfigurationError(f"{what}: RA bounds {ra} must lie in [0, 360]")


def _check_dec(dec, what):
    if not all(-90.0 <= bound <= 90.0 for bound in dec):
        raise ConfigurationError(f"{what}: Dec bounds {dec} must lie in [-90, 90]")
    if dec[0] >= dec[1]:
        raise ConfigurationError(f"{what}: Dec lower bound must be below upper bound, got {dec}")


@dataclass(frozen=True)
class SkyRectangle:
    """Axis-aligned RA/Dec rectangle; RA may wrap across 0/360."""
    ra_min: float
    ra_max: float
    dec_min: float
    dec_max: float
    name: Optional[str] = None

    def __post_init__(self):
        what = f"Rectangle '{self.name}'" if self.name else "Rectangle"
        _check_ra((self.ra_min, self.ra_max), what)
        _check_dec((self.dec_min, self.dec_max), what)

    @property
    def ra(self) -> Tuple[float, float]:
        return (self.ra_min, self.ra_max)

    @property
    def dec(self) -> Tuple[float, float]:
        return (self.dec_min, self.dec_max)

    @property
    def wraps(self) -> bool:
        return self.ra_min > self.ra_max

    def contains(self, ra, dec):
        dec = np.asarray(dec)
        return ra_in_interval(ra, self.ra_min, self.ra_max) & (dec >= self.dec_min) & (dec <= self.dec_max)

    def area(self) -> float:
        """Solid angle in square degrees."""
        return _interval_area(self.ra, self.dec)


@dataclass(frozen=True)
class Footprint:
    """
    Angular footprint of a survey as an ordered union of sky rectangles.

    Parameters
    ----------
    rectangles : tuple of SkyRectangle
        Survey fields; a position is in the footprint if any rectangle
        contains it.
    """
    rectangles: Tuple[SkyRectangle, ...]

    def __post_init__(self):
        object.__setattr__(self, "rectangles", tuple(self.rectangles))
        if not self.rectangles:
            raise ConfigurationError("Footprint requires at least one rectangle")

    def __iter__(self):
        return iter(self.rectangles)

    def __len__(self):
        return len(self.rectangles)

    def contains(self, ra, dec):
        inside = self.rectangles[0].contains(ra, dec)
        for rect in self.rectangles[1:]:
            inside = inside | rect.contains(ra, dec)
        return inside

    def area(self) -> float:
        """Total solid angle in square degrees, assuming disjoint fields."""
        return sum(rect.area() for rect in self.rectangles)


@dataclass(frozen=True)
class FieldOfViewRange:
    """
    Bounding region of a survey in comoving distance, RA and Dec.

    The range is the tightest known superset of everything the survey can
    select; the tiling collaborator uses it to limit which box replicas and
    angular wedges it enumerates.

    Parameters
    ----------
    dc : tuple of float
        Comoving distance interval in Mpc
    ra : tuple of float
        RA interval in degrees; lower > upper wraps across 0/360
    dec : tuple of float
        Dec interval in degrees
    """
    dc: Tuple[float, float]
    ra: Tuple[float, float]
    dec: Tuple[float, float]

    def __post_init__(self):
        for name in ("dc", "ra", "dec"):
            interval = tuple(float(v) for v in getattr(self, name))
            if len(interval) != 2:
                raise ConfigurationError(f"Field of view '{name}' must be a (lower, upper) pair")
            if not np.all(np.isfinite(interval)):
                raise ConfigurationError(f"Field of view '{name}' bounds must be finite, got {interval}")
            object.__setattr__(self, name, interval)

        if self.dc[0] < 0 or self.dc[0] >= self.dc[1]:
            raise ConfigurationError(f"Field of view distance range {self.dc} must satisfy 0 <= lower < upper")
        _check_ra(self.ra, "Field of view")
        _check_dec(self.dec, "Field of view")

    @property
    def wraps(self) -> bool:
        return self.ra[0] > self.ra[1]

    def contains(self, position):
        dc = np.asarray(position.dc)
        dec = np.asarray(position.dec)
        return (
            (dc >= self.dc[0]) & (dc <= self.dc[1])
            & ra_in_interval(position.ra, *self.ra)
            & (dec >= self.dec[0]) & (dec <= self.dec[1])
        )

    def covers(self, rectangle: SkyRectangle) -> bool:
        """Whether a sky rectangle lies entirely inside the angular range."""
        if rectangle.dec_min < self.dec[0] or rectangle.dec_max > self.dec[1]:
            return False
        if rectangle.wraps and not self.wraps:
            return self.ra == (0.0, 360.0)
        return bool(
            ra_in_interval(rectangle.ra_min, *self.ra)
            and ra_in_interval(rectangle.ra_max, *self.ra)
            and ra_width(*rectangle.ra) <= ra_width(*self.ra)
        )

    def area(self) -> float:
        """Solid angle of the angular range in square degrees."""
        return _interval_area(self.ra, self.dec)
