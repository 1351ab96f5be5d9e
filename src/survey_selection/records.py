"""
Candidate Records Module

Immutable per-candidate records passed between the tiling collaborator,
the selection stages and the sky-property collaborator.

Every field may hold a scalar (one candidate) or an equal-length numpy
array (a batch of candidates); stage logic is evaluated elementwise.
Non-finite values are carried through unmodified.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import numpy as np


def _length(*values):
    sizes = {np.size(v) for v in values}
    if len(sizes) != 1:
        raise ValueError(f"Inconsistent record field lengths: {sorted(sizes)}")
    return sizes.pop()


@dataclass(frozen=True)
class Position:
    """
    Sky position of a candidate as seen by the observer.

    Parameters
    ----------
    dc : float or numpy.ndarray
        Comoving distance in Mpc
    ra : float or numpy.ndarray
        Right ascension in degrees, [0, 360)
    dec : float or numpy.ndarray
        Declination in degrees, [-90, 90]
    """
    dc: Any
    ra: Any
    dec: Any

    def __len__(self):
        return _length(self.dc, self.ra, self.dec)

    def take(self, indices):
        """Return the candidates at ``indices`` as a new Position."""
        return Position(
            dc=np.asarray(self.dc)[indices],
            ra=np.asarray(self.ra)[indices],
            dec=np.asarray(self.dec)[indices],
        )


@dataclass(frozen=True)
class ModelRecord:
    """
    Galaxy properties produced by the galaxy-formation model.

    The property names are defined by the model (e.g. ``mstars_disk`` and
    ``mstars_bulge`` for Shark); only the names referenced by a survey's
    cuts are ever read.
    """
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __getitem__(self, name):
        try:
            return self.properties[name]
        except KeyError:
            raise KeyError(f"Model record has no property '{name}'") from None

    def __len__(self):
        return _length(*self.properties.values()) if self.properties else 0

    def mass(self, fields: Iterable[str]):
        """Sum of the named mass components."""
        total = 0.0
        for name in fields:
            total = total + np.asarray(self[name], dtype=float)
        return total

    def take(self, indices):
        """Return the candidates at ``indices`` as a new ModelRecord."""
        return ModelRecord({
            name: np.asarray(values)[indices]
            for name, values in self.properties.items()
        })


@dataclass(frozen=True)
class ObservedProperties:
    """
    Apparent properties computed by the sky-property collaborator.

    Parameters
    ----------
    mag : float or numpy.ndarray
        Apparent magnitude in the survey's selection band
    zobs : float or numpy.ndarray
        Observed redshift, including peculiar velocities
    """
    mag: Any
    zobs: Any

    def __len__(self):
        return _length(self.mag, self.zobs)
