"""Collaborator stand-ins shared by the test modules."""

import numpy as np

from survey_selection.photometry import proxy_magnitude
from survey_selection.records import ModelRecord, ObservedProperties

# km/s/Mpc and km/s, for the toy distance-redshift relation used in tests
H0 = 70.0
SPEED_OF_LIGHT = 299792.458


def hubble_redshift(dc):
    """Low-redshift stand-in for the cosmology collaborator."""
    return H0 * np.asarray(dc, dtype=float) / SPEED_OF_LIGHT


def make_observer(strategy, offset=0.0):
    """
    Build a sky-property collaborator for tests.

    Apparent magnitudes use the luminosity distance ``(1 + z) dc`` and the
    strategy's mass-to-light ratio, shifted by ``offset`` (scalar or array
    aligned with the candidates passed in).
    """
    params = strategy.parameters

    def observe(position, model):
        z = hubble_redshift(position.dc)
        dl = (1.0 + z) * np.asarray(position.dc, dtype=float)
        mag = proxy_magnitude(model.mass(params.mass_fields), dl, params.mass_to_light) + offset
        return ObservedProperties(mag=mag, zobs=z)

    return observe


def shark_model(mass):
    """Model record with the whole stellar mass in the disk component."""
    mass = np.asarray(mass, dtype=float)
    return ModelRecord({"mstars_disk": mass, "mstars_bulge": np.zeros_like(mass)})


def mass_for_proxy_magnitude(mag, dc, mass_to_light=1.0):
    """Stellar mass whose proxy magnitude at distance ``dc`` equals ``mag``."""
    absmag = np.asarray(mag) - 5.0 * np.log10(dc) - 25.0
    return mass_to_light * 10.0 ** ((4.83 - absmag) / 2.5)
