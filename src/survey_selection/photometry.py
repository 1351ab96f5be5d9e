"""
Photometry Module

Magnitude conversions used by the inexpensive proxy selection cut.
"""

import numpy as np

# absolute magnitude of the Sun in the selection band
SOLAR_ABSMAG = 4.83


def stellar_mass_to_absmag(mass, mass_to_light=1.0):
    """
    Convert stellar mass to absolute magnitude for a fixed mass-to-light ratio.

    Parameters
    ----------
    mass : float or numpy.ndarray
        Stellar mass in solar masses
    mass_to_light : float, optional
        Mass-to-light ratio in solar units (default: 1.0)

    Returns
    -------
    float or numpy.ndarray
        Absolute magnitude; non-positive masses yield +inf or NaN
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return SOLAR_ABSMAG - 2.5 * np.log10(np.asarray(mass, dtype=float) / mass_to_light)


def absmag_to_appmag(absmag, distance):
    """
    Convert absolute to apparent magnitude.

    Parameters
    ----------
    absmag : float or numpy.ndarray
        Absolute magnitude
    distance : float or numpy.ndarray
        Luminosity distance in Mpc

    Returns
    -------
    float or numpy.ndarray
        Apparent magnitude, ``absmag + 5 log10(distance / 10 pc)``
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.asarray(absmag, dtype=float) + 5.0 * np.log10(np.asarray(distance, dtype=float)) + 25.0


def proxy_magnitude(mass, dc, mass_to_light=1.0):
    """
    Apparent magnitude estimate using comoving distance in place of
    luminosity distance.

    Since the luminosity distance is never smaller than the comoving
    distance, the result is never fainter than the magnitude obtained with
    the true luminosity distance and the same mass-to-light ratio.
    """
    return absmag_to_appmag(stellar_mass_to_absmag(mass, mass_to_light), dc)
