"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from survey_selection.geometry import FieldOfViewRange, Footprint, SkyRectangle
from survey_selection.records import Position
from survey_selection.strategy import SurveyParameters, SurveyStrategy

from tests.helpers import shark_model


@pytest.fixture
def gama_like():
    """GAMA-like survey without the G12 field."""
    return SurveyStrategy(SurveyParameters(
        name="gama-like",
        field_of_view=FieldOfViewRange(dc=(0.0, 2450.0), ra=(129.0, 351.0), dec=(-35.0, 3.0)),
        footprint=Footprint((
            SkyRectangle(129.0, 141.0, -2.0, 3.0, name="G09"),
            SkyRectangle(211.5, 223.5, -2.0, 3.0, name="G15"),
            SkyRectangle(339.0, 351.0, -35.0, -30.0, name="G23"),
        )),
        min_mass=1e8,
        mag_limit=19.8,
        proxy_margin=2.0,
    ))


@pytest.fixture
def wrap_survey():
    """Survey whose only field straddles RA = 0."""
    return SurveyStrategy(SurveyParameters(
        name="wrap",
        field_of_view=FieldOfViewRange(dc=(0.0, 1000.0), ra=(330.0, 30.0), dec=(-10.0, 10.0)),
        footprint=Footprint((SkyRectangle(330.0, 30.0, -10.0, 10.0),)),
        min_mass=1e7,
        mag_limit=22.0,
    ))


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def single_candidate():
    """Bright candidate in the G09 field."""
    return Position(dc=500.0, ra=135.0, dec=0.0), shark_model(1e11)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Fast unit tests"
    )
    config.addinivalue_line(
        "markers", "property: Randomized property tests over sampled candidates"
    )
