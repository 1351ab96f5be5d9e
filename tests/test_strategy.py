"""Unit and property tests for selection strategies."""

from dataclasses import replace
from unittest.mock import Mock

import numpy as np
import pytest

from survey_selection.batch import select_candidates
from survey_selection.dispatcher import (
    compute_range, evaluate_candidate, filter_by_observed, filter_by_position_and_model
)
from survey_selection.geometry import FieldOfViewRange, Footprint, SkyRectangle
from survey_selection.photometry import proxy_magnitude
from survey_selection.records import ObservedProperties, Position
from survey_selection.stages import SelectionStage
from survey_selection.strategy import SelectionStrategy, SurveyParameters, SurveyStrategy
from survey_selection.survey_config import ConfigurationError
from survey_selection.surveys import BUILTIN_SURVEYS

from tests.helpers import hubble_redshift, make_observer, mass_for_proxy_magnitude, shark_model

SURVEY_IDS = [s.name for s in BUILTIN_SURVEYS]


def _params(**overrides):
    values = dict(
        name="test",
        field_of_view=FieldOfViewRange(dc=(0.0, 100.0), ra=(0.0, 10.0), dec=(0.0, 10.0)),
        footprint=Footprint((SkyRectangle(0.0, 10.0, 0.0, 10.0),)),
        min_mass=1e8,
        mag_limit=20.0,
    )
    values.update(overrides)
    return SurveyParameters(**values)


def _sample_in_footprint(strategy, rng, n):
    """Positions drawn uniformly in RA/Dec inside random footprint rectangles."""
    rects = strategy.parameters.footprint.rectangles
    choice = rng.integers(len(rects), size=n)
    ra = np.empty(n)
    dec = np.empty(n)
    for i, rect in enumerate(rects):
        sel = choice == i
        width = (rect.ra_max - rect.ra_min) % 360.0
        ra[sel] = (rect.ra_min + rng.uniform(0.0, width, sel.sum())) % 360.0
        dec[sel] = rng.uniform(rect.dec_min, rect.dec_max, sel.sum())
    return ra, dec


class TestSelectionStrategyBase:
    """Test the abstract strategy contract."""

    @pytest.mark.unit
    def test_range_query_is_mandatory(self):
        class NoRange(SelectionStrategy):
            pass

        with pytest.raises(TypeError):
            NoRange()

    @pytest.mark.unit
    def test_omitted_stages_accept(self):
        class RangeOnly(SelectionStrategy):
            name = "range-only"

            def field_of_view(self):
                return FieldOfViewRange(dc=(0.0, 1.0), ra=(0.0, 1.0), dec=(0.0, 1.0))

        strategy = RangeOnly()
        assert strategy.accept_position(None) is True
        assert strategy.accept_model(None) is True
        assert strategy.accept_position_model(None, None) is True
        assert strategy.accept_observed(None) is True
        assert repr(strategy) == "RangeOnly('range-only')"


class TestSurveyParameters:
    """Test SurveyParameters validation."""

    @pytest.mark.unit
    def test_proxy_limit(self):
        assert _params(mag_limit=19.8, proxy_margin=2.0).proxy_mag_limit == pytest.approx(21.8)

    @pytest.mark.unit
    def test_negative_margin(self):
        with pytest.raises(ConfigurationError, match="proxy margin"):
            _params(proxy_margin=-0.1)

    @pytest.mark.unit
    def test_non_positive_mass_to_light(self):
        with pytest.raises(ConfigurationError, match="mass-to-light"):
            _params(mass_to_light=0.0)

    @pytest.mark.unit
    def test_negative_redshift_limit(self):
        with pytest.raises(ConfigurationError, match="z_max"):
            _params(z_max=-1.0)

    @pytest.mark.unit
    def test_empty_name(self):
        with pytest.raises(ConfigurationError, match="name"):
            _params(name="  ")

    @pytest.mark.unit
    def test_no_mass_fields(self):
        with pytest.raises(ConfigurationError, match="mass field"):
            _params(mass_fields=())

    @pytest.mark.unit
    def test_footprint_outside_field_of_view(self):
        with pytest.raises(ConfigurationError, match="extends beyond"):
            _params(footprint=Footprint((SkyRectangle(5.0, 20.0, 0.0, 10.0, name="wide"),)))


class TestSurveyStrategyStages:
    """Test the individual stages of the survey template."""

    @pytest.mark.unit
    def test_range_query(self, gama_like):
        fov = compute_range(gama_like)
        assert fov.dc == (0.0, 2450.0)
        assert fov.ra == (129.0, 351.0)
        assert fov.dec == (-35.0, 3.0)

    @pytest.mark.unit
    def test_position_requires_field_of_view_distance(self, gama_like):
        inside = Position(dc=1000.0, ra=135.0, dec=0.0)
        too_far = Position(dc=2500.0, ra=135.0, dec=0.0)
        assert gama_like.accept_position(inside)
        assert not gama_like.accept_position(too_far)

    @pytest.mark.unit
    def test_position_between_fields(self, gama_like):
        assert not gama_like.accept_position(Position(dc=1000.0, ra=180.0, dec=0.0))

    @pytest.mark.unit
    def test_model_minimum_mass_inclusive(self, gama_like):
        assert gama_like.accept_model(shark_model(1e8))
        assert not gama_like.accept_model(shark_model(9.9e7))

    @pytest.mark.unit
    def test_model_sums_mass_components(self, gama_like):
        from survey_selection.records import ModelRecord
        model = ModelRecord({"mstars_disk": 6e7, "mstars_bulge": 6e7})
        assert gama_like.accept_model(model)

    @pytest.mark.unit
    def test_proxy_cut_margin(self, gama_like):
        dc = 1000.0
        just_inside = mass_for_proxy_magnitude(21.7, dc)
        just_outside = mass_for_proxy_magnitude(21.9, dc)
        position = Position(dc=dc, ra=135.0, dec=0.0)
        assert gama_like.accept_position_model(position, shark_model(just_inside))
        assert not gama_like.accept_position_model(position, shark_model(just_outside))

        # the proxy limit itself is accepted
        at_limit = shark_model(mass_for_proxy_magnitude(21.8, dc))
        proxy = float(proxy_magnitude(at_limit.mass(gama_like.parameters.mass_fields), dc))
        boundary = SurveyStrategy(replace(gama_like.parameters, mag_limit=proxy - 2.0))
        assert boundary.accept_position_model(position, at_limit)

    @pytest.mark.unit
    @pytest.mark.parametrize("margin", [0.0, 2.0])
    def test_proxy_cut_keeps_candidate_observed_at_limit(self, margin):
        """Observed magnitude exactly ``margin`` brighter than the proxy and
        exactly at the magnitude limit passes both stages."""
        dc = 50.0
        mass = mass_for_proxy_magnitude(20.0, dc)
        proxy = float(proxy_magnitude(mass, dc))
        strategy = SurveyStrategy(_params(min_mass=1e6, mag_limit=proxy - margin, proxy_margin=margin))
        position = Position(dc=dc, ra=5.0, dec=5.0)
        model = shark_model(mass)
        observed = ObservedProperties(mag=proxy - margin, zobs=0.0)

        assert filter_by_observed(strategy, observed) is True
        assert filter_by_position_and_model(strategy, position, model) is True

        decision = evaluate_candidate(strategy, position, model, Mock(return_value=observed))
        assert decision.accepted
        assert decision.rejected_at is None

    @pytest.mark.unit
    def test_observed_magnitude_limit_inclusive(self, gama_like):
        assert gama_like.accept_observed(ObservedProperties(mag=19.8, zobs=0.3))
        assert not gama_like.accept_observed(ObservedProperties(mag=19.81, zobs=0.3))

    @pytest.mark.unit
    def test_observed_redshift_limit(self):
        strategy = SurveyStrategy(_params(z_max=0.2))
        assert strategy.accept_observed(ObservedProperties(mag=15.0, zobs=0.2))
        assert not strategy.accept_observed(ObservedProperties(mag=15.0, zobs=0.21))

    @pytest.mark.unit
    def test_nan_candidates_rejected_without_error(self, gama_like):
        position = Position(dc=np.nan, ra=135.0, dec=0.0)
        assert not gama_like.accept_position(position)
        assert not gama_like.accept_observed(ObservedProperties(mag=np.nan, zobs=0.1))

    @pytest.mark.unit
    def test_stages_are_pure(self, gama_like, single_candidate):
        position, model = single_candidate
        first = gama_like.accept_position_model(position, model)
        second = gama_like.accept_position_model(position, model)
        assert first == second
        assert model["mstars_disk"] == 1e11


class TestBuiltinSurveys:
    """Test the built-in survey definitions."""

    @pytest.mark.unit
    def test_identifiers_unique(self):
        assert len(set(SURVEY_IDS)) == len(SURVEY_IDS)

    @pytest.mark.unit
    @pytest.mark.parametrize("strategy", BUILTIN_SURVEYS, ids=SURVEY_IDS)
    def test_range_idempotent(self, strategy):
        first = compute_range(strategy)
        second = compute_range(strategy)
        assert first == second
        assert (first.dc, first.ra, first.dec) == (second.dc, second.ra, second.dec)

    @pytest.mark.unit
    def test_gama_fields(self):
        from survey_selection.surveys import gama
        names = [rect.name for rect in gama.parameters.footprint]
        assert names == ["G09", "G12", "G15", "G23"]
        assert gama.accept_position(Position(dc=1000.0, ra=180.0, dec=0.0))
        assert not gama.accept_position(Position(dc=1000.0, ra=160.0, dec=0.0))

    @pytest.mark.unit
    def test_deep_optical_wraps(self):
        from survey_selection.surveys import deep_optical
        ra = np.array([350.0, 10.0, 200.0])
        positions = Position(dc=np.full(3, 1000.0), ra=ra, dec=np.zeros(3))
        assert deep_optical.accept_position(positions).tolist() == [True, True, False]


class TestSelectionProperties:
    """Randomized checks of the stage invariants for every built-in survey."""

    @pytest.mark.property
    @pytest.mark.parametrize("strategy", BUILTIN_SURVEYS, ids=SURVEY_IDS)
    def test_accepted_candidates_lie_in_field_of_view(self, strategy, rng):
        n = 4000
        fov = compute_range(strategy)
        ra_in, dec_in = _sample_in_footprint(strategy, rng, n // 2)
        ra = np.concatenate([ra_in, rng.uniform(0.0, 360.0, n - n // 2)])
        dec = np.concatenate([dec_in, np.degrees(np.arcsin(rng.uniform(-1.0, 1.0, n - n // 2)))])
        dc = rng.uniform(0.0, 1.2 * fov.dc[1], n)
        positions = Position(dc=dc, ra=ra, dec=dec)
        model = shark_model(10.0 ** rng.uniform(6.0, 12.0, n))

        result = select_candidates(strategy, positions, model, make_observer(strategy))

        assert result.n_selected > 0
        assert np.all(fov.contains(positions.take(result.selected)))

    @pytest.mark.property
    @pytest.mark.parametrize("margin", [None, 0.0], ids=["configured-margin", "zero-margin"])
    @pytest.mark.parametrize("strategy", BUILTIN_SURVEYS, ids=SURVEY_IDS)
    def test_proxy_cut_never_rejects_observable_accepts(self, strategy, margin, rng):
        """Sample around the magnitude limit +/- margin, with photometric offsets
        up to the full margin brighter than the proxy allows."""
        if margin is not None:
            strategy = SurveyStrategy(replace(strategy.parameters, proxy_margin=margin))
        params = strategy.parameters
        n = 5000
        fov = compute_range(strategy)
        dc = rng.uniform(max(fov.dc[0], 1.0), fov.dc[1], n)
        target = rng.uniform(
            params.mag_limit - 2.0 * params.proxy_margin - 0.5,
            params.mag_limit + 2.0 * params.proxy_margin + 0.5,
            n,
        )
        mass = mass_for_proxy_magnitude(target, dc, params.mass_to_light)
        ra, dec = _sample_in_footprint(strategy, rng, n)
        positions = Position(dc=dc, ra=ra, dec=dec)
        model = shark_model(mass)
        offset = rng.uniform(-params.proxy_margin, 1.0, n)
        offset[: n // 10] = -params.proxy_margin

        proxy_accepts = filter_by_position_and_model(strategy, positions, model)
        observed_accepts = filter_by_observed(strategy, make_observer(strategy, offset)(positions, model))

        assert observed_accepts.any()
        assert (~proxy_accepts).any()
        assert not np.any(observed_accepts & ~proxy_accepts)

    @pytest.mark.property
    @pytest.mark.parametrize("strategy", BUILTIN_SURVEYS, ids=SURVEY_IDS)
    def test_redshift_collaborator_consistent(self, strategy, rng):
        """The toy redshift relation keeps luminosity distance above comoving distance."""
        dc = rng.uniform(1.0, compute_range(strategy).dc[1], 100)
        assert np.all((1.0 + hubble_redshift(dc)) * dc >= dc)
