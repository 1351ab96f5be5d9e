"""Unit tests for Records module."""

import numpy as np
import pytest

from survey_selection.records import ModelRecord, ObservedProperties, Position


class TestPosition:
    """Test Position record."""

    @pytest.mark.unit
    def test_scalar_length(self):
        assert len(Position(dc=1.0, ra=2.0, dec=3.0)) == 1

    @pytest.mark.unit
    def test_take(self):
        positions = Position(dc=np.arange(5.0), ra=np.arange(5.0) * 10, dec=np.zeros(5))
        subset = positions.take(np.array([1, 3]))
        assert subset.dc.tolist() == [1.0, 3.0]
        assert subset.ra.tolist() == [10.0, 30.0]
        assert len(subset) == 2

    @pytest.mark.unit
    def test_inconsistent_lengths(self):
        positions = Position(dc=np.arange(3.0), ra=np.arange(2.0), dec=np.zeros(3))
        with pytest.raises(ValueError, match="Inconsistent"):
            len(positions)

    @pytest.mark.unit
    def test_immutable(self):
        position = Position(dc=1.0, ra=2.0, dec=3.0)
        with pytest.raises(AttributeError):
            position.ra = 5.0


class TestModelRecord:
    """Test ModelRecord."""

    @pytest.mark.unit
    def test_mass_sums_components(self):
        model = ModelRecord({"mstars_disk": 3e9, "mstars_bulge": 1e9, "mhalo": 1e12})
        assert model.mass(("mstars_disk", "mstars_bulge")) == pytest.approx(4e9)

    @pytest.mark.unit
    def test_missing_property(self):
        model = ModelRecord({"mstars_disk": 1e9})
        with pytest.raises(KeyError, match="mstars_bulge"):
            model.mass(("mstars_disk", "mstars_bulge"))

    @pytest.mark.unit
    def test_properties_read_only(self):
        source = {"mstars": 1e9}
        model = ModelRecord(source)
        source["mstars"] = 0.0
        assert model["mstars"] == 1e9
        with pytest.raises(TypeError):
            model.properties["mstars"] = 5.0

    @pytest.mark.unit
    def test_take_and_length(self):
        model = ModelRecord({"mstars": np.array([1.0, 2.0, 3.0])})
        assert len(model) == 3
        assert model.take(np.array([2]))["mstars"].tolist() == [3.0]

    @pytest.mark.unit
    def test_empty_record(self):
        assert len(ModelRecord()) == 0

    @pytest.mark.unit
    def test_nan_passed_through(self):
        model = ModelRecord({"mstars": np.nan})
        assert np.isnan(model.mass(("mstars",)))


class TestObservedProperties:
    """Test ObservedProperties."""

    @pytest.mark.unit
    def test_length(self):
        observed = ObservedProperties(mag=np.array([19.0, 20.0]), zobs=np.array([0.1, 0.2]))
        assert len(observed) == 2
