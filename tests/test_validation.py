#!/usr/bin/env python3
"""
Tests for the input guards and unit helpers.
"""

import numpy as np
import pint
import pytest

from pipeflow.errors import (
    NegativePressureLoss,
    NegativeReynoldsNumber,
    NegativeRoughnessRatio,
    NonPhysicalInput,
    ZeroReynoldsNumber,
)
from pipeflow.models import FluidProperties, PipeGeometry
from pipeflow.units import LENGTH, Q_, as_quantity
from pipeflow.validation import (
    validate_fluid,
    validate_form_loss_k,
    validate_geometry,
    validate_length_to_diameter,
    validate_max_iterations,
    validate_pressure_loss,
    validate_reynolds_number,
    validate_roughness_ratio,
    validate_tolerance,
)


class TestAsQuantity:
    """Dimension checking of dimensioned inputs."""

    def test_accepts_matching_quantity(self):
        q = Q_(3.0, "ft")
        assert as_quantity(q, LENGTH, "length") is q

    def test_parses_string(self):
        assert as_quantity("2 inch", LENGTH, "diameter").m_as("m") == pytest.approx(0.0508)

    def test_rejects_bare_number(self):
        with pytest.raises(TypeError, match="diameter"):
            as_quantity(0.05, LENGTH, "diameter")

    def test_rejects_wrong_dimension(self):
        with pytest.raises(pint.DimensionalityError):
            as_quantity(Q_(1.0, "s"), LENGTH, "length")

    def test_angle_must_be_dimensionless(self):
        assert as_quantity(Q_(10.0, "degree"), None, "incline_angle").m_as("radian") == \
            pytest.approx(np.deg2rad(10.0))
        with pytest.raises(pint.DimensionalityError):
            as_quantity(Q_(10.0, "m"), None, "incline_angle")


class TestDimensionlessGuards:
    """Reynolds number, roughness, L/D and K."""

    def test_valid_reynolds_passes_through(self):
        assert validate_reynolds_number(1234.5) == 1234.5

    def test_zero_reynolds(self):
        with pytest.raises(ZeroReynoldsNumber) as exc_info:
            validate_reynolds_number(0.0, "my_operation")
        assert exc_info.value.operation == "my_operation"
        assert "my_operation" in str(exc_info.value)

    def test_negative_reynolds(self):
        with pytest.raises(NegativeReynoldsNumber) as exc_info:
            validate_reynolds_number(-5.0)
        assert exc_info.value.value == -5.0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
    def test_non_finite(self, bad):
        with pytest.raises(NonPhysicalInput):
            validate_reynolds_number(bad)
        with pytest.raises(NonPhysicalInput):
            validate_roughness_ratio(bad)

    def test_non_numeric(self):
        with pytest.raises(NonPhysicalInput):
            validate_reynolds_number("fast")

    def test_array(self):
        re = validate_reynolds_number(np.array([1.0, 10.0]))
        assert isinstance(re, np.ndarray)
        with pytest.raises(NegativeReynoldsNumber):
            validate_reynolds_number([1.0, -10.0])

    def test_roughness(self):
        assert validate_roughness_ratio(0.0) == 0.0
        with pytest.raises(NegativeRoughnessRatio):
            validate_roughness_ratio(-1e-6)

    def test_length_to_diameter(self):
        assert validate_length_to_diameter(100.0) == 100.0
        with pytest.raises(NonPhysicalInput):
            validate_length_to_diameter(-1.0)

    def test_form_loss_k(self):
        assert validate_form_loss_k(0.0) == 0.0
        with pytest.raises(NonPhysicalInput):
            validate_form_loss_k(-0.1)


class TestDimensionedGuards:
    """Pressure, geometry and fluid."""

    def test_pressure_loss(self):
        assert validate_pressure_loss(Q_(0.0, "Pa")).magnitude == 0.0
        assert validate_pressure_loss("1 psi").m_as("Pa") == pytest.approx(6894.757, rel=1e-6)

    def test_negative_pressure_loss(self):
        with pytest.raises(NegativePressureLoss) as exc_info:
            validate_pressure_loss(Q_(-1.0, "bar"))
        assert exc_info.value.value == Q_(-1.0, "bar")

    def test_non_finite_pressure_loss(self):
        with pytest.raises(NonPhysicalInput):
            validate_pressure_loss(Q_(float("nan"), "Pa"))

    def test_geometry(self):
        good = PipeGeometry(length="1 m", diameter="10 mm")
        assert validate_geometry(good) is good
        with pytest.raises(NonPhysicalInput, match="diameter"):
            validate_geometry(PipeGeometry(length="1 m", diameter="-10 mm"))
        with pytest.raises(NonPhysicalInput, match="area"):
            validate_geometry(PipeGeometry(length="1 m", diameter="10 mm", cross_sectional_area="0 m^2"))

    def test_zero_roughness_is_allowed(self):
        validate_geometry(PipeGeometry(length="1 m", diameter="10 mm", absolute_roughness="0 mm"))

    def test_fluid(self):
        with pytest.raises(NonPhysicalInput, match="density"):
            validate_fluid(FluidProperties(density="0 kg/m^3", viscosity="1 mPa*s"))
        with pytest.raises(NonPhysicalInput, match="viscosity"):
            validate_fluid(FluidProperties(density="1000 kg/m^3", viscosity="-1 mPa*s"))


class TestSolverSettings:
    """Tolerance and iteration budget."""

    def test_relative_tolerance(self):
        assert validate_tolerance(1e-6, relative=True) == 1e-6
        with pytest.raises(NonPhysicalInput):
            validate_tolerance(-1e-6, relative=True)

    def test_absolute_tolerance_in_pascal(self):
        assert validate_tolerance(Q_(1.0, "kPa"), relative=False) == pytest.approx(1000.0)
        with pytest.raises(NonPhysicalInput):
            validate_tolerance(Q_(0.0, "Pa"), relative=False)

    def test_absolute_tolerance_must_be_pressure(self):
        with pytest.raises(pint.DimensionalityError):
            validate_tolerance(Q_(1.0, "m"), relative=False)
        with pytest.raises(TypeError):
            validate_tolerance(1.0, relative=False)

    @pytest.mark.parametrize("bad", [0, -3, 2.5, True, "10"])
    def test_max_iterations(self, bad):
        with pytest.raises(NonPhysicalInput):
            validate_max_iterations(bad)

    def test_max_iterations_accepts_numpy_int(self):
        assert validate_max_iterations(np.int64(50)) == 50
