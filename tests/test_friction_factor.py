#!/usr/bin/env python3
"""
Tests for the Churchill friction factor correlation.
"""

import math

import numpy as np
import pint
import pytest
import fluids.friction

from pipeflow.churchill import darcy_friction_factor, fanning_friction_factor, fldk
from pipeflow.errors import (
    NegativeReynoldsNumber,
    NegativeRoughnessRatio,
    NonPhysicalInput,
    PipeFlowError,
    ZeroReynoldsNumber,
)
from pipeflow.units import Q_


class TestKnownValues:
    """Reference values of the correlation."""

    def test_laminar_recovers_64_over_re(self):
        """Deep in the laminar regime f_darcy = 64/Re."""
        for re in (1.0, 10.0, 100.0, 500.0):
            assert darcy_friction_factor(re, 0.0) == pytest.approx(64.0 / re, rel=1e-6)

    def test_re_1000_smooth(self):
        assert darcy_friction_factor(1000.0, 0.0) == pytest.approx(0.064, rel=1e-3)

    def test_turbulent_rough_pipe(self):
        """Re = 1e5, eps/D = 4e-4."""
        assert darcy_friction_factor(1e5, 4e-4) == pytest.approx(0.01997, rel=1e-3)

    def test_darcy_is_four_times_fanning(self):
        for re in (50.0, 2500.0, 1e6):
            assert darcy_friction_factor(re, 1e-3) == pytest.approx(
                4.0 * fanning_friction_factor(re, 1e-3), rel=1e-14)

    @pytest.mark.parametrize("re", [10.0, 800.0, 2300.0, 3000.0, 1e4, 1e5, 1e7])
    @pytest.mark.parametrize("eps", [0.0, 1e-5, 4e-4, 0.01, 0.05])
    def test_matches_fluids_library(self, re, eps):
        """Cross-check against fluids.friction.Churchill_1977 (Darcy)."""
        assert darcy_friction_factor(re, eps) == pytest.approx(
            fluids.friction.Churchill_1977(Re=re, eD=eps), rel=1e-9)

    def test_fully_rough_asymptote(self):
        """At very high Re the factor approaches the roughness-only limit."""
        eps = 1e-3
        asymptote = 4.0 * 2.0 / (2.457 * math.log(1.0 / (0.27 * eps))) ** 2
        assert darcy_friction_factor(1e12, eps) == pytest.approx(asymptote, rel=1e-6)
        for re in np.logspace(4, 10, 20):
            assert darcy_friction_factor(re, eps) >= asymptote * (1 - 1e-12)


class TestRegimeBehaviour:
    """Shape of the curve across regimes."""

    def test_decreasing_in_laminar_regime(self):
        re = np.logspace(0, math.log10(2000.0), 60)
        f = darcy_friction_factor(re, 0.0)
        assert np.all(np.diff(f) < 0)

    @pytest.mark.parametrize("eps", [0.0, 1e-4, 1e-2])
    def test_decreasing_in_turbulent_regime(self, eps):
        re = np.logspace(math.log10(4000.0), 8, 60)
        f = darcy_friction_factor(re, eps)
        assert np.all(np.diff(f) < 0)

    def test_rises_through_transition(self):
        """The correlation climbs from the laminar to the turbulent branch."""
        assert darcy_friction_factor(3000.0, 0.0) > darcy_friction_factor(2000.0, 0.0)
        assert darcy_friction_factor(2500.0, 0.0) > darcy_friction_factor(2000.0, 0.0)

    def test_rougher_pipe_has_higher_turbulent_friction(self):
        assert darcy_friction_factor(1e6, 1e-2) > darcy_friction_factor(1e6, 1e-4) \
            > darcy_friction_factor(1e6, 0.0)

    @pytest.mark.parametrize("re", [1e-12, 1e-6, 1e15, 1e30, 1e100])
    def test_extreme_reynolds_numbers_stay_finite(self, re):
        f = darcy_friction_factor(re, 1e-3)
        assert math.isfinite(f)
        assert f > 0


class TestInputs:
    """Accepted input types."""

    def test_scalar_returns_float(self):
        assert isinstance(darcy_friction_factor(1e4, 0.0), float)

    def test_array_is_elementwise(self):
        re = np.array([500.0, 5e3, 5e5])
        f = darcy_friction_factor(re, 1e-4)
        assert isinstance(f, np.ndarray)
        assert f.shape == (3,)
        for value, expected in zip(f, (darcy_friction_factor(r, 1e-4) for r in re)):
            assert value == pytest.approx(expected, rel=1e-14)

    def test_array_roughness_broadcasts(self):
        f = darcy_friction_factor(1e5, np.array([0.0, 1e-3]))
        assert f.shape == (2,)
        assert f[1] > f[0]

    def test_dimensionless_quantity(self):
        assert darcy_friction_factor(Q_(1000.0, "dimensionless"), 0.0) == pytest.approx(0.064, rel=1e-3)

    def test_dimensioned_quantity_is_rejected(self):
        with pytest.raises(pint.DimensionalityError):
            darcy_friction_factor(Q_(1000.0, "m"), 0.0)


class TestErrors:
    """Validation happens before any arithmetic."""

    def test_zero_reynolds(self):
        with pytest.raises(ZeroReynoldsNumber) as exc_info:
            darcy_friction_factor(0.0, 1e-4)
        assert exc_info.value.operation == "darcy_friction_factor"
        assert exc_info.value.value == 0.0

    def test_negative_reynolds(self):
        with pytest.raises(NegativeReynoldsNumber):
            darcy_friction_factor(-1e4, 1e-4)

    def test_negative_roughness(self):
        with pytest.raises(NegativeRoughnessRatio) as exc_info:
            fanning_friction_factor(1e4, -1e-4)
        assert exc_info.value.value == -1e-4

    def test_documented_invalid_inputs(self):
        with pytest.raises(ZeroReynoldsNumber):
            darcy_friction_factor(0.0, 0.001)
        with pytest.raises(NegativeReynoldsNumber) as exc_info:
            darcy_friction_factor(-5.0, 0.001)
        assert exc_info.value.value == -5.0
        with pytest.raises(NegativeRoughnessRatio) as exc_info:
            darcy_friction_factor(1e4, -0.001)
        assert exc_info.value.value == -0.001

    def test_zero_inside_array(self):
        with pytest.raises(ZeroReynoldsNumber):
            darcy_friction_factor(np.array([1e3, 0.0, 1e5]), 0.0)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_reynolds(self, bad):
        with pytest.raises(NonPhysicalInput):
            darcy_friction_factor(bad, 0.0)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            darcy_friction_factor(0.0, 0.0)
        assert issubclass(ZeroReynoldsNumber, PipeFlowError)


class TestFLDK:
    """Total loss coefficient f*L/D + K."""

    def test_value(self):
        f = darcy_friction_factor(1e5, 1e-4)
        assert fldk(1e5, 1e-4, 250.0, 3.5) == pytest.approx(f * 250.0 + 3.5, rel=1e-14)

    def test_default_k_is_zero(self):
        assert fldk(1e5, 0.0, 10.0) == pytest.approx(10.0 * darcy_friction_factor(1e5, 0.0))

    def test_custom_friction_factor(self):
        """Any (Re, eps/D) -> f callable can be used."""
        assert fldk(1e5, 0.0, 100.0, 1.0, friction_factor=lambda re, eps: 0.02) == pytest.approx(3.0)

    def test_non_positive_length_to_diameter(self):
        with pytest.raises(NonPhysicalInput):
            fldk(1e5, 0.0, 0.0)

    def test_negative_k(self):
        with pytest.raises(NonPhysicalInput):
            fldk(1e5, 0.0, 10.0, -1.0)

    def test_friction_errors_propagate(self):
        with pytest.raises(ZeroReynoldsNumber):
            fldk(0.0, 0.0, 10.0)
