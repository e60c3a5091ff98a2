#!/usr/bin/env python3
"""
Pytest tests for the pipeflow MCP server tools.
Each tool returns a JSON string; these tests decode it and check the values.
"""

import json
import pytest

# Import the tools (package installed via pip install -e .)
from pipeflow.churchill import darcy_friction_factor
from tools.fluid_properties import get_fluid_properties, list_available_fluids
from tools.friction_factor import calculate_friction_factor
from tools.pipe_pressure_loss import calculate_pipe_pressure_loss, pipe_pressure_loss_sweep
from tools.pipe_properties import get_pipe_properties


# 10 m of smooth 100 mm pipe carrying water at 1 m/s (Re = 1e5)
WATER_PIPE = dict(
    pipe_length=10.0,
    pipe_diameter=0.1,
    pipe_roughness=0.0,
    fluid_density=1000.0,
    fluid_viscosity=1.0e-3,
)


def expected_loss_pa(velocity=1.0):
    re = 1000.0 * velocity * 0.1 / 1.0e-3
    return darcy_friction_factor(re, 0.0) * 100.0 * 1000.0 * velocity ** 2 / 2.0


class TestFrictionFactor:
    """Test the friction factor tool."""

    def test_from_reynolds_number(self):
        result = json.loads(calculate_friction_factor(reynolds_number=1e5, relative_roughness=4e-4))

        assert "error" not in result
        assert result["darcy_friction_factor"] == pytest.approx(0.01997, rel=1e-3)
        assert result["fanning_friction_factor"] == pytest.approx(result["darcy_friction_factor"] / 4.0)
        assert result["flow_regime"] == "Turbulent"

    def test_laminar(self):
        result = json.loads(calculate_friction_factor(reynolds_number=100.0))

        assert result["relative_roughness"] == 0.0
        assert result["darcy_friction_factor"] == pytest.approx(result["laminar_64_over_re"], rel=1e-6)
        assert result["flow_regime"] == "Laminar"

    def test_from_flow_and_pipe(self):
        result = json.loads(calculate_friction_factor(
            velocity=1.0,
            pipe_diameter=0.1,
            pipe_roughness=0.0,
            fluid_density=1000.0,
            fluid_viscosity=1.0e-3,
        ))

        assert "error" not in result
        assert result["reynolds_number"] == pytest.approx(1e5)
        assert result["darcy_friction_factor"] == pytest.approx(darcy_friction_factor(1e5, 0.0))

    def test_zero_reynolds_number(self):
        result = json.loads(calculate_friction_factor(reynolds_number=0.0))

        assert result["error_type"] == "ZeroReynoldsNumber"

    def test_negative_roughness(self):
        result = json.loads(calculate_friction_factor(reynolds_number=1e4, relative_roughness=-0.1))

        assert result["error_type"] == "NegativeRoughnessRatio"

    def test_missing_fluid(self):
        result = json.loads(calculate_friction_factor(velocity=1.0, pipe_diameter=0.1))

        assert "errors" in result
        assert any("density" in error for error in result["errors"])


class TestPipePressureLoss:
    """Test pipe pressure loss in both directions."""

    def test_pressure_loss_from_flow(self):
        result = json.loads(calculate_pipe_pressure_loss(velocity=1.0, **WATER_PIPE))

        assert "error" not in result
        assert result["solved_variable"] is None
        assert result["reynolds_number"] == pytest.approx(1e5)
        assert result["pressure_loss_pa"] == pytest.approx(expected_loss_pa(), rel=1e-9)
        assert result["pressure_change_pa"] == pytest.approx(-result["pressure_loss_pa"])
        assert result["head_loss_m"] == pytest.approx(result["pressure_loss_pa"] / (1000.0 * 9.81))

    def test_flow_from_pressure_loss(self):
        result = json.loads(calculate_pipe_pressure_loss(pressure_loss_pa=expected_loss_pa(2.0), **WATER_PIPE))

        assert "error" not in result
        assert result["solved_variable"] == "flow_rate"
        assert result["flow_velocity_m_s"] == pytest.approx(2.0, rel=1e-6)
        assert result["pressure_loss_pa"] == pytest.approx(expected_loss_pa(2.0), rel=1e-8)

    @pytest.mark.parametrize("method", ["bisection", "brent"])
    def test_methods_agree(self, method):
        result = json.loads(calculate_pipe_pressure_loss(
            pressure_loss_psi=1.0, method=method, tolerance_pa=1e-3, **WATER_PIPE))

        assert result["pressure_loss_pa"] == pytest.approx(6894.757293, abs=2e-3)

    def test_unknown_method(self):
        result = json.loads(calculate_pipe_pressure_loss(pressure_loss_pa=100.0, method="newton", **WATER_PIPE))

        assert any("newton" in error for error in result["errors"])

    def test_zero_pressure_loss_gives_zero_flow(self):
        result = json.loads(calculate_pipe_pressure_loss(pressure_loss_pa=0.0, **WATER_PIPE))

        assert result["flow_rate_m3s"] == 0.0
        assert result["pressure_change_pa"] == 0.0

    def test_flow_and_pressure_loss_together(self):
        result = json.loads(calculate_pipe_pressure_loss(velocity=1.0, pressure_loss_pa=100.0, **WATER_PIPE))

        assert "errors" in result
        assert any("exactly one" in error for error in result["errors"])

    def test_negative_pressure_loss(self):
        result = json.loads(calculate_pipe_pressure_loss(pressure_loss_pa=-10.0, **WATER_PIPE))

        assert result["error_type"] == "NegativePressureLoss"

    def test_flow_of_viscous_oil_in_capillary(self):
        result = json.loads(calculate_pipe_pressure_loss(
            pressure_loss_pa=100.0, pipe_length=10.0, pipe_diameter=0.001,
            fluid_density=900.0, fluid_viscosity=1.0,
        ))

        assert "error" not in result
        assert result["flow_velocity_m_s"] == pytest.approx(3.125e-7, rel=1e-6)
        assert result["flow_regime"] == "Laminar"

    def test_unreachable_pressure_loss(self):
        result = json.loads(calculate_pipe_pressure_loss(pressure_loss_pa=1e30, **WATER_PIPE))

        assert result["error_type"] == "ConvergenceFailure"
        assert len(result["last_bracket"]) == 2

    def test_nominal_pipe_size_lookup(self):
        result = json.loads(calculate_pipe_pressure_loss(
            flow_rate_gpm=100.0,
            pipe_length_ft=100.0,
            nominal_size_in=2.0,
            schedule="40",
            material="Steel",
            fluid_name="Water",
            temperature_c=20.0,
        ))

        assert "error" not in result
        assert result["pipe_diameter_m"] == pytest.approx(0.0525, rel=1e-2)
        assert result["pipe_details"]["roughness_source"] == "Material Lookup 'Steel'"
        assert result["flow_rate_gpm"] == pytest.approx(100.0)
        # 100 gpm through 100 ft of 2" Sch 40 loses several psi
        assert 4.0 < result["pressure_loss_psi"] < 10.0

    def test_inclined_pipe_with_source(self):
        result = json.loads(calculate_pipe_pressure_loss(
            velocity=1.0, incline_angle_deg=90.0, source_pressure_pa=2.0e5, **WATER_PIPE))

        assert result["hydrostatic_pressure_change_pa"] == pytest.approx(-98100.0)
        assert result["pressure_change_pa"] == pytest.approx(
            -result["pressure_loss_pa"] - 98100.0 + 2.0e5)

    def test_dowtherm_lookup(self):
        result = json.loads(calculate_pipe_pressure_loss(
            velocity=1.0, pipe_length=10.0, pipe_diameter=0.05,
            fluid_name="dowtherm_a", temperature_c=100.0,
        ))

        assert "error" not in result
        assert result["mass_flow_rate_kg_s"] == pytest.approx(993.0 * 3.141592653589793 / 4.0 * 0.05 ** 2)

    def test_dowtherm_out_of_range(self):
        result = json.loads(calculate_pipe_pressure_loss(
            velocity=1.0, pipe_length=10.0, pipe_diameter=0.05,
            fluid_name="dowtherm_a", temperature_c=250.0,
        ))

        assert result["error_type"] == "PropertyRangeError"

    def test_non_finite_input(self):
        result = json.loads(calculate_pipe_pressure_loss(velocity=float("nan"), **WATER_PIPE))

        assert result["error_type"] == "ValidationError"


class TestPressureLossSweep:
    """Test the parameter sweep."""

    def test_velocity_sweep(self):
        result = json.loads(pipe_pressure_loss_sweep("velocity", 0.5, 2.0, 4, **WATER_PIPE))

        assert result["summary"]["successful_points"] == 4
        losses = [point["pressure_loss_pa"] for point in result["results"]]
        assert losses == sorted(losses)

    def test_pressure_loss_sweep_solves_flow(self):
        result = json.loads(pipe_pressure_loss_sweep("pressure_loss_pa", 100.0, 1000.0, 3, **WATER_PIPE))

        assert result["summary"]["successful_points"] == 3
        assert all(point["solved_variable"] == "flow_rate" for point in result["results"])

    def test_failed_points_are_reported(self):
        result = json.loads(pipe_pressure_loss_sweep("pressure_loss_pa", -100.0, 100.0, 3, **WATER_PIPE))

        assert result["summary"]["failed_points"] == 1
        assert "error" in result["results"][0]

    def test_invalid_variable(self):
        result = json.loads(pipe_pressure_loss_sweep("colour", 0.0, 1.0, 3, **WATER_PIPE))

        assert "error" in result

    def test_too_many_points(self):
        result = json.loads(pipe_pressure_loss_sweep("velocity", 0.5, 2.0, 10000, **WATER_PIPE))

        assert "error" in result


class TestPipeProperties:
    """Test pipe property lookup."""

    def test_nominal_size_with_material(self):
        result = json.loads(get_pipe_properties(nominal_size=2.0, schedule="40", material="steel"))

        assert result["successful"] is True
        assert result["inner_diameter_m"] == pytest.approx(0.0525, rel=1e-2)
        assert result["material"] == "Steel"
        assert result["relative_roughness"] == pytest.approx(
            result["absolute_roughness_m"] / result["inner_diameter_m"])

    def test_unknown_material(self):
        result = json.loads(get_pipe_properties(material="Unobtainium"))

        assert "error_material" in result
        assert "Steel" in result["available_materials"]

    def test_no_inputs(self):
        result = json.loads(get_pipe_properties())

        assert "error" in result


class TestFluidProperties:
    """Test fluid property lookup functionality."""

    def test_list_available_fluids(self):
        result = json.loads(list_available_fluids())

        assert result["builtin"][0]["name"] == "dowtherm_a"
        assert "Water" in result["coolprop"]
        assert result["count"] > 100

    def test_water_properties(self):
        result = json.loads(get_fluid_properties(fluid_name="Water", temperature_c=20.0, pressure_bar=1.01325))

        # Water density at 20°C should be close to 998 kg/m³
        assert 990 < result["density_kg_m3"] < 1005
        assert result["dynamic_viscosity_cp"] == pytest.approx(1.0, rel=0.05)

    def test_dowtherm_properties(self):
        result = json.loads(get_fluid_properties(fluid_name="Therminol_VP1", temperature_c=100.0))

        assert result["density_kg_m3"] == pytest.approx(993.0)
        assert result["kinematic_viscosity_m2_s"] == pytest.approx(
            result["dynamic_viscosity_pa_s"] / 993.0)

    def test_dowtherm_out_of_range(self):
        result = json.loads(get_fluid_properties(fluid_name="dowtherm_a", temperature_c=10.0))

        assert result["error_type"] == "PropertyRangeError"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
