"""
Tests para parámetros de flujo (flow.py).
"""

import math

import pytest
from pydantic import ValidationError

from hidrocanal.config import FlowRegime, RectangularChannel, UnitSystem
from hidrocanal.core.flow import (
    GRAVITY,
    flow_depth_point,
    flow_regime,
    friction_slope,
    froude_number,
    gravity,
    manning_k,
    shear_stress,
    specific_energy,
    specific_force,
    specific_weight,
    velocity,
)


class TestUnits:
    """Tests de constantes por sistema de unidades."""

    def test_metric(self, mild_channel):
        assert gravity(mild_channel) == 9.81
        assert manning_k(mild_channel) == 1.0
        assert specific_weight(mild_channel) == 9810.0

    def test_imperial(self, mild_params):
        channel = RectangularChannel(**{**mild_params, "units": "imperial"})
        assert gravity(channel) == pytest.approx(32.2)
        assert manning_k(channel) == pytest.approx(1.49)
        assert specific_weight(channel) == pytest.approx(62.4)


class TestFlowParameters:
    """Tests de velocidad, Froude, energía y pendiente de fricción."""

    def test_velocity(self, mild_channel):
        assert velocity(1.0, mild_channel) == pytest.approx(2.0)

    def test_froude_rectangular(self, mild_channel):
        # Fr = V / sqrt(g y) = 2 / sqrt(9.81)
        assert froude_number(1.0, mild_channel) == pytest.approx(2.0 / math.sqrt(9.81))

    def test_specific_energy(self, mild_channel):
        assert specific_energy(1.0, mild_channel) == pytest.approx(1.0 + 4.0 / (2 * 9.81))

    def test_friction_slope_at_normal_depth(self, mild_channel):
        """En y = yn, Sf = S0."""
        from hidrocanal.core.normal import normal_depth
        yn = normal_depth(mild_channel)
        assert friction_slope(yn, mild_channel) == pytest.approx(0.001, rel=0.01)

    def test_friction_slope_decreases_with_depth(self, mild_channel):
        assert friction_slope(0.5, mild_channel) > friction_slope(1.5, mild_channel)

    def test_shear_stress(self, mild_channel):
        # τ = γ R S = 9810 × (5/7) × 0.001
        assert shear_stress(1.0, mild_channel) == pytest.approx(9810 * 5 / 7 * 0.001)

    def test_zero_depth(self, mild_channel):
        assert velocity(0.0, mild_channel) == 0.0
        assert froude_number(0.0, mild_channel) == 0.0
        assert friction_slope(0.0, mild_channel) == 0.0
        assert specific_force(0.0, mild_channel) == 0.0


class TestSpecificForce:
    """Tests de fuerza específica."""

    def test_rectangular(self, mild_channel):
        # M = b y²/2 + Q²/(g b y)
        expected = 5.0 / 2 + 100.0 / (GRAVITY[UnitSystem.METRIC] * 5.0)
        assert specific_force(1.0, mild_channel) == pytest.approx(expected)

    def test_minimum_at_critical(self, mild_channel):
        """La fuerza específica es mínima en el tirante crítico."""
        from hidrocanal.core.critical import critical_depth
        yc = critical_depth(mild_channel)
        m_c = specific_force(yc, mild_channel)
        assert specific_force(yc * 0.8, mild_channel) > m_c
        assert specific_force(yc * 1.2, mild_channel) > m_c


class TestFlowRegime:
    """Tests de clasificación de régimen."""

    @pytest.mark.parametrize("froude,expected", [
        (0.5, FlowRegime.SUBCRITICAL),
        (0.949, FlowRegime.SUBCRITICAL),
        (0.95, FlowRegime.CRITICAL),
        (1.0, FlowRegime.CRITICAL),
        (1.05, FlowRegime.CRITICAL),
        (1.06, FlowRegime.SUPERCRITICAL),
        (3.0, FlowRegime.SUPERCRITICAL),
    ])
    def test_bands(self, froude, expected):
        assert flow_regime(froude) == expected


class TestFlowDepthPoint:
    """Tests de construcción de puntos del perfil."""

    def test_fields(self, mild_channel):
        point = flow_depth_point(100.0, 1.0, mild_channel, 0.74, 1.02)
        assert point.station == 100.0
        assert point.depth == 1.0
        assert point.velocity == pytest.approx(2.0)
        assert point.froude_number == pytest.approx(froude_number(1.0, mild_channel))
        assert point.specific_energy == pytest.approx(specific_energy(1.0, mild_channel))
        assert point.critical_depth == 0.74
        assert point.normal_depth == 1.02

    def test_immutable(self, mild_channel):
        point = flow_depth_point(0.0, 1.0, mild_channel, 0.74, 1.02)
        with pytest.raises(ValidationError):
            point.depth = 2.0
