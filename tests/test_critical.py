"""
Tests para el cálculo de tirante crítico (critical.py).
"""

import pytest

from hidrocanal.core.critical import (
    critical_depth,
    critical_energy,
    critical_flow_function,
    critical_velocity,
    is_flow_critical,
    solve_critical_depth,
)
from hidrocanal.core.flow import froude_number, specific_energy


class TestClosedForm:
    """Tests de secciones con solución cerrada."""

    def test_rectangular_reference(self, mild_channel):
        """yc = (q²/g)^(1/3) con q = 2 m²/s."""
        assert critical_depth(mild_channel) == pytest.approx(0.7415, abs=1e-3)

    def test_rectangular_closed_form_flag(self, mild_channel):
        result = solve_critical_depth(mild_channel)
        assert result.converged
        assert result.method == "closed_form"
        assert result.iterations == 0

    def test_triangular(self, triangular_channel):
        # yc = (2Q²/(g z²))^(1/5)
        expected = (2 * 0.5**2 / (9.81 * 2.0**2)) ** 0.2
        assert critical_depth(triangular_channel) == pytest.approx(expected)

    def test_independent_of_slope(self, mild_channel, steep_channel):
        assert critical_depth(mild_channel) == critical_depth(steep_channel)


class TestIterative:
    """Tests de secciones resueltas por bisección."""

    def test_trapezoidal_converges(self, trapezoidal_channel):
        result = solve_critical_depth(trapezoidal_channel)
        assert result.converged
        assert result.method == "bisection"
        assert 0.7 < result.value < 0.9

    def test_circular_below_diameter(self, circular_channel):
        yc = critical_depth(circular_channel)
        assert 0 < yc < circular_channel.diameter

    def test_function_vanishes(self, trapezoidal_channel):
        yc = critical_depth(trapezoidal_channel)
        assert critical_flow_function(yc, trapezoidal_channel) == pytest.approx(0, abs=1e-3)


class TestFroudeAtCritical:
    """En el tirante crítico Fr = 1 para todas las formas."""

    def test_all_shapes(self, all_channels):
        for channel in all_channels:
            yc = critical_depth(channel)
            assert abs(froude_number(yc, channel) - 1) < 0.05
            assert is_flow_critical(yc, channel)

    def test_not_critical_away_from_yc(self, mild_channel):
        assert not is_flow_critical(0.5, mild_channel)
        assert not is_flow_critical(1.2, mild_channel)


class TestCriticalEnergy:
    """Tests de velocidad y energía crítica."""

    def test_rectangular_energy(self, mild_channel):
        yc = critical_depth(mild_channel)
        assert critical_energy(mild_channel) == pytest.approx(1.5 * yc)

    def test_energy_is_minimum(self, trapezoidal_channel):
        ec = critical_energy(trapezoidal_channel)
        yc = critical_depth(trapezoidal_channel)
        assert specific_energy(yc * 0.9, trapezoidal_channel) > ec
        assert specific_energy(yc * 1.1, trapezoidal_channel) > ec

    def test_velocity(self, mild_channel):
        yc = critical_depth(mild_channel)
        assert critical_velocity(mild_channel) == pytest.approx(10.0 / (5.0 * yc))
        assert critical_velocity(mild_channel, yc=1.0) == pytest.approx(2.0)
