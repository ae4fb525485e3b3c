"""
Tests para el perfil de superficie libre (profile.py).

Caso de referencia: canal rectangular b=5 m, Q=10 m³/s, n=0.013, L=1000 m.
- S=0.001: yc = 0.7415 m, yn ≈ 1.02 m (pendiente suave)
- S=0.02: yn ≈ 0.385 m (pendiente fuerte)
"""

import pytest

from hidrocanal.config import Direction, JumpType, ProfileType, RectangularChannel, SlopeClass
from hidrocanal.core.profile import (
    InitialConditions,
    MarchState,
    ProfileMarch,
    adaptive_resolution_profile,
    bidirectional_profile,
    determine_profile_type,
    high_resolution_profile,
    optimal_step_count,
    refinement_regions,
    setup_initial_conditions,
    water_surface_profile,
)


def channel_with(base, **changes):
    return RectangularChannel(**{**base.model_dump(), **changes})


class TestStepCount:
    """Tests de número de pasos recomendado."""

    @pytest.mark.parametrize("length,expected", [
        (1.0, 20),
        (25.0, 250),
        (1000.0, 500),
    ])
    def test_bounds(self, length, expected):
        assert optimal_step_count(length) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            optimal_step_count(0.0)


class TestInitialConditions:
    """Tests de prioridad de la condición de borde."""

    def test_mild_default(self, mild_channel):
        """Pendiente suave sin tirantes: yc en x = L hacia aguas arriba."""
        c = setup_initial_conditions(mild_channel)
        assert c.slope_class == SlopeClass.MILD
        assert c.station == mild_channel.length
        assert c.depth == pytest.approx(c.critical_depth)
        assert c.direction == Direction.UPSTREAM
        assert c.control_depth is None

    def test_steep_default(self, steep_channel):
        """Pendiente fuerte sin tirantes: yn en x = 0 hacia aguas abajo."""
        c = setup_initial_conditions(steep_channel)
        assert c.slope_class == SlopeClass.STEEP
        assert c.station == 0.0
        assert c.depth == pytest.approx(c.normal_depth)
        assert c.direction == Direction.DOWNSTREAM

    def test_downstream_depth(self, mild_channel):
        c = setup_initial_conditions(channel_with(mild_channel, downstream_depth=1.5))
        assert c.depth == 1.5
        assert c.station == 1000.0
        assert c.direction == Direction.UPSTREAM

    def test_upstream_depth(self, steep_channel):
        c = setup_initial_conditions(channel_with(steep_channel, upstream_depth=0.3))
        assert c.depth == 0.3
        assert c.station == 0.0
        assert c.direction == Direction.DOWNSTREAM

    def test_both_with_supercritical_inflow(self, mild_channel):
        """Ambos tirantes y entrada supercrítica: aguas arriba, con control aguas abajo."""
        c = setup_initial_conditions(
            channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        )
        assert c.depth == 0.3
        assert c.direction == Direction.DOWNSTREAM
        assert c.control_depth == 1.2

    def test_both_with_subcritical_inflow(self, mild_channel):
        """Ambos tirantes subcríticos: prevalece el tirante aguas abajo."""
        c = setup_initial_conditions(
            channel_with(mild_channel, upstream_depth=1.1, downstream_depth=1.5)
        )
        assert c.depth == 1.5
        assert c.direction == Direction.UPSTREAM

    def test_supercritical_inflow_on_mild_slope(self, mild_channel):
        """Entrada supercrítica sin control: yn controla aguas abajo."""
        c = setup_initial_conditions(channel_with(mild_channel, upstream_depth=0.3))
        assert c.control_depth == pytest.approx(c.normal_depth)

    def test_invalid_steps(self, mild_channel):
        with pytest.raises(ValueError):
            setup_initial_conditions(mild_channel, num_steps=0)


class TestProfileType:
    """Tests de clasificación del perfil."""

    @pytest.mark.parametrize("slope_class,depth,yn,yc,expected", [
        (SlopeClass.MILD, 1.5, 1.02, 0.74, ProfileType.M1),
        (SlopeClass.MILD, 0.9, 1.02, 0.74, ProfileType.M2),
        (SlopeClass.MILD, 0.5, 1.02, 0.74, ProfileType.M3),
        (SlopeClass.STEEP, 1.5, 0.5, 1.0, ProfileType.S1),
        (SlopeClass.STEEP, 0.7, 0.5, 1.0, ProfileType.S2),
        (SlopeClass.STEEP, 0.3, 0.5, 1.0, ProfileType.S3),
    ])
    def test_zones(self, slope_class, depth, yn, yc, expected):
        assert determine_profile_type(slope_class, depth, yn, yc) == expected

    @pytest.mark.parametrize("depth,expected", [
        (1.2, ProfileType.C1),
        (1.0, ProfileType.C2),
        (0.8, ProfileType.C3),
    ])
    def test_critical_slope(self, depth, expected):
        assert determine_profile_type(SlopeClass.CRITICAL, depth, 1.0, 1.0) == expected

    def test_boundary_is_unknown(self):
        """Un tirante igual a yn en pendiente suave no define zona."""
        assert determine_profile_type(SlopeClass.MILD, 1.02, 1.02, 0.74) == ProfileType.UNKNOWN


class TestWaterSurfaceProfile:
    """Tests del cálculo por paso estándar."""

    def test_mild_no_boundary(self, mild_channel):
        """Sin tirantes impuestos en pendiente suave: perfil M2 que termina en yc."""
        result = water_surface_profile(mild_channel)
        assert result.slope_class == SlopeClass.MILD
        assert result.profile_type == ProfileType.M2
        assert result.direction == Direction.UPSTREAM
        assert not result.is_choking
        assert not result.has_jump
        assert len(result.points) == 101

        last = result.points[-1]
        assert last.station == pytest.approx(1000.0)
        assert last.depth == pytest.approx(result.critical_depth)
        assert result.critical_depth == pytest.approx(0.7415, abs=1e-3)

        # Ordenado por progresiva, tirante entre yc e yn
        assert result.stations == sorted(result.stations)
        assert result.points[0].station == pytest.approx(0.0)
        assert all(result.critical_depth <= y < result.normal_depth for y in result.depths)

    def test_backwater_m1(self, mild_channel):
        result = water_surface_profile(channel_with(mild_channel, downstream_depth=1.5))
        assert result.profile_type == ProfileType.M1
        depths = result.depths
        assert depths[-1] == pytest.approx(1.5)
        assert all(y > result.normal_depth for y in depths)
        # Hacia aguas arriba el tirante tiende a yn
        assert depths == sorted(depths)

    def test_steep_uniform(self, steep_channel):
        result = water_surface_profile(steep_channel)
        assert result.slope_class == SlopeClass.STEEP
        assert result.direction == Direction.DOWNSTREAM
        for y in result.depths:
            assert y == pytest.approx(result.normal_depth, rel=1e-3)

    def test_steep_s3(self, steep_channel):
        result = water_surface_profile(channel_with(steep_channel, upstream_depth=0.3))
        assert result.profile_type == ProfileType.S3
        assert result.depths[0] == pytest.approx(0.3)
        assert all(y < result.critical_depth for y in result.depths)
        assert not result.has_jump

    def test_choking(self, steep_channel):
        """Tirante subcrítico impuesto en pendiente fuerte: perfil incompleto."""
        result = water_surface_profile(channel_with(steep_channel, downstream_depth=0.8))
        assert result.is_choking
        assert 1 <= len(result.points) < 101
        assert result.points[-1].station == pytest.approx(1000.0)

    def test_hydraulic_jump(self, mild_channel):
        """Entrada supercrítica con control subcrítico aguas abajo."""
        channel = channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        result = water_surface_profile(channel)

        assert result.has_jump
        assert result.profile_type == ProfileType.MIXED
        assert not result.is_choking

        jump = result.hydraulic_jump
        assert 0 < jump.station < 200
        assert jump.upstream_depth == pytest.approx(0.42, abs=0.01)
        assert jump.downstream_depth == pytest.approx(1.2, abs=0.01)
        assert jump.downstream_depth > jump.upstream_depth
        assert jump.jump_type == JumpType.WEAK

        assert result.stations == sorted(result.stations)
        assert result.points[0].depth == pytest.approx(0.3)
        assert result.points[-1].station == pytest.approx(1000.0)
        at_jump = [p.depth for p in result.points if p.station == jump.station]
        assert len(at_jump) == 2

    def test_jump_detection_disabled(self, mild_channel):
        channel = channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        result = water_surface_profile(channel, detect_jumps=False)
        assert not result.has_jump
        assert result.profile_type != ProfileType.MIXED

    def test_progress(self, mild_channel):
        values = []
        water_surface_profile(mild_channel, num_steps=20, progress=values.append)
        assert values[0] == 0.0
        assert values == sorted(values)
        assert values[-1] == pytest.approx(95.0)
        assert 100.0 not in values

    def test_high_resolution(self, mild_channel):
        result = high_resolution_profile(mild_channel, resolution=50)
        assert len(result.points) == 201


class TestProfileMarch:
    """Tests de la máquina de estados."""

    def test_terminal_state(self, mild_channel):
        march = ProfileMarch(mild_channel, setup_initial_conditions(mild_channel, 10)).run()
        assert march.state == MarchState.COMPLETE
        assert march.jump is None
        assert len(march.points) == 11

    def test_choked_state(self, steep_channel):
        channel = channel_with(steep_channel, downstream_depth=0.8)
        march = ProfileMarch(channel, setup_initial_conditions(channel, 10)).run()
        assert march.state == MarchState.CHOKED

    def test_jump_state(self, mild_channel):
        channel = channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        march = ProfileMarch(channel, setup_initial_conditions(channel)).run()
        assert march.state == MarchState.COMPLETE
        assert march.jump is not None
        assert march.jump.occurs

    def test_custom_conditions(self, mild_channel):
        conditions = InitialConditions(
            depth=1.3,
            station=1000.0,
            direction=Direction.UPSTREAM,
            critical_depth=0.7415,
            normal_depth=1.02,
            slope_class=SlopeClass.MILD,
            num_steps=10,
        )
        march = ProfileMarch(mild_channel, conditions).run()
        assert march.points[0].depth == 1.3
        assert march.points[-1].station == pytest.approx(0.0)


class TestBidirectional:
    """Tests del cálculo en ambos sentidos."""

    def test_joined_by_jump(self, mild_channel):
        channel = channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        result = bidirectional_profile(channel)
        assert result.has_jump
        assert result.profile_type == ProfileType.MIXED
        assert result.stations == sorted(result.stations)
        assert result.points[0].depth == pytest.approx(0.3)
        assert result.points[-1].depth == pytest.approx(1.2)

    def test_subcritical_only(self, mild_channel):
        """Sin entrada supercrítica se usa el cálculo desde aguas abajo."""
        result = bidirectional_profile(channel_with(mild_channel, downstream_depth=1.5))
        assert not result.has_jump
        assert result.direction == Direction.UPSTREAM
        assert result.profile_type == ProfileType.M1

    def test_progress_split(self, mild_channel):
        values = []
        bidirectional_profile(mild_channel, num_steps=20, progress=values.append)
        assert values == sorted(values)
        assert values[-1] == pytest.approx(97.5)
        assert any(v < 50.0 for v in values)


class TestAdaptiveResolution:
    """Tests del refinamiento en tramos de cambio rápido."""

    def test_regions_near_control(self, mild_channel):
        """En M2 los gradientes mayores están junto al tirante crítico."""
        base = water_surface_profile(mild_channel, num_steps=100)
        [(start, end)] = refinement_regions(list(base.points))
        assert start == pytest.approx(800.0)
        assert end == pytest.approx(1000.0)

    def test_no_regions_for_single_point(self, mild_channel):
        base = water_surface_profile(mild_channel, num_steps=10)
        assert refinement_regions(list(base.points[:1])) == []

    def test_refines_m2(self, mild_channel):
        base = water_surface_profile(mild_channel, num_steps=100)
        result = adaptive_resolution_profile(mild_channel, num_steps=100)
        stations = result.stations
        assert len(result.points) == len(base.points) - 19 + 49
        assert stations == sorted(stations)
        assert stations[0] == pytest.approx(0.0)
        assert stations[-1] == pytest.approx(1000.0)
        assert min(b - a for a, b in zip(stations, stations[1:])) < 10.0
        assert result.points[-1].depth == pytest.approx(result.critical_depth, rel=1e-3)
        assert result.profile_type == ProfileType.M2

    def test_keeps_jump(self, mild_channel):
        channel = channel_with(mild_channel, upstream_depth=0.3, downstream_depth=1.2)
        result = adaptive_resolution_profile(channel)
        assert result.has_jump
        assert result.stations == sorted(result.stations)
        assert result.points[0].depth == pytest.approx(0.3)
        station = result.hydraulic_jump.station
        assert sum(p.station == station for p in result.points) == 2

    def test_progress(self, mild_channel):
        values = []
        adaptive_resolution_profile(mild_channel, num_steps=20, progress=values.append)
        assert values == sorted(values)
        assert values[-1] < 100.0
        assert any(v >= 50.0 for v in values)
