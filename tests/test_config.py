"""
Tests para modelos de parámetros y opciones (config.py).
"""

import pytest
from pydantic import ValidationError

from hidrocanal.config import (
    CHANNEL_MODELS,
    CacheConfig,
    CircularChannel,
    ProfileOptions,
    RectangularChannel,
    TrapezoidalChannel,
    TriangularChannel,
    UnitSystem,
    parse_channel,
)


class TestChannelModels:
    """Tests de modelos de canal."""

    def test_defaults(self, mild_channel):
        assert mild_channel.units == UnitSystem.METRIC
        assert mild_channel.upstream_depth is None
        assert mild_channel.downstream_depth is None
        assert not mild_channel.has_boundary_depth

    def test_boundary_flag(self, mild_params):
        channel = RectangularChannel(**mild_params, downstream_depth=1.2)
        assert channel.has_boundary_depth

    def test_frozen(self, mild_channel):
        with pytest.raises(ValidationError):
            mild_channel.discharge = 20.0

    @pytest.mark.parametrize("field", ["discharge", "manning_n", "slope", "length", "bottom_width"])
    def test_positive_fields(self, mild_params, field):
        with pytest.raises(ValidationError):
            RectangularChannel(**{**mild_params, field: 0.0})

    def test_negative_boundary_depth(self, mild_params):
        with pytest.raises(ValidationError):
            RectangularChannel(**mild_params, upstream_depth=-0.5)

    def test_extra_field_rejected(self, mild_params):
        with pytest.raises(ValidationError):
            RectangularChannel(**mild_params, side_slope=1.0)

    def test_circular_depth_below_diameter(self):
        with pytest.raises(ValidationError, match="diámetro"):
            CircularChannel(
                diameter=1.0, discharge=0.5, manning_n=0.013, slope=0.001,
                length=100.0, upstream_depth=1.0,
            )


class TestParseChannel:
    """Tests de construcción por forma."""

    @pytest.mark.parametrize("shape,geometry,model", [
        ("rectangular", {"bottom_width": 2.0}, RectangularChannel),
        ("trapezoidal", {"bottom_width": 2.0, "side_slope": 1.0}, TrapezoidalChannel),
        ("triangular", {"side_slope": 1.5}, TriangularChannel),
        ("circular", {"diameter": 1.0}, CircularChannel),
    ])
    def test_shapes(self, shape, geometry, model):
        data = {"shape": shape, "discharge": 1.0, "manning_n": 0.013,
                "slope": 0.001, "length": 100.0, **geometry}
        channel = parse_channel(data)
        assert isinstance(channel, model)
        assert isinstance(channel, CHANNEL_MODELS)

    def test_missing_shape(self, mild_params):
        data = dict(mild_params)
        del data["shape"]
        with pytest.raises(ValidationError):
            parse_channel(data)

    def test_imperial(self, mild_params):
        assert parse_channel({**mild_params, "units": "imperial"}).units == UnitSystem.IMPERIAL


class TestProfileOptions:
    """Tests de opciones de cálculo."""

    def test_defaults(self):
        options = ProfileOptions()
        assert options.resolution == 100
        assert options.detect_jumps
        assert not options.bidirectional
        assert options.num_steps == 100

    def test_high_resolution_steps(self):
        assert ProfileOptions(high_resolution=True).num_steps == 200
        assert ProfileOptions(resolution=500, high_resolution=True).num_steps == 500

    @pytest.mark.parametrize("resolution", [0, 1, 10001])
    def test_resolution_range(self, resolution):
        with pytest.raises(ValidationError):
            ProfileOptions(resolution=resolution)


class TestCacheConfig:
    """Tests de configuración del cache."""

    def test_defaults(self):
        config = CacheConfig()
        assert config.ttl_s == 600.0
        assert config.max_size == 100
        assert config.precision == 4

    def test_invalid_size(self):
        with pytest.raises(ValidationError):
            CacheConfig(max_size=0)
