"""Configuración de pytest para tests de hidrocanal."""

import pytest

from hidrocanal.cache import ResultCache, clear_cache
from hidrocanal.config import (
    CacheConfig,
    CircularChannel,
    RectangularChannel,
    TrapezoidalChannel,
    TriangularChannel,
)


class FakeClock:
    """Reloj manual para probar expiración del cache."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _clean_shared_cache():
    """Cada test parte con el cache compartido vacío."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def mild_params():
    """Canal rectangular de referencia: b=5 m, Q=10 m³/s, S=0.001, n=0.013."""
    return {
        "shape": "rectangular",
        "bottom_width": 5.0,
        "discharge": 10.0,
        "manning_n": 0.013,
        "slope": 0.001,
        "length": 1000.0,
    }


@pytest.fixture
def mild_channel(mild_params):
    """Canal rectangular de pendiente suave."""
    return RectangularChannel(**mild_params)


@pytest.fixture
def steep_channel(mild_params):
    """Mismo canal con pendiente fuerte (S=0.02)."""
    return RectangularChannel(**{**mild_params, "slope": 0.02})


@pytest.fixture
def trapezoidal_channel():
    """Canal trapezoidal b=3 m, z=1.5."""
    return TrapezoidalChannel(
        bottom_width=3.0, side_slope=1.5, discharge=8.0,
        manning_n=0.015, slope=0.0005, length=800.0,
    )


@pytest.fixture
def triangular_channel():
    """Cuneta triangular z=2."""
    return TriangularChannel(
        side_slope=2.0, discharge=0.5, manning_n=0.016, slope=0.002, length=200.0,
    )


@pytest.fixture
def circular_channel():
    """Conducto circular D=1.2 m."""
    return CircularChannel(
        diameter=1.2, discharge=0.8, manning_n=0.013, slope=0.002, length=300.0,
    )


@pytest.fixture
def all_channels(mild_channel, trapezoidal_channel, triangular_channel, circular_channel):
    """Un canal de cada forma."""
    return [mild_channel, trapezoidal_channel, triangular_channel, circular_channel]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Cache independiente con reloj manual."""
    return ResultCache(CacheConfig(), clock=clock)
