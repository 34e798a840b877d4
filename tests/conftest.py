"""Root conftest for all tests - shared numeric backends, series builders and config isolation."""

from collections.abc import Callable, Iterable, Sequence

import pytest

from qtanalysis.num import DecimalNumFactory, DoubleNumFactory, NumFactory
from qtanalysis.services.data.models import BarSeries
from qtanalysis.system import config as system_config


@pytest.fixture(autouse=True)
def default_system_config(monkeypatch):
    """Every test starts from built-in configuration defaults (no config file, no env override)."""
    monkeypatch.delenv(system_config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(system_config, "_system_config", system_config.SystemConfig())


@pytest.fixture
def decimal_factory() -> DecimalNumFactory:
    return DecimalNumFactory.get_instance()


@pytest.fixture
def double_factory() -> DoubleNumFactory:
    return DoubleNumFactory.get_instance()


@pytest.fixture(params=["decimal", "double"])
def num_factory(request) -> NumFactory:
    """Run the test once per numeric backend."""
    if request.param == "decimal":
        return DecimalNumFactory.get_instance()
    return DoubleNumFactory.get_instance()


@pytest.fixture
def series_of() -> Callable[..., BarSeries]:
    """
    Build a series from close prices.

    Example:
        series = series_of(num_factory, [1, 2, 3])
    """

    def _build(factory: NumFactory, closes: Iterable[float | int | str], name: str = "test_series") -> BarSeries:
        series = BarSeries(name, factory)
        for close in closes:
            series.add_bar_values(close)
        return series

    return _build


@pytest.fixture
def series_of_bars() -> Callable[..., BarSeries]:
    """
    Build a series from (close, high, low, volume) tuples.

    Example:
        series = series_of_bars(num_factory, [(10, 12, 8, 200), (8, 10, 7, 100)])
    """

    def _build(factory: NumFactory, rows: Iterable[Sequence[float | int]], name: str = "test_series") -> BarSeries:
        series = BarSeries(name, factory)
        for close, high, low, volume in rows:
            series.add_bar_values(close, high=high, low=low, volume=volume)
        return series

    return _build
