"""
Unit tests for qtanalysis.services.data.models.

Tests:
- Bar: construction, OHLC validation, backend consistency
- BarSeries: indices, append/replace semantics, revision counter, backend checks
"""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from qtanalysis.num import DecimalNumFactory, DoubleNumFactory, MixedPrecisionError
from qtanalysis.services.data.models import Bar, BarSeries, IndexOutOfRangeError


class TestBar:
    """Test Bar model."""

    def test_of_defaults_missing_prices_to_close(self, num_factory):
        """open/high/low default to the close price, volume to zero."""
        # Act
        bar = Bar.of(num_factory, close=10)

        # Assert
        assert bar.open.is_equal(num_factory.num_of(10))
        assert bar.high.is_equal(num_factory.num_of(10))
        assert bar.low.is_equal(num_factory.num_of(10))
        assert bar.volume.is_zero()
        assert bar.end_time is None

    def test_values_in_ohlcv_order(self, num_factory):
        # Arrange
        bar = Bar.of(num_factory, close=10, open=9, high=12, low=8, volume=200)

        # Act
        values = [value.int_value() for value in bar.values()]

        # Assert
        assert values == [9, 12, 8, 10, 200]

    def test_high_below_low_rejected(self, num_factory):
        """High must not be below low."""
        with pytest.raises(ValidationError, match="High"):
            Bar.of(num_factory, close=10, high=8, low=12)

    def test_mixed_backends_rejected(self):
        """All values of a bar come from one backend."""
        # Arrange
        decimal = DecimalNumFactory.get_instance()
        double = DoubleNumFactory.get_instance()

        # Act & Assert
        with pytest.raises(ValidationError, match="mix numeric backends"):
            Bar(
                open=decimal.one,
                high=decimal.two,
                low=decimal.one,
                close=double.one,
                volume=decimal.zero,
            )

    def test_bar_is_frozen(self, num_factory):
        """Bars are immutable facts."""
        # Arrange
        bar = Bar.of(num_factory, close=10)

        # Act & Assert
        with pytest.raises(ValidationError):
            bar.close = num_factory.one  # type: ignore[misc]


class TestBarSeriesIndices:
    """Test BarSeries index bounds."""

    def test_empty_series(self, num_factory):
        """An empty series has begin and end index -1."""
        # Arrange & Act
        series = BarSeries("empty", num_factory)

        # Assert
        assert series.is_empty
        assert series.bar_count == 0
        assert series.begin_index == -1
        assert series.end_index == -1
        assert len(series) == 0

    def test_indices_after_appending(self, num_factory, series_of):
        # Arrange & Act
        series = series_of(num_factory, [1, 2, 3])

        # Assert
        assert series.begin_index == 0
        assert series.end_index == 2
        assert series.bar_count == 3
        assert series.first_bar.close.is_equal(num_factory.one)
        assert series.last_bar.close.is_equal(num_factory.three)

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_get_bar_out_of_range_raises(self, num_factory, series_of, index):
        # Arrange
        series = series_of(num_factory, [1, 2, 3])

        # Act & Assert
        with pytest.raises(IndexOutOfRangeError):
            series.get_bar(index)

    def test_get_bar_on_empty_series_raises(self, num_factory):
        with pytest.raises(IndexOutOfRangeError):
            BarSeries("empty", num_factory).get_bar(0)

    def test_index_error_is_index_error(self):
        assert issubclass(IndexOutOfRangeError, IndexError)


class TestBarSeriesMutation:
    """Test append and replace semantics."""

    def test_append_bumps_revision(self, num_factory):
        # Arrange
        series = BarSeries("s", num_factory)

        # Act
        series.add_bar_values(1)
        series.add_bar_values(2)

        # Assert
        assert series.revision == 2

    def test_replace_last_bar(self, num_factory, series_of):
        """Replacing updates the open last bar without growing the series."""
        # Arrange
        series = series_of(num_factory, [1, 2])
        revision = series.revision

        # Act
        series.add_bar_values(5, replace=True)

        # Assert
        assert series.bar_count == 2
        assert series.last_bar.close.is_equal(num_factory.num_of(5))
        assert series.revision == revision + 1

    def test_replace_on_empty_series_appends(self, num_factory):
        # Arrange
        series = BarSeries("s", num_factory)

        # Act
        series.add_bar_values(5, replace=True)

        # Assert
        assert series.bar_count == 1

    def test_bars_returns_copy(self, num_factory, series_of):
        # Arrange
        series = series_of(num_factory, [1, 2])

        # Act
        series.bars.clear()

        # Assert
        assert series.bar_count == 2

    def test_end_time_must_increase(self, num_factory):
        """Appended bars end after the current last bar."""
        # Arrange
        start = datetime(2024, 1, 2, 16, 0)
        series = BarSeries("s", num_factory)
        series.add_bar_values(1, end_time=start)

        # Act & Assert
        with pytest.raises(ValueError, match="before last bar end"):
            series.add_bar_values(2, end_time=start - timedelta(days=1))

    def test_bar_from_other_backend_rejected(self):
        """A series only accepts bars of its own backend."""
        # Arrange
        series = BarSeries("s", DecimalNumFactory.get_instance())
        bar = Bar.of(DoubleNumFactory.get_instance(), close=1)

        # Act & Assert
        with pytest.raises(MixedPrecisionError):
            series.add_bar(bar)

    def test_bar_from_other_decimal_precision_rejected(self):
        """Decimal bars must match the series factory's precision."""
        # Arrange
        series = BarSeries("s", DecimalNumFactory.get_instance())
        bar = Bar.of(DecimalNumFactory(precision=8), close=1)

        # Act & Assert
        with pytest.raises(MixedPrecisionError):
            series.add_bar(bar)
        assert series.is_empty

    def test_initial_bars(self, num_factory):
        # Arrange
        bars = [Bar.of(num_factory, close=close) for close in (1, 2, 3)]

        # Act
        series = BarSeries("s", num_factory, bars=bars)

        # Assert
        assert series.bar_count == 3
        assert series.revision == 3


class TestBarSeriesDefaults:
    """Test configuration-driven defaults."""

    def test_default_factory_from_system_config(self):
        """Without an explicit factory the configured backend is used."""
        # Act
        series = BarSeries()

        # Assert
        assert series.name == "unnamed_series"
        assert series.num_factory is DecimalNumFactory.get_instance()

    def test_double_backend_from_config(self, tmp_path):
        """The configured backend applies to new series."""
        # Arrange
        from qtanalysis.system.config import get_system_config

        config_file = tmp_path / "double.yaml"
        config_file.write_text("num:\n  backend: double\n")
        get_system_config(config_file)

        # Act
        series = BarSeries("s")

        # Assert
        assert series.num_factory is DoubleNumFactory.get_instance()
