"""Tests for the bounded oscillators: RSI and MFI."""

from collections.abc import Callable
from unittest.mock import patch

import pytest

from src.modules.indicators.mfi import MFI
from src.modules.indicators.rsi import RSI
from src.modules.indicators.types import Candle, SignalStrength, SignalType

CandleFactory = Callable[..., list[Candle]]


class TestRSICalculate:
    """Tests for RSI.calculate."""

    def test_output_length_and_warmup(self, sample_candles: list[Candle]) -> None:
        """Test RSI is aligned and present from index period."""
        values = RSI().calculate(sample_candles)["rsi"]

        assert len(values) == len(sample_candles)
        assert all(v is None for v in values[:14])
        assert all(v is not None for v in values[14:])

    def test_values_bounded(self, sample_candles: list[Candle]) -> None:
        """Test RSI stays within [0, 100]."""
        values = RSI({"period": 5}).calculate(sample_candles)["rsi"]

        assert all(0.0 <= v <= 100.0 for v in values if v is not None)

    def test_rising_series_reaches_100(self, rising_candles: list[Candle]) -> None:
        """Test strictly rising closes have no losses, so RSI is 100."""
        values = RSI({"period": 14}).calculate(rising_candles)["rsi"]

        assert values[-1] == pytest.approx(100.0)

    def test_falling_series_reaches_0(self, make_candles: CandleFactory) -> None:
        """Test strictly falling closes have no gains, so RSI is 0."""
        values = RSI().calculate(make_candles([200.0 - i for i in range(20)]))["rsi"]

        assert values[-1] == pytest.approx(0.0)

    def test_flat_series_is_midpoint(self, flat_candles: list[Candle]) -> None:
        """Test no movement at all gives RSI 50."""
        values = RSI().calculate(flat_candles)["rsi"]

        assert values[-1] == 50.0

    def test_short_series_all_absent(self, make_candles: CandleFactory) -> None:
        """Test a series no longer than the period has no RSI."""
        values = RSI().calculate(make_candles([100.0 + i for i in range(14)]))["rsi"]

        assert values == [None] * 14

    def test_idempotent(self, sample_candles: list[Candle]) -> None:
        """Test repeated calls give identical output."""
        indicator = RSI()

        assert indicator.calculate(sample_candles) == indicator.calculate(sample_candles)


class TestRSIDetectSignal:
    """Tests for RSI.detect_signal."""

    def test_rising_series_is_strong_sell(self, rising_candles: list[Candle]) -> None:
        """Test 20 rising candles give an overbought STRONG sell."""
        signal = RSI({"period": 14}).detect_signal(rising_candles)

        assert signal.type == SignalType.SELL
        assert signal.strength == SignalStrength.STRONG
        assert signal.indicator == "RSI"
        assert signal.values["rsi"] == pytest.approx(100.0)
        assert signal.timestamp == rising_candles[-1].timestamp

    def test_flat_series_is_neutral(self, flat_candles: list[Candle]) -> None:
        """Test RSI 50 is inside the thresholds."""
        signal = RSI().detect_signal(flat_candles)

        assert signal.type == SignalType.NEUTRAL
        assert signal.strength == SignalStrength.WEAK

    @pytest.mark.parametrize(
        ("current", "strength"),
        [
            (20.0, SignalStrength.STRONG),
            (24.0, SignalStrength.MEDIUM),
            (27.0, SignalStrength.WEAK),
        ],
    )
    def test_oversold_strength_by_margin(
        self, make_candles: CandleFactory, current: float, strength: SignalStrength
    ) -> None:
        """Test BUY strength grows with the distance below oversold."""
        candles = make_candles([100.0, 99.0])

        with patch.object(RSI, "calculate", return_value={"rsi": [35.0, current]}):
            signal = RSI().detect_signal(candles)

        assert signal.type == SignalType.BUY
        assert signal.strength == strength

    def test_recovery_from_oversold(self, make_candles: CandleFactory) -> None:
        """Test crossing back above oversold is a MEDIUM buy."""
        candles = make_candles([100.0, 101.0])

        with patch.object(RSI, "calculate", return_value={"rsi": [25.0, 35.0]}):
            signal = RSI().detect_signal(candles)

        assert signal.type == SignalType.BUY
        assert signal.strength == SignalStrength.MEDIUM

    def test_fall_back_from_overbought(self, make_candles: CandleFactory) -> None:
        """Test crossing back below overbought is a MEDIUM sell."""
        candles = make_candles([100.0, 99.0])

        with patch.object(RSI, "calculate", return_value={"rsi": [75.0, 65.0]}):
            signal = RSI().detect_signal(candles)

        assert signal.type == SignalType.SELL
        assert signal.strength == SignalStrength.MEDIUM

    def test_custom_thresholds(self, make_candles: CandleFactory) -> None:
        """Test threshold overrides change the classification."""
        candles = make_candles([100.0, 101.0])

        with patch.object(RSI, "calculate", return_value={"rsi": [74.0, 75.0]}):
            signal = RSI({"overboughtThreshold": 80}).detect_signal(candles)

        assert signal.type == SignalType.NEUTRAL

    def test_invalid_thresholds_rejected(self) -> None:
        """Test oversold >= overbought raises ValueError."""
        with pytest.raises(ValueError, match="Thresholds"):
            RSI({"oversoldThreshold": 80, "overboughtThreshold": 70})


class TestMFI:
    """Tests for MFI."""

    def test_output_length_and_warmup(self, sample_candles: list[Candle]) -> None:
        """Test MFI is aligned and present from index period."""
        values = MFI().calculate(sample_candles)["mfi"]

        assert len(values) == len(sample_candles)
        assert all(v is None for v in values[:14])
        assert all(v is not None for v in values[14:])

    def test_values_bounded(self, sample_candles: list[Candle]) -> None:
        """Test MFI stays within [0, 100]."""
        values = MFI({"period": 5}).calculate(sample_candles)["mfi"]

        assert all(0.0 <= v <= 100.0 for v in values if v is not None)

    def test_rising_series_is_strong_sell(self, rising_candles: list[Candle]) -> None:
        """Test only positive money flow gives MFI 100 and a STRONG sell."""
        signal = MFI().detect_signal(rising_candles)

        assert signal.values["mfi"] == pytest.approx(100.0)
        assert signal.type == SignalType.SELL
        assert signal.strength == SignalStrength.STRONG

    def test_falling_series_is_strong_buy(self, make_candles: CandleFactory) -> None:
        """Test only negative money flow gives MFI 0 and a STRONG buy."""
        signal = MFI().detect_signal(make_candles([200.0 - i for i in range(20)]))

        assert signal.values["mfi"] == pytest.approx(0.0)
        assert signal.type == SignalType.BUY
        assert signal.strength == SignalStrength.STRONG

    def test_zero_volume_is_midpoint(self, make_candles: CandleFactory) -> None:
        """Test candles without volume (e.g. CoinGecko) give MFI 50."""
        candles = make_candles([100.0 + i for i in range(20)], volumes=[0.0] * 20)

        values = MFI().calculate(candles)["mfi"]
        signal = MFI().detect_signal(candles)

        assert values[-1] == 50.0
        assert signal.type == SignalType.NEUTRAL

    def test_default_thresholds(self) -> None:
        """Test MFI uses 80/20 thresholds by default."""
        params = MFI().params

        assert params.overbought_threshold == 80.0  # type: ignore[attr-defined]
        assert params.oversold_threshold == 20.0  # type: ignore[attr-defined]
