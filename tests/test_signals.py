"""Tests for the signal engine — rule votes, tallying, entry points."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from market_signals.analysis.indicators import compute_snapshot
from market_signals.models import Bar, IndicatorSnapshot
from market_signals.signals import RULE_REGISTRY, Rule, SignalContext, SignalEngine, register
from market_signals.signals.engine import round_half_up
from market_signals.signals.rules.candles import pattern_bias

T0 = datetime(2026, 1, 5, tzinfo=timezone.utc)


def _bars(closes):
    return [
        Bar(asset_id=1, timestamp=T0 + timedelta(seconds=5 * i), open=c, high=c, low=c, close=c)
        for i, c in enumerate(closes)
    ]


def _snapshot(**fields):
    return IndicatorSnapshot(asset_id=1, timestamp=T0, **fields)


@pytest.fixture
def engine():
    return SignalEngine()


class TestRegistry:
    def test_default_rules_registered(self):
        assert set(RULE_REGISTRY) == {
            "rsi_extremes",
            "macd_sign",
            "price_vs_sma20",
            "price_vs_ema12",
            "candle_patterns",
            "momentum",
        }

    def test_engine_uses_registry_by_default(self, engine):
        assert {r.name for r in engine.rules} == set(RULE_REGISTRY)

    def test_rules_run_in_name_order(self, engine):
        names = [r.name for r in engine.rules]
        assert names == sorted(RULE_REGISTRY)
        decision = engine.evaluate(_bars([100.0, 101.0]), _snapshot())
        assert list(decision.rule_votes) == names

    def test_duplicate_name_rejected(self):
        class Impostor(Rule):
            name = "momentum"

            def votes(self, ctx: SignalContext):
                return []

        with pytest.raises(ValueError):
            register(Impostor)
        assert RULE_REGISTRY["momentum"] is not Impostor

    def test_custom_rule_set(self):
        class AlwaysSell(Rule):
            name = "always_sell"

            def votes(self, ctx: SignalContext):
                return ["SELL", "SELL"]

        decision = SignalEngine(rules=[AlwaysSell()]).evaluate(_bars([100.0]), _snapshot())
        assert decision.direction == "SELL"
        assert decision.sell_votes == 2
        assert decision.rule_votes == {"always_sell": ["SELL", "SELL"]}


class TestPatternBias:
    def test_bullish_names(self):
        assert pattern_bias("Bullish Hammer") == "BUY"
        assert pattern_bias("Bullish Engulfing") == "BUY"

    def test_bearish_names(self):
        assert pattern_bias("Shooting Star") == "SELL"
        assert pattern_bias("Bearish Engulfing") == "SELL"

    def test_unknown_name(self):
        assert pattern_bias("Doji") is None


class TestVoting:
    def test_rising_series_is_buy(self, engine):
        bars = _bars([float(p) for p in range(100, 125)])
        snap = compute_snapshot(1, bars, T0)
        decision = engine.evaluate(bars[-10:], snap)

        assert decision.direction == "BUY"
        assert 80 <= decision.confidence <= 95
        # RSI 100 is overbought and votes SELL; everything else votes BUY.
        assert decision.buy_votes == 4
        assert decision.sell_votes == 1
        assert decision.confidence == 80.0
        assert decision.entry_point == 124.12

    def test_unanimous_buy_clamps_to_95(self, engine):
        bars = _bars([99.0, 100.0])
        snap = _snapshot(rsi14=20.0, macd=1.5, sma20=95.0, ema12=98.0)
        decision = engine.evaluate(bars, snap, patterns=["Bullish Hammer"])
        assert decision.direction == "BUY"
        assert decision.buy_votes == 6
        assert decision.sell_votes == 0
        assert decision.confidence == 95.0
        assert decision.entry_point == 100.1

    def test_unanimous_sell(self, engine):
        bars = _bars([101.0, 100.0])
        snap = _snapshot(rsi14=80.0, macd=-1.0, sma20=105.0, ema12=102.0)
        decision = engine.evaluate(bars, snap)
        assert decision.direction == "SELL"
        assert decision.confidence == 95.0
        assert decision.entry_point == 99.9

    def test_tie_goes_to_buy_at_floor_confidence(self, engine):
        # rsi abstains; macd SELL, sma BUY, ema SELL, momentum BUY
        bars = _bars([99.0, 100.0])
        snap = _snapshot(rsi14=50.0, macd=-0.5, sma20=98.0, ema12=101.0)
        decision = engine.evaluate(bars, snap)
        assert decision.buy_votes == decision.sell_votes == 2
        assert decision.direction == "BUY"
        assert decision.confidence == 55.0

    def test_one_more_sell_flips(self, engine):
        bars = _bars([99.0, 100.0])
        snap = _snapshot(rsi14=50.0, macd=-0.5, sma20=98.0, ema12=101.0)
        decision = engine.evaluate(bars, snap, patterns=["Shooting Star"])
        assert decision.sell_votes == 3
        assert decision.direction == "SELL"
        assert decision.confidence == 60.0

    def test_rsi_band_abstains(self, engine):
        decision = engine.evaluate(_bars([99.0, 100.0]), _snapshot(rsi14=45.0, macd=1.0))
        assert decision.rule_votes["rsi_extremes"] == []

    def test_momentum_abstains_with_one_bar(self, engine):
        decision = engine.evaluate(_bars([100.0]), _snapshot(macd=1.0))
        assert decision.rule_votes["momentum"] == []

    def test_equal_close_momentum_is_sell(self, engine):
        decision = engine.evaluate(_bars([100.0, 100.0]), _snapshot(macd=1.0))
        assert decision.rule_votes["momentum"] == ["SELL"]

    def test_each_pattern_casts_a_vote(self, engine):
        decision = engine.evaluate(
            _bars([100.0]),
            _snapshot(),
            patterns=["Bullish Hammer", "Bullish Engulfing", "Bearish Engulfing"],
        )
        assert decision.rule_votes["candle_patterns"] == ["BUY", "BUY", "SELL"]

    def test_missing_indicators_use_neutral_defaults(self, engine):
        decision = engine.evaluate(_bars([100.0]), _snapshot())
        # macd 0 -> SELL, close == sma20 == ema12 -> SELL, rsi 50 abstains
        assert decision.rule_votes["rsi_extremes"] == []
        assert decision.sell_votes == 3
        assert decision.buy_votes == 0
        assert decision.direction == "SELL"
        assert decision.entry_point == 99.9

    def test_patterns_detected_when_not_given(self, engine):
        bars = _bars([10.0, 10.0]) + [
            Bar(asset_id=1, timestamp=T0 + timedelta(seconds=10), open=10, high=10.1, low=8, close=10.05)
        ]
        decision = engine.evaluate(bars, _snapshot(macd=1.0))
        assert decision.patterns == ("Bullish Hammer",)

    def test_requires_a_bar(self, engine):
        with pytest.raises(ValueError):
            engine.evaluate([], _snapshot())


class TestDeterminism:
    def test_same_inputs_same_decision(self, engine):
        bars = _bars([100.0, 101.5, 100.7, 102.2])
        snap = _snapshot(rsi14=61.2, macd=0.3, sma20=100.9, ema12=101.4)
        first = engine.evaluate(bars, snap)
        second = SignalEngine().evaluate(list(bars), snap.model_copy())
        assert (first.direction, first.confidence, first.entry_point) == (
            second.direction, second.confidence, second.entry_point,
        )


class TestEntryPoint:
    def test_price_precision(self, engine):
        bars = _bars([1.0875])
        snap = _snapshot(macd=1.0, sma20=1.0, ema12=1.0)
        assert engine.evaluate(bars, snap, price_precision=4).entry_point == 1.0886
        assert engine.evaluate(bars, snap, price_precision=2).entry_point == 1.09

    def test_round_half_up(self):
        assert round_half_up(2.675, 2) == 2.68
        assert round_half_up(83.25, 1) == 83.3


class TestToPrediction:
    def test_carries_technical_data(self, engine):
        bars = _bars([99.0, 100.0])
        snap = _snapshot(rsi14=20.0, macd=1.5, sma20=95.0, ema12=98.0)
        decision = engine.evaluate(bars, snap, patterns=["Bullish Hammer"])
        prediction = decision.to_prediction(1, T0, snap)
        assert prediction.outcome == "PENDING"
        assert prediction.direction == "BUY"
        assert prediction.technical_data.patterns == ["Bullish Hammer"]
        assert prediction.technical_data.rsi == 20.0
        assert prediction.technical_data.buy_votes == 6
