"""Tests for the adaptive tuner."""

import pytest
from skykit.solution.adaptive import AdaptiveTuner, StrategyMode


def overflow(airport="ZRH", kit_class="Economy", amount=100.0):
    return {
        "code": "INVENTORY_EXCEEDS_CAPACITY",
        "penalty": amount,
        "reason": f"Airport {airport} exceeds {kit_class} capacity",
    }


def unfulfilled(kit_class="Economy", amount=100.0, airport=None):
    reason = f"Flight SK1 unfulfilled {kit_class} passengers"
    if airport:
        reason = f"Airport {airport}: " + reason
    return {"code": "FLIGHT_UNFULFILLED", "penalty": amount, "reason": reason}


def play_rounds(tuner, totals, day=0):
    for hour, total in enumerate(totals):
        penalties = [{"code": "FLIGHT_UNFULFILLED", "penalty": total, "reason": ""}] if total else []
        tuner.record_penalties(penalties, day, hour)


@pytest.fixture
def tuner():
    return AdaptiveTuner()


def test_neutral_without_history(tuner):
    assert tuner.mode == StrategyMode.BALANCED
    assert tuner.buffer_percent("ZRH", "ECONOMY", 0.9) == pytest.approx(0.9)
    assert tuner.risk_score("ZRH") == 0.5
    assert tuner.purchase_adjustment("ECONOMY") == 1.0
    assert tuner.is_hot_airport("ZRH", 0) is False


def test_no_adaptation_before_six_rounds(tuner):
    play_rounds(tuner, [0, 0, 0, 0, 1000])

    assert tuner.buffer_multiplier == 1.0
    assert tuner.mode == StrategyMode.BALANCED


def test_worsening_trend_goes_conservative(tuner):
    play_rounds(tuner, [10] * 6 + [100] * 6)

    assert tuner.mode == StrategyMode.CONSERVATIVE
    assert tuner.buffer_multiplier > 1.0


def test_multiplier_capped(tuner):
    # alternating worsening blocks keep stepping the multiplier up
    for _ in range(10):
        play_rounds(tuner, [1] * 6 + [1000] * 6)

    assert tuner.buffer_multiplier <= 1.2


def test_improving_trend_goes_aggressive(tuner):
    # recent 55 vs older 100 on the ninth round
    play_rounds(tuner, [100] * 6 + [10] * 3)

    assert tuner.mode == StrategyMode.AGGRESSIVE
    assert tuner.buffer_multiplier == pytest.approx(0.97)


def test_aggressive_does_not_repeat_back_to_back(tuner):
    play_rounds(tuner, [100] * 6 + [10] * 4)

    assert tuner.mode == StrategyMode.BALANCED
    assert tuner.buffer_multiplier == pytest.approx(0.97 * 0.98 + 0.02)


def test_multiplier_floor(tuner):
    tuner.buffer_multiplier = 0.91
    play_rounds(tuner, [100] * 6 + [10] * 3)

    assert tuner.buffer_multiplier == pytest.approx(0.9)


def test_balanced_relaxes_toward_one(tuner):
    tuner.buffer_multiplier = 1.2
    play_rounds(tuner, [50] * 6)

    assert tuner.mode == StrategyMode.BALANCED
    assert tuner.buffer_multiplier == pytest.approx(1.2 * 0.98 + 0.02)


def test_economy_overflows_raise_boost(tuner):
    for hour in range(6):
        tuner.record_penalties([overflow(airport=f"AP{i}") for i in range(6)], day=1, hour=hour)

    assert tuner.economy_boost > 0
    assert tuner.economy_boost <= 0.15
    assert tuner.buffer_percent("B1", "ECONOMY", 0.9) < tuner.buffer_percent("B1", "BUSINESS", 0.9)


def test_premium_economy_overflows_do_not_raise_boost(tuner):
    for hour in range(6):
        tuner.record_penalties(
            [overflow(airport=f"AP{i}", kit_class="Premium Economy") for i in range(6)], day=1, hour=hour
        )

    assert tuner.economy_boost == 0


def test_airport_risk_updates(tuner):
    tuner.record_penalties([overflow("ZRH")], day=0, hour=0)

    assert tuner.risk_score("ZRH") == pytest.approx((0.5 + 0.1) * 0.99)

    tuner.record_penalties([unfulfilled(airport="ZRH")], day=0, hour=1)

    profile = tuner.airport_profiles["ZRH"]
    assert profile.overflow_count == 1
    assert profile.unfulfilled_count == 1
    assert profile.last_overflow_day == 0


def test_risk_stays_in_bounds(tuner):
    tuner.record_penalties([overflow("ZRH") for _ in range(50)], day=0, hour=0)
    assert tuner.risk_score("ZRH") <= 1.0

    tuner.record_penalties([unfulfilled(airport="FRA") for _ in range(200)], day=0, hour=1)
    assert tuner.risk_score("FRA") >= 0.1


def test_hot_airport_and_high_risk_buffer(tuner):
    tuner.record_penalties([overflow("ZRH") for _ in range(5)], day=3, hour=0)

    assert tuner.is_hot_airport("ZRH", 4) is True
    assert tuner.is_hot_airport("ZRH", 6) is False
    assert tuner.buffer_percent("ZRH", "FIRST", 0.9) < tuner.buffer_percent("FRA", "FIRST", 0.9)
    assert "ZRH" in tuner.summary()["hotAirports"]


def test_buffer_percent_clamped(tuner):
    assert tuner.buffer_percent("ZRH", "FIRST", 2.0) == 0.95
    assert tuner.buffer_percent("ZRH", "FIRST", 0.1) == 0.5


def test_purchase_adjustment(tuner):
    tuner.record_penalties([unfulfilled() for _ in range(6)], day=0, hour=0)
    assert tuner.purchase_adjustment("ECONOMY") == 1.1

    tuner.record_penalties([unfulfilled() for _ in range(5)], day=0, hour=1)
    assert tuner.purchase_adjustment("ECONOMY") == 1.2

    tuner.record_penalties([overflow(kit_class="Business") for _ in range(6)], day=0, hour=2)
    assert tuner.purchase_adjustment("BUSINESS") == 0.9


def test_summary_and_reset(tuner):
    play_rounds(tuner, [10] * 6 + [100] * 6)
    summary = tuner.summary()

    assert summary["mode"] == "conservative"
    assert summary["recentPenaltyAvg"] == pytest.approx(100.0)
    assert set(summary) == {"mode", "bufferMultiplier", "economyBoost", "hotAirports", "recentPenaltyAvg"}

    tuner.reset()

    assert tuner.mode == StrategyMode.BALANCED
    assert tuner.buffer_multiplier == 1.0
    assert tuner.summary()["recentPenaltyAvg"] == 0.0
