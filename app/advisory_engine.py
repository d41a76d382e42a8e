"""Deterministic weather advisories for mowing, watering and fertilizing.

Each activity is an ordered cascade of (predicate, reason) rules. Rules are
checked top to bottom; the first one that fires blocks the activity and its
reason is reported. If nothing fires the activity is allowed with the
category's default reason. The three cascades are independent of each other.
"""

from __future__ import annotations

from typing import Callable, Sequence, Tuple

from app.domain import Advisory, AdvisoryResult, WeatherSnapshot

WET_GROUND_RAIN_TODAY_INCHES = 0.25
WINDY_MPH = 20.0
COLD_F = 50.0
HOT_F = 95.0
RAIN_EXPECTED_48H_INCHES = 0.5
RAINED_TODAY_INCHES = 0.3

Predicate = Callable[[WeatherSnapshot], bool]
Reason = Callable[[WeatherSnapshot], str]
Rule = Tuple[Predicate, Reason]


def is_wet_ground(w: WeatherSnapshot) -> bool:
    """Raining now, or enough rain today that the turf is still wet."""
    return w.is_raining_now or w.rain_today_inches > WET_GROUND_RAIN_TODAY_INCHES


def is_too_windy(w: WeatherSnapshot) -> bool:
    return w.current_wind_speed_mph > WINDY_MPH


def is_too_cold(w: WeatherSnapshot) -> bool:
    return w.current_temperature_f < COLD_F


def _raining(w: WeatherSnapshot) -> bool:
    return w.is_raining_now


def _rain_expected(w: WeatherSnapshot) -> bool:
    return w.rain_next_48h_inches > RAIN_EXPECTED_48H_INCHES


def _const(text: str) -> Reason:
    return lambda _w: text


MOW_DEFAULT = "Good conditions for mowing"
MOW_RULES: Sequence[Rule] = (
    (_raining, _const("🌧️ Raining — wait for dry grass")),
    (is_wet_ground, _const("💧 Ground is wet — let it dry first")),
    (is_too_windy, _const("💨 Too windy — clippings will scatter")),
    (is_too_cold, _const("🥶 Too cold — grass isn't growing")),
)

WATER_DEFAULT = "No rain expected — water if needed"
WATER_RULES: Sequence[Rule] = (
    (_raining, _const("🌧️ It's raining — nature's got you covered")),
    (_rain_expected, lambda w: f'🌧️ {w.rain_next_48h_inches:.1f}" rain expected — hold off'),
    (lambda w: w.rain_today_inches > RAINED_TODAY_INCHES, _const("💧 Already got rain today — skip watering")),
)

FERTILIZE_DEFAULT = "Safe to fertilize today"
FERTILIZE_RULES: Sequence[Rule] = (
    (_rain_expected, _const("🌧️ Rain coming — fertilizer will wash away")),
    (is_wet_ground, _const("💧 Wet ground — wait for it to dry")),
    (lambda w: w.current_temperature_f > HOT_F, _const("🔥 Too hot — risk of burning the lawn")),
    (is_too_cold, _const("🥶 Too cold — grass can't absorb nutrients")),
)


def run_cascade(weather: WeatherSnapshot, rules: Sequence[Rule], default_reason: str) -> Advisory:
    """Evaluate rules in order; the first match blocks, otherwise allow."""
    for predicate, reason in rules:
        if predicate(weather):
            return Advisory(allowed=False, reason=reason(weather))
    return Advisory(allowed=True, reason=default_reason)


def evaluate_advisory(weather: WeatherSnapshot) -> AdvisoryResult:
    """Pure function: turn a weather snapshot into mow / water / fertilize advisories."""
    return AdvisoryResult(
        mow=run_cascade(weather, MOW_RULES, MOW_DEFAULT),
        water=run_cascade(weather, WATER_RULES, WATER_DEFAULT),
        fertilize=run_cascade(weather, FERTILIZE_RULES, FERTILIZE_DEFAULT),
    )
