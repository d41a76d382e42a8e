"""Month-driven growth phase and seasonal tip lookups for warm-season turf."""

from __future__ import annotations

import datetime as dt
from typing import Dict

from app.domain import GrowthPhase, GrowthPhaseInfo


PHASE_INFO: Dict[GrowthPhase, GrowthPhaseInfo] = {
    GrowthPhase.DORMANT: GrowthPhaseInfo(
        phase=GrowthPhase.DORMANT,
        label="Dormant",
        description="Grass is dormant — protect and prepare",
        emoji="😴",
    ),
    GrowthPhase.GREEN_UP: GrowthPhaseInfo(
        phase=GrowthPhase.GREEN_UP,
        label="Green-Up",
        description="Grass is waking up — light feeding time",
        emoji="🌱",
    ),
    GrowthPhase.PEAK_GROWTH: GrowthPhaseInfo(
        phase=GrowthPhase.PEAK_GROWTH,
        label="Peak Growth",
        description="Full speed ahead — mow every 5-7 days",
        emoji="🚀",
    ),
    GrowthPhase.TRANSITION: GrowthPhaseInfo(
        phase=GrowthPhase.TRANSITION,
        label="Transition",
        description="Slowing down — prepare for dormancy",
        emoji="🍂",
    ),
}

MONTH_TO_PHASE: Dict[int, GrowthPhase] = {
    1: GrowthPhase.DORMANT,
    2: GrowthPhase.DORMANT,
    3: GrowthPhase.GREEN_UP,
    4: GrowthPhase.GREEN_UP,
    5: GrowthPhase.PEAK_GROWTH,
    6: GrowthPhase.PEAK_GROWTH,
    7: GrowthPhase.PEAK_GROWTH,
    8: GrowthPhase.PEAK_GROWTH,
    9: GrowthPhase.PEAK_GROWTH,
    10: GrowthPhase.TRANSITION,
    11: GrowthPhase.TRANSITION,
    12: GrowthPhase.DORMANT,
}

MONTHLY_TIPS: Dict[int, str] = {
    1: "Keep off frozen or frosty grass — dormant Bermuda is fragile.",
    2: "Sharpen mower blades before the Spring Scalp season.",
    3: "Pre-emergent window is closing — apply before soil hits 55°F.",
    4: "First cut of the year? Set blade to lowest setting for the scalp.",
    5: "Water deeply but infrequently — 1 inch per week encourages deep roots.",
    6: "Mow every 5-7 days. Don't remove more than 1/3 of the blade height.",
    7: "Watch for chinch bugs — brown patches that don't respond to water.",
    8: "Hold off on heavy nitrogen — avoid pushing soft growth before fall.",
    9: "Apply a winterizer fertilizer to strengthen roots for dormancy.",
    10: "Last mow of the season — cut slightly lower than normal.",
    11: "Leaf blower > mower. Don't mow dormant grass unnecessarily.",
    12: "Great time to service your mower and prepare for next season.",
}

DEFAULT_TIP = "Keep your equipment clean and sharp."


def classify_growth_phase(day: dt.date) -> GrowthPhaseInfo:
    """Pure function: map a date to its growth phase using the month only."""
    return PHASE_INFO[MONTH_TO_PHASE[day.month]]


def quick_tip(day: dt.date) -> str:
    """Return the seasonal tip for the month of `day`."""
    return MONTHLY_TIPS.get(day.month, DEFAULT_TIP)
