"""Surge multiplier rules.

Each rule doubles the multiplier independently, so the result is always one
of 1, 2, 4 or 8. The only time-dependent input is the hour of day, which the
caller reads from a clock and passes in.
"""
from datetime import datetime
from typing import Callable, Optional

from app.schemas.quote import SurgeContext
from app.schemas.route import RouteSummary

MAJOR_ROAD_FRACTION_THRESHOLD = 0.5
SCARCE_DRIVER_COUNT = 5
OFF_PEAK_AFTER_HOUR = 22
OFF_PEAK_BEFORE_HOUR = 6
SURGE_FACTOR = 2.0

Clock = Callable[[], datetime]


def current_hour(clock: Optional[Clock] = None) -> int:
    now = clock() if clock is not None else datetime.now()
    return now.hour


def build_surge_context(summary: RouteSummary, available_driver_count: int, hour_of_day: int) -> SurgeContext:
    return SurgeContext(
        major_road_fraction=summary.major_road_fraction,
        available_driver_count=available_driver_count,
        hour_of_day=hour_of_day,
    )


def is_major_road_heavy(ctx: SurgeContext) -> bool:
    return ctx.major_road_fraction > MAJOR_ROAD_FRACTION_THRESHOLD


def is_driver_scarce(ctx: SurgeContext) -> bool:
    return ctx.available_driver_count < SCARCE_DRIVER_COUNT


def is_off_peak(ctx: SurgeContext) -> bool:
    return ctx.hour_of_day > OFF_PEAK_AFTER_HOUR or ctx.hour_of_day < OFF_PEAK_BEFORE_HOUR


SURGE_RULES = {
    "major_road": is_major_road_heavy,
    "driver_scarcity": is_driver_scarce,
    "off_peak": is_off_peak,
}


def compute_multiplier(ctx: SurgeContext) -> float:
    multiplier = 1.0
    for rule in SURGE_RULES.values():
        if rule(ctx):
            multiplier *= SURGE_FACTOR
    return multiplier


def surge_breakdown(ctx: SurgeContext) -> dict:
    """Which rules fired, keyed by rule name."""
    return {name: rule(ctx) for name, rule in SURGE_RULES.items()}
