"""Match clock helpers for half-relative display values."""

from __future__ import annotations

from typing import Iterable, List

FIRST_HALF_LABEL = "1st Half"
SECOND_HALF_LABEL = "2nd Half"


def minutes_to_seconds(minutes: float) -> int:
    """Convert a match-clock minute value to whole seconds."""
    return int(round(minutes * 60))


def times_to_seconds(times_in_minutes: Iterable[float]) -> List[int]:
    """Convert a sequence of minute values to whole seconds."""
    return [minutes_to_seconds(t) for t in times_in_minutes]


def format_time(minutes: float) -> str:
    """Format minutes as ``M:SS``.

    Rounds to the nearest whole second first, so 1.9999 renders as "2:00"
    rather than "1:60".

    Examples:
        format_time(0) -> "0:00"
        format_time(12.5) -> "12:30"
        format_time(8.571428) -> "8:34"
    """
    total_seconds = minutes_to_seconds(minutes)
    if total_seconds < 0:
        raise ValueError(f"cannot format negative match time: {minutes}")
    mins, secs = divmod(total_seconds, 60)
    return f"{mins}:{secs:02d}"


def half_label(minutes: float, minutes_per_half: float) -> str:
    """Return "1st Half" up to and including half time, "2nd Half" after."""
    return FIRST_HALF_LABEL if minutes <= minutes_per_half else SECOND_HALF_LABEL


def time_within_half(minutes: float, minutes_per_half: float) -> float:
    """Minutes elapsed since the start of the half containing ``minutes``."""
    return minutes if minutes <= minutes_per_half else minutes - minutes_per_half


def format_half_time(minutes: float, minutes_per_half: float) -> str:
    """Combined display value, e.g. ``"2nd Half 5:00"``."""
    return f"{half_label(minutes, minutes_per_half)} {format_time(time_within_half(minutes, minutes_per_half))}"
