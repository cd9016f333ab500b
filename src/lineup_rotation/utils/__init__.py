"""Utility helpers for the lineup rotation engine."""

from .clock import (
    format_half_time,
    format_time,
    half_label,
    minutes_to_seconds,
    time_within_half,
    times_to_seconds,
)

__all__ = [
    "format_half_time",
    "format_time",
    "half_label",
    "minutes_to_seconds",
    "time_within_half",
    "times_to_seconds",
]
