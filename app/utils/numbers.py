"""Rounding helpers for scores and percentiles"""

import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_percentage(correct: int, total: int) -> int:
    """Rounded percentage, 0 for an empty quiz"""
    if total <= 0:
        return 0
    return round_half_up(correct * 100 / total)
