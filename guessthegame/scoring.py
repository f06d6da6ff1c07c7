# guessthegame/scoring.py
from __future__ import annotations

from guessthegame.config import (
    BONUS_BASE_POINTS,
    DIFFICULTY_STEP,
    HOT_STREAK_MAX_GUESSES,
    HOT_STREAK_MULTIPLIER,
    SCORE_TABLE,
    ZOOM_BONUS_STEP,
)


def base_points(guess_count: int) -> int:
    """5/3/2/1/1 for a win on guess 1..5; 0 outside that range."""
    if 1 <= guess_count <= len(SCORE_TABLE):
        return SCORE_TABLE[guess_count - 1]
    return 0


def difficulty_bonus(streak: int) -> int:
    return streak // DIFFICULTY_STEP


def zoom_bonus(level_index: int) -> int:
    """Extra screenshot zoom, in percent, for the 0-based level index."""
    return (level_index // DIFFICULTY_STEP) * ZOOM_BONUS_STEP


def round_points(guess_count: int, streak: int, hot_streak_active: bool) -> int:
    """
    Points for a correct guess. `streak` and `hot_streak_active` are the
    values before this win is counted.
    """
    points = base_points(guess_count) + difficulty_bonus(streak)
    if hot_streak_active:
        points *= HOT_STREAK_MULTIPLIER
    return points


def bonus_round_points(streak: int, hot_streak_active: bool, correct: bool) -> int:
    if not correct:
        return 0
    points = BONUS_BASE_POINTS + difficulty_bonus(streak)
    if hot_streak_active:
        points *= HOT_STREAK_MULTIPLIER
    return points


def next_hot_streak_count(count: int, winning_guess_count: int) -> int:
    if winning_guess_count <= HOT_STREAK_MAX_GUESSES:
        return count + 1
    return 0
