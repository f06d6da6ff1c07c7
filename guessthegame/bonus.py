# guessthegame/bonus.py
from __future__ import annotations

import random
from typing import Optional, Sequence

from guessthegame.config import BONUS_CHANCE, BONUS_CHOICES, BONUS_MIN_STREAK, SHOP_EVERY
from guessthegame.models import BonusRound, Game, RunState


def bonus_eligible(state: RunState) -> bool:
    """Everything except the dice roll."""
    return (
        state.streak >= BONUS_MIN_STREAK
        and not state.has_bonus_round_occurred_in_current_block
        # shop boundaries take precedence
        and state.streak % SHOP_EVERY != 0
    )


def roll_bonus(rng: random.Random, state: RunState) -> bool:
    if not bonus_eligible(state):
        return False
    return rng.random() < BONUS_CHANCE


def generate_bonus_round(
    rng: random.Random,
    catalog: Sequence[Game],
    exclude_id: Optional[int] = None,
) -> Optional[BonusRound]:
    """
    Pick BONUS_CHOICES games and one of them as the named target.
    `exclude_id` keeps the upcoming normal round out of the lineup.
    """
    pool = [g for g in catalog if g.id != exclude_id]
    if len(pool) < BONUS_CHOICES:
        return None
    picks = rng.sample(pool, BONUS_CHOICES)
    target = rng.choice(picks)
    return BonusRound(game_ids=[g.id for g in picks], target_id=target.id)
