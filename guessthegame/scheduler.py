# guessthegame/scheduler.py
from __future__ import annotations

import logging
import random
from typing import Dict, List, MutableSequence, Optional, Sequence, Tuple, TypeVar

from guessthegame.config import (
    FRIENDLY_PROBABILITIES,
    RATING_THRESHOLD_RANGE,
    SEEDED_FIXED_COUNT,
    SEEDED_ORDER_SEED,
    YEAR_THRESHOLD_RANGE,
)
from guessthegame.models import CropPosition, Game

logger = logging.getLogger(__name__)

T = TypeVar("T")


def fisher_yates(rng: random.Random, items: MutableSequence[T]) -> MutableSequence[T]:
    """Uniform in-place shuffle driven only by rng.random()."""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items


def partition_catalog(
    rng: random.Random,
    games: Sequence[Game],
) -> Tuple[List[Game], List[Game], List[Game]]:
    """
    Split into (friendly_rated, friendly_new, standard). Thresholds are drawn
    per game so the boundary is fuzzy. Rated wins when a game is both.
    """
    rated: List[Game] = []
    new: List[Game] = []
    standard: List[Game] = []
    for game in games:
        rating_threshold = rng.randint(*RATING_THRESHOLD_RANGE)
        year_threshold = rng.randint(*YEAR_THRESHOLD_RANGE)
        if (game.rating or 0) >= rating_threshold:
            rated.append(game)
        elif (game.year or 0) >= year_threshold:
            new.append(game)
        else:
            standard.append(game)
    return rated, new, standard


def _pop_friendly(rng: random.Random, rated: List[Game], new: List[Game]) -> Optional[Game]:
    use_rated = rng.random() < 0.5
    if use_rated and rated:
        return rated.pop()
    if not use_rated and new:
        return new.pop()
    if rated:
        return rated.pop()
    if new:
        return new.pop()
    return None


def weighted_game_order(rng: random.Random, games: Sequence[Game]) -> List[int]:
    """
    Endless order: early slots lean toward well-known or recent titles,
    everything else follows in random order. Every id appears exactly once.
    """
    rated, new, standard = partition_catalog(rng, games)
    logger.debug("scheduler pools: rated=%d new=%d standard=%d",
                 len(rated), len(new), len(standard))

    fisher_yates(rng, rated)
    fisher_yates(rng, new)
    fisher_yates(rng, standard)

    order: List[int] = []
    for chance in FRIENDLY_PROBABILITIES:
        if not (rated or new or standard):
            break
        roll = rng.random()
        if roll < chance and (rated or new):
            picked = _pop_friendly(rng, rated, new)
        elif standard:
            picked = standard.pop()
        else:
            picked = _pop_friendly(rng, rated, new)
        if picked is not None:
            order.append(picked.id)

    remaining = fisher_yates(rng, rated + new + standard)
    order.extend(g.id for g in remaining)
    return order


def seeded_game_order(
    games: Sequence[Game],
    fixed_count: int = SEEDED_FIXED_COUNT,
    seed: int = SEEDED_ORDER_SEED,
) -> List[Game]:
    """
    Standard-mode order: the first `fixed_count` games stay put as the easy
    tier, the rest get the same permutation for every player.
    """
    if not games:
        return []
    if len(games) <= fixed_count:
        return list(games)

    tail = list(games[fixed_count:])
    fisher_yates(random.Random(seed), tail)
    return list(games[:fixed_count]) + tail


def remap_progress(
    progress: Dict[int, T],
    old_order: Sequence[Game],
    new_order: Sequence[Game],
) -> Dict[int, T]:
    """
    Re-key saved per-level progress (1-indexed level numbers) after the
    ordering changed. Levels whose game can't be located keep their number.
    """
    new_levels = {game.id: i + 1 for i, game in enumerate(new_order)}
    out: Dict[int, T] = {}
    for level, value in progress.items():
        target = level
        if 1 <= level <= len(old_order):
            target = new_levels.get(old_order[level - 1].id, level)
        out[target] = value
    return out


def random_crops(rng: random.Random, count: int = 5) -> List[CropPosition]:
    return [CropPosition(x=rng.random() * 100, y=rng.random() * 100) for _ in range(count)]
