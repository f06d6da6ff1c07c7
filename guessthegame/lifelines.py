# guessthegame/lifelines.py
from __future__ import annotations

import random
import re
import string
from typing import Dict, List, Optional, Sequence

from guessthegame.config import (
    ALL_IN_BONUS,
    CONSULTANT_REAL_OPTIONS,
    CONSULTANT_WRONG_OPTIONS,
    SHOP_DISCOUNT,
    SHOP_DISCOUNTED_ITEMS,
    SHOP_EVERY,
)
from guessthegame.models import (
    ConsultantOption,
    Game,
    RunState,
    ShopItem,
    ShopOffer,
    ShopVisit,
)
from guessthegame.scheduler import fisher_yates

SHOP_ITEMS: List[ShopItem] = [
    ShopItem("safety_first", "Safety First", 'Refill "Skip" Lifeline', 20, lifeline="skip"),
    ShopItem("utility_anagram", "Anagram", 'Refill "Anagram" Lifeline', 10, lifeline="anagram"),
    ShopItem("utility_consultant", "Consultant", 'Refill "Consultant" Lifeline', 10,
             lifeline="consultant"),
    ShopItem("utility_double_trouble", "Double Trouble", 'Refill "Double Trouble" Lifeline', 5,
             lifeline="double_trouble"),
    ShopItem("utility_zoom_out", "Zoom Out", 'Refill "Zoom Out" Lifeline', 5, lifeline="zoom_out"),
    ShopItem("greed", "Greed is Good", f"No refills. +{ALL_IN_BONUS} Points immediately.", 0,
             bonus_points=ALL_IN_BONUS),
]

_ITEMS_BY_ID: Dict[str, ShopItem] = {item.id: item for item in SHOP_ITEMS}


def get_shop_items() -> List[ShopItem]:
    return list(SHOP_ITEMS)


def get_shop_item(item_id: str) -> Optional[ShopItem]:
    return _ITEMS_BY_ID.get(item_id)


# --- Shop economy ---

def shop_due(state: RunState) -> bool:
    """Streak sits on a shop boundary that hasn't been dismissed yet."""
    return (
        state.streak > 0
        and state.streak % SHOP_EVERY == 0
        and state.last_shop_streak != state.streak
    )


def new_shop_visit(rng: random.Random, streak: int) -> ShopVisit:
    refills = [item.id for item in SHOP_ITEMS if not item.is_all_in]
    discounted = rng.sample(refills, min(SHOP_DISCOUNTED_ITEMS, len(refills)))
    return ShopVisit(streak=streak, discounted_item_ids=discounted)


def final_cost(item: ShopItem, visit: ShopVisit) -> int:
    if item.id in visit.discounted_item_ids:
        return max(0, item.cost - SHOP_DISCOUNT)
    return item.cost


def purchase_allowed(state: RunState, visit: ShopVisit, item: ShopItem) -> bool:
    # the all-in item closes the shop for the rest of the run
    if state.all_in_purchased or item.id in visit.purchased_item_ids:
        return False
    if item.is_all_in and visit.purchased_item_ids:
        return False
    return state.score >= final_cost(item, visit)


def shop_offers(state: RunState, visit: ShopVisit) -> List[ShopOffer]:
    return [
        ShopOffer(
            item=item,
            final_cost=final_cost(item, visit),
            discounted=item.id in visit.discounted_item_ids,
            purchased=item.id in visit.purchased_item_ids,
            available=purchase_allowed(state, visit, item),
        )
        for item in SHOP_ITEMS
    ]


# --- Informational reveals ---

def generate_anagram(rng: random.Random, name: str) -> str:
    """Letters of the name plus one random decoy letter, shuffled, spaced out."""
    letters = list(re.sub(r"[^a-zA-Z0-9]", "", name).upper())
    letters.append(string.ascii_uppercase[int(rng.random() * 26)])
    return " ".join(fisher_yates(rng, letters))


def consultant_options(
    rng: random.Random,
    target: Game,
    catalog: Sequence[Game],
    bait_names: Sequence[str],
) -> List[ConsultantOption]:
    """Target plus three wrong answers: real games first, bait names to fill."""
    others = [g for g in catalog if g.id != target.id]
    real = rng.sample(others, min(CONSULTANT_REAL_OPTIONS, len(others)))

    needed = CONSULTANT_WRONG_OPTIONS - len(real)
    bait = rng.sample(list(bait_names), min(needed, len(bait_names)))

    options = [ConsultantOption(id=target.id, name=target.name)]
    options += [ConsultantOption(id=g.id, name=g.name) for g in real]
    options += [ConsultantOption(id=f"bait_{i}", name=n, is_bait=True) for i, n in enumerate(bait)]
    return list(fisher_yates(rng, options))


def pick_double_trouble(rng: random.Random, target: Game, catalog: Sequence[Game]) -> Optional[Game]:
    others = [g for g in catalog if g.id != target.id]
    if not others:
        return None
    return rng.choice(others)
