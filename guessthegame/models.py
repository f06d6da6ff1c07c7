# guessthegame/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from guessthegame.config import HOT_STREAK_THRESHOLD, LIFELINE_START


class GuessOutcome(Enum):
    WRONG = "wrong"
    SIMILAR_NAME = "similar-name"
    CORRECT = "correct"
    SKIPPED = "skipped"


class RoundStatus(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class LifelineType(Enum):
    SKIP = "skip"
    ANAGRAM = "anagram"
    CONSULTANT = "consultant"
    DOUBLE_TROUBLE = "double_trouble"
    ZOOM_OUT = "zoom_out"
    COVER_PEEK = "cover_peek"
    SYNOPSIS = "synopsis"


LIFELINE_TYPES: Tuple[str, ...] = tuple(t.value for t in LifelineType)


def initial_lifelines() -> Dict[str, int]:
    return {name: LIFELINE_START for name in LIFELINE_TYPES}


@dataclass(frozen=True)
class CropPosition:
    """Percentage coordinates (0..100); only the viewer interprets them."""
    x: float
    y: float


@dataclass(frozen=True)
class Game:
    """A catalog entry. Immutable once fetched."""
    id: int
    name: str
    year: int
    platform: str
    genre: str
    rating: int                     # 0..100
    screenshots: Tuple[str, ...]    # exactly 5
    cover: Optional[str] = None
    crop_positions: Tuple[CropPosition, ...] = ()
    synopsis: Optional[str] = None


@dataclass
class GuessRecord:
    name: str
    outcome: GuessOutcome


@dataclass
class RoundState:
    """The live round. Discarded once its decision lands in history."""
    status: RoundStatus = RoundStatus.PLAYING
    guesses: List[GuessRecord] = field(default_factory=list)
    crop_positions: List[CropPosition] = field(default_factory=list)
    double_trouble_game_id: Optional[int] = None
    zoom_out_active: bool = False
    lifelines_used: List[str] = field(default_factory=list)


@dataclass
class HistoryEntry:
    """One completed round. Append-only; never mutated after append."""
    game_id: int
    points_awarded: int
    status: str                     # "won" | "lost" | "skipped"
    guesses: List[GuessRecord] = field(default_factory=list)
    lifelines_used: List[str] = field(default_factory=list)
    correct_answer: str = ""
    crop_positions: List[CropPosition] = field(default_factory=list)
    is_bonus: bool = False


@dataclass
class BonusRound:
    """Pick which of `game_ids` is `target_id` from screenshots alone."""
    game_ids: List[int]
    target_id: int


@dataclass
class ShopVisit:
    streak: int
    discounted_item_ids: List[str] = field(default_factory=list)
    purchased_item_ids: List[str] = field(default_factory=list)


@dataclass
class RunState:
    """
    The persisted aggregate for one endless run. Keep this as a 'data bag';
    the rules live in engine.py and friends.
    """
    score: int = 0
    streak: int = 0
    high_score: int = 0
    lifelines: Dict[str, int] = field(default_factory=initial_lifelines)

    game_order: List[int] = field(default_factory=list)
    current_index: int = 0
    is_game_over: bool = False

    hot_streak_count: int = 0
    last_shop_streak: int = 0
    has_bonus_round_occurred_in_current_block: bool = False
    bonus_round: Optional[BonusRound] = None

    round: RoundState = field(default_factory=RoundState)
    shop: Optional[ShopVisit] = None
    all_in_purchased: bool = False

    history: List[HistoryEntry] = field(default_factory=list)

    @property
    def is_hot_streak_active(self) -> bool:
        return self.hot_streak_count >= HOT_STREAK_THRESHOLD


@dataclass(frozen=True)
class ShopItem:
    id: str
    name: str
    description: str
    cost: int
    lifeline: Optional[str] = None  # counter refilled; None for the all-in item
    bonus_points: int = 0

    @property
    def is_all_in(self) -> bool:
        return self.lifeline is None


@dataclass(frozen=True)
class ShopOffer:
    """A shop item as priced and gated for the current visit."""
    item: ShopItem
    final_cost: int
    discounted: bool
    purchased: bool
    available: bool


@dataclass(frozen=True)
class ConsultantOption:
    id: Union[int, str]             # catalog id, or "bait_<n>" for decoys
    name: str
    is_bait: bool = False


@dataclass
class LifelineReveal:
    """What the player gets to see after spending a lifeline."""
    type: str
    anagram: Optional[str] = None
    options: List[ConsultantOption] = field(default_factory=list)
    game: Optional[Game] = None
    cover: Optional[str] = None
    synopsis: Optional[str] = None
