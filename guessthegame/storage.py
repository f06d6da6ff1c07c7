# guessthegame/storage.py
"""
Persistence port for the endless engine.

The engine only ever talks to a RunStore; a RunStore only needs a backend
that can get/set string blobs by key. Three records are kept: the run
state, the all-time high score and the lifetime stats.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from guessthegame.config import HIGH_SCORE_KEY, MAX_GUESSES, STATE_DIR, STATE_KEY, STATS_KEY
from guessthegame.models import (
    BonusRound,
    CropPosition,
    GuessOutcome,
    GuessRecord,
    HistoryEntry,
    RoundState,
    RoundStatus,
    RunState,
    ShopVisit,
    initial_lifelines,
)
from guessthegame.stats import EndlessStats

logger = logging.getLogger(__name__)


class Backend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBackend:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileBackend:
    """One `<key>.json` file per record under `directory`."""

    def __init__(self, directory: str = STATE_DIR):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        tmp = self._path(key) + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp, self._path(key))


# --- Encoding ---

def to_plain(obj: Any) -> Any:
    """Dataclasses and enums down to JSON-ready dicts, lists and scalars."""
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    return obj


def encode_state(state: RunState) -> str:
    payload = to_plain(state)
    payload["is_hot_streak_active"] = state.is_hot_streak_active
    return json.dumps(payload)


def _crops(raw: Optional[List[Dict[str, Any]]]) -> List[CropPosition]:
    return [CropPosition(x=float(c["x"]), y=float(c["y"])) for c in raw or []]


def _guesses(raw: Optional[List[Dict[str, Any]]]) -> List[GuessRecord]:
    return [GuessRecord(name=g["name"], outcome=GuessOutcome(g["outcome"])) for g in raw or []]


def _round(raw: Optional[Dict[str, Any]]) -> RoundState:
    raw = raw or {}
    return RoundState(
        status=RoundStatus(raw.get("status", RoundStatus.PLAYING.value)),
        guesses=_guesses(raw.get("guesses")),
        crop_positions=_crops(raw.get("crop_positions")),
        double_trouble_game_id=raw.get("double_trouble_game_id"),
        zoom_out_active=bool(raw.get("zoom_out_active", False)),
        lifelines_used=list(raw.get("lifelines_used") or []),
    )


def _history_entry(raw: Dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        game_id=int(raw["game_id"]),
        points_awarded=int(raw.get("points_awarded", 0)),
        status=str(raw.get("status", "won")),
        guesses=_guesses(raw.get("guesses")),
        lifelines_used=list(raw.get("lifelines_used") or []),
        correct_answer=str(raw.get("correct_answer", "")),
        crop_positions=_crops(raw.get("crop_positions")),
        is_bonus=bool(raw.get("is_bonus", False)),
    )


def decode_state(blob: str) -> RunState:
    """Missing fields fall back to a fresh run's defaults."""
    raw = json.loads(blob)
    if not isinstance(raw, dict):
        raise ValueError("saved run state is not an object")

    lifelines = initial_lifelines()
    lifelines.update({k: int(v) for k, v in (raw.get("lifelines") or {}).items()})

    bonus = raw.get("bonus_round")
    shop = raw.get("shop")

    return RunState(
        score=max(0, int(raw.get("score", 0))),
        streak=max(0, int(raw.get("streak", 0))),
        high_score=int(raw.get("high_score", 0)),
        lifelines=lifelines,
        game_order=[int(i) for i in raw.get("game_order") or []],
        current_index=int(raw.get("current_index", 0)),
        is_game_over=bool(raw.get("is_game_over", False)),
        hot_streak_count=int(raw.get("hot_streak_count", 0)),
        last_shop_streak=int(raw.get("last_shop_streak", 0)),
        has_bonus_round_occurred_in_current_block=bool(
            raw.get("has_bonus_round_occurred_in_current_block", False)),
        bonus_round=BonusRound(
            game_ids=[int(i) for i in bonus["game_ids"]],
            target_id=int(bonus["target_id"]),
        ) if bonus else None,
        round=_round(raw.get("round")),
        shop=ShopVisit(
            streak=int(shop["streak"]),
            discounted_item_ids=list(shop.get("discounted_item_ids") or []),
            purchased_item_ids=list(shop.get("purchased_item_ids") or []),
        ) if shop else None,
        all_in_purchased=bool(raw.get("all_in_purchased", False)),
        history=[_history_entry(h) for h in raw.get("history") or []],
    )


def _tally(raw: Optional[Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    return {str(k): {"correct": int(v["correct"]), "total": int(v["total"])}
            for k, v in (raw or {}).items()}


def decode_stats(blob: str) -> EndlessStats:
    raw = json.loads(blob)
    if not isinstance(raw, dict):
        raise ValueError("saved stats are not an object")
    distribution = [int(n) for n in raw["guess_distribution"]]
    if len(distribution) != MAX_GUESSES:
        raise ValueError(f"guess distribution has {len(distribution)} buckets")
    return EndlessStats(
        total_correct=int(raw.get("total_correct", 0)),
        total_incorrect=int(raw.get("total_incorrect", 0)),
        guess_distribution=distribution,
        genre_stats=_tally(raw.get("genre_stats")),
        decade_stats=_tally(raw.get("decade_stats")),
    )


class RunStore:
    def __init__(self, backend: Optional[Backend] = None):
        self.backend = backend if backend is not None else MemoryBackend()

    def _read(self, key: str) -> Optional[str]:
        # an unreadable record is treated like a missing one
        try:
            return self.backend.get(key)
        except (OSError, ValueError) as e:
            logger.warning("could not read %s: %s", key, e)
            return None

    def load_high_score(self) -> int:
        blob = self._read(HIGH_SCORE_KEY)
        if not blob:
            return 0
        try:
            return int(blob)
        except ValueError:
            logger.warning("ignoring corrupt high score record: %r", blob)
            return 0

    def load(self) -> Optional[RunState]:
        """Last saved run, or None when there is nothing usable."""
        blob = self._read(STATE_KEY)
        if not blob:
            return None
        try:
            state = decode_state(blob)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("discarding corrupt run state: %s", e)
            return None
        state.high_score = max(state.high_score, self.load_high_score())
        return state

    def save(self, state: RunState) -> None:
        self.backend.set(STATE_KEY, encode_state(state))
        if state.high_score > self.load_high_score():
            self.backend.set(HIGH_SCORE_KEY, str(state.high_score))

    def load_stats(self) -> EndlessStats:
        blob = self._read(STATS_KEY)
        if not blob:
            return EndlessStats()
        try:
            return decode_stats(blob)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("discarding corrupt stats: %s", e)
            return EndlessStats()

    def save_stats(self, stats: EndlessStats) -> None:
        self.backend.set(STATS_KEY, json.dumps(asdict(stats)))
