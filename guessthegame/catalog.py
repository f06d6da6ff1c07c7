# guessthegame/catalog.py
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from guessthegame.config import DATA_DIR
from guessthegame.models import CropPosition, Game

logger = logging.getLogger(__name__)

SCREENSHOTS_PER_GAME = 5

GAMES_PATH = os.path.join(DATA_DIR, "games.json")
BAIT_PATH = os.path.join(DATA_DIR, "bait_games.json")


class CatalogError(ValueError):
    pass


def _crop(raw: Any) -> CropPosition:
    if not isinstance(raw, dict):
        return CropPosition(x=50.0, y=50.0)
    return CropPosition(x=float(raw.get("x", 50)), y=float(raw.get("y", 50)))


def parse_game(raw: Dict[str, Any]) -> Game:
    try:
        screenshots = tuple(str(s) for s in raw["screenshots"])
        crops = [_crop(c) for c in raw.get("cropPositions") or []]
        game_id = int(raw["id"])
        name = str(raw["name"])
        year = int(raw.get("year") or 0)
        rating = int(raw.get("rating") or 0)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Malformed game record: {raw!r}") from e

    if len(screenshots) != SCREENSHOTS_PER_GAME:
        raise CatalogError(
            f"Game {game_id} has {len(screenshots)} screenshots, expected {SCREENSHOTS_PER_GAME}")
    crops += [CropPosition(x=50.0, y=50.0)] * (SCREENSHOTS_PER_GAME - len(crops))

    return Game(
        id=game_id,
        name=name,
        year=year,
        platform=str(raw.get("platform") or ""),
        genre=str(raw.get("genre") or ""),
        rating=rating,
        screenshots=screenshots,
        cover=raw.get("cover"),
        crop_positions=tuple(crops[:SCREENSHOTS_PER_GAME]),
        synopsis=raw.get("synopsis"),
    )


def load_games(path: str = GAMES_PATH) -> List[Game]:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise CatalogError("Catalog file must contain an array of games")

    games = [parse_game(g) for g in raw]
    ids = [g.id for g in games]
    if len(ids) != len(set(ids)):
        raise CatalogError("Duplicate game ids in catalog")

    logger.info("loaded %d games from %s", len(games), path)
    return games


def load_bait_names(path: str = BAIT_PATH) -> List[str]:
    """Decoy titles for the consultant lifeline. Missing file means none."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning("bait list not found at %s", path)
        return []
    names = raw.get("baitGames", []) if isinstance(raw, dict) else raw
    return [str(n) for n in names]


def find_by_id(catalog: Sequence[Game], game_id: int) -> Optional[Game]:
    for game in catalog:
        if game.id == game_id:
            return game
    return None


def find_by_name(catalog: Sequence[Game], name: str) -> Optional[Game]:
    wanted = name.strip().lower()
    for game in catalog:
        if game.name.lower() == wanted:
            return game
    return None
