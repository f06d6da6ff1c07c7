# guessthegame/webapp.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from guessthegame.catalog import load_bait_names, load_games
from guessthegame.config import LOG_LEVEL
from guessthegame.engine import EndlessEngine
from guessthegame.models import Game, LIFELINE_TYPES, RoundStatus
from guessthegame.scoring import zoom_bonus
from guessthegame.storage import MemoryBackend, RunStore, to_plain

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Guess the Game: Endless")

try:
    CATALOG: List[Game] = load_games()
except FileNotFoundError:
    logger.warning("no catalog file found; serving an empty catalog")
    CATALOG = []
BAIT_NAMES: List[str] = load_bait_names()

# In-memory sessions. Each one keeps its own store so runs never mix.
SESSIONS: Dict[str, EndlessEngine] = {}


class GuessIn(BaseModel):
    game_id: Optional[int] = None
    name: Optional[str] = None
    fatal: bool = False


class BonusGuessIn(BaseModel):
    game_id: int


def get_engine(sid: str) -> EndlessEngine:
    engine = SESSIONS.get(sid)
    if engine is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    return engine


def screenshots_view(game: Game) -> Dict[str, Any]:
    return {"id": game.id, "screenshots": list(game.screenshots)}


def game_view(engine: EndlessEngine) -> Dict[str, Any]:
    """What the player may see right now. The answer stays hidden mid-round."""
    s = engine.state
    game = engine.current_game
    view: Dict[str, Any] = {
        "score": s.score,
        "streak": s.streak,
        "high_score": s.high_score,
        "lifelines": dict(s.lifelines),
        "is_game_over": s.is_game_over,
        "is_hot_streak_active": s.is_hot_streak_active,
        "round": to_plain(s.round),
        "zoom_bonus": zoom_bonus(s.current_index),
        "shop_available": engine.shop_available(),
        "shop_open": s.shop is not None,
        "game": screenshots_view(game) if game else None,
        "answer": None,
        "bonus_round": None,
    }
    if game is not None and s.round.status is not RoundStatus.PLAYING:
        view["answer"] = game.name
    if s.bonus_round is not None:
        target = engine.game(s.bonus_round.target_id)
        view["bonus_round"] = {
            "target_name": target.name if target else "",
            "games": [screenshots_view(g) for g in
                      (engine.game(i) for i in s.bonus_round.game_ids) if g],
        }
    return view


@app.post("/game")
def create_game() -> Dict[str, Any]:
    sid = str(uuid.uuid4())
    SESSIONS[sid] = EndlessEngine(CATALOG, store=RunStore(MemoryBackend()), bait_names=BAIT_NAMES)
    logger.info("session %s created", sid)
    return {"sid": sid, **game_view(SESSIONS[sid])}


@app.get("/game/{sid}")
def read_game(sid: str) -> Dict[str, Any]:
    return game_view(get_engine(sid))


@app.post("/game/{sid}/guess")
def guess(sid: str, body: GuessIn) -> Dict[str, Any]:
    engine = get_engine(sid)
    if body.game_id is not None:
        game = engine.game(body.game_id)
        if game is None:
            raise HTTPException(status_code=404, detail="Unknown game")
        applied = engine.submit_guess(game, is_fatal=body.fatal)
    elif body.name:
        applied = engine.submit_guess(body.name, is_fatal=body.fatal)
    else:
        raise HTTPException(status_code=422, detail="Provide game_id or name")
    return {"applied": applied, **game_view(engine)}


@app.post("/game/{sid}/skip")
def skip(sid: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    applied = engine.skip_guess()
    return {"applied": applied, **game_view(engine)}


@app.post("/game/{sid}/lifeline/{lifeline}")
def lifeline(sid: str, lifeline: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    if lifeline not in LIFELINE_TYPES:
        raise HTTPException(status_code=404, detail="Unknown lifeline")
    reveal = engine.use_lifeline(lifeline)
    return {"applied": reveal is not None, "reveal": to_plain(reveal), **game_view(engine)}


@app.get("/game/{sid}/shop")
def shop(sid: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    return {
        "items": to_plain(engine.get_shop_items()),
        "offer": to_plain(engine.shop_offer()),
        "score": engine.state.score,
    }


@app.post("/game/{sid}/shop/open")
def open_shop(sid: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    visit = engine.open_shop()
    return {"applied": visit is not None, "offer": to_plain(engine.shop_offer())}


@app.post("/game/{sid}/shop/buy/{item_id}")
def buy(sid: str, item_id: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    if item_id not in {item.id for item in engine.get_shop_items()}:
        raise HTTPException(status_code=404, detail="Unknown shop item")
    applied = engine.buy_shop_item(item_id)
    return {"applied": applied, "offer": to_plain(engine.shop_offer()), "score": engine.state.score}


@app.post("/game/{sid}/shop/close")
def close_shop(sid: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    applied = engine.close_shop()
    return {"applied": applied, **game_view(engine)}


@app.post("/game/{sid}/next")
def next_level(sid: str) -> Dict[str, Any]:
    engine = get_engine(sid)
    applied = engine.next_level()
    return {"applied": applied, **game_view(engine)}


@app.post("/game/{sid}/bonus")
def bonus_guess(sid: str, body: BonusGuessIn) -> Dict[str, Any]:
    engine = get_engine(sid)
    result = engine.submit_bonus_guess(body.game_id)
    return {"applied": result is not None, "correct": bool(result), **game_view(engine)}


@app.get("/game/{sid}/summary")
def summary(sid: str) -> Dict[str, Any]:
    return get_engine(sid).run_summary()
