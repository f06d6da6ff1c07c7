import random

import pytest

from guessthegame.engine import EndlessEngine
from guessthegame.models import Game
from guessthegame.storage import MemoryBackend, RunStore


class FixedRandom(random.Random):
    """random() always returns `value`; integer draws stay seeded."""

    def __init__(self, value, seed=0):
        super().__init__(seed)
        self.value = value

    def random(self):
        return self.value


def make_game(game_id, name, year=2000, rating=70, cover="cover.jpg", synopsis=None, genre="Action"):
    return Game(
        id=game_id,
        name=name,
        year=year,
        platform="PC",
        genre=genre,
        rating=rating,
        screenshots=tuple(f"{game_id}_{i}.jpg" for i in range(5)),
        cover=cover,
        synopsis=synopsis,
    )


NAMES = [
    "Fallout 3",
    "Fallout: New Vegas",
    "Portal 2",
    "Half-Life 2",
    "Hollow Knight",
    "Halo Infinite",
    "Stardew Valley",
    "Super Metroid",
    "Tetris",
    "Metro Exodus",
]


@pytest.fixture
def catalog():
    games = [make_game(i + 1, name) for i, name in enumerate(NAMES)]
    games[2] = make_game(3, "Portal 2", synopsis="Portal 2 sends Chell back into Aperture.")
    games[4] = make_game(5, "Hollow Knight", cover=None)
    return games


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def new_engine(catalog, backend):
    """Build an engine; `value` pins rng.random() so bonus rolls are predictable."""

    def build(value=0.99, order=None, **kwargs):
        engine = EndlessEngine(catalog, store=RunStore(backend), rng=FixedRandom(value), **kwargs)
        if order is not None:
            engine.state.game_order = list(order)
        return engine

    return build


def win_round(engine, on_guess=1):
    for _ in range(on_guess - 1):
        engine.skip_guess()
    assert engine.submit_guess(engine.current_game)


def play_and_advance(engine, on_guess=1):
    win_round(engine, on_guess)
    assert engine.next_level()
