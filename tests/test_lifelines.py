import random

from guessthegame.lifelines import consultant_options, generate_anagram
from guessthegame.models import RoundStatus


def test_skip_lifeline_completes_round_without_points(new_engine):
    engine = new_engine()
    streak_before = engine.state.streak
    target = engine.current_game
    reveal = engine.use_lifeline("skip")
    assert reveal is not None
    s = engine.state
    assert engine.round.status is RoundStatus.WON
    assert s.lifelines["skip"] == 0
    assert s.score == 0
    assert s.streak == streak_before
    assert s.history[-1].status == "skipped"
    assert s.history[-1].game_id == target.id
    assert s.hot_streak_count == 0
    assert not s.is_game_over


def test_lifeline_with_empty_counter_is_noop(new_engine):
    engine = new_engine()
    engine.state.lifelines["anagram"] = 0
    assert engine.use_lifeline("anagram") is None
    assert engine.round.lifelines_used == []


def test_unknown_lifeline_is_noop(new_engine):
    engine = new_engine()
    assert engine.use_lifeline("telepathy") is None


def test_zoom_out_sets_flag(new_engine):
    engine = new_engine()
    engine.use_lifeline("zoom_out")
    assert engine.round.zoom_out_active
    assert engine.state.lifelines["zoom_out"] == 0


def test_double_trouble_accepts_second_answer(new_engine):
    engine = new_engine()
    reveal = engine.use_lifeline("double_trouble")
    assert reveal.game is not None
    assert engine.round.double_trouble_game_id == reveal.game.id
    engine.submit_guess(reveal.game)
    assert engine.round.status is RoundStatus.WON
    assert engine.state.score == 5


def test_cover_peek_needs_a_cover(new_engine, catalog):
    coverless = [g.id for g in catalog if g.cover is None]
    engine = new_engine(order=coverless + [g.id for g in catalog if g.cover])
    assert engine.use_lifeline("cover_peek") is None
    assert engine.state.lifelines["cover_peek"] == 1


def test_synopsis_is_redacted(new_engine, catalog):
    engine = new_engine(order=[3] + [g.id for g in catalog if g.id != 3])
    reveal = engine.use_lifeline("synopsis")
    assert reveal.synopsis is not None
    assert "Portal" not in reveal.synopsis
    assert "Aperture" in reveal.synopsis


def test_lifelines_blocked_after_round(new_engine):
    engine = new_engine()
    engine.submit_guess(engine.current_game)
    assert engine.use_lifeline("anagram") is None
    assert engine.state.lifelines["anagram"] == 1


def test_anagram_keeps_letters_plus_one():
    anagram = generate_anagram(random.Random(3), "Halo: CE!")
    letters = anagram.split(" ")
    assert len(letters) == 7
    remaining = list(letters)
    for ch in "HALOCE":
        remaining.remove(ch)
    assert len(remaining) == 1 and remaining[0].isupper()


def test_consultant_options(catalog):
    target = catalog[0]
    options = consultant_options(random.Random(1), target, catalog, ["Fake Game One", "Fake Two"])
    assert len(options) == 4
    assert sum(o.id == target.id for o in options) == 1
    assert sum(o.is_bait for o in options) == 1


def test_consultant_fills_with_bait_when_catalog_is_small(catalog):
    target = catalog[0]
    options = consultant_options(random.Random(1), target, catalog[:2], ["A", "B", "C"])
    assert len(options) == 4
    assert sum(o.is_bait for o in options) == 2
