import pytest

from conftest import play_and_advance, win_round
from guessthegame.config import MAX_GUESSES
from guessthegame.models import GuessOutcome, RoundStatus


@pytest.mark.parametrize("on_guess,expected", [(1, 5), (2, 3), (3, 2), (4, 1), (5, 1)])
def test_scoring_table(new_engine, on_guess, expected):
    engine = new_engine()
    win_round(engine, on_guess)
    assert engine.state.score == expected
    assert engine.round.status is RoundStatus.WON
    assert engine.state.history[-1].points_awarded == expected


def test_difficulty_bonus(new_engine):
    engine = new_engine()
    engine.state.streak = 7
    win_round(engine)
    assert engine.state.score == 6
    assert engine.state.streak == 8


def test_hot_streak_doubles_and_resets(new_engine):
    engine = new_engine()
    for _ in range(3):
        play_and_advance(engine)
    assert engine.state.score == 15
    assert engine.state.hot_streak_count == 3
    assert engine.state.is_hot_streak_active

    win_round(engine)
    assert engine.state.history[-1].points_awarded == 10
    engine.next_level()

    win_round(engine, on_guess=3)
    assert engine.state.hot_streak_count == 0
    assert not engine.state.is_hot_streak_active


def test_high_score_tracks_score(new_engine):
    engine = new_engine()
    play_and_advance(engine)
    play_and_advance(engine, on_guess=2)
    assert engine.state.high_score == engine.state.score == 8


def test_fifth_miss_ends_run(new_engine):
    engine = new_engine()
    for _ in range(MAX_GUESSES - 1):
        engine.submit_guess("Definitely Not A Real Game")
    assert engine.round.status is RoundStatus.PLAYING
    assert not engine.state.is_game_over

    engine.skip_guess()
    assert engine.round.status is RoundStatus.LOST
    assert engine.state.is_game_over
    assert len(engine.round.guesses) == MAX_GUESSES
    assert engine.state.history[-1].status == "lost"

    # stale calls change nothing
    assert not engine.submit_guess(engine.current_game)
    assert not engine.skip_guess()
    assert len(engine.round.guesses) == MAX_GUESSES


def test_fatal_guess_ends_run_immediately(new_engine):
    engine = new_engine()
    play_and_advance(engine)
    engine.submit_guess("Nobody Made This", is_fatal=True)
    assert engine.state.is_game_over
    assert engine.round.status is RoundStatus.LOST
    assert len(engine.round.guesses) == 1
    assert engine.state.hot_streak_count == 0


def test_fatal_flag_ignored_on_correct_guess(new_engine):
    engine = new_engine()
    engine.submit_guess(engine.current_game, is_fatal=True)
    assert engine.round.status is RoundStatus.WON
    assert not engine.state.is_game_over


def test_similar_name_outcome(new_engine, catalog):
    engine = new_engine(order=[g.id for g in catalog])  # Fallout 3 first
    engine.submit_guess("Fallout: New Vegas")
    engine.submit_guess("Tetris")
    outcomes = [g.outcome for g in engine.round.guesses]
    assert outcomes == [GuessOutcome.SIMILAR_NAME, GuessOutcome.WRONG]


def test_free_text_matches_target_case_insensitively(new_engine, catalog):
    engine = new_engine(order=[g.id for g in catalog])
    engine.submit_guess("  fallout 3 ")
    assert engine.round.status is RoundStatus.WON
    assert engine.round.guesses[0].name == "Fallout 3"


def test_next_level_requires_decided_round(new_engine):
    engine = new_engine()
    assert not engine.next_level()
    win_round(engine)
    first = engine.current_game
    assert engine.next_level()
    assert engine.state.current_index == 1
    assert engine.current_game != first
    assert engine.round.status is RoundStatus.PLAYING
    assert engine.round.guesses == []
    assert len(engine.round.crop_positions) == 5


def test_reset_after_game_over_keeps_high_score(new_engine):
    engine = new_engine()
    play_and_advance(engine)
    engine.use_lifeline("anagram")
    for _ in range(MAX_GUESSES):
        engine.skip_guess()
    assert engine.state.is_game_over

    old_order = list(engine.state.game_order)
    assert engine.next_level()
    s = engine.state
    assert (s.score, s.streak, s.current_index) == (0, 0, 0)
    assert s.history == []
    assert not s.is_game_over
    assert set(s.lifelines.values()) == {1}
    assert s.high_score == 5
    assert sorted(s.game_order) == sorted(old_order)


def test_order_extends_when_exhausted(new_engine, catalog):
    engine = new_engine()
    for _ in range(len(catalog)):
        play_and_advance(engine)
    assert engine.current_game is not None
    assert len(engine.state.game_order) == 2 * len(catalog)


def test_history_entry_contents(new_engine):
    engine = new_engine()
    target = engine.current_game
    engine.use_lifeline("zoom_out")
    win_round(engine, on_guess=2)
    entry = engine.state.history[-1]
    assert entry.game_id == target.id
    assert entry.correct_answer == target.name
    assert entry.lifelines_used == ["zoom_out"]
    assert [g.outcome for g in entry.guesses] == [GuessOutcome.SKIPPED, GuessOutcome.CORRECT]
    assert len(entry.crop_positions) == 5


def test_run_summary(new_engine):
    engine = new_engine()
    play_and_advance(engine)
    summary = engine.run_summary()
    assert summary["total_score"] == 5
    assert summary["total_games"] == 1
    assert summary["history"][0]["status"] == "won"
    assert summary["history"][0]["guesses"][0]["outcome"] == "correct"
