from guessthegame.scoring import (
    base_points,
    bonus_round_points,
    difficulty_bonus,
    next_hot_streak_count,
    round_points,
    zoom_bonus,
)


def test_base_points():
    assert [base_points(n) for n in range(1, 6)] == [5, 3, 2, 1, 1]
    assert base_points(0) == 0
    assert base_points(6) == 0


def test_difficulty_bonus():
    assert difficulty_bonus(4) == 0
    assert difficulty_bonus(5) == 1
    assert difficulty_bonus(14) == 2


def test_round_points():
    assert round_points(1, 7, False) == 6
    assert round_points(2, 0, True) == 6
    assert round_points(3, 10, True) == 8


def test_bonus_round_points():
    assert bonus_round_points(3, False, True) == 2
    assert bonus_round_points(11, True, True) == 8
    assert bonus_round_points(11, True, False) == 0


def test_hot_streak_counter():
    assert next_hot_streak_count(2, 2) == 3
    assert next_hot_streak_count(2, 3) == 0


def test_zoom_bonus_every_five_levels():
    assert zoom_bonus(0) == 0
    assert zoom_bonus(4) == 0
    assert zoom_bonus(5) == 10
    assert zoom_bonus(14) == 20
