import json

import pytest

from guessthegame.catalog import (
    CatalogError,
    find_by_id,
    find_by_name,
    load_bait_names,
    load_games,
    parse_game,
)


def raw_game(**overrides):
    raw = {
        "id": 1,
        "name": "Portal 2",
        "year": 2011,
        "platform": "PC",
        "genre": "Puzzle",
        "rating": 95,
        "screenshots": [f"p{i}.jpg" for i in range(5)],
        "cover": "portal2.jpg",
    }
    raw.update(overrides)
    return raw


def test_bundled_catalog_loads():
    games = load_games()
    assert len(games) == 14
    assert all(len(g.screenshots) == 5 for g in games)
    assert all(len(g.crop_positions) == 5 for g in games)


def test_parse_pads_crop_positions():
    game = parse_game(raw_game(cropPositions=[{"x": 10, "y": 20}]))
    assert game.crop_positions[0].x == 10.0
    assert game.crop_positions[1].x == 50.0
    assert len(game.crop_positions) == 5


def test_wrong_screenshot_count_rejected():
    with pytest.raises(CatalogError):
        parse_game(raw_game(screenshots=["a.jpg"] * 4))


def test_malformed_record_rejected():
    raw = raw_game()
    del raw["name"]
    with pytest.raises(CatalogError):
        parse_game(raw)
    with pytest.raises(CatalogError):
        parse_game(raw_game(id="seven"))


def test_duplicate_ids_rejected(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(json.dumps([raw_game(), raw_game(name="Portal")]))
    with pytest.raises(CatalogError):
        load_games(str(path))


def test_catalog_must_be_a_list(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(json.dumps({"games": []}))
    with pytest.raises(CatalogError):
        load_games(str(path))


def test_bait_names(tmp_path):
    assert len(load_bait_names()) == 8
    assert load_bait_names(str(tmp_path / "missing.json")) == []

    path = tmp_path / "bait.json"
    path.write_text(json.dumps(["Fake Game"]))
    assert load_bait_names(str(path)) == ["Fake Game"]


def test_lookups():
    games = load_games()
    assert find_by_id(games, 14).name == "Tetris"
    assert find_by_id(games, 999) is None
    assert find_by_name(games, "  metro exodus ").id == 9
    assert find_by_name(games, "Metro") is None
