import pytest
from datetime import date

from catalog import InMemoryGameSpecCatalog, NullGameSpecCatalog, SEED_SPECS, load_default_catalog
from models import Game, GameHole, GameSpec, Player, Round, RoundToGame, Score, ScoreValue, Team, Tee, TeeHole
from scoring import score_game


def _build_spec(name="nassau", version=1, **fields) -> GameSpec:
    return GameSpec(name=name, version=version, **fields)


def _build_game(spec: GameSpec, count: int) -> Game:
    tee = Tee(id="tee-1", holes=[TeeHole(number=n, par=4, handicap=n) for n in range(1, 19)])
    ids = [f"p{i}" for i in range(1, count + 1)]
    rounds = [
        RoundToGame(round=Round(
            player_id=pid,
            course_handicap=0,
            tee=tee,
            played_at=date(2024, 5, 1),
            scores=[Score(hole=1, values=[ScoreValue(key="gross", value="4")])],
        ))
        for pid in ids
    ]
    teams = []
    if spec.teams.teams:
        size = spec.teams.team_size
        teams = [Team(id=chr(65 + i), player_ids=ids[i * size:(i + 1) * size]) for i in range(count // size)]
    return Game(
        specs=[spec],
        players=[Player(id=pid) for pid in ids],
        rounds=rounds,
        holes=[GameHole(hole="1", number=1, teams=teams)],
    )


# ================================================================
# In-memory catalog
# ================================================================

def test_get_latest_and_specific_version():
    catalog = InMemoryGameSpecCatalog([_build_spec(version=1), _build_spec(version=3, disp="Nassau v3")])
    assert catalog.get("nassau").version == 3
    assert catalog.get("nassau", 1).version == 1
    assert catalog.get("nassau", 2) is None
    assert catalog.get("wolf") is None
    assert catalog.versions("nassau") == [1, 3]


def test_duplicate_version_rejected():
    catalog = InMemoryGameSpecCatalog([_build_spec()])
    with pytest.raises(ValueError):
        catalog.add(_build_spec())


def test_list_specs_sorted_by_name():
    catalog = InMemoryGameSpecCatalog([_build_spec("wolf"), _build_spec("nassau"), _build_spec("nassau", 2)])
    assert [(s.name, s.version) for s in catalog.list_specs()] == [("nassau", 2), ("wolf", 1)]


def test_specs_are_copied_in_and_out():
    spec = _build_spec(disp="Nassau")
    catalog = InMemoryGameSpecCatalog([spec])

    spec.disp = "Changed after add"
    fetched = catalog.get("nassau")
    assert fetched.disp == "Nassau"

    fetched.disp = "Changed after get"
    assert catalog.get("nassau").disp == "Nassau"


def test_null_catalog():
    catalog = NullGameSpecCatalog()
    assert catalog.get("skins") is None
    assert catalog.list_specs() == []


# ================================================================
# Seed specs
# ================================================================

def test_default_catalog_holds_every_seed():
    catalog = load_default_catalog()
    assert {s.name for s in catalog.list_specs()} == {s.name for s in SEED_SPECS}


@pytest.mark.parametrize("spec", SEED_SPECS, ids=lambda s: s.name)
def test_seed_specs_score_a_hole(spec):
    count = spec.max_players if spec.max_players and spec.max_players < 4 else 4
    board = score_game(_build_game(spec, count))

    assert board.spec_name == spec.name
    assert [h.hole for h in board.holes] == [1]
    assert board.leaderboard
    assert not [w for w in board.warnings if w.code.value == "bad_expression"]
