"""Built-in game specs the catalog is seeded with."""

from models import (
    Choice,
    GameOption,
    GameSpec,
    JunkOption,
    MultiplierOption,
    ScoringRules,
    TeamsConfig,
)

from .repository import InMemoryGameSpecCatalog

HANDICAP_MODE = GameOption(
    name="handicap_mode",
    disp="Handicaps",
    value_type="menu",
    choices=[Choice(name="full", disp="Full"), Choice(name="low", disp="Off the low")],
    default_value="full",
    seq=1,
)

DOWN_THE_MOST = "{'team_down_the_most': [{'getPrevHole': []}, {'var': 'team'}]}"
WON_EVERY_POINT = "{'===': [{'var': 'team.points'}, {'var': 'possiblePoints'}]}"

FIVE_POINTS = GameSpec(
    name="five_points",
    disp="Five Points",
    short="5pts",
    type="points",
    min_players=4,
    max_players=4,
    teams=TeamsConfig(teams=True, team_size=2, team_count=2),
    scoring=ScoringRules(based_on="net", team_score="best_ball", better="higher"),
    options=[HANDICAP_MODE],
    junk=[
        JunkOption(name="low_ball", disp="Low Ball", value=2, seq=1, awarded_to="team",
                   calculation="best_ball", based_on="net", better="lower", limit="one_team_per_group"),
        JunkOption(name="low_total", disp="Low Total", value=2, seq=2, awarded_to="team",
                   calculation="sum", based_on="net", better="lower", limit="one_team_per_group"),
        JunkOption(name="prox", disp="Prox", value=1, seq=3, based_on="user"),
        JunkOption(name="birdie", disp="Birdie", value=1, seq=4, based_on="gross", score_to_par="exactly -1"),
        JunkOption(name="eagle", disp="Eagle", value=2, seq=5, based_on="gross", score_to_par="exactly -2"),
    ],
    multipliers=[
        MultiplierOption(name="pre_double", disp="Pre 2x", sub_type="press", value=2, seq=1,
                         based_on="user", scope="rest_of_nine", availability=DOWN_THE_MOST),
        MultiplierOption(name="double", disp="2x", sub_type="press", value=2, seq=2,
                         based_on="user", scope="hole", availability=DOWN_THE_MOST),
        MultiplierOption(name="double_back", disp="2x back", sub_type="press", value=2, seq=3,
                         based_on="user", scope="hole",
                         availability="{'and': [{'team_second_to_last': [{'getPrevHole': []}, {'var': 'team'}]}, "
                                      "{'other_team_multiplied_with': [{'getCurrHole': []}, {'var': 'team'}, 'double']}]}"),
        MultiplierOption(name="birdie_bbq", disp="Birdie BBQ", sub_type="bbq", value=2, seq=4,
                         based_on="birdie", availability=WON_EVERY_POINT),
        MultiplierOption(name="eagle_bbq", disp="Eagle BBQ", sub_type="bbq", value=4, seq=5,
                         based_on="eagle", availability=WON_EVERY_POINT),
    ],
)

SKINS = GameSpec(
    name="skins",
    disp="Skins",
    type="skins",
    min_players=2,
    max_players=8,
    scoring=ScoringRules(based_on="net", skin_value=1),
    options=[
        HANDICAP_MODE,
        GameOption(name="carryover", disp="Carryovers", value_type="bool", default_value="false", seq=2),
    ],
)

MATCH_PLAY = GameSpec(
    name="match_play",
    disp="Match Play",
    short="Match",
    type="match_play",
    min_players=2,
    max_players=2,
    scoring=ScoringRules(based_on="net"),
    options=[HANDICAP_MODE],
)

STABLEFORD = GameSpec(
    name="stableford",
    disp="Stableford",
    type="points",
    min_players=1,
    scoring=ScoringRules(
        based_on="net",
        points_table={
            "albatross": 5,
            "eagle": 4,
            "birdie": 3,
            "par": 2,
            "bogey": 1,
        },
    ),
    options=[HANDICAP_MODE],
)

BIRDIE_EM_ALL = GameSpec(
    name="birdie_em_all",
    disp="Birdie 'Em All",
    type="points",
    min_players=1,
    scoring=ScoringRules(based_on="gross"),
    junk=[
        JunkOption(name="birdie", disp="Birdie", value=1, seq=1, based_on="user"),
    ],
)

SEED_SPECS = [FIVE_POINTS, SKINS, MATCH_PLAY, STABLEFORD, BIRDIE_EM_ALL]


def load_default_catalog() -> InMemoryGameSpecCatalog:
    return InMemoryGameSpecCatalog(SEED_SPECS)
