"""Shared fixtures for the trade grading and simulation test suites."""

import pytest

from src.league.demo import DEMO_SCORING, build_demo_league
from src.league.models import League, LeagueSettings, Player, Position, ScoringRules, Team, Trade

# ------------------------------------------------------------------
# Four-team league: nine players each (one FLEX-eligible extra)
# ------------------------------------------------------------------

_FOUR_TEAM_ROSTERS = {
    # team: [(slot-ish suffix, position, weekly projection)]
    "t1": [("qb", "QB", 22.0), ("rb1", "RB", 16.0), ("rb2", "RB", 12.0),
           ("wr1", "WR", 15.0), ("wr2", "WR", 11.0), ("te", "TE", 9.0),
           ("k", "K", 8.0), ("def", "DEF", 7.0), ("rb3", "RB", 9.0)],
    "t2": [("qb", "QB", 18.0), ("rb1", "RB", 14.0), ("rb2", "RB", 13.0),
           ("wr1", "WR", 14.0), ("wr2", "WR", 12.0), ("te", "TE", 8.0),
           ("k", "K", 8.0), ("def", "DEF", 7.0), ("wr3", "WR", 9.0)],
    "t3": [("qb", "QB", 20.0), ("rb1", "RB", 15.0), ("rb2", "RB", 10.0),
           ("wr1", "WR", 13.0), ("wr2", "WR", 12.0), ("te", "TE", 10.0),
           ("k", "K", 7.0), ("def", "DEF", 8.0), ("rb3", "RB", 8.0)],
    "t4": [("qb", "QB", 17.0), ("rb1", "RB", 13.0), ("rb2", "RB", 11.0),
           ("wr1", "WR", 16.0), ("wr2", "WR", 10.0), ("te", "TE", 7.0),
           ("k", "K", 9.0), ("def", "DEF", 6.0), ("wr3", "WR", 9.0)],
}


def make_four_team_league(**settings_overrides) -> League:
    settings = {
        "roster_slots": {},
        "playoff_teams": 2,
        "regular_season_weeks": 14,
        "current_week": 9,
        "league_size": 4,
    }
    settings.update(settings_overrides)

    teams = []
    for team_id, roster in _FOUR_TEAM_ROSTERS.items():
        players = tuple(
            Player(f"{team_id}_{suffix}", f"{team_id.upper()} {suffix.upper()}",
                   Position(pos), "TST", proj)
            for suffix, pos, proj in roster
        )
        teams.append(Team(team_id, f"Team {team_id.upper()}", f"Owner {team_id}", players))

    return League(
        league_id="four",
        name="Four Team League",
        teams=tuple(teams),
        scoring_rules=ScoringRules(dict(DEMO_SCORING)),
        settings=LeagueSettings(**settings),
    )


@pytest.fixture
def demo_league():
    return build_demo_league()


@pytest.fixture
def qb_for_wr():
    """The reference trade: Team A's QB for Team B's WR."""
    return Trade(team_a_out=("player1",), team_b_out=("player3",))


@pytest.fixture
def four_team_league():
    return make_four_team_league()


@pytest.fixture
def qb_swap():
    """t1's 22-point QB for t2's 18-point QB."""
    return Trade(team_a_out=("t1_qb",), team_b_out=("t2_qb",))


@pytest.fixture
def league_factory():
    """Builds the four-team league with overridden settings."""
    return make_four_team_league
