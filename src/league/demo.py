"""Reference two-team league used for demos and smoke tests."""

from src.league.models import (
    League,
    LeagueSettings,
    Player,
    Position,
    ScoringRules,
    StatCategory,
    Team,
)

DEMO_SCORING = {
    StatCategory.PASSING_YARDS: 0.04,
    StatCategory.PASSING_TOUCHDOWNS: 4,
    StatCategory.INTERCEPTIONS: -2,
    StatCategory.RUSHING_YARDS: 0.1,
    StatCategory.RUSHING_TOUCHDOWNS: 6,
    StatCategory.RECEIVING_YARDS: 0.1,
    StatCategory.RECEIVING_TOUCHDOWNS: 6,
    StatCategory.RECEPTIONS: 0.5,
    StatCategory.FUMBLES: -2,
}


def build_demo_league() -> League:
    """Team A holds a QB (20) and RB (15); Team B a WR (12) and TE (8)."""
    team_a = Team(
        team_id="team1",
        name="Team A",
        owner="Owner A",
        roster=(
            Player("player1", "Test Player 1", Position.QB, "TEST", 20.0),
            Player("player2", "Test Player 2", Position.RB, "TEST", 15.0),
        ),
    )
    team_b = Team(
        team_id="team2",
        name="Team B",
        owner="Owner B",
        roster=(
            Player("player3", "Test Player 3", Position.WR, "TEST", 12.0),
            Player("player4", "Test Player 4", Position.TE, "TEST", 8.0),
        ),
    )
    return League(
        league_id="demo",
        name="Demo League",
        teams=(team_a, team_b),
        scoring_rules=ScoringRules(dict(DEMO_SCORING)),
        settings=LeagueSettings(
            roster_slots={},
            playoff_teams=4,
            regular_season_weeks=14,
            current_week=8,
            league_size=2,
        ),
    )
