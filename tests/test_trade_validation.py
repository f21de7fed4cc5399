"""Tests for league/trade validation and trade resolution."""

from dataclasses import replace

import pytest

from src.league.errors import InsufficientLeagueDataError, InvalidTradeError
from src.league.models import Player, Position, Trade
from src.trade_engine.trade_validation import resolve_trade, validate_league


class TestValidateLeague:
    def test_demo_league_is_valid(self, demo_league):
        validate_league(demo_league)

    def test_missing_scoring_rules(self, demo_league):
        league = replace(demo_league, scoring_rules=None)
        with pytest.raises(InsufficientLeagueDataError, match="no scoring rules"):
            validate_league(league)

    def test_single_team(self, demo_league):
        league = replace(demo_league, teams=demo_league.teams[:1])
        with pytest.raises(InsufficientLeagueDataError, match="at least two teams"):
            validate_league(league)


class TestResolveTrade:
    def test_resolves_sides(self, demo_league, qb_for_wr):
        resolved = resolve_trade(demo_league, qb_for_wr)
        assert resolved.team_a.team_id == "team1"
        assert resolved.team_b.team_id == "team2"
        assert [p.player_id for p in resolved.team_a_outgoing] == ["player1"]
        assert [p.player_id for p in resolved.team_b_outgoing] == ["player3"]

    def test_empty_team_a_side(self, demo_league):
        with pytest.raises(InvalidTradeError, match="Team A must send"):
            resolve_trade(demo_league, Trade(team_a_out=[], team_b_out=["player3"]))

    def test_empty_team_b_side(self, demo_league):
        with pytest.raises(InvalidTradeError, match="Team B must send"):
            resolve_trade(demo_league, Trade(team_a_out=["player1"], team_b_out=[]))

    def test_id_on_both_sides(self, demo_league):
        trade = Trade(team_a_out=["player1"], team_b_out=["player1", "player3"])
        with pytest.raises(InvalidTradeError, match="both sides"):
            resolve_trade(demo_league, trade)

    def test_duplicate_id_on_one_side(self, demo_league):
        trade = Trade(team_a_out=["player1", "player1"], team_b_out=["player3"])
        with pytest.raises(InvalidTradeError, match="more than once"):
            resolve_trade(demo_league, trade)

    def test_unknown_player(self, demo_league):
        trade = Trade(team_a_out=["ghost"], team_b_out=["player3"])
        with pytest.raises(InvalidTradeError, match="not on any roster"):
            resolve_trade(demo_league, trade)

    def test_side_mixes_teams(self, demo_league):
        trade = Trade(team_a_out=["player1", "player3"], team_b_out=["player4"])
        with pytest.raises(InvalidTradeError, match="not on team A's roster"):
            resolve_trade(demo_league, trade)

    def test_both_sides_same_team(self, demo_league):
        trade = Trade(team_a_out=["player1"], team_b_out=["player2"])
        with pytest.raises(InvalidTradeError, match="Both sides"):
            resolve_trade(demo_league, trade)

    def test_claimed_team_must_hold_players(self, demo_league):
        trade = Trade(team_a_out=["player1"], team_b_out=["player3"], team_a_id="team2")
        with pytest.raises(InvalidTradeError, match="not on team A's roster"):
            resolve_trade(demo_league, trade)

    def test_claimed_team_must_exist(self, demo_league):
        trade = Trade(team_a_out=["player1"], team_b_out=["player3"], team_a_id="team9")
        with pytest.raises(InvalidTradeError, match="not in the league"):
            resolve_trade(demo_league, trade)

    def test_player_on_two_rosters(self, demo_league):
        dup = Player("player1", "Clone", Position.QB, "TEST", 20.0)
        team_b = replace(demo_league.teams[1], roster=demo_league.teams[1].roster + (dup,))
        league = demo_league.replace_teams([team_b])
        trade = Trade(team_a_out=["player1"], team_b_out=["player3"])
        with pytest.raises(InvalidTradeError, match="more than one team"):
            resolve_trade(league, trade)


class TestApplyTrade:
    def test_rosters_swap(self, demo_league, qb_for_wr):
        traded = resolve_trade(demo_league, qb_for_wr).apply(demo_league)
        assert traded.get_team("team1").player_ids() == ["player2", "player3"]
        assert traded.get_team("team2").player_ids() == ["player4", "player1"]

    def test_original_league_untouched(self, demo_league, qb_for_wr):
        resolve_trade(demo_league, qb_for_wr).apply(demo_league)
        assert demo_league.get_team("team1").player_ids() == ["player1", "player2"]
