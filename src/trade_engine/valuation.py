"""Player trade valuation.

A player's trade value is their rules-adjusted weekly projection scaled by a
positional scarcity multiplier::

    value = projection * (1 + demand * (weight - 1))
    demand = min(starters(position) * league_size / pool_size(position), 1)

``weight`` comes from ``POSITION_SCARCITY_WEIGHTS`` and ``pool_size`` from
``REPLACEMENT_POOL_SIZES``. A position whose starting slots soak up the whole
startable pool gets the full weight; a position few teams start stays near 1.
"""

import logging
import math
from typing import Optional

import pandas as pd

from src.league.models import League, LeagueSettings, Player, Position, ScoringRules
from src.trade_engine.config import (
    POSITION_SCARCITY_WEIGHTS,
    REPLACEMENT_POOL_SIZES,
    RISK_THRESHOLDS,
)
from src.trade_engine.models import PlayerValuation

logger = logging.getLogger(__name__)


def _coerce_points(raw) -> Optional[float]:
    """Return *raw* as a float, or None when missing or non-numeric."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        points = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(points) or math.isinf(points):
        return None
    return points


class ValuationModel:
    """Pure player valuation for one league's scoring rules and settings.

    Holds no state beyond its two inputs; identical inputs always produce
    identical values.
    """

    def __init__(self, scoring_rules: Optional[ScoringRules], settings: LeagueSettings):
        self.scoring_rules = scoring_rules
        self.settings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def projection(self, player: Player) -> float:
        """Rules-adjusted weekly projection, never negative.

        Raw stat lines are scored with the league's weights when present;
        otherwise the supplied projected points are used as-is.
        """
        if player.stats and self.scoring_rules is not None:
            return max(self.scoring_rules.points(player.stats), 0.0)

        points = _coerce_points(player.projected_points)
        if points is None:
            logger.warning(
                "Player %s (%s) has no usable projection; valuing at 0",
                player.player_id, player.name,
            )
            return 0.0
        return max(points, 0.0)

    def is_low_sample(self, player: Player) -> bool:
        """Whether the projection is missing, non-numeric or zero."""
        if player.stats and self.scoring_rules is not None:
            return self.projection(player) <= RISK_THRESHOLDS["low_sample_projection"]
        points = _coerce_points(player.projected_points)
        return points is None or points <= RISK_THRESHOLDS["low_sample_projection"]

    def scarcity_multiplier(self, position: Position) -> float:
        weight = POSITION_SCARCITY_WEIGHTS.get(position.value, 1.0)
        pool_size = REPLACEMENT_POOL_SIZES.get(position.value, 1)
        starters = self.settings.starting_slots(position)
        demand = min(starters * self.settings.league_size / pool_size, 1.0)
        return 1.0 + demand * (weight - 1.0)

    def value(self, player: Player) -> float:
        return self.projection(player) * self.scarcity_multiplier(player.position)

    def valuate(self, player: Player) -> PlayerValuation:
        """Full valuation breakdown for *player*."""
        projection = self.projection(player)
        scarcity = self.scarcity_multiplier(player.position)
        return PlayerValuation(
            player_id=player.player_id,
            position=player.position,
            projection=projection,
            scarcity_multiplier=scarcity,
            value=projection * scarcity,
            low_sample=self.is_low_sample(player),
        )


def value(player: Player, scoring_rules: Optional[ScoringRules], settings: LeagueSettings) -> float:
    """Trade value of *player* (>= 0)."""
    return ValuationModel(scoring_rules, settings).value(player)


def player_value_table(league: League) -> pd.DataFrame:
    """Valuation of every rostered player in the league.

    Returns:
        DataFrame with columns ``player_id``, ``name``, ``team_id``,
        ``position``, ``projection``, ``scarcity``, ``value`` and
        ``position_rank`` (1-based rank by value within position,
        ties broken by player id).
    """
    model = ValuationModel(league.scoring_rules, league.settings)
    rows = []
    for team in league.teams:
        for player in team.roster:
            valuation = model.valuate(player)
            rows.append({
                "player_id": player.player_id,
                "name": player.name,
                "team_id": team.team_id,
                "position": player.position.value,
                "projection": valuation.projection,
                "scarcity": valuation.scarcity_multiplier,
                "value": valuation.value,
            })

    columns = ["player_id", "name", "team_id", "position", "projection", "scarcity", "value"]
    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        df["position_rank"] = pd.Series(dtype="int64")
        return df

    df = df.sort_values(["value", "player_id"], ascending=[False, True]).reset_index(drop=True)
    df["position_rank"] = df.groupby("position").cumcount() + 1

    logger.debug("Valued %d players across %d teams", len(df), len(league.teams))
    return df
