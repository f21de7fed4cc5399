"""Data models for the trade grading engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from src.league.models import Position, Trade


class LetterGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class RiskTag(str, Enum):
    LOW_SAMPLE_PROJECTION = "low-sample-projection"
    LOPSIDED_VALUE = "lopsided-value"
    POSITION_DEPLETION = "position-depletion"
    ROSTER_IMBALANCE = "roster-imbalance"


@dataclass(frozen=True)
class PlayerValuation:
    """Trade value of a single player and how it was derived."""

    player_id: str
    position: Position
    projection: float
    scarcity_multiplier: float
    value: float
    low_sample: bool  # Projection was missing, non-numeric or zero


@dataclass(frozen=True)
class TeamImpact:
    team_id: str
    team_name: str
    outgoing_value: float
    incoming_value: float
    net_delta: float  # incoming - outgoing

    def to_dict(self) -> Dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "outgoingValue": self.outgoing_value,
            "incomingValue": self.incoming_value,
            "netDelta": self.net_delta,
        }


@dataclass(frozen=True)
class FairnessResult:
    towards_team_id: Optional[str]  # None when both sides gain equally
    delta_percent: float
    score: float
    explanation: str

    def to_dict(self) -> Dict:
        out: Dict = {
            "deltaPercent": self.delta_percent,
            "explanation": self.explanation,
        }
        if self.towards_team_id is not None:
            out["towardsTeamId"] = self.towards_team_id
        return out


@dataclass(frozen=True)
class RationaleEntry:
    factor: str
    impact: float  # In [-1, 1]; positive pushes the grade up
    text: str

    def to_dict(self) -> Dict:
        return {"factor": self.factor, "impact": self.impact, "text": self.text}


@dataclass(frozen=True)
class GradeResult:
    """Complete grade for one trade. Never mutated after construction."""

    score: float
    letter: LetterGrade
    team_impacts: Tuple[TeamImpact, ...]
    fairness: FairnessResult
    rationale: Tuple[RationaleEntry, ...]
    risk_tags: Tuple[RiskTag, ...]

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "letter": self.letter.value,
            "teamImpacts": [impact.to_dict() for impact in self.team_impacts],
            "fairness": self.fairness.to_dict(),
            "rationale": [entry.to_dict() for entry in self.rationale],
            "riskTags": [tag.value for tag in self.risk_tags],
        }


@dataclass(frozen=True)
class CounterOffer:
    """An alternative trade that grades better than the original."""

    trade: Trade
    grade: GradeResult
    description: str

    def to_dict(self) -> Dict:
        return {
            "trade": self.trade.to_dict(),
            "grade": self.grade.to_dict(),
            "description": self.description,
        }
