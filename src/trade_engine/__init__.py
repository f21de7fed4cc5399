from src.trade_engine.counter_offers import CounterOfferSuggester, suggest_counter_offers
from src.trade_engine.models import GradeResult, LetterGrade, RiskTag
from src.trade_engine.trade_analyzer import TradeAnalyzer, analyze_trade
from src.trade_engine.valuation import ValuationModel, player_value_table, value

__all__ = [
    "CounterOfferSuggester",
    "GradeResult",
    "LetterGrade",
    "RiskTag",
    "TradeAnalyzer",
    "ValuationModel",
    "analyze_trade",
    "player_value_table",
    "suggest_counter_offers",
    "value",
]
