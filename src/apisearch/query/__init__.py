"""Request-side model: filters, aggregations, scoring and the query builder."""

from .aggregation import Aggregation
from .filter import ApplicationType, Filter, FilterType
from .query import Query
from .score_strategy import DecayType, Modifier, ScoreStrategy, ScoreStrategyType
from .sort_by import SortBy

__all__ = [
    "Aggregation",
    "ApplicationType",
    "Filter",
    "FilterType",
    "Query",
    "DecayType",
    "Modifier",
    "ScoreStrategy",
    "ScoreStrategyType",
    "SortBy",
]
