"""Response-side model: computed aggregations and relevance-ordered results."""

from .aggregation import ResultAggregation
from .aggregations import Aggregations
from .counter import Counter
from .result import Result

__all__ = ["ResultAggregation", "Aggregations", "Counter", "Result"]
