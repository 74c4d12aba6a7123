"""Relevance-boosting strategies.

A strategy tweaks how the engine scores matches: by a numeric field value, by
a custom scoring script, or by decaying the score with the distance of a field
(a date, a price, a location) from an origin. An optional filter restricts the
boost to matching documents.

Unlike filters and aggregations, decoding is lenient: a missing, empty or
unknown strategy type falls back to ``DEFAULT`` instead of failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from apisearch.query.filter import Filter

logger = logging.getLogger("apisearch.query.score_strategy")

DEFAULT_WEIGHT = 1.0
DEFAULT_FACTOR = 1.0
DEFAULT_MISSING = 1.0


class ScoreStrategyType(str, Enum):
    DEFAULT = "default"
    BOOSTING_FIELD_VALUE = "field_value"
    CUSTOM_FUNCTION = "custom_function"
    DECAY = "decay"


class DecayType(str, Enum):
    LINEAR = "linear"
    EXP = "exp"
    GAUSS = "gauss"


class Modifier(str, Enum):
    NONE = "none"
    SQRT = "sqrt"
    LOG = "log"
    LN = "ln"
    SQUARE = "square"


@dataclass(frozen=True, slots=True)
class ScoreStrategy:
    type: ScoreStrategyType = ScoreStrategyType.DEFAULT
    weight: float = DEFAULT_WEIGHT
    filter: Optional[Filter] = None
    configuration: Mapping[str, Any] = field(default_factory=dict)

    def get_configuration_value(self, element: str) -> Any:
        return self.configuration.get(element)

    @classmethod
    def create_default(cls) -> ScoreStrategy:
        return cls()

    @classmethod
    def create_field_boosting(
        cls,
        field: str,
        factor: float = DEFAULT_FACTOR,
        missing: float = DEFAULT_MISSING,
        modifier: Modifier = Modifier.NONE,
        weight: float = DEFAULT_WEIGHT,
        filter: Optional[Filter] = None,
    ) -> ScoreStrategy:
        return cls(
            type=ScoreStrategyType.BOOSTING_FIELD_VALUE,
            weight=float(weight),
            filter=filter,
            configuration={
                "field": field,
                "factor": float(factor),
                "missing": float(missing),
                "modifier": Modifier(modifier).value,
            },
        )

    @classmethod
    def create_custom_function(
        cls,
        function: str,
        weight: float = DEFAULT_WEIGHT,
        filter: Optional[Filter] = None,
    ) -> ScoreStrategy:
        return cls(
            type=ScoreStrategyType.CUSTOM_FUNCTION,
            weight=float(weight),
            filter=filter,
            configuration={"function": function},
        )

    @classmethod
    def create_decay_function(
        cls,
        type: DecayType,
        field: str,
        origin: str,
        scale: str,
        offset: str,
        decay: float,
        weight: float = DEFAULT_WEIGHT,
        filter: Optional[Filter] = None,
    ) -> ScoreStrategy:
        """Decay the score as ``field`` moves away from ``origin``.

        ``scale`` is the distance at which the score is multiplied by ``decay``;
        documents within ``offset`` of the origin are not penalized.
        """
        return cls(
            type=ScoreStrategyType.DECAY,
            weight=float(weight),
            filter=filter,
            configuration={
                "type": DecayType(type).value,
                "field": field,
                "origin": origin,
                "scale": scale,
                "offset": offset,
                "decay": float(decay),
            },
        )

    def to_array(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "configuration": dict(self.configuration),
            "weight": self.weight,
            "filter": self.filter.to_array() if self.filter is not None else None,
        }

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> ScoreStrategy:
        raw_type = array.get("type")
        try:
            strategy_type = ScoreStrategyType(raw_type or ScoreStrategyType.DEFAULT)
        except ValueError:
            logger.debug("Unknown score strategy type %r, using default", raw_type)
            strategy_type = ScoreStrategyType.DEFAULT
        raw_filter = array.get("filter")
        weight = array.get("weight")
        return cls(
            type=strategy_type,
            weight=float(weight) if weight is not None else DEFAULT_WEIGHT,
            filter=Filter.create_from_array(raw_filter) if raw_filter else None,
            configuration=dict(array.get("configuration") or {}),
        )
