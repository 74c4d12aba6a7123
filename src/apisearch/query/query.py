"""Query builder.

A ``Query`` collects free text, filters, aggregations, sort, paging and an
optional score strategy, and encodes them into the engine-agnostic wire map
the search service understands.

Filters and aggregations are kept in insertion-ordered dicts keyed by a
logical name. The free text lives in an implicit ``_query`` filter which is
never sent as a filter but as the top-level ``q`` key.

All mutators return the same instance so calls can be chained::

    query = (
        Query.create("shoes", page=2)
        .filter_by_brands(["nike"])
        .filter_by_price_range(["0..50", "50..100"], ["0..50"])
        .sort_by(SortBy.PRICE_ASC)
    )
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from apisearch.exceptions import FormatError, QueryBuildError
from apisearch.model.base import UUIDReference, require
from apisearch.model.coordinate import Coordinate
from apisearch.model.geo import LocationRange
from apisearch.query.aggregation import Aggregation
from apisearch.query.filter import ApplicationType, Filter, FilterType
from apisearch.query.score_strategy import ScoreStrategy
from apisearch.query.sort_by import GEO_DISTANCE, SortBy

logger = logging.getLogger("apisearch.query")

QUERY_FILTER = "_query"
EXCLUDED_IDS_FIELD = "_id"
DEFAULT_SIZE = 10
MATCH_ALL_SIZE = 1000


class Query:
    """Mutable request builder owned by a single caller until serialized."""

    def __init__(self, query_text: str) -> None:
        self.coordinate: Optional[Coordinate] = None
        self.filters: Dict[str, Filter] = {}
        self.aggregations: Dict[str, Aggregation] = {}
        self.sort: Dict[str, Any] = {}
        self.page = 1
        self.from_ = 0
        self.size = DEFAULT_SIZE
        self.suggestions_enabled = False
        self.aggregations_enabled = True
        self.score_strategy: Optional[ScoreStrategy] = None

        self.sort_by(SortBy.SCORE)
        self.filters[QUERY_FILTER] = Filter.create(
            "", [query_text], ApplicationType.MUST_ALL, FilterType.QUERY
        )

    # ----- Factories -----

    @classmethod
    def create(cls, query_text: str, page: int = 1, size: int = DEFAULT_SIZE) -> Query:
        page = max(1, int(page))
        query = cls(query_text)
        query.page = page
        query.size = int(size)
        query.from_ = (page - 1) * query.size
        return query

    @classmethod
    def create_located(
        cls,
        coordinate: Coordinate,
        query_text: str,
        page: int = 1,
        size: int = DEFAULT_SIZE,
    ) -> Query:
        query = cls.create(query_text, page, size)
        query.coordinate = coordinate
        return query

    @classmethod
    def create_match_all(cls) -> Query:
        return cls.create("", 1, MATCH_ALL_SIZE)

    # ----- Filters -----

    def _set_filter(self, key: str, filter_: Optional[Filter]) -> None:
        # Filters are never stored without values; None removes the key
        if filter_ is None:
            if self.filters.pop(key, None) is not None:
                logger.debug("Removed filter '%s'", key)
            return
        self.filters[key] = filter_

    def filter_by(
        self,
        field: str,
        values: Sequence[Any],
        application_type: ApplicationType = ApplicationType.MUST_ALL,
    ) -> Query:
        """Filter by any indexed field, under the key ``_<field>``."""
        self._set_filter(
            f"_{field}",
            Filter.create(field, values, application_type, FilterType.FIELD) if values else None,
        )
        return self

    def filter_by_meta(
        self,
        field: str,
        values: Sequence[Any],
        application_type: ApplicationType = ApplicationType.MUST_ALL,
    ) -> Query:
        """Filter by a field of the entity metadata, under the key ``_m_<field>``."""
        self._set_filter(
            f"_m_{field}",
            Filter.create(f"metadata.{field}", values, application_type, FilterType.FIELD)
            if values
            else None,
        )
        return self

    def filter_by_families(
        self,
        families: Sequence[str],
        application_type: ApplicationType = ApplicationType.MUST_ALL,
        aggregate: bool = True,
    ) -> Query:
        self._set_filter(
            "family",
            Filter.create("family", families, application_type, FilterType.FIELD)
            if families
            else None,
        )
        if aggregate:
            self._add_aggregation("family", "family", application_type, FilterType.FIELD)
        return self

    def filter_by_types(
        self,
        types: Sequence[str],
        application_type: ApplicationType = ApplicationType.MUST_ALL,
        aggregate: bool = True,
    ) -> Query:
        self._set_filter(
            "type",
            Filter.create("_type", types, application_type, FilterType.FIELD) if types else None,
        )
        if aggregate:
            self._add_aggregation("type", "_type", application_type, FilterType.FIELD)
        return self

    def filter_by_categories(
        self,
        categories: Sequence[str],
        application_type: ApplicationType = ApplicationType.MUST_ALL_WITH_LEVELS,
        aggregate: bool = True,
    ) -> Query:
        self._set_filter(
            "categories",
            Filter.create("categories.id", categories, application_type, FilterType.NESTED)
            if categories
            else None,
        )
        if aggregate:
            self._add_aggregation(
                "categories",
                "categories.id|categories.name|categories.level",
                application_type,
                FilterType.NESTED,
            )
        return self

    def filter_by_manufacturers(
        self,
        manufacturers: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        aggregate: bool = True,
    ) -> Query:
        self._set_filter(
            "manufacturers",
            Filter.create("manufacturers.id", manufacturers, application_type, FilterType.NESTED)
            if manufacturers
            else None,
        )
        if aggregate:
            self._add_aggregation(
                "manufacturers",
                "manufacturers.id|manufacturers.name",
                application_type,
                FilterType.NESTED,
            )
        return self

    def filter_by_brands(
        self,
        brands: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        aggregate: bool = True,
    ) -> Query:
        self._set_filter(
            "brand",
            Filter.create("brand.id", brands, application_type, FilterType.FIELD)
            if brands
            else None,
        )
        if aggregate:
            self._add_aggregation("brand", "brand.id|brand.name", application_type, FilterType.FIELD)
        return self

    def filter_by_tags(
        self,
        group_name: str,
        options: Sequence[str],
        tags: Sequence[str],
        application_type: ApplicationType = ApplicationType.MUST_ALL,
        aggregate: bool = True,
    ) -> Query:
        """Filter by tags belonging to a caller-named group.

        ``options`` are the tags offered in the group; they become the
        explicit buckets of the companion aggregation.
        """
        self._set_filter(
            group_name,
            Filter.create(
                "tags.name",
                tags,
                application_type,
                FilterType.NESTED,
                {"field": "tags.name", "values": list(options)},
            )
            if tags
            else None,
        )
        if aggregate:
            self._add_aggregation(
                group_name, "tags.name", application_type, FilterType.NESTED, options
            )
        return self

    def filter_by_price_range(
        self,
        options: Sequence[str],
        values: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        aggregate: bool = True,
    ) -> Query:
        return self.filter_by_range(
            "price", "real_price", options, values, application_type, aggregate
        )

    def filter_by_rating_range(
        self,
        options: Sequence[str],
        values: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        aggregate: bool = True,
    ) -> Query:
        return self.filter_by_range("rating", "rating", options, values, application_type, aggregate)

    def filter_by_range(
        self,
        range_name: str,
        field: str,
        options: Sequence[str],
        values: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
        aggregate: bool = True,
    ) -> Query:
        """Filter by ``"from..to"`` ranges of a numeric or date field.

        The range filter is stored even without values. The companion
        aggregation is only added when ``options`` lists buckets.
        """
        self.filters[range_name] = Filter.create(field, values, application_type, FilterType.RANGE)
        if aggregate and options:
            self._add_aggregation(range_name, field, application_type, FilterType.RANGE, options)
        return self

    def filter_by_location(self, location_range: LocationRange) -> Query:
        self.filters["coordinate"] = Filter.create(
            "coordinate",
            [location_range.to_array()],
            ApplicationType.AT_LEAST_ONE,
            FilterType.GEO,
        )
        return self

    def filter_by_stores(
        self,
        stores: Sequence[str],
        application_type: ApplicationType = ApplicationType.AT_LEAST_ONE,
    ) -> Query:
        self._set_filter(
            "stores",
            Filter.create("stores", stores, application_type, FilterType.FIELD) if stores else None,
        )
        return self

    def exclude_references(self, references: Iterable[UUIDReference]) -> Query:
        """Leave the given entities out of the results.

        Repeated calls accumulate into a single exclusion filter.
        """
        excluded: List[str] = []
        current = self.filters.get(f"_{EXCLUDED_IDS_FIELD}")
        if current is not None and current.application_type == ApplicationType.EXCLUDE:
            excluded.extend(current.values)
        for reference in references:
            uuid = reference.compose_uuid()
            if uuid not in excluded:
                excluded.append(uuid)
        return self.filter_by(EXCLUDED_IDS_FIELD, excluded, ApplicationType.EXCLUDE)

    def exclude_reference(self, reference: UUIDReference) -> Query:
        return self.exclude_references([reference])

    # ----- Aggregations -----

    def _add_aggregation(
        self,
        name: str,
        field: str,
        application_type: ApplicationType,
        aggregation_type: FilterType,
        options: Optional[Sequence[str]] = None,
    ) -> None:
        self.aggregations[name] = Aggregation.create(
            name, field, application_type, aggregation_type, options
        )

    # ----- Sort, scoring and toggles -----

    def sort_by(self, sort: Mapping[str, Any]) -> Query:
        """Set the sort specification.

        Geo-distance sorts are measured from the query coordinate and
        therefore need a query built with ``create_located``.
        """
        sort = copy.deepcopy(dict(sort))
        if SortBy.is_geo_distance(sort):
            if self.coordinate is None:
                raise QueryBuildError(
                    "In order to be able to sort by coordinates, you need to create a Query "
                    "by using Query.create_located() instead of Query.create()"
                )
            if not isinstance(sort[GEO_DISTANCE], dict):
                raise QueryBuildError("Geo distance sort must be a mapping with order and unit")
            sort[GEO_DISTANCE]["coordinate"] = self.coordinate.to_array()
        self.sort = sort
        return self

    def set_score_strategy(self, score_strategy: Optional[ScoreStrategy]) -> Query:
        self.score_strategy = score_strategy
        return self

    def enable_suggestions(self) -> Query:
        self.suggestions_enabled = True
        return self

    def disable_suggestions(self) -> Query:
        self.suggestions_enabled = False
        return self

    def enable_aggregations(self) -> Query:
        self.aggregations_enabled = True
        return self

    def disable_aggregations(self) -> Query:
        self.aggregations_enabled = False
        return self

    # ----- Accessors -----

    def get_query_text(self) -> str:
        return self.filters[QUERY_FILTER].values[0]

    def get_coordinate(self) -> Optional[Coordinate]:
        return self.coordinate

    def get_filters(self) -> Dict[str, Filter]:
        return dict(self.filters)

    def get_filter(self, name: str) -> Optional[Filter]:
        return self.filters.get(name)

    def get_aggregations(self) -> Dict[str, Aggregation]:
        return dict(self.aggregations)

    def get_aggregation(self, name: str) -> Optional[Aggregation]:
        return self.aggregations.get(name)

    def get_sort_by(self) -> Dict[str, Any]:
        return copy.deepcopy(self.sort)

    def get_score_strategy(self) -> Optional[ScoreStrategy]:
        return self.score_strategy

    def get_page(self) -> int:
        return self.page

    def get_from(self) -> int:
        return self.from_

    def get_size(self) -> int:
        return self.size

    def are_suggestions_enabled(self) -> bool:
        return self.suggestions_enabled

    def are_aggregations_enabled(self) -> bool:
        return self.aggregations_enabled

    # ----- Wire format -----

    def to_array(self) -> Dict[str, Any]:
        array: Dict[str, Any] = {
            "q": self.get_query_text(),
            "coordinate": self.coordinate.to_array() if self.coordinate else None,
            "filters": {
                name: f.to_array()
                for name, f in self.filters.items()
                if f.filter_type != FilterType.QUERY
            },
            "aggregations": {name: a.to_array() for name, a in self.aggregations.items()},
            "sort": copy.deepcopy(self.sort),
            "page": self.page,
            "size": self.size,
            "suggestions_enabled": self.suggestions_enabled,
            "aggregations_enabled": self.aggregations_enabled,
            "score_strategy": self.score_strategy.to_array() if self.score_strategy else None,
        }
        # Booleans and the (possibly empty) query text are always sent
        return {k: v for k, v in array.items() if v is not None and v != {} and v != []}

    @classmethod
    def create_from_array(cls, array: Mapping[str, Any]) -> Query:
        try:
            page = int(require(array, "page", "Query"))
            size = int(require(array, "size", "Query"))
        except (TypeError, ValueError) as exc:
            raise FormatError(f"Query page and size must be integers: {exc}") from exc
        sort = require(array, "sort", "Query")
        if not isinstance(sort, Mapping):
            raise FormatError("Query sort must be a mapping")

        query_text = str(array.get("q") or "")
        coordinate = array.get("coordinate")
        if coordinate:
            query = cls.create_located(
                Coordinate.create_from_array(coordinate), query_text, page, size
            )
        else:
            query = cls.create(query_text, page, size)

        # The sort already carries its coordinate, so it bypasses sort_by()
        query.sort = copy.deepcopy(dict(sort))
        for name, raw in (array.get("filters") or {}).items():
            query.filters[name] = Filter.create_from_array(raw)
        for name, raw in (array.get("aggregations") or {}).items():
            query.aggregations[name] = Aggregation.create_from_array(raw)
        query.suggestions_enabled = bool(array.get("suggestions_enabled", False))
        query.aggregations_enabled = bool(array.get("aggregations_enabled", True))
        raw_strategy = array.get("score_strategy")
        if raw_strategy:
            query.score_strategy = ScoreStrategy.create_from_array(raw_strategy)
        return query
