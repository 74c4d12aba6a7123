from typing import Any, Dict

import pytest

from apisearch.exceptions import FormatError
from apisearch.model.entities import Brand, Category, Manufacturer, Product, Tag
from apisearch.query.filter import ApplicationType
from apisearch.result.aggregation import ResultAggregation
from apisearch.result.aggregations import Aggregations
from apisearch.result.counter import Counter, parse_bucket_name
from apisearch.result.result import Result

# ---------- Helpers ----------


def make_result() -> Result:
    return Result(total_elements=5, total_products=2, total_hits=7, min_price=10, max_price=90)


def populated_result() -> Result:
    result = make_result()
    result.add_product(
        Product(
            id="1",
            name="Trail shoe",
            price=90.0,
            reduced_price=70.0,
            brand=Brand(id="b1", name="Nike"),
            categories=[Category(id="c1", name="Shoes", level=1)],
            tags=[Tag(name="outdoor")],
        )
    )
    result.add_category(Category(id="c1", name="Shoes"))
    result.add_brand(Brand(id="b1", name="Nike"))
    result.add_product(Product(id="2", name="Sock", family="accessory", price=10.0))
    result.add_manufacturer(Manufacturer(id="m1", name="Acme"))
    result.add_tag(Tag(name="outdoor"))

    brand_aggregation = ResultAggregation(
        "brand", ApplicationType.AT_LEAST_ONE, total_elements=2, active_elements=["b1"]
    )
    brand_aggregation.add_counter("id##b1~~name##Nike", 4)
    brand_aggregation.add_counter("id##b2~~name##Adidas", 1)
    aggregations = Aggregations(total_elements=5)
    aggregations.add_aggregation("brand", brand_aggregation)
    result.set_aggregations(aggregations)
    return result


# ---------- Relevance order ----------


def test_results_preserve_cross_kind_order() -> None:
    result = make_result()
    p1 = Product(id="1", name="P1")
    c1 = Category(id="1", name="C1")
    p2 = Product(id="2", name="P2")
    result.add_product(p1)
    result.add_category(c1)
    result.add_product(p2)

    assert result.get_results() == [p1, c1, p2]
    assert result.get_products() == [p1, p2]
    assert result.get_categories() == [c1]
    assert result.get_first_result() is p1


def test_same_identity_in_different_kinds_is_distinct() -> None:
    result = make_result()
    brand = Brand(id="x", name="Brand X")
    manufacturer = Manufacturer(id="x", name="Maker X")
    result.add_brand(brand)
    result.add_manufacturer(manufacturer)
    assert result.get_results() == [brand, manufacturer]


def test_duplicate_identity_keeps_first_position_and_latest_entity() -> None:
    result = make_result()
    old = Product(id="1", name="Old name")
    other = Product(id="2", name="Other")
    new = Product(id="1", name="New name")
    result.add_product(old)
    result.add_product(other)
    result.add_product(new)

    assert result.get_results() == [new, other]
    assert len(result.results) == len(result.products)


def test_empty_result() -> None:
    result = make_result()
    assert result.get_results() == []
    assert result.get_first_result() is None
    assert result.get_aggregation("brand") is None
    assert result.has_not_empty_aggregation("brand") is False


def test_totals() -> None:
    result = make_result()
    assert result.get_total_elements() == 5
    assert result.get_total_products() == 2
    assert result.get_total_hits() == 7
    assert result.get_min_price() == 10
    assert result.get_max_price() == 90


# ---------- Wire format ----------


def test_to_array_shape() -> None:
    array = populated_result().to_array()
    assert array["results"] == [
        ["p", "product~1"],
        ["c", "category~c1"],
        ["b", "brand~b1"],
        ["p", "accessory~2"],
        ["m", "manufacturer~m1"],
        ["t", "tag~outdoor"],
    ]
    assert set(array["products"]) == {"product~1", "accessory~2"}
    assert array["products"]["product~1"]["brand"] == {"id": "b1", "name": "Nike"}
    assert array["aggregations"]["total_elements"] == 5


def test_round_trip_preserves_totals_entities_and_order() -> None:
    original = populated_result()
    rebuilt = Result.create_from_array(original.to_array())

    assert rebuilt.to_array() == original.to_array()
    assert rebuilt.get_results() == original.get_results()
    assert rebuilt.get_total_hits() == 7
    assert [p.real_price for p in rebuilt.get_products()] == [70.0, 10.0]

    brand = rebuilt.get_aggregation("brand")
    assert brand is not None
    assert brand.get_counter("b1") is not None
    assert brand.get_counter("b1").used is True  # type: ignore[union-attr]
    assert brand.get_counter("b2").used is False  # type: ignore[union-attr]


def test_create_from_array_without_aggregations() -> None:
    array = make_result().to_array()
    del array["aggregations"]
    result = Result.create_from_array(array)
    assert result.get_aggregations().get_aggregations() == {}


@pytest.mark.parametrize(
    "missing", ["total_elements", "total_products", "total_hits", "min_price", "max_price"]
)
def test_create_from_array_requires_totals(missing: str) -> None:
    array: Dict[str, Any] = make_result().to_array()
    del array[missing]
    with pytest.raises(FormatError):
        Result.create_from_array(array)


def test_create_from_array_rejects_dangling_order_entries() -> None:
    array = make_result().to_array()
    array["results"] = [["p", "product~404"]]
    with pytest.raises(FormatError):
        Result.create_from_array(array)


def test_create_from_array_rejects_unknown_kind() -> None:
    array = populated_result().to_array()
    array["results"].append(["z", "product~1"])
    with pytest.raises(FormatError):
        Result.create_from_array(array)


# ---------- Aggregations ----------


def test_parse_bucket_name() -> None:
    assert parse_bucket_name("id##1~~name##Nike~~level##2") == {
        "id": "1",
        "name": "Nike",
        "level": "2",
    }
    assert parse_bucket_name("red") == {"id": "red", "name": "red"}


def test_counter_uses_active_elements() -> None:
    counter = Counter.create_by_active_elements("id##7~~name##Shoes~~level##2", 3, ["7"])
    assert counter.id == "7"
    assert counter.name == "Shoes"
    assert counter.level == 2
    assert counter.used is True
    assert counter.n == 3
    assert Counter.create_from_array(counter.to_array()) == counter


def test_counter_requires_id() -> None:
    with pytest.raises(FormatError):
        Counter.create_from_array({"values": {"name": "x"}, "n": 1})


@pytest.mark.parametrize("n", ["many", None])
def test_counter_rejects_non_numeric_n(n: object) -> None:
    with pytest.raises(FormatError):
        Counter.create_from_array({"values": {"id": "1", "name": "x"}, "n": n})


def test_hierarchical_aggregation_exposes_next_level() -> None:
    aggregation = ResultAggregation(
        "categories", ApplicationType.MUST_ALL_WITH_LEVELS, active_elements=["1"]
    )
    aggregation.add_counter("id##1~~name##Shoes~~level##1", 10)
    aggregation.add_counter("id##2~~name##Shirts~~level##1", 4)
    aggregation.add_counter("id##3~~name##Running~~level##2", 6)
    aggregation.add_counter("id##4~~name##Trail~~level##3", 2)

    assert aggregation.is_filter() is True
    assert aggregation.has_levels() is True
    assert aggregation.get_highest_active_level() == 1
    assert [c.id for c in aggregation.get_all_elements()] == ["1", "3"]


def test_flat_aggregation_lists_active_first() -> None:
    aggregation = ResultAggregation("color", active_elements=["blue"])
    aggregation.add_counter("red", 5)
    aggregation.add_counter("blue", 2)
    assert [c.id for c in aggregation.get_all_elements()] == ["blue", "red"]
    assert [c.id for c in aggregation.get_active_counters()] == ["blue"]


def test_aggregations_lookup_and_round_trip() -> None:
    aggregations = Aggregations(total_elements=3)
    empty = ResultAggregation("empty")
    full = ResultAggregation("full")
    full.add_counter("a", 1)
    aggregations.add_aggregation("empty", empty)
    aggregations.add_aggregation("full", full)

    assert aggregations.get_aggregation("missing") is None
    assert aggregations.has_not_empty_aggregation("empty") is False
    assert aggregations.has_not_empty_aggregation("full") is True

    rebuilt = Aggregations.create_from_array(aggregations.to_array())
    assert rebuilt.to_array() == aggregations.to_array()
    assert rebuilt.get_total_elements() == 3


def test_result_aggregation_rejects_unknown_application_type() -> None:
    with pytest.raises(FormatError):
        ResultAggregation.create_from_array({"name": "x", "application_type": 99})
