"""Tests for raw signal wrapping and coercion."""

from ecoscore.core.prediction.model.signals import (
    BoolValue,
    NumberValue,
    StringValue,
    coerce_category,
    coerce_number,
    is_truthy,
    to_plain,
    to_signal,
    to_signal_map,
)


def test_to_signal_checks_bool_before_int() -> None:
    assert to_signal(True) == BoolValue(True)
    assert to_signal(3) == NumberValue(3.0)
    assert to_signal(2.5) == NumberValue(2.5)
    assert to_signal("vegan") == StringValue("vegan")


def test_to_signal_map_drops_none_and_unsupported_values() -> None:
    signals = to_signal_map({"car_km": 4, "diet_type": None, "tags": ["a"], "x": "y"})
    assert signals == {"car_km": NumberValue(4.0), "x": StringValue("y")}


def test_to_plain_round_trips_values() -> None:
    raw = {"car_km": 4.0, "uses_solar_panels": False, "diet_type": "vegan"}
    assert to_plain(to_signal_map(raw)) == raw


def test_coerce_number_by_value_type() -> None:
    assert coerce_number(BoolValue(True), 9.0) == 1.0
    assert coerce_number(BoolValue(False), 9.0) == 0.0
    assert coerce_number(NumberValue(12.5), 9.0) == 12.5
    assert coerce_number(StringValue(" 7.25 "), 9.0) == 7.25
    assert coerce_number(None, 9.0) == 9.0


def test_coerce_number_falls_back_on_bad_text() -> None:
    assert coerce_number(StringValue("lots"), 10.0) == 10.0
    assert coerce_number(StringValue(""), 10.0) == 10.0


def test_coerce_number_rejects_non_finite_values() -> None:
    assert coerce_number(StringValue("nan"), 2.0) == 2.0
    assert coerce_number(StringValue("inf"), 2.0) == 2.0
    assert coerce_number(NumberValue(float("nan")), 2.0) == 2.0


def test_coerce_category_only_accepts_text() -> None:
    assert coerce_category(StringValue("urban"), "suburban") == "urban"
    assert coerce_category(NumberValue(1.0), "suburban") == "suburban"
    assert coerce_category(None, "suburban") == "suburban"


def test_is_truthy() -> None:
    assert is_truthy(BoolValue(True))
    assert not is_truthy(BoolValue(False))
    assert is_truthy(NumberValue(1.0))
    assert not is_truthy(NumberValue(0.0))
    assert not is_truthy(StringValue("true"))
    assert not is_truthy(None)
