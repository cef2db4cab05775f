from decimal import Decimal

import pytest

from fast_constraints import Email, NotBlank, NotEmpty, Pattern, Range, Required, SchemaError
from fast_constraints.core.constraints import parse_constraint

IPV4 = r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$"


@pytest.mark.parametrize("value, expected", [
    (1, True),
    (10, True),
    (5, True),
    (0, False),
    (11, False),
    (1.0, True),
    (10.5, False),
    (Decimal("9.99"), True),
])
def test_range_bounds_are_inclusive(value, expected):
    assert Range("n", min=1, max=10).is_satisfied(value) is expected


def test_range_with_open_bound():
    at_least_five = Range("id", min=5)
    assert at_least_five.is_satisfied(5)
    assert at_least_five.is_satisfied(10 ** 12)
    assert not at_least_five.is_satisfied(4)

    at_most_five = Range("id", max=5)
    assert at_most_five.is_satisfied(-(10 ** 12))
    assert not at_most_five.is_satisfied(6)


def test_range_rejects_non_numbers_but_accepts_absence():
    constraint = Range("n", min=1, max=10)
    assert not constraint.is_satisfied("3")
    assert not constraint.is_satisfied(True)
    assert not constraint.is_satisfied(float("nan"))
    assert constraint.is_satisfied(None)


def test_range_messages():
    assert Range("id", min=5).render_message(3) == "must be greater than or equal to 5"
    assert Range("id", max=5).render_message(6) == "must be less than or equal to 5"
    assert Range("id", min=1, max=10).render_message(11) == "must be between 1 and 10"


@pytest.mark.parametrize("kwargs", [
    {},
    {"min": 10, "max": 1},
    {"min": "1"},
    {"min": True},
    {"max": float("nan")},
])
def test_range_rejects_inconsistent_parameters(kwargs):
    with pytest.raises(SchemaError):
        Range("n", **kwargs)


def test_range_min_equal_to_max_is_allowed():
    constraint = Range("n", min=3, max=3)
    assert constraint.is_satisfied(3)
    assert not constraint.is_satisfied(4)


def test_required():
    constraint = Required("name")
    assert constraint.is_satisfied("")
    assert constraint.is_satisfied(0)
    assert not constraint.is_satisfied(None)
    assert constraint.render_message(None) == "must not be null"


@pytest.mark.parametrize("value, expected", [
    ("a", True),
    ([1], True),
    ({"k": 1}, True),
    ("", False),
    ([], False),
    ({}, False),
    (None, False),
    (5, False),
])
def test_not_empty(value, expected):
    assert NotEmpty("tags").is_satisfied(value) is expected


@pytest.mark.parametrize("value, expected", [
    ("a", True),
    ("  a  ", True),
    ("", False),
    ("   ", False),
    ("\t\n", False),
    (None, False),
    (["a"], False),
])
def test_not_blank(value, expected):
    assert NotBlank("name").is_satisfied(value) is expected


def test_pattern_is_anchored():
    constraint = Pattern("code", regexp=r"[A-Z]{3}")
    assert constraint.is_satisfied("ABC")
    assert not constraint.is_satisfied("ABCD")
    assert not constraint.is_satisfied("xABC")
    assert not constraint.is_satisfied(123)
    assert constraint.is_satisfied(None)


def test_ipv4_pattern_checks_shape_only():
    constraint = Pattern("ip_address", regexp=IPV4)
    assert constraint.is_satisfied("127.0.0.1")
    # Octets are not range checked, only one to three digits each
    assert constraint.is_satisfied("999.1.1.1")
    assert not constraint.is_satisfied("1.1.1.1.1")
    assert not constraint.is_satisfied("1.1.1.1x")
    assert not constraint.is_satisfied("1111.1.1.1")


def test_pattern_message_and_invalid_regexp():
    assert Pattern("code", regexp="[0-9]+").render_message("x") == 'must match "[0-9]+"'

    with pytest.raises(SchemaError):
        Pattern("code", regexp="[unclosed")


def test_email(sample_data):
    constraint = Email("email")
    assert constraint.is_satisfied(sample_data["email"])
    assert constraint.is_satisfied("first.last+tag@mail.example.com")
    assert not constraint.is_satisfied("user@localhost")
    assert not constraint.is_satisfied("user.example.com")
    assert not constraint.is_satisfied("@example.com")
    assert not constraint.is_satisfied("user@@example.com")
    assert not constraint.is_satisfied("user@example.com trailing")
    assert constraint.is_satisfied(None)
    assert constraint.render_message("x") == "must be a well-formed email address"


def test_custom_message_template_references_value():
    constraint = Range("age", min=18, message_template="{value} is below the minimum age of {min}")
    assert constraint.render_message(12) == "12 is below the minimum age of 18"


def test_custom_message_template_with_unknown_placeholder_is_kept():
    constraint = NotBlank("name", message_template="name {missing} is required")
    assert constraint.render_message("") == "name {missing} is required"


@pytest.mark.parametrize("path", ["", "   "])
def test_target_path_must_not_be_empty(path):
    with pytest.raises(SchemaError):
        Required(path)


def test_target_path_is_required():
    with pytest.raises(SchemaError):
        Required()


def test_constraints_are_immutable():
    constraint = Range("n", min=1, max=10)
    with pytest.raises(Exception):
        constraint.min = 0


def test_parse_constraint_dispatches_on_kind():
    constraint = parse_constraint({"kind": "range", "target_path": "id", "min": 5})
    assert isinstance(constraint, Range)
    assert constraint.min == 5
    assert constraint.max is None

    constraint = parse_constraint({"kind": "pattern", "target_path": "ip", "regexp": IPV4})
    assert isinstance(constraint, Pattern)


@pytest.mark.parametrize("data", [
    {"kind": "unknown", "target_path": "x"},
    {"kind": "required"},
    {"kind": "required", "target_path": "x", "unexpected": 1},
    {"kind": "range", "target_path": "x", "min": 10, "max": 1},
    {"kind": "pattern", "target_path": "x", "regexp": "("},
])
def test_parse_constraint_rejects_malformed_entries(data):
    with pytest.raises(SchemaError):
        parse_constraint(data)
