import pytest

from nexus.payments.gateway.errors import ValidationError
from nexus.payments.order import (
    DEFAULT_CUSTOMER_NAME,
    DEFAULT_PHONE,
    build_order,
    generate_order_id,
    normalize_document,
    normalize_phone,
)


def test_build_order_normalizes_customer(order_payload):
    order = build_order(order_payload)
    assert order.identifier == "NEX_TESTE0001"
    assert order.total == 29.9
    assert order.customer.document == "12345678909"
    assert order.customer.phone == "+5511988887777"
    assert order.items[0].quantity == 1


def test_identifier_generated_when_missing(order_payload):
    order_payload.pop("orderId")
    order = build_order(order_payload)
    assert order.identifier.startswith("NEX_")
    assert len(order.identifier) == 13
    assert build_order(order_payload).identifier != order.identifier


def test_total_computed_from_items(order_payload):
    order_payload.pop("amount")
    order_payload["items"] = [
        {"id": "a", "name": "A", "quantity": 2, "price": 10.5},
        {"id": "b", "name": "B", "quantity": 1, "price": 0.25},
    ]
    assert build_order(order_payload).total == 21.25


def test_defaults_for_name_and_phone(order_payload):
    order_payload["customer"] = {"email": "x@example.com"}
    order = build_order(order_payload)
    assert order.customer.name == DEFAULT_CUSTOMER_NAME
    assert order.customer.phone == DEFAULT_PHONE
    assert order.customer.document == ""


@pytest.mark.parametrize("amount", [0, -1, "abc", True, "NaN", "inf", float("-inf")])
def test_rejects_non_positive_or_invalid_total(order_payload, amount):
    order_payload["amount"] = amount
    with pytest.raises(ValidationError):
        build_order(order_payload)


def test_rejects_missing_email(order_payload):
    order_payload["customer"]["email"] = " "
    with pytest.raises(ValidationError):
        build_order(order_payload)


@pytest.mark.parametrize(
    "items",
    [
        [],
        None,
        [{"id": "a", "name": "A", "quantity": 0, "price": 1}],
        [{"name": "A", "price": 1}],
        [{"id": "a", "name": "A", "quantity": 1, "price": "NaN"}],
        ["x"],
    ],
)
def test_rejects_bad_items(order_payload, items):
    order_payload["items"] = items
    with pytest.raises(ValidationError):
        build_order(order_payload)


def test_rejects_non_dict_body():
    with pytest.raises(ValidationError):
        build_order(None)


def test_helpers():
    assert normalize_document("12.345.678/0001-90") == "12345678000190"
    assert normalize_document(None) == ""
    assert normalize_phone("5511999990000") == "+5511999990000"
    assert normalize_phone("  ") == DEFAULT_PHONE
    assert generate_order_id()[4:].isalnum()


def test_rejects_total_that_overflows(order_payload):
    order_payload.pop("amount")
    order_payload["items"] = [{"id": "a", "name": "A", "quantity": 2, "price": 1e308}]
    with pytest.raises(ValidationError):
        build_order(order_payload)
