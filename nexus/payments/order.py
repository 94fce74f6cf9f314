"""Montagem e validação do pedido recebido do checkout."""

import math
import re
import secrets
import string
from typing import Any

from nexus.payments.gateway.base import Customer, Order, OrderItem
from nexus.payments.gateway.errors import ValidationError

DEFAULT_CUSTOMER_NAME = "Cliente Nexus"
DEFAULT_PHONE = "+5500000000000"
ORDER_ID_PREFIX = "NEX_"
_ORDER_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_id() -> str:
    """Identificador único do pedido, ex: NEX_8F3K2QZ1A."""
    return ORDER_ID_PREFIX + "".join(secrets.choice(_ORDER_ID_ALPHABET) for _ in range(9))


def normalize_document(value: Any) -> str:
    """CPF/CNPJ só com dígitos."""
    return re.sub(r"\D", "", str(value or ""))


def normalize_phone(value: Any) -> str:
    """Telefone em formato internacional (+55...); default quando ausente."""
    raw = str(value or "").strip()
    if not raw:
        return DEFAULT_PHONE
    digits = re.sub(r"\D", "", raw)
    if not digits:
        return DEFAULT_PHONE
    return "+" + digits


def _to_number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} inválido")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} inválido") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} inválido")
    return number


def _build_item(raw: Any, index: int) -> OrderItem:
    if not isinstance(raw, dict):
        raise ValidationError(f"items[{index}] inválido")
    item_id = str(raw.get("id") or "").strip()
    name = str(raw.get("name") or "").strip()
    if not item_id or not name:
        raise ValidationError(f"items[{index}] precisa de id e name")
    quantity = raw.get("quantity", 1)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"items[{index}].quantity deve ser inteiro positivo")
    price = _to_number(raw.get("price"), f"items[{index}].price")
    if price < 0:
        raise ValidationError(f"items[{index}].price não pode ser negativo")
    return OrderItem(id=item_id, name=name, quantity=quantity, price=round(price, 2))


def build_order(payload: Any) -> Order:
    """
    Monta o Order a partir do JSON do checkout:
    {orderId?, amount?, customer: {name, email, document, phone}, items: [...]}.
    Levanta ValidationError antes de qualquer chamada ao gateway.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Corpo da requisição inválido")

    customer_raw = payload.get("customer")
    if not isinstance(customer_raw, dict):
        raise ValidationError("customer obrigatório")
    email = str(customer_raw.get("email") or "").strip()
    if not email:
        raise ValidationError("customer.email obrigatório")
    customer = Customer(
        name=str(customer_raw.get("name") or "").strip() or DEFAULT_CUSTOMER_NAME,
        email=email,
        document=normalize_document(customer_raw.get("document")),
        phone=normalize_phone(customer_raw.get("phone")),
    )

    items_raw = payload.get("items")
    if not isinstance(items_raw, list) or not items_raw:
        raise ValidationError("items deve ser uma lista não vazia")
    items = tuple(_build_item(raw, i) for i, raw in enumerate(items_raw))

    if payload.get("amount") is None:
        total = sum(item.quantity * item.price for item in items)
    else:
        total = _to_number(payload.get("amount"), "amount")
    total = round(total, 2)
    if not math.isfinite(total) or total <= 0:
        raise ValidationError("O valor total deve ser positivo")

    identifier = str(payload.get("orderId") or "").strip() or generate_order_id()
    return Order(identifier=identifier, customer=customer, items=items, total=total)
