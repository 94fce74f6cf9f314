"""Gateway de pagamento PIX (interface base + implementações)."""

from nexus.payments.gateway.amplopay import AmploPayGateway
from nexus.payments.gateway.base import (
    Charge,
    ChargeStatus,
    Customer,
    Order,
    OrderItem,
    PaymentGatewayProtocol,
    PaymentStatus,
)
from nexus.payments.gateway.errors import (
    GatewayError,
    GatewayRejected,
    GatewayTimeout,
    GatewayUnreachable,
    MalformedGatewayResponse,
    ValidationError,
)
from nexus.payments.gateway.example import ExampleGateway
from nexus.payments.gateway.factory import get_gateway

__all__ = [
    "AmploPayGateway",
    "Charge",
    "ChargeStatus",
    "Customer",
    "ExampleGateway",
    "GatewayError",
    "GatewayRejected",
    "GatewayTimeout",
    "GatewayUnreachable",
    "MalformedGatewayResponse",
    "Order",
    "OrderItem",
    "PaymentGatewayProtocol",
    "PaymentStatus",
    "ValidationError",
    "get_gateway",
]
