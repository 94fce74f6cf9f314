"""Interface base do gateway de pagamento PIX (desacoplada)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class PaymentStatus(str, Enum):
    """Status local de uma cobrança; paid e failed são terminais."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    document: str
    phone: str


@dataclass(frozen=True)
class OrderItem:
    id: str
    name: str
    quantity: int
    price: float


@dataclass(frozen=True)
class Order:
    """Pedido efêmero montado no checkout (nunca persistido)."""

    identifier: str
    customer: Customer
    items: tuple[OrderItem, ...]
    total: float


@dataclass(frozen=True)
class Charge:
    """Cobrança PIX normalizada. Só o status muda, via nova consulta ao gateway."""

    transaction_id: str
    copy_paste: str
    status: PaymentStatus = PaymentStatus.PENDING
    qr_code_base64: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.transaction_id,
            "status": self.status.value,
            "copy_paste": self.copy_paste,
            "qr_code_base64": self.qr_code_base64,
        }


@dataclass(frozen=True)
class ChargeStatus:
    """Leitura de status de uma cobrança (consulta ou webhook)."""

    transaction_id: str
    status: PaymentStatus
    raw_status: str | None = None


class PaymentGatewayProtocol(Protocol):
    """Protocolo do gateway de pagamento PIX."""

    def create_pix_charge(self, order: Order) -> Charge:
        """Cria uma cobrança PIX e retorna dados para pagamento (QR/copia e cola)."""
        ...

    def get_charge_status(self, transaction_id: str) -> ChargeStatus:
        """Consulta o status atual da cobrança."""
        ...
