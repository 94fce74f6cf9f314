"""Implementação de exemplo (stub) do gateway PIX, sem API externa."""

import uuid

from nexus.payments.gateway.base import Charge, ChargeStatus, Order, PaymentStatus


class ExampleGateway:
    """Gateway stub: retorna dados fictícios para desenvolver/testar o fluxo."""

    def create_pix_charge(self, order: Order) -> Charge:
        transaction_id = f"example-{uuid.uuid4().hex[:16]}"
        return Charge(
            transaction_id=transaction_id,
            copy_paste=f"00020126580014br.gov.bcb.pix0136{transaction_id}",
            status=PaymentStatus.PENDING,
            qr_code_base64=None,
        )

    def get_charge_status(self, transaction_id: str) -> ChargeStatus:
        # Para testes: id que termina com "-paid" é considerado pago, "-failed" recusado
        if transaction_id.endswith("-paid"):
            return ChargeStatus(transaction_id, PaymentStatus.PAID, raw_status="paid")
        if transaction_id.endswith("-failed"):
            return ChargeStatus(transaction_id, PaymentStatus.FAILED, raw_status="failed")
        return ChargeStatus(transaction_id, PaymentStatus.PENDING, raw_status="pending")
