"""Serviço de domínio: criação de cobrança, consulta de status e confirmação via webhook."""

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from nexus.config import GatewayConfig
from nexus.db.models import PixCharge, utc_now
from nexus.db.session import get_session
from nexus.payments.gateway.base import Charge, PaymentGatewayProtocol, PaymentStatus
from nexus.payments.gateway.normalize import extract_status, extract_transaction_id, map_status
from nexus.payments.order import build_order
from nexus.payments.poller import StatusPoller

logger = logging.getLogger(__name__)


class PaymentService:
    """Serviço síncrono (usar via asyncio.to_thread a partir das rotas async)."""

    def __init__(
        self,
        gateway: Optional[PaymentGatewayProtocol] = None,
        config: Optional[GatewayConfig] = None,
    ):
        from nexus.payments.gateway.factory import get_gateway
        self._config = config or GatewayConfig.from_env()
        self._gateway = gateway or get_gateway(self._config)

    @property
    def gateway(self) -> PaymentGatewayProtocol:
        return self._gateway

    def create_charge(self, payload: Any) -> Charge:
        """
        Valida o pedido, cria a cobrança no gateway e registra o id da transação.
        Falha ao gravar não descarta a cobrança já criada no gateway.
        """
        order = build_order(payload)
        charge = self._gateway.create_pix_charge(order)
        try:
            self._register_charge(charge, order.identifier, order.total)
        except SQLAlchemyError:
            logger.exception("Erro ao registrar cobrança %s", charge.transaction_id)
        return charge

    def _register_charge(self, charge: Charge, identifier: str, total: float) -> None:
        with get_session() as session:
            existing = session.exec(
                select(PixCharge).where(PixCharge.transaction_id == charge.transaction_id)
            ).first()
            if existing is None:
                session.add(
                    PixCharge(
                        transaction_id=charge.transaction_id,
                        identifier=identifier,
                        amount_cents=int(round(total * 100)),
                        status=PaymentStatus.PENDING.value,
                    )
                )
                session.commit()

    def settled_status(self, transaction_id: str) -> Optional[PaymentStatus]:
        """Status terminal já registrado localmente (webhook ou consulta anterior), se houver."""
        with get_session() as session:
            record = session.exec(
                select(PixCharge).where(PixCharge.transaction_id == transaction_id)
            ).first()
            if record is None:
                return None
            status = PaymentStatus(record.status)
            return status if status.is_terminal else None

    def record_status(self, transaction_id: str, status: PaymentStatus) -> bool:
        """Grava status terminal. Retorna False se já havia um status terminal registrado."""
        if not status.is_terminal:
            return False
        now = utc_now()
        with get_session() as session:
            record = session.exec(
                select(PixCharge).where(PixCharge.transaction_id == transaction_id)
            ).first()
            if record is None:
                record = PixCharge(transaction_id=transaction_id)
            elif PaymentStatus(record.status).is_terminal:
                return False
            record.status = status.value
            record.updated_at = now
            if status is PaymentStatus.PAID:
                record.paid_at = now
            session.add(record)
            session.commit()
            return True

    def get_status(self, transaction_id: str) -> PaymentStatus:
        """Status atual: o terminal registrado localmente vence; senão consulta o gateway."""
        local = self.settled_status(transaction_id)
        if local is not None:
            return local
        reading = self._gateway.get_charge_status(transaction_id)
        if reading.status.is_terminal:
            self.record_status(transaction_id, reading.status)
        return reading.status

    def handle_webhook(self, payload: Any) -> Optional[PaymentStatus]:
        """
        Processa notificação do gateway (formato aninhado ou plano).
        Retorna o status mapeado, ou None se não houver id da transação.
        """
        transaction_id = extract_transaction_id(payload)
        raw_status = extract_status(payload)
        status = map_status(raw_status)
        if not transaction_id:
            logger.warning("Webhook sem id de transação (status=%s)", raw_status)
            return None
        if status is PaymentStatus.PAID:
            logger.info("Pagamento aprovado via webhook: %s", transaction_id)
        else:
            logger.info("Webhook para %s: status %s -> %s", transaction_id, raw_status, status.value)
        self.record_status(transaction_id, status)
        return status

    def poller(self, transaction_id: str, interval: Optional[float] = None) -> StatusPoller:
        """Poller de fallback; encerra assim que o webhook registrar status terminal."""
        return StatusPoller(
            self._gateway,
            transaction_id,
            interval=interval or self._config.poll_interval,
            settled=self.settled_status,
        )
