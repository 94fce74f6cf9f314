"""Polling de status de uma cobrança PIX em background (asyncio)."""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, Union

from nexus.config import DEFAULT_POLL_INTERVAL_SECONDS
from nexus.payments.gateway.base import PaymentGatewayProtocol, PaymentStatus
from nexus.payments.gateway.errors import GatewayError

logger = logging.getLogger(__name__)

SettledLookup = Callable[[str], Optional[PaymentStatus]]
StatusCallback = Callable[[str], Union[None, Awaitable[None]]]


class StatusPoller:
    """
    Consulta o gateway a cada `interval` segundos até um status terminal
    (paid/failed) ou até cancel(). Sem timeout próprio: quem chama decide
    quanto tempo o checkout fica aberto.

    `settled`, se informado, é consultado antes de cada GET; um status
    terminal já registrado (ex: pelo webhook) encerra o polling sem tocar
    no gateway.
    """

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        transaction_id: str,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        settled: Optional[SettledLookup] = None,
    ):
        if interval <= 0:
            raise ValueError("interval deve ser positivo")
        self._gateway = gateway
        self.transaction_id = transaction_id
        self.interval = interval
        self._settled = settled
        self._stop = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        """Nenhum novo tick é agendado; um tick em andamento termina normalmente."""
        if not self._stop.is_set():
            logger.info("Polling cancelado: %s", self.transaction_id)
        self._stop.set()

    def reset(self) -> None:
        """Permite reiniciar o polling depois de cancel()."""
        self._stop.clear()

    async def _wait_interval(self) -> bool:
        """Espera o intervalo; True se foi cancelado durante a espera."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
        except asyncio.TimeoutError:
            return self._stop.is_set()
        return True

    async def _tick(self) -> Optional[PaymentStatus]:
        if self._settled is not None:
            try:
                local = await asyncio.to_thread(self._settled, self.transaction_id)
            except Exception as e:
                logger.warning("Falha ao ler status local de %s: %s", self.transaction_id, e)
                local = None
            if local is not None and local.is_terminal:
                logger.info("Status %s já registrado para %s", local.value, self.transaction_id)
                return local
        try:
            reading = await asyncio.to_thread(self._gateway.get_charge_status, self.transaction_id)
        except GatewayError as e:
            logger.warning("Consulta de status inconclusiva para %s: %s", self.transaction_id, e)
            return None
        return reading.status

    async def readings(self) -> AsyncIterator[PaymentStatus]:
        """Sequência preguiçosa de leituras; termina após paid/failed ou cancel()."""
        while True:
            if await self._wait_interval():
                return
            status = await self._tick()
            if status is None:
                continue
            yield status
            if status.is_terminal:
                return

    async def run(
        self,
        on_paid: Optional[StatusCallback] = None,
        on_failed: Optional[StatusCallback] = None,
    ) -> Optional[PaymentStatus]:
        """Consome readings(); chama o callback do status terminal uma única vez."""
        async for status in self.readings():
            if status is PaymentStatus.PAID:
                logger.info("Pagamento confirmado: %s", self.transaction_id)
                await _call(on_paid, self.transaction_id)
                return status
            if status is PaymentStatus.FAILED:
                logger.info("Pagamento recusado/expirado: %s", self.transaction_id)
                await _call(on_failed, self.transaction_id)
                return status
        return None

    def start(
        self,
        on_paid: Optional[StatusCallback] = None,
        on_failed: Optional[StatusCallback] = None,
    ) -> "asyncio.Task[Optional[PaymentStatus]]":
        """Executa run() como task independente (uma por checkout ativo)."""
        return asyncio.create_task(self.run(on_paid, on_failed))


async def _call(callback: Optional[StatusCallback], transaction_id: str) -> None:
    if callback is None:
        return
    result = callback(transaction_id)
    if asyncio.iscoroutine(result):
        await result
