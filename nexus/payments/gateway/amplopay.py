"""Cliente HTTP do gateway AmploPay (criação de cobrança PIX e consulta de status)."""

import json
import logging
from typing import Any, Optional

import httpx

from nexus.config import GatewayConfig, mask_key
from nexus.payments.gateway.base import Charge, ChargeStatus, Order
from nexus.payments.gateway.errors import (
    GatewayRejected,
    GatewayTimeout,
    GatewayUnreachable,
    MalformedGatewayResponse,
)
from nexus.payments.gateway.normalize import (
    extract_pix_code,
    extract_qr_image,
    extract_status,
    extract_transaction_id,
    map_status,
)

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_MESSAGE = "Erro na AmploPay Gateway"


def build_charge_payload(order: Order, callback_url: str) -> dict[str, Any]:
    """Serializa o pedido no schema do endpoint pix/receive."""
    return {
        "identifier": order.identifier,
        "amount": round(order.total, 2),
        "client": {
            "name": order.customer.name,
            "email": order.customer.email,
            "document": order.customer.document,
            "phone": order.customer.phone,
        },
        "products": [
            {
                "id": item.id,
                "name": item.name,
                "quantity": item.quantity,
                "price": round(item.price, 2),
            }
            for item in order.items
        ],
        "callbackUrl": callback_url,
    }


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


class AmploPayGateway:
    """Gateway real: uma chamada HTTPS por operação, sem retry e sem estado."""

    def __init__(self, config: GatewayConfig, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._client = httpx.Client(
            timeout=config.timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "x-public-key": config.public_key,
                "x-secret-key": config.secret_key,
            },
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> tuple[httpx.Response, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Timeout no AmploPay (%ss): %s %s", self._config.timeout, method, url)
            raise GatewayTimeout(f"AmploPay não respondeu em {self._config.timeout}s") from e
        except httpx.TransportError as e:
            logger.error("Erro de conexão com AmploPay: %s", e)
            raise GatewayUnreachable("Servidor AmploPay inacessível no momento.") from e

        data = _decode(response)
        logger.debug("AmploPay %s %s -> %s: %s", method, url, response.status_code, data)
        if not response.is_success:
            message = DEFAULT_REJECTION_MESSAGE
            if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
                message = data["message"]
            logger.error("Erro gateway (%s): %s", response.status_code, message)
            raise GatewayRejected(
                message,
                status_code=response.status_code,
                raw=data if data is not None else response.text,
            )
        if data is None:
            raise MalformedGatewayResponse(
                "Resposta do gateway não é JSON.", raw=response.text
            )
        return response, data

    def create_pix_charge(self, order: Order) -> Charge:
        payload = build_charge_payload(order, self._config.callback_url)
        logger.info(
            "Nova cobrança PIX: identificador=%s valor=R$ %.2f (chave pública %s)",
            order.identifier,
            order.total,
            mask_key(self._config.public_key),
        )
        _response, data = self._request("POST", self._config.charge_url(), json=payload)

        code = extract_pix_code(data)
        if not code:
            logger.error("Container de PIX não encontrado na resposta do gateway")
            raise MalformedGatewayResponse(
                "Resposta do gateway não contém dados do PIX.", raw=data
            )
        transaction_id = extract_transaction_id(data)
        if not transaction_id:
            raise MalformedGatewayResponse(
                "Resposta do gateway não contém id da transação.", raw=data
            )
        charge = Charge(
            transaction_id=transaction_id,
            copy_paste=code,
            status=map_status(extract_status(data)),
            qr_code_base64=extract_qr_image(data),
            raw=data if isinstance(data, dict) else {},
        )
        logger.info("Transação %s pronta para pagamento", charge.transaction_id)
        return charge

    def get_charge_status(self, transaction_id: str) -> ChargeStatus:
        _response, data = self._request("GET", self._config.status_url(transaction_id))
        raw_status = extract_status(data)
        if raw_status is None:
            raise MalformedGatewayResponse(
                "Resposta de status sem campo status.", raw=data
            )
        return ChargeStatus(
            transaction_id=transaction_id,
            status=map_status(raw_status),
            raw_status=raw_status,
        )
