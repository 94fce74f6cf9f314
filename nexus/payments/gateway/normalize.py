"""
Normalização das respostas do AmploPay.

O formato da resposta muda conforme conta/versão da API, então cada campo é
lido por uma lista ordenada de extratores: o primeiro valor não vazio vence.
Novos caminhos entram no fim da lista; os antigos nunca são removidos.
"""

from typing import Any, Callable, Iterable, Optional

from nexus.payments.gateway.base import PaymentStatus

Extractor = Callable[[Any], Any]

PAID_STATUSES = frozenset({"paid", "completed", "approved", "ok", "pago"})
FAILED_STATUSES = frozenset({"failed", "canceled", "cancelled", "expired", "recusado"})


def _path(*keys: str) -> Extractor:
    """Extrator que desce pelas chaves aninhadas; None se algum nível faltar."""

    def extract(payload: Any) -> Any:
        node = payload
        for key in keys:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node

    extract.__name__ = "path_" + "_".join(keys)
    return extract


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, dict, list)) and not value:
        return True
    return isinstance(value, str) and not value.strip()


def first_match(payload: Any, extractors: Iterable[Extractor]) -> Any:
    """Aplica os extratores em ordem e retorna o primeiro valor não vazio."""
    for extractor in extractors:
        value = extractor(payload)
        if not _is_empty(value):
            return value
    return None


PIX_CONTAINER_PATHS: list[Extractor] = [
    _path("data", "transaction", "pixInformation"),
    _path("data", "pix"),
    _path("pix"),
    _path("data", "transaction", "pix"),
    _path("data", "pixInformation"),
]

CODE_KEYS: list[Extractor] = [_path("code"), _path("qrCode"), _path("copyPaste")]
IMAGE_KEYS: list[Extractor] = [_path("base64"), _path("image"), _path("qrCodeImage")]

# Campos planos de versões antigas da API
LEGACY_CODE_PATHS: list[Extractor] = [_path("pix_code"), _path("data", "pix_code")]
LEGACY_IMAGE_PATHS: list[Extractor] = [_path("qr_code_image"), _path("data", "qr_code_image")]

TRANSACTION_ID_PATHS: list[Extractor] = [
    _path("data", "transactionId"),
    _path("data", "transaction", "id"),
    _path("data", "id"),
    _path("transactionId"),
    _path("id"),
    _path("transaction", "id"),
]

STATUS_PATHS: list[Extractor] = [
    _path("data", "status"),
    _path("data", "transaction", "status"),
    _path("status"),
    _path("transaction", "status"),
]


def _containers(payload: Any) -> list[dict]:
    found = []
    for extractor in PIX_CONTAINER_PATHS:
        value = extractor(payload)
        if isinstance(value, dict) and value:
            found.append(value)
    return found


def _from_containers(payload: Any, keys: list[Extractor], legacy: list[Extractor]) -> Optional[str]:
    for container in _containers(payload):
        value = first_match(container, keys)
        if value is not None:
            return str(value)
    value = first_match(payload, legacy)
    return str(value) if value is not None else None


def extract_pix_code(payload: Any) -> Optional[str]:
    """Código copia e cola (payload PIX)."""
    return _from_containers(payload, CODE_KEYS, LEGACY_CODE_PATHS)


def extract_qr_image(payload: Any) -> Optional[str]:
    """Imagem do QR Code em base64, se o gateway enviar."""
    return _from_containers(payload, IMAGE_KEYS, LEGACY_IMAGE_PATHS)


def extract_transaction_id(payload: Any) -> Optional[str]:
    value = first_match(payload, TRANSACTION_ID_PATHS)
    return str(value) if value is not None else None


def extract_status(payload: Any) -> Optional[str]:
    value = first_match(payload, STATUS_PATHS)
    return value if isinstance(value, str) else None


def map_status(value: Any) -> PaymentStatus:
    """Mapeia status livre do gateway para pending/paid/failed (case-insensitive)."""
    if not isinstance(value, str):
        return PaymentStatus.PENDING
    folded = value.strip().casefold()
    if folded in PAID_STATUSES:
        return PaymentStatus.PAID
    if folded in FAILED_STATUSES:
        return PaymentStatus.FAILED
    return PaymentStatus.PENDING
