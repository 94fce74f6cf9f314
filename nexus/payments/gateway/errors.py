"""Erros do gateway de pagamento. Nunca carregam credenciais."""

from typing import Any


class GatewayError(Exception):
    """Base dos erros de integração com o gateway."""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.message = message
        self.raw = raw


class GatewayUnreachable(GatewayError):
    """Falha de rede/conexão: o gateway não respondeu."""


class GatewayTimeout(GatewayUnreachable):
    """O gateway não respondeu dentro do timeout configurado."""


class GatewayRejected(GatewayError):
    """Gateway respondeu com status não-2xx."""

    def __init__(self, message: str, status_code: int, raw: Any = None):
        super().__init__(message, raw)
        self.status_code = status_code


class MalformedGatewayResponse(GatewayError):
    """Resposta 2xx sem dados de PIX reconhecíveis."""


class ValidationError(ValueError):
    """Pedido inválido, detectado antes de qualquer chamada de rede."""
