"""Factory do gateway de pagamento (retorna implementação conforme config)."""

import logging

from nexus.config import GatewayConfig
from nexus.payments.gateway.amplopay import AmploPayGateway
from nexus.payments.gateway.base import PaymentGatewayProtocol
from nexus.payments.gateway.example import ExampleGateway

logger = logging.getLogger(__name__)


def get_gateway(config: GatewayConfig) -> PaymentGatewayProtocol:
    """
    Retorna a implementação do gateway conforme config.gateway.
    'example' usa o stub; 'amplopay' (default) exige as duas chaves.
    """
    if config.gateway == "example":
        return ExampleGateway()
    if not config.has_credentials:
        logger.warning("AMPLOPAY_PUBLIC_KEY/AMPLOPAY_SECRET_KEY ausentes; cobranças serão rejeitadas")
    return AmploPayGateway(config)
