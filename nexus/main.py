"""Entrypoint do relay: carrega .env, configura logging e sobe o uvicorn."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

from nexus.config import GatewayConfig, mask_key

load_dotenv()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

# Não emite logs de requisição HTTP do httpx (URLs de consulta a cada polling)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def main() -> None:
    config = GatewayConfig.from_env()
    if config.gateway != "example" and not config.has_credentials:
        raise SystemExit(
            "Defina AMPLOPAY_PUBLIC_KEY e AMPLOPAY_SECRET_KEY no ambiente ou no .env "
            "(ou PAYMENT_GATEWAY=example)"
        )
    port = int(os.getenv("PORT", "3001"))
    logger.info(
        "Backend Nexus ativo na porta %s (gateway %s, chave pública %s)",
        port,
        config.gateway,
        mask_key(config.public_key),
    )
    uvicorn.run("nexus.api:app", host="0.0.0.0", port=port, log_level="warning")


if __name__ == "__main__":
    main()
