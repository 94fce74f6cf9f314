"""Configuração do gateway PIX (lida do ambiente só em from_env)."""

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://app.amplopay.com"
DEFAULT_CHARGE_PATH = "/api/v1/gateway/pix/receive"
DEFAULT_STATUS_PATH = "/api/v1/gateway/transactions/{transaction_id}"
DEFAULT_CALLBACK_URL = "https://nexus-store.com/webhook/amplopay"
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_POLL_INTERVAL_SECONDS = 5.0


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def mask_key(key: str) -> str:
    """Mostra só os 4 últimos caracteres da chave (para logs)."""
    if not key:
        return "<vazio>"
    return "*" * max(0, len(key) - 4) + key[-4:]


@dataclass(frozen=True)
class GatewayConfig:
    """Endpoint, credenciais e tempos do gateway AmploPay."""

    base_url: str = DEFAULT_BASE_URL
    public_key: str = field(default="", repr=False)
    secret_key: str = field(default="", repr=False)
    callback_url: str = DEFAULT_CALLBACK_URL
    charge_path: str = DEFAULT_CHARGE_PATH
    status_path: str = DEFAULT_STATUS_PATH
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    gateway: str = "amplopay"

    @property
    def has_credentials(self) -> bool:
        return bool(self.public_key and self.secret_key)

    def charge_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.charge_path.lstrip("/")

    def status_url(self, transaction_id: str) -> str:
        path = self.status_path.format(transaction_id=transaction_id)
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        return cls(
            base_url=_env("AMPLOPAY_BASE_URL", DEFAULT_BASE_URL),
            public_key=_env("AMPLOPAY_PUBLIC_KEY"),
            secret_key=_env("AMPLOPAY_SECRET_KEY"),
            callback_url=_env("AMPLOPAY_CALLBACK_URL", DEFAULT_CALLBACK_URL),
            charge_path=_env("AMPLOPAY_CHARGE_PATH", DEFAULT_CHARGE_PATH),
            status_path=_env("AMPLOPAY_STATUS_PATH", DEFAULT_STATUS_PATH),
            timeout=_env_float("AMPLOPAY_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            poll_interval=_env_float("PIX_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_SECONDS),
            gateway=_env("PAYMENT_GATEWAY", "amplopay").lower(),
        )


def cors_origins() -> list[str]:
    """Origens liberadas no CORS (CORS_ORIGINS separado por vírgula; default '*')."""
    raw = _env("CORS_ORIGINS", "*")
    return [part.strip() for part in raw.split(",") if part.strip()]
