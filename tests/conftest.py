import json

import httpx
import pytest

from nexus.config import GatewayConfig
from nexus.db import session as db_session
from nexus.payments.gateway.amplopay import AmploPayGateway


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'nexus.db'}")
    db_session.reset_engine()
    db_session.create_all_tables()
    yield
    db_session.reset_engine()


@pytest.fixture
def config():
    return GatewayConfig(
        base_url="https://gateway.test",
        public_key="pk_test_12345678",
        secret_key="sk_test_87654321",
        callback_url="https://loja.test/webhook/amplopay",
        poll_interval=0.01,
    )


class GatewayRecorder:
    """Responde às requisições com respostas enfileiradas e guarda o que recebeu."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list = []

    def queue(self, response) -> None:
        self.responses.append(response)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder():
    return GatewayRecorder()


@pytest.fixture
def gateway(config, recorder):
    gw = AmploPayGateway(config, transport=httpx.MockTransport(recorder))
    yield gw
    gw.close()


@pytest.fixture
def order_payload():
    return {
        "orderId": "NEX_TESTE0001",
        "amount": 29.9,
        "customer": {
            "name": "Maria Souza",
            "email": "maria@example.com",
            "document": "123.456.789-09",
            "phone": "+55 11 98888-7777",
        },
        "items": [
            {"id": "prod-1", "name": "Pack Premium", "quantity": 1, "price": 29.9},
        ],
    }
