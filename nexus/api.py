"""App FastAPI: relay PIX (/pix) e webhook do AmploPay."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from nexus.config import cors_origins
from nexus.db.session import create_all_tables
from nexus.payments.gateway.errors import (
    GatewayError,
    GatewayRejected,
    GatewayTimeout,
    GatewayUnreachable,
    MalformedGatewayResponse,
    ValidationError,
)
from nexus.payments.service import PaymentService

logger = logging.getLogger(__name__)

_service: Optional[PaymentService] = None


def get_payment_service() -> PaymentService:
    global _service
    if _service is None:
        _service = PaymentService()
    return _service


def set_payment_service(service: Optional[PaymentService]) -> None:
    """Troca o serviço usado pelas rotas (testes ou gateway customizado)."""
    global _service
    _service = service


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_all_tables()
    yield


app = FastAPI(title="Nexus PIX Relay", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(error: GatewayError) -> JSONResponse:
    """Traduz o erro do gateway para HTTP; só inclui o corpo cru do gateway."""
    if isinstance(error, GatewayRejected):
        return JSONResponse(
            status_code=error.status_code,
            content={"message": error.message, "details": error.raw},
        )
    if isinstance(error, GatewayTimeout):
        return JSONResponse(status_code=504, content={"message": error.message})
    if isinstance(error, GatewayUnreachable):
        return JSONResponse(status_code=502, content={"message": error.message})
    if isinstance(error, MalformedGatewayResponse):
        return JSONResponse(status_code=500, content={"message": error.message, "raw": error.raw})
    return JSONResponse(status_code=500, content={"message": error.message})


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/pix")
async def create_pix(body: Any = Body(default=None)):
    """Cria cobrança PIX no gateway e retorna {id, status, copy_paste, qr_code_base64}."""
    service = get_payment_service()
    try:
        charge = await asyncio.to_thread(service.create_charge, body)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})
    except GatewayError as e:
        return _error_response(e)
    return charge.to_dict()


@app.get("/pix/{transaction_id}")
async def pix_status(transaction_id: str):
    """Consulta de status (passthrough ao gateway, salvo status terminal já registrado)."""
    service = get_payment_service()
    try:
        status = await asyncio.to_thread(service.get_status, transaction_id)
    except GatewayError as e:
        return _error_response(e)
    return {"id": transaction_id, "status": status.value}


@app.post("/webhook/amplopay")
async def amplopay_webhook(body: Any = Body(default=None)) -> PlainTextResponse:
    """
    Notificação assíncrona do gateway. Sempre 200: o gateway não precisa
    saber de falhas de validação locais.
    """
    service = get_payment_service()
    try:
        await asyncio.to_thread(service.handle_webhook, body)
    except Exception:
        logger.exception("Erro ao processar webhook AmploPay")
    return PlainTextResponse("OK")
