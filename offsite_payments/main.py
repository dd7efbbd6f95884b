import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from .config import get_settings
from .exceptions import ConfigurationError, MalformedPayload, SignatureMismatch, UnknownIntegration
from .integrations import INTEGRATIONS
from .models import Base
from .notification_handler import NotificationHandler

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("offsite-payments")


class EndpointFilter(logging.Filter):
    """Filter out noisy health check access logs."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - logging filter
        return "GET /health" not in record.getMessage()


logging.getLogger("uvicorn.access").addFilter(EndpointFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    engine: AsyncEngine = create_async_engine(settings.database_url)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.handler = NotificationHandler(sessionmaker, settings)
    logger.info(
        "Callback service ready in %s mode for %s",
        settings.INTEGRATION_MODE.value,
        ", ".join(INTEGRATIONS),
    )
    try:
        yield
    finally:
        await engine.dispose()


app = FastAPI(
    title="Offsite Payments Callback Service",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "offsite-payments"}


@app.post("/notifications/{integration}")
async def receive_notification(integration: str, request: Request):
    """Acknowledge a provider callback and record the order outcome."""
    handler: NotificationHandler = request.app.state.handler
    payload = await request.body()
    content_type = request.headers.get("content-type")

    try:
        notification, transaction = await handler.handle(integration, payload, content_type)
    except UnknownIntegration as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except MalformedPayload as exc:
        logger.warning("Malformed %s notification: %s", integration, exc)
        raise HTTPException(status_code=400, detail=f"Malformed payload: {exc}")
    except SignatureMismatch as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ConfigurationError as exc:
        logger.error("Cannot verify %s notification: %s", integration, exc)
        raise HTTPException(status_code=500, detail=str(exc))

    # Some providers retry until they read a fixed acknowledgement body.
    if notification.response_body is not None:
        return PlainTextResponse(notification.response_body)

    return {
        "received": True,
        "integration": integration,
        "item_id": transaction.item_id,
        "transaction_id": transaction.transaction_id,
        "status": transaction.status,
    }


@app.get("/transactions/{integration}/{item_id}")
async def get_transaction(integration: str, item_id: str, request: Request):
    handler: NotificationHandler = request.app.state.handler
    transaction = await handler.get_transaction(integration, item_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail=f"No transaction for {integration} item {item_id}")
    return {
        "integration": transaction.integration,
        "item_id": transaction.item_id,
        "transaction_id": transaction.transaction_id,
        "amount": None if transaction.amount is None else str(transaction.amount),
        "currency": transaction.currency,
        "status": transaction.status,
        "test": transaction.test,
        "notification_count": transaction.notification_count,
    }


@app.get("/")
async def root():
    return {"message": "Offsite Payments Callback Service", "integrations": list(INTEGRATIONS)}


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "offsite_payments.main:app",
        host="0.0.0.0",
        port=settings.HTTP_PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
