# api/main.py
import logging
import os

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.order_api import create_order_router
from api.ws_api import create_ws_router

from repositories.order_repository import OrderRepository
from services.order_service import OrderService

logger = logging.getLogger(__name__)


# ----------------------------------------------------------
# Logging
# ----------------------------------------------------------
def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _idle_timeout_from_env() -> float | None:
    raw = os.getenv("WS_IDLE_TIMEOUT")
    if not raw:
        return None
    timeout = float(raw)
    return timeout if timeout > 0 else None


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid request body")
        ctx_error = (err.get("ctx") or {}).get("error")
        if ctx_error and str(ctx_error) not in msg:
            msg = f"{msg}: {ctx_error}"
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"


# ----------------------------------------------------------
# App factory
# ----------------------------------------------------------
def create_app(order_service: OrderService | None = None, idle_timeout: float | None = None) -> FastAPI:
    if order_service is None:
        order_service = OrderService(OrderRepository())
    if idle_timeout is None:
        idle_timeout = _idle_timeout_from_env()

    app = FastAPI(
        title="Grub Run Order Server",
        description="Order registration API and WebSocket echo endpoint",
        version="1.0.0",
    )
    app.state.order_service = order_service

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Malformed request bodies are a 400, not FastAPI's default 422
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _format_validation_error(exc)
        logger.warning("[API] %s %s rejected: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})

    app.include_router(create_order_router(order_service))
    app.include_router(create_ws_router(idle_timeout=idle_timeout))

    @app.get("/health")
    def health():
        return {"status": "ok", "orders": order_service.order_count()}

    return app


app = create_app()


def main():
    configure_logging()

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    logger.info("HTTP server starting on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
