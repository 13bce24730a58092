"""
Chat Gateway HTTP Service

A FastAPI service exposing the chat gateway to the chat client.

Endpoints:
- GET  /api/health       liveness
- GET  /api/chat/models  models routable with the configured credentials
- POST /api/chat         complete one chat turn
"""

import os
import logging
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource

from .core.config import load_config
from .core.errors import GatewayError, InvalidInputError
from .core.gateway import ChatGateway

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "invalid_input": 400,
    "not_found": 404,
    "unavailable": 503,
    "upstream_failure": 502,
}


class ChatBody(BaseModel):
    """Body of POST /api/chat. Message shape is checked by the gateway."""
    messages: Any = None
    model: Optional[str] = None
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")


def _setup_tracing() -> None:
    """Export spans over OTLP when a collector endpoint is configured."""
    otel_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not otel_endpoint:
        return
    resource = Resource.create({"service.name": "chat-gateway"})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otel_endpoint)))
    trace.set_tracer_provider(provider)


def create_app(gateway: Optional[ChatGateway] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        gateway: Prebuilt gateway. When None, one is created from the
            process configuration at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        app.state.gateway = gateway or ChatGateway(load_config())
        logger.info(
            f"Chat gateway started; models: {[m.id for m in app.state.gateway.list_models()]}"
        )
        yield
        await app.state.gateway.close()
        logger.info("Chat gateway stopped")

    app = FastAPI(
        title="Chat Gateway",
        description="Multi-provider chat completion gateway",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("ALLOWED_ORIGIN", "http://localhost:5173")],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    FastAPIInstrumentor.instrument_app(app)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return JSONResponse(
            status_code=ERROR_STATUS.get(exc.kind, 500),
            content={"error": exc.message, "type": exc.kind},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return await gateway_error_handler(
            request, InvalidInputError(f"Invalid request body: {problems}")
        )

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/chat/models")
    async def list_models(request: Request):
        """Models the client may choose from."""
        gateway_ = request.app.state.gateway
        return {"models": [m.public_dict() for m in gateway_.list_models()]}

    @app.post("/api/chat")
    async def chat(body: ChatBody, request: Request):
        """Complete one chat turn with the full conversation history."""
        if not isinstance(body.messages, list):
            raise InvalidInputError("messages must be an array", model=body.model)

        gateway_ = request.app.state.gateway
        if body.conversation_id:
            logger.info(f"Chat request for conversation {body.conversation_id}")

        reply = await gateway_.chat(body.messages, body.model or None)
        return {"message": reply.model_dump()}

    return app


_setup_tracing()
logging.basicConfig(level=logging.INFO)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3001")))
