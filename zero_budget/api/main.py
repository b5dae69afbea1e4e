"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from zero_budget.api.dependencies import get_budget_service
from zero_budget.api.middleware import RequestIDMiddleware, MetricsMiddleware
from zero_budget.api.v1 import categories, recurring, months, state
from zero_budget.infrastructure.observability.logging import setup_logging
from zero_budget.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = (
    (categories.router, "categories"),
    (recurring.router, "recurring-expenses"),
    (months.router, "months"),
    (state.router, "state"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let queued snapshot writes land before the process exits
    if get_budget_service.cache_info().currsize:
        get_budget_service().close()


def create_app() -> FastAPI:
    """Budget API with tracing and metrics middleware, /health, /metrics and the v1 routers"""
    app = FastAPI(
        title="Zero Budget",
        description="Zero-based monthly budgeting ledger",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Last added runs first, so every request has an id before it is timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
