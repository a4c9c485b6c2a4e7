"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintcs_records.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintcs_records.api.v1 import societies, members, loans, vouchers, system_users, monthly_demands, dashboard
from fintcs_records.infrastructure.observability.logging import setup_logging
from fintcs_records.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FINTCS Records",
        description="Society, member, loan, voucher and monthly demand records for cooperative credit societies",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(societies.router, prefix="/v1", tags=["societies"])
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(vouchers.router, prefix="/v1", tags=["vouchers"])
    app.include_router(system_users.router, prefix="/v1", tags=["system-users"])
    app.include_router(monthly_demands.router, prefix="/v1", tags=["monthly-demands"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
