import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from asistencia.analytics.errors import AnalyticsError
from asistencia.api.analytics import router as analytics_router
from asistencia.api.reports import router as reports_router
from asistencia.core.config import settings
from asistencia.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting asistencia analytics backend.")

    yield

    await engine.dispose()
    logger.info("Shutting down asistencia analytics backend.")


app = FastAPI(
    title="Asistencia Analytics API",
    description="Métricas, tendencias, alertas y reportes de asistencia de empleados.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(reports_router, prefix="/api/reports", tags=["Reports"])


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    logger.warning("Solicitud rechazada %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


@app.get("/health", tags=["System"])
async def health_check() -> dict:
    return {"status": "ok"}
