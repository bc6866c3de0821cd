"""FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.plans import router as plans_router
from backend.app.config import get_settings
from backend.app.db.repositories import PlanPersistenceError

logger = logging.getLogger(__name__)

app = FastAPI(title="Border Route Planner API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().ui_origin],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(plans_router, tags=["plans"])


@app.exception_handler(PlanPersistenceError)
async def plan_persistence_error_handler(request: Request, exc: PlanPersistenceError) -> JSONResponse:
    """Storage failures are the only plan errors surfaced to callers."""
    logger.error(f"[{request.method} {request.url.path}] {exc}")
    return JSONResponse(status_code=500, content={"detail": "internal error"})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Border Route Planner API", "version": "0.1.0"}
