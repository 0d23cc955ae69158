from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from momentum.api.routers import api_router
from momentum.config import settings
from momentum.db import create_all
from momentum.errors import InvalidRuleError, NotFoundError, PreconditionViolation, SnapshotError
from momentum.jobs.periodic import run_periodic_work


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Momentum", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError) -> ORJSONResponse:
    return ORJSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidRuleError)
async def _invalid_rule(request: Request, exc: InvalidRuleError) -> ORJSONResponse:
    return ORJSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SnapshotError)
async def _bad_snapshot(request: Request, exc: SnapshotError) -> ORJSONResponse:
    return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(PreconditionViolation)
async def _precondition(request: Request, exc: PreconditionViolation) -> ORJSONResponse:
    logger.error("Precondition violated: %s", exc)
    return ORJSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.on_event("startup")
async def _startup() -> None:
    await create_all()
    # Catch up on anything the scheduler missed while the app was down.
    results = await run_periodic_work()
    logger.info("Startup catch-up: %s", results)
