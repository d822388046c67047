from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError

from lottery_areas.core.config import settings
from lottery_areas.core.db import Base, engine
from lottery_areas.core.logging import setup_logging
from lottery_areas.errors import AppError
from lottery_areas.models import area, company, game, ticket, user  # noqa: F401  (register tables)
from lottery_areas.routers import area_configs, areas, audit, draws, games, tickets

setup_logging()
app = FastAPI(title="Praças e Séries")

app.include_router(areas.router)
app.include_router(area_configs.router)
app.include_router(games.router)
app.include_router(tickets.router)
app.include_router(draws.router)
app.include_router(audit.router)


def _fail(code: str, message: str, status_code: int, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": None, "error": {"code": code, "message": message, "details": details}},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _fail(exc.code, exc.message, exc.status_code, exc.details)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.info("Integrity error on {} {}: {}", request.method, request.url.path, exc.orig)
    return _fail("conflict", "Conflito de integridade", 409, str(exc.orig) if exc.orig else str(exc))


@app.get("/health")
async def health():
    return {"status": "ok", "environment": settings.environment}


@app.on_event("startup")
def ensure_schema():
    # alembic owns the schema outside development
    if settings.environment == "development":
        Base.metadata.create_all(bind=engine)
