"""FastAPI leaderboard API - public rankings, application intake and admin review."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

import config
from leaderboard.errors import Internal, LeaderboardError
from leaderboard.models import init_db

from web.api.application_routes import router as application_router
from web.api.auth_routes import router as auth_router
from web.api.player_routes import router as player_router, sample_router

logger = logging.getLogger("leaderboard.api")

GENERIC_ERROR = "Something went wrong, please try again"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Leaderboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(player_router)
app.include_router(application_router)
app.include_router(sample_router)


@app.exception_handler(LeaderboardError)
async def leaderboard_error_handler(request: Request, exc: LeaderboardError):
    if isinstance(exc, Internal):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400, like the rest of the InvalidArgument family."""
    errors = exc.errors()
    if errors:
        err = errors[0]
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        detail = f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid request")
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


@app.get("/api/health")
async def health():
    return {"status": "ok"}
