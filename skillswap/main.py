import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skillswap.api.admin import router as admin_router
from skillswap.api.auth import router as auth_router
from skillswap.api.health import router as health_router
from skillswap.api.management import router as management_router
from skillswap.api.notifications import router as notifications_router
from skillswap.api.profiles import router as profiles_router
from skillswap.api.ratings import router as ratings_router
from skillswap.api.sessions import router as sessions_router
from skillswap.api.skills import router as skills_router
from skillswap.api.ws import router as ws_router
from skillswap.config import settings
from skillswap.database import async_session, engine
from skillswap.errors import SkillSwapError
from skillswap.models import Base
from skillswap.services.seed import seed_all

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("skillswap.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        if settings.RESET_DB:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with async_session() as db:
        try:
            await seed_all(db)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("An error occurred while seeding the database.")
    yield
    await engine.dispose()


app = FastAPI(title="SkillSwap", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "%s %s -> %s (%sms) request_id=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        req_id,
    )
    return response


@app.exception_handler(SkillSwapError)
async def skillswap_error_handler(request: Request, exc: SkillSwapError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed input is a BadRequest like any other validation failure
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # same policy for every route: log the stack, never return it
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(skills_router, prefix="/api")
app.include_router(profiles_router, prefix="/api")
app.include_router(sessions_router, prefix="/api")
app.include_router(management_router, prefix="/api")
app.include_router(ratings_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(ws_router)


@app.get("/api")
def api_root():
    return {"message": "SkillSwap API"}
