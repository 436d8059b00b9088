from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.core import celery, config, database, exception_handlers, redis
from app.domains import moderation, reports

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    celery.init_celery()
    await database.init_db()
    moderation.register_event_handlers()
    yield
    await redis.RedisManager.close()
    await database.engine.dispose()


app = FastAPI(title="Content Moderation Service", version=VERSION, lifespan=lifespan)

exception_handlers.setup_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(moderation.router, prefix="/api/moderation", tags=["Moderation queue"])
app.include_router(reports.router, prefix="/api/moderation", tags=["Abuse reports"])


@app.get("/health")
async def health():
    services = {
        "database": await database.check_connection(),
        "redis": await redis.check_connection(),
    }
    status = "healthy" if all(services.values()) else "degraded"
    return {
        "status": status,
        "services": services,
        "version": VERSION,
        "events_transport": config.settings.EVENTS_TRANSPORT.value,
    }
