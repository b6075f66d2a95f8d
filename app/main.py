from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import setup_exception_handlers
from app.core.health import check_database_connection
from app.core.logging_config import configure_logging
from app.core.middleware import RequestLoggingMiddleware
from app.core.redis_config import close_redis_client
from app.database.db import engine, get_db, init_db
from app.routes import events, registrations, users

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
    # Create all tables (in production, use migrations such as Alembic)
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
    try:
        yield
    finally:
        logger.info("Shutting down: closing database and Redis connections")
        close_redis_client()
        engine.dispose()


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

setup_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include the routers
app.include_router(events.router, prefix=settings.API_PREFIX)
app.include_router(registrations.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    api = settings.API_PREFIX
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "endpoints": {
            "health": "GET /health",
            "createEvent": f"POST {api}/events",
            "listEvents": f"GET {api}/events",
            "getEvent": f"GET {api}/events/:id",
            "upcomingEvents": f"GET {api}/events/upcoming",
            "eventStats": f"GET {api}/events/:id/stats",
            "registerUser": f"POST {api}/events/:id/register",
            "cancelRegistration": f"DELETE {api}/events/:id/register/:userId",
            "createUser": f"POST {api}/users",
            "getUser": f"GET {api}/users/:id",
        },
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    result = check_database_connection(db)
    status_code = 200 if result["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=result)


def run():
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
