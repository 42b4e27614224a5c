"""Application entry point for the Diyetim API.

Defines FastAPI app, middleware, exception handlers and includes API
routers from the `api` package. The `lifespan` handler initializes the DB
on startup and stops running Telegram bots on shutdown.
"""

import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from core.config import PORT, UPLOAD_DIR, UPLOAD_URL_PREFIX
from core.error_handlers import register_exception_handlers
from core.exceptions import DatabaseError
from core.logger import get_logger
from database import init_db, models
from database.deps import get_db_read
from services.telegram_service import telegram_service
from api.auth import router as auth_router
from api.clients import router as clients_router
from api.measurements import router as measurements_router
from api.diet_plans import router as diet_plans_router
from api.appointments import router as appointments_router
from api.activities import router as activities_router
from api.dashboard import router as dashboard_router
from api.blog import router as blog_router
from api.upload import router as upload_router
from api.telegram import router as telegram_router
from api.calculations import router as calculations_router

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fastapi lifespan context: initialize resources before serving requests."""
    init_db()
    yield
    await telegram_service.stop_all()


app = FastAPI(title="Diyetim API", version="1.0.0", lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise


@app.get("/health")
def health(db: Session = Depends(get_db_read)):
    """Return basic health status and database connectivity.

    Raises:
        DatabaseError: If database connection fails.
    """
    try:
        _ = db.query(models.BlogArticle).first()
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.exception("Health check failed")
        raise DatabaseError("Database health check failed", details={"error": str(e)})


# include routers
app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(measurements_router)
app.include_router(diet_plans_router)
app.include_router(appointments_router)
app.include_router(activities_router)
app.include_router(dashboard_router)
app.include_router(blog_router)
app.include_router(upload_router)
app.include_router(telegram_router)
app.include_router(calculations_router)

os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")


if __name__ == "__main__":
    # Allow starting the app via `python ./main.py`
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=True)
