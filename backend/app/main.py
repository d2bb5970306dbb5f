import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .api import application as application_api
from .api import auth as auth_api
from .api import dashboard as dashboard_api
from .api import job as job_api
from .api import organization as organization_api
from .config import FRONTEND_ORIGINS, LOG_LEVEL
from .database import engine, init_db
from .utils.error_handlers import register_exception_handlers

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Hiring Platform API")

app.include_router(auth_api.router)
app.include_router(organization_api.router)
app.include_router(job_api.router)
app.include_router(application_api.router)
app.include_router(dashboard_api.router)

register_exception_handlers(app)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "Backend running",
        "service": "Hiring Platform API"
    }


_default_origins = ["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=[*_default_origins, *FRONTEND_ORIGINS],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    try:
        init_db()
        app.state.db_init_error = None
        logger.info("Database initialized")
    except Exception as e:
        logger.exception("Database initialization failed")
        app.state.db_init_error = str(e)


@app.get("/db/health")
def db_health():
    if getattr(app.state, "db_init_error", None):
        raise HTTPException(status_code=503, detail="DB init failed. Check server logs.")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("DB health check failed")
        raise HTTPException(status_code=503, detail="DB connection failed. Check server logs.") from None

    return {"status": "ok"}
