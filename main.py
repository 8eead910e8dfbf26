import logging
import subprocess
import sys
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import click
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.handlers import register_exception_handlers
from app.core.init import initialize_application
from app.core.limiter import limiter
from app.models import *
from app.routers import routes

BASE_DIR = Path(__file__).parent


def _resolve(path: str) -> Path:
    candidate = Path(path)
    return candidate if candidate.is_absolute() else BASE_DIR / candidate


LOG_FILE = _resolve(settings.log_file)
UPLOADS_DIR = _resolve(settings.upload_dir)

LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)


def setup_logging():
    """Log to stdout and to the configured log file."""
    fallback = logging.DEBUG if settings.debug else logging.INFO
    level = logging.getLevelName(settings.log_level.upper())

    logging.basicConfig(
        level=level if isinstance(level, int) else fallback,
        format="%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(LOG_FILE, mode="a", encoding="utf-8"),
        ],
        force=True,
    )

    for noisy in ("sqlalchemy.engine", "uvicorn.access", "aiosmtplib"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


def init_database() -> None:
    """Create tables, then the default admin and categories."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        initialize_application(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    try:
        init_database()
    except Exception as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        raise
    logger.info(f"Serving uploads from {UPLOADS_DIR}")

    yield

    engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    docs_url=None if settings.production else "/docs",
    redoc_url=None if settings.production else "/redoc",
    openapi_url=None if settings.production else "/openapi.json",
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every response with a request id and its processing time."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.4f}"
    return response


register_exception_handlers(app)


@app.get("/")
async def root():
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": "production" if settings.production else "development",
    }


@app.get("/api/health")
async def health_check():
    """Liveness plus a database round trip."""
    database = "healthy"
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        database = "unhealthy"

    return {
        "status": "OK" if database == "healthy" else "degraded",
        "timestamp": time.time(),
        "database": database,
    }


app.mount("/uploads", StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")

for router in routes:
    app.include_router(router, prefix="/api")


# ============================================================================
# CLI Commands
# ============================================================================
@click.group()
def cli():
    """Blog backend management CLI."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True)
@click.option("--reload", is_flag=True, help="Restart on code changes")
def dev(host: str, port: int, reload: bool):
    """Serve the API with a single Uvicorn process."""
    logger.info(f"Development server on {host}:{port} (reload={reload})")
    uvicorn.run("main:app", host=host, port=port, reload=reload, log_level="debug")


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, show_default=True)
@click.option("--workers", default=4, show_default=True, help="Uvicorn worker processes")
def prod(host: str, port: int, workers: int):
    """Run production server with Gunicorn and Uvicorn workers."""
    if workers > 1 and settings.rate_limit_storage_uri.startswith("memory://"):
        logger.warning(
            "Rate limit counters are per worker; point RATE_LIMIT_STORAGE_URI at redis:// to share them"
        )

    options = {
        "--worker-class": "uvicorn.workers.UvicornWorker",
        "--workers": str(workers),
        "--bind": f"{host}:{port}",
        "--access-logfile": "-",
        "--error-logfile": "-",
        "--timeout": "120",
        "--graceful-timeout": "30",
    }
    cmd = ["gunicorn", "main:app"]
    for flag, value in options.items():
        cmd += [flag, value]

    logger.info(f"Production server on {host}:{port} with {workers} workers")
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError:
        raise click.ClickException("Gunicorn not installed")
    except subprocess.CalledProcessError as e:
        raise click.ClickException(f"Gunicorn exited with status {e.returncode}")


@cli.command("init-db")
def init_db():
    """Create tables and seed the default admin and categories."""
    init_database()
    click.echo("Database initialized")


@cli.command()
def info():
    """Print the effective configuration."""
    click.echo(f"Application: {settings.app_name} {settings.app_version}")
    click.echo(f"Debug Mode: {settings.debug}")
    click.echo(f"Mail Enabled: {settings.mail_enabled}")
    click.echo(f"Rate Limiting: {settings.rate_limit_enabled}")
    click.echo(f"Uploads Directory: {UPLOADS_DIR}")
    click.echo(f"Log File: {LOG_FILE}")


if __name__ == "__main__":
    cli()
