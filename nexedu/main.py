import time
import logging
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy import text

from .infrastructure.db import engine
from .infrastructure.models import Base
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.security import ensure_signing_key
from .interfaces.http.errors import install_error_handlers
from .interfaces.http.ratelimit import limiter
from .interfaces.http.routers import auth as auth_router
from .interfaces.http.routers import posts as posts_router
from .interfaces.http.routers import users as users_router
from .config import settings

# Logging estruturado (JSON)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(title="NexEdu API", version="1.0.0")
app.state.limiter = limiter
install_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Métricas e log de cada requisição
def _record_request(request: Request, status_code: int, start_time: float):
    method = request.method
    # template da rota (/posts/{post_id}) para não explodir a cardinalidade
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    duration = time.time() - start_time
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    logger.info(
        "http_request",
        method=method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=round(duration * 1000, 2)
    )


@app.middleware("http")
async def observe_request(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception:
        # o 500 é montado depois, pelo ServerErrorMiddleware
        _record_request(request, 500, start_time)
        raise
    _record_request(request, response.status_code, start_time)
    return response


@app.on_event("startup")
def on_startup():
    logger.info("Starting NexEdu API", version="1.0.0", environment=settings.ENVIRONMENT)
    ensure_signing_key()
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection established")


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Hello, NexEdu!"


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint"""
    return metrics_endpoint()


app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(posts_router.router)


def run():
    uvicorn.run("nexedu.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
