# healthflow/main.py
import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .database import build_store

# Routers
from .routers.patients import router as patients_router
from .routers.doctors import router as doctors_router
from .routers.appointments import router as appointments_router
from .routers.dashboard import router as dashboard_router
from .responses import register_exception_handlers

# ──────────────────────────────────────────────────────────────────────────────
# LOGGING
# Níveis via variáveis de ambiente: LOG_LEVEL, UVICORN_LOG_LEVEL
# ──────────────────────────────────────────────────────────────────────────────
def configure_logging(cfg: Settings) -> None:
    logging.basicConfig(
        level=cfg.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("uvicorn.error").setLevel(
        getattr(logging, cfg.UVICORN_LOG_LEVEL, logging.INFO)
    )


configure_logging(default_settings)
logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ──────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[Settings] = None, clock: Optional[Callable[[], datetime]] = None) -> FastAPI:
    cfg = cfg or default_settings
    app = FastAPI(
        title=cfg.APP_NAME,
        docs_url="/docs" if cfg.DOCS_ENABLED else None,
        redoc_url=None,
        openapi_url="/openapi.json" if cfg.DOCS_ENABLED else None,
    )
    app.state.settings = cfg
    # cada app tem o seu store; nada de listas globais
    app.state.store = build_store(cfg, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    api = APIRouter(prefix=cfg.API_PREFIX)
    api.include_router(patients_router)
    api.include_router(doctors_router)
    api.include_router(appointments_router)
    api.include_router(dashboard_router)

    @api.get("/health", tags=["health"])
    def health():
        return {
            "status": "healthy",
            "timestamp": app.state.store.now().isoformat(),
            "service": cfg.APP_NAME,
        }

    app.include_router(api)

    @app.get("/", include_in_schema=False)
    def root():
        return {"ok": True, "app": cfg.APP_NAME, "env": cfg.ENV}

    # ──────────────────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        logger.info("HealthFlow API iniciada: %s (%s)", cfg.APP_NAME, cfg.ENV)
        if cfg.DOCS_ENABLED:
            logger.info("Swagger UI disponível em: http://%s:%s/docs", cfg.HOST, cfg.PORT)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "healthflow.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.UVICORN_LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
