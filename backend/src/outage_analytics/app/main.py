from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..api.routes import indices, metrics, window
from ..config import cors_origins
from ..logging_config import configure_logging


def create_app() -> FastAPI:
    load_dotenv()
    configure_logging()
    app = FastAPI(title="Outage Analytics API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(window.router)
    app.include_router(indices.router)
    app.include_router(metrics.router)

    @app.get("/")
    def root() -> dict[str, str]:
        return {"status": "ok", "service": "outage-analytics"}

    return app


app = create_app()
