"""
Main - Factory FastAPI.

Responsabilite unique:
----------------------
Exposer GET / -> {"sync": "ok"} pour les sondes de liveness.
La reponse ne depend jamais de l'etat du pipeline.

Usage:
------
    uvicorn replica_sync.presentation.api.main:app --host 0.0.0.0 --port 3000
"""

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from replica_sync import __version__
from replica_sync.infrastructure.logging.config import RequestLogger

LIVENESS_PAYLOAD = {"sync": "ok"}


def create_app() -> FastAPI:
    """
    Factory pour creer l'application FastAPI.

    Returns:
        Application FastAPI configuree.
    """
    app = FastAPI(
        title="Replica Sync",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Request logging middleware
    app.add_middleware(BaseHTTPMiddleware, dispatch=RequestLogger())

    @app.get("/", tags=["Health"])
    def liveness():
        """Endpoint de liveness."""
        return dict(LIVENESS_PAYLOAD)

    return app


# Instance pour uvicorn
app = create_app()
