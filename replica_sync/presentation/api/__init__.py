"""
API - Endpoint de liveness pour l'orchestrateur.
"""

from replica_sync.presentation.api.main import create_app

__all__ = ["create_app"]
