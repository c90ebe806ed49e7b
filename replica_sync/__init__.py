"""
Replica Sync - Copie periodique d'une base PostgreSQL vers une autre.

Structure:
    - domain/: Coeur metier (cycle, artefact, politique de retry)
    - application/: Use cases et ports (pipeline dump -> restore -> cleanup)
    - infrastructure/: Adapters (sous-processus, APScheduler, config, logs)
    - presentation/: Endpoint HTTP de liveness (FastAPI)
"""

__version__ = "1.0.0"
