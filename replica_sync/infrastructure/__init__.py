"""
Infrastructure Layer - Adapters pour les services externes.

Cette couche gere les interactions avec:
- Les binaires PostgreSQL (pg_dump, psql) via subprocess
- APScheduler pour le declenchement cron
- Les variables d'environnement (pydantic-settings)
- structlog pour les logs
"""
