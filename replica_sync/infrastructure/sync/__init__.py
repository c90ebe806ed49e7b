"""
Sync Infrastructure - Copie periodique source -> cible.

Features:
---------
- Dump / restore / suppression de l'artefact
- Retry du cycle complet avec delai
- Declenchement cron + cycle au demarrage optionnel
"""

from replica_sync.infrastructure.sync.pipeline import CycleResult, SyncPipeline
from replica_sync.infrastructure.sync.retry import RetryOutcome, RetryPolicy
from replica_sync.infrastructure.sync.scheduler import SyncScheduler
from replica_sync.infrastructure.sync.service import SyncService

__all__ = [
    "CycleResult",
    "RetryOutcome",
    "RetryPolicy",
    "SyncPipeline",
    "SyncScheduler",
    "SyncService",
]
