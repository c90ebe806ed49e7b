"""
Scheduling Infrastructure - Expressions cron.
"""

from replica_sync.infrastructure.scheduling.cron import build_cron_trigger

__all__ = ["build_cron_trigger"]
