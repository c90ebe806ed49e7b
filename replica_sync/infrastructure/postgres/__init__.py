"""
Postgres Infrastructure - Arguments des binaires pg_dump et psql.
"""

from replica_sync.infrastructure.postgres.commands import (
    build_dump_args,
    build_restore_args,
    redact_url,
)

__all__ = ["build_dump_args", "build_restore_args", "redact_url"]
