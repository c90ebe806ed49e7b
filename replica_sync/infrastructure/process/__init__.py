"""
Process Infrastructure - Execution de commandes externes.
"""

from replica_sync.infrastructure.process.subprocess_runner import SubprocessRunner

__all__ = ["SubprocessRunner"]
