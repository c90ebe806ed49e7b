"""
Ports - Interfaces implementees par la couche infrastructure.
"""

from replica_sync.application.ports.process_runner import ProcessOutput, ProcessRunner

__all__ = ["ProcessOutput", "ProcessRunner"]
