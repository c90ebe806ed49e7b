"""
Entites du domaine.
"""

from replica_sync.domain.entities.cycle import (
    Cycle,
    CycleOutcome,
    PipelineState,
    Stage,
)
from replica_sync.domain.entities.retry_state import RetryState

__all__ = ["Cycle", "CycleOutcome", "PipelineState", "RetryState", "Stage"]
