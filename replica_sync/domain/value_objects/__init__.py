"""
Value Objects du domaine.
"""

from replica_sync.domain.value_objects.artifact_id import (
    ArtifactId,
    ArtifactNamer,
    new_artifact_id,
)

__all__ = ["ArtifactId", "ArtifactNamer", "new_artifact_id"]
