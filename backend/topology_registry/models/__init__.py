"""Record schemas."""
from topology_registry.models.records import (
    ApplicationCreate,
    InstanceCreate,
    ManifestCreate,
    RecordCreate,
    ServiceCreate,
)

__all__ = ["RecordCreate", "ApplicationCreate", "ServiceCreate", "InstanceCreate", "ManifestCreate"]
