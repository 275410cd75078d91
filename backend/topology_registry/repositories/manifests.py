"""Configuration manifest repository."""
from topology_registry.models import ManifestCreate
from topology_registry.repositories.base import BaseRepository
from topology_registry.storage import MANIFESTS


class ManifestRepository(BaseRepository):
    """Manifests reference nothing, so creation only validates fields."""

    kind = "manifest"
    bucket = MANIFESTS
    schema = ManifestCreate
