"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    """Registry settings.

    Every value can be overridden from the environment or a .env file.
    """

    # App Configuration
    APP_NAME: str = "Topology Registry"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Record store configuration
    STORE_BACKEND: str = "sqlite"  # sqlite, postgres
    SQLITE_PATH: str = os.path.join(os.path.dirname(__file__), "..", "registry.db")
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "topology"
    DB_USER: str = "topology"
    DB_PASSWORD: str = ""  # MUST be set via POSTGRES_PASSWORD env var

    @property
    def DATABASE_URL(self) -> str:
        """Construct the record store URL from components."""
        if self.STORE_BACKEND == "postgres":
            password = os.getenv("POSTGRES_PASSWORD", self.DB_PASSWORD)
            return f"postgresql+asyncpg://{self.DB_USER}:{password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    # Keycloak Configuration (owner lookups)
    KEYCLOAK_URL: str = "http://localhost:8080"
    KEYCLOAK_REALM: str = "topology"
    KEYCLOAK_ADMIN_USER: str = "admin"
    KEYCLOAK_ADMIN_PASSWORD: str = ""  # MUST be set via env var

    # Image registry
    IMAGE_REGISTRY_URL: str = "http://localhost:8081"

    # Kubernetes Configuration (workload provisioning)
    KUBECONFIG_PATH: str = "~/.kube/config"
    WORKLOAD_NAMESPACE: str = "topology"
    WORKLOAD_IMAGE_TEMPLATE: str = "registry.local/images/{image_uuid}:latest"

    # Default deployment policy. These stand in for a placement engine.
    DEFAULT_BRAND: str = "joyent-minimal"
    DEFAULT_RAM_MB: int = 256
    DEFAULT_NETWORKS: List[str] = ["cda22a50-15bd-43cf-b379-be0cbac60cb4"]
    DEFAULT_SERVER_UUID: str = "44454c4c-4800-1034-804a-b2c04f354d31"

    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
