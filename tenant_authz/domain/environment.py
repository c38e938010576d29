"""
Deployment Environment

Which store is authoritative for global roles is a property of the
deployment, resolved once at startup and never re-derived per call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

LOCAL_HOST_MARKERS = ("localhost", "127.0.0.1", "sqlite")


class DeploymentEnvironment(str, Enum):
    local = "local"  # roles live on the users table
    managed = "managed"  # roles live in identity provider private metadata


@dataclass(frozen=True)
class EnvironmentSettings:
    environment: DeploymentEnvironment
    identity_provider_enabled: bool
    rich_logging: bool

    @property
    def is_local(self) -> bool:
        return self.environment == DeploymentEnvironment.local

    @classmethod
    def resolve(
        cls,
        app_env: str,
        db_uri: str,
        idp_secret_key: Optional[str] = None,
        explicit: Optional[str] = None,
    ) -> "EnvironmentSettings":
        """
        Classify the deployment.

        An explicit DEPLOYMENT_ENVIRONMENT wins. Otherwise a development
        build against a local database is local; everything else is managed.
        """
        if explicit:
            environment = DeploymentEnvironment(explicit)
        elif app_env == "development" and any(m in db_uri for m in LOCAL_HOST_MARKERS):
            environment = DeploymentEnvironment.local
        else:
            environment = DeploymentEnvironment.managed

        return cls(
            environment=environment,
            identity_provider_enabled=bool(idp_secret_key),
            rich_logging=app_env != "production",
        )
