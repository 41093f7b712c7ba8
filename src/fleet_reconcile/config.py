"""Configuration for fleet reconciliation.

Loaded from environment variables with the FLEET_RECONCILE_ prefix or from a
.env file in the working directory.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REDACTION_SENTINEL = "***REDACTED***"

DEFAULT_REDACTED_FIELDS = [
    "spec.userContext.username",
    "spec.userContext.password",
    "spec.userContext.refreshToken",
]


class AuthMode(str, Enum):
    """How to authenticate against the management cluster."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    IN_CLUSTER = "in_cluster"


class LogLevel(str, Enum):
    """Log level for the fleet_reconcile package logger."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class FleetReconcileConfig(BaseSettings):
    """Configuration for the reconciliation core."""

    model_config = SettingsConfigDict(
        env_prefix="FLEET_RECONCILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Management cluster access
    auth_mode: AuthMode = Field(
        default=AuthMode.AUTO,
        description="Authentication mode for the management cluster",
    )
    kubeconfig_path: str | None = Field(
        default=None,
        description="Path to kubeconfig file (defaults to ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Log level for the fleet_reconcile logger",
    )

    # Projection redaction
    redaction_sentinel: str = Field(
        default=DEFAULT_REDACTION_SENTINEL,
        min_length=1,
        description="Value written over redacted fields",
    )
    redacted_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REDACTED_FIELDS),
        description="Dotted field paths overwritten before projection",
    )

    @property
    def effective_kubeconfig_path(self) -> Path:
        """Kubeconfig path with the default applied."""
        if self.kubeconfig_path:
            return Path(self.kubeconfig_path).expanduser()
        return Path.home() / ".kube" / "config"

    def validate_auth_config(self) -> list[str]:
        """Validate the authentication settings.

        Returns:
            List of warnings that do not prevent startup.

        Raises:
            ValueError: If the settings contradict each other.
        """
        warnings: list[str] = []

        if self.auth_mode == AuthMode.IN_CLUSTER and self.kubeconfig_path:
            raise ValueError("kubeconfig_path cannot be combined with auth_mode=in_cluster")

        if self.auth_mode == AuthMode.KUBECONFIG and not self.effective_kubeconfig_path.exists():
            raise ValueError(f"Kubeconfig not found at {self.effective_kubeconfig_path}")

        if self.kubeconfig_context and self.auth_mode == AuthMode.IN_CLUSTER:
            warnings.append("kubeconfig_context is ignored with auth_mode=in_cluster")

        if not self.redacted_fields:
            warnings.append("No redacted fields configured; credentials may appear in projections")

        return warnings


@lru_cache(maxsize=1)
def get_config() -> FleetReconcileConfig:
    """Return the process-wide configuration loaded from the environment."""
    return FleetReconcileConfig()
