"""
Pydantic models for configuration validation.

These models define the schema for the backend connection, wizard
behaviour and logging settings.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class FlowName(str, Enum):
    """Available wizard flows."""
    STANDARD = "standard"
    EXTENDED = "extended"


class LogLevel(str, Enum):
    """Console log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class BackendSettings(BaseModel):
    """Connection settings for the hosted catalog backend."""

    url: str = Field(default="", description="Project URL, e.g. https://xyz.supabase.co")
    api_key: Optional[str] = Field(None, description="API key sent as apikey and bearer token")
    schema_name: str = Field(default="public", description="Database schema exposed over REST")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"Backend URL must start with http:// or https://: {v}")
        return v.rstrip("/")

    @property
    def rest_url(self) -> str:
        """Base URL of the REST endpoint."""
        return f"{self.url}/rest/v1"

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.api_key)


class WizardSettings(BaseModel):
    """Wizard session behaviour."""

    flow: FlowName = Field(default=FlowName.STANDARD, description="Step list to run")
    state_dir: Optional[Path] = Field(None, description="Checkpoint directory")
    checkpoint: bool = Field(default=True, description="Save progress for 'wizard resume'")


class LoggingSettings(BaseModel):
    """Logging output settings."""

    level: LogLevel = Field(default=LogLevel.WARNING, description="Console log level")
    file: Optional[Path] = Field(None, description="Optional rotating log file")

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class ProductFlowConfig(BaseModel):
    """Complete productflow configuration."""

    backend: BackendSettings = Field(default_factory=BackendSettings)
    wizard: WizardSettings = Field(default_factory=WizardSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
