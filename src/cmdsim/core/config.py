"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NetworkConfig(BaseModel):
    """Simulated network settings."""

    latency_ms: int = 200
    force_error: bool = False


class LifecycleConfig(BaseModel):
    """Command lifecycle settings."""

    failure_probability: float = Field(default=0.15, ge=0.0, le=1.0)
    id_start: int = 120  # First allocated command is c_<id_start + 1>
    seed: Optional[int] = None  # Seed for the failure draw; random if not set


class PollingConfig(BaseModel):
    """Command view polling settings."""

    interval_seconds: float = Field(default=5.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"


class Settings(BaseSettings):
    """Main settings container."""

    model_config = SettingsConfigDict(
        env_prefix="CMDSIM_",
        env_nested_delimiter="__",
    )

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    devices: list[str] = Field(default_factory=lambda: ["d_001", "d_002", "d_003"])
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file."""
        import yaml

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls(**data) if data else cls()
