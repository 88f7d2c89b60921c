"""Configuration management for the fault monitor."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class LogConfig(BaseModel):
    """Log output configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["text", "json", "logfmt"] = Field(default="text")


class MetricsConfig(BaseModel):
    """Prometheus exporter configuration."""

    enabled: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=7300, ge=0, le=65535)


class MonitorConfig(BaseSettings):
    """Root configuration for the fault monitor."""

    l1_node_url: str = Field(default="http://localhost:8545", description="L1 execution node RPC")
    l2_node_url: str = Field(default="http://localhost:9545", description="L2 execution node RPC")
    optimism_portal_address: str = Field(..., description="Address of the OptimismPortal contract")
    loop_interval_msec: int = Field(default=60_000, gt=0, description="Loop interval in milliseconds")
    start_output_index: int = Field(
        default=-1,
        description="Output index to start from; negative finds the first unfinalized output",
    )
    rpc_timeout_sec: float = Field(default=10.0, gt=0)

    log: LogConfig = Field(default_factory=LogConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    model_config = {"env_prefix": "FAULTMON_", "env_nested_delimiter": "__"}

    @field_validator("optimism_portal_address")
    @classmethod
    def _checksum_address(cls, value: str) -> str:
        if not is_address(value):
            raise ValueError(f"invalid address: {value}")
        return to_checksum_address(value)

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> MonitorConfig:
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value
        return cls(**data)
