"""Core types, configuration and utilities for faultmon."""

from faultmon.core.types import (
    Address,
    Bytes32,
    L2BlockHeader,
    OutputProposal,
    OutputV0,
)
from faultmon.core.config import LogConfig, MetricsConfig, MonitorConfig
from faultmon.core.errors import (
    FaultMonitorError,
    MonitorSetupError,
    OutputRetrievalError,
)

__all__ = [
    "Address",
    "Bytes32",
    "L2BlockHeader",
    "OutputProposal",
    "OutputV0",
    "LogConfig",
    "MetricsConfig",
    "MonitorConfig",
    "FaultMonitorError",
    "MonitorSetupError",
    "OutputRetrievalError",
]
