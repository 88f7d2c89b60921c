"""Monitor runtime: the verification loop, its scheduler and metrics."""

from faultmon.client.loop import LoopFn
from faultmon.client.metrics import MonitorMetrics
from faultmon.client.monitor import FaultMonitor

__all__ = ["FaultMonitor", "LoopFn", "MonitorMetrics"]
