"""Prometheus gauges exported by the monitor."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Gauge, start_http_server

METRICS_NAMESPACE = "faultmon"


class MonitorMetrics:
    """Gauges owned by a single FaultMonitor.

    - faultmon_highestOutputIndex{type="known"}   : next output index on L1
    - faultmon_highestOutputIndex{type="checked"} : last index validated
    - faultmon_isCurrentlyMismatched              : 1 while an output root mismatches
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        reg = registry or REGISTRY
        self.highest_output_index = Gauge(
            "highestOutputIndex",
            "Highest output indices (checked and known)",
            ["type"],
            namespace=METRICS_NAMESPACE,
            registry=reg,
        )
        self.is_currently_mismatched = Gauge(
            "isCurrentlyMismatched",
            "0 if state is ok, 1 if state is mismatched",
            namespace=METRICS_NAMESPACE,
            registry=reg,
        )

    def record_known(self, next_output_index: int) -> None:
        self.highest_output_index.labels("known").set(next_output_index)

    def record_checked(self, output_index: int) -> None:
        self.highest_output_index.labels("checked").set(output_index)

    def set_mismatched(self, mismatched: bool) -> None:
        self.is_currently_mismatched.set(1 if mismatched else 0)


def serve_metrics(host: str, port: int, registry: CollectorRegistry | None = None) -> None:
    start_http_server(port, addr=host, registry=registry or REGISTRY)
