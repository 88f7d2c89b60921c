"""CLI entry point for faultmon."""

from __future__ import annotations

import asyncio
import signal
from pathlib import Path
from typing import Any, Optional

import typer
import structlog
from pydantic import ValidationError

from faultmon.core.config import MonitorConfig
from faultmon.core.errors import MonitorSetupError
from faultmon.core.logging import configure_logging

app = typer.Typer(
    name="faultmon",
    help="Monitor L2 output roots posted to L1 for faults",
)

logger = structlog.get_logger()


def _load_config(config_path: Optional[Path], **overrides: Any) -> MonitorConfig:
    explicit = {}
    for key, value in overrides.items():
        if isinstance(value, dict):
            value = {k: v for k, v in value.items() if v is not None} or None
        if value is not None:
            explicit[key] = value
    try:
        if config_path is not None:
            if not config_path.exists():
                typer.echo(f"Config file {config_path} not found", err=True)
                raise typer.Exit(2)
            return MonitorConfig.from_yaml(config_path, **explicit)
        return MonitorConfig(**explicit)
    except ValidationError as e:
        typer.echo(f"Invalid configuration:\n{e}", err=True)
        raise typer.Exit(2)


async def _run_until_signalled(config: MonitorConfig) -> None:
    from faultmon.client.monitor import FaultMonitor

    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    monitor = await FaultMonitor.create(config)
    try:
        if not shutdown.is_set():
            await monitor.start()
        await shutdown.wait()
    finally:
        await monitor.stop()


@app.command()
def run(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to YAML configuration file",
    ),
    l1_node_url: Optional[str] = typer.Option(None, "--l1-node-url", help="L1 node RPC URL"),
    l2_node_url: Optional[str] = typer.Option(None, "--l2-node-url", help="L2 node RPC URL"),
    optimism_portal_address: Optional[str] = typer.Option(
        None,
        "--optimism-portal-address",
        help="Address of the OptimismPortal contract",
    ),
    loop_interval_msec: Optional[int] = typer.Option(
        None,
        "--loop-interval-msec",
        help="Loop interval of the monitor in milliseconds",
    ),
    start_output_index: Optional[int] = typer.Option(
        None,
        "--start-output-index",
        help="Output index to start from; negative finds the first unfinalized output",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="text, json or logfmt"),
    metrics: Optional[bool] = typer.Option(None, "--metrics/--no-metrics"),
    metrics_port: Optional[int] = typer.Option(None, "--metrics-port"),
) -> None:
    """Run the fault monitor until interrupted."""
    config = _load_config(
        config_path,
        l1_node_url=l1_node_url,
        l2_node_url=l2_node_url,
        optimism_portal_address=optimism_portal_address,
        loop_interval_msec=loop_interval_msec,
        start_output_index=start_output_index,
        log={"level": log_level.upper() if log_level else None, "format": log_format},
        metrics={"enabled": metrics, "port": metrics_port},
    )

    configure_logging(config.log.level, config.log.format)

    if config.metrics.enabled:
        from faultmon.client.metrics import serve_metrics

        serve_metrics(config.metrics.host, config.metrics.port)
        logger.info("metrics_server_started", host=config.metrics.host, port=config.metrics.port)

    try:
        asyncio.run(_run_until_signalled(config))
    except MonitorSetupError as e:
        logger.error("monitor_setup_failed", err=str(e))
        typer.echo(f"Failed to start monitor: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def locate(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to YAML configuration file",
    ),
    l1_node_url: Optional[str] = typer.Option(None, "--l1-node-url"),
    l2_node_url: Optional[str] = typer.Option(None, "--l2-node-url"),
    optimism_portal_address: Optional[str] = typer.Option(None, "--optimism-portal-address"),
) -> None:
    """Print the index of the first output still inside its finalization window."""
    from faultmon.client.monitor import FaultMonitor
    from faultmon.data.extractor import L2ChainReader, OutputOracleReader

    config = _load_config(
        config_path,
        l1_node_url=l1_node_url,
        l2_node_url=l2_node_url,
        optimism_portal_address=optimism_portal_address,
    )
    configure_logging(config.log.level, config.log.format)

    oracle = OutputOracleReader(
        config.l1_node_url, config.optimism_portal_address, config.rpc_timeout_sec
    )
    l2 = L2ChainReader(config.l2_node_url, config.rpc_timeout_sec)

    async def find() -> int:
        try:
            await oracle.connect()
            await l2.connect()
            window = await oracle.finalization_period_seconds()
            return await FaultMonitor.find_first_unfinalized_output_index(oracle, l2, window)
        finally:
            await oracle.close()
            await l2.close()

    try:
        index = asyncio.run(find())
    except Exception as e:
        typer.echo(f"Failed to locate output index: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"First unfinalized output index: {index}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
