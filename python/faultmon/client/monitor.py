"""Fault monitor comparing posted output roots with L2 state."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from faultmon.client.loop import LoopFn
from faultmon.client.metrics import MonitorMetrics
from faultmon.core.config import MonitorConfig
from faultmon.core.errors import MonitorSetupError
from faultmon.core.types import L2_TO_L1_MESSAGE_PASSER, to_hex
from faultmon.data.extractor import L2ChainReader, OutputOracleReader
from faultmon.verification.locator import find_first_unfinalized_index
from faultmon.verification.verifier import verify_output

logger = structlog.get_logger()


def _format_time(unix_seconds: int) -> str:
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).isoformat()


class FaultMonitor:
    """Walks the L2OutputOracle output list and checks every root against L2.

    ``curr_output_index`` only moves forward, one index per validated output.
    A mismatching output holds the cursor in place and raises the
    ``isCurrentlyMismatched`` gauge until a later check succeeds.
    """

    def __init__(
        self,
        oracle: OutputOracleReader,
        l2: L2ChainReader,
        metrics: MonitorMetrics,
        finalization_window: int,
        start_output_index: int,
        loop_interval_msec: int = 60_000,
    ) -> None:
        if start_output_index < 0:
            raise ValueError("start_output_index must be non-negative")
        self.oracle = oracle
        self.l2 = l2
        self.metrics = metrics
        self.finalization_window = finalization_window
        self.loop_interval_msec = loop_interval_msec

        self.curr_output_index = start_output_index
        self.is_currently_mismatched = False

        self._worker: LoopFn | None = None
        self._stopped = False

    @classmethod
    async def create(
        cls,
        config: MonitorConfig,
        metrics: MonitorMetrics | None = None,
    ) -> FaultMonitor:
        """Connect to both chains and seed the cursor."""
        logger.info("creating_monitor")

        oracle = OutputOracleReader(
            config.l1_node_url, config.optimism_portal_address, config.rpc_timeout_sec
        )
        l2 = L2ChainReader(config.l2_node_url, config.rpc_timeout_sec)

        try:
            await oracle.connect()
        except Exception as e:
            await oracle.close()
            raise MonitorSetupError(
                f"failed to connect to l1 and bind the L2OutputOracle: {e}"
            ) from e
        try:
            await l2.connect()
        except Exception as e:
            await oracle.close()
            raise MonitorSetupError(f"failed to dial l2: {e}") from e

        try:
            finalization_window = await oracle.finalization_period_seconds()
            start_index = config.start_output_index
            if start_index < 0:
                start_index = await cls.find_first_unfinalized_output_index(
                    oracle, l2, finalization_window
                )
        except Exception as e:
            await oracle.close()
            await l2.close()
            raise MonitorSetupError(f"failed to initialize starting state: {e}") from e

        logger.info(
            "configured_starting_index",
            index=start_index,
            finalization_window=finalization_window,
        )
        return cls(
            oracle,
            l2,
            metrics or MonitorMetrics(),
            finalization_window=finalization_window,
            start_output_index=start_index,
            loop_interval_msec=config.loop_interval_msec,
        )

    @staticmethod
    async def find_first_unfinalized_output_index(
        oracle: OutputOracleReader,
        l2: L2ChainReader,
        finalization_window: int,
    ) -> int:
        """Locate the oldest output still inside its fault proof window."""
        logger.info("searching_for_first_unfinalized_output")
        latest_block = await l2.get_block(None)
        total_outputs = await oracle.next_output_index()
        return await find_first_unfinalized_index(
            oracle.get_l2_output,
            total_outputs,
            finalization_window,
            latest_block.timestamp,
        )

    async def start(self) -> None:
        if self._worker is not None:
            raise RuntimeError("monitor already started")

        logger.info("starting_monitor", loop_interval_ms=self.loop_interval_msec)
        await self.tick()
        self._worker = LoopFn(self.tick, self.loop_interval_msec / 1000)
        self._worker.start()

    async def stop(self) -> None:
        logger.info("closing_monitor")
        if self._worker is not None:
            await self._worker.close()
        await self.oracle.close()
        await self.l2.close()
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def tick(self) -> None:
        # Check for available outputs to validate

        try:
            next_output_index = await self.oracle.next_output_index()
        except Exception as e:
            logger.error("failed_to_query_next_output_index", err=str(e))
            return

        self.metrics.record_known(next_output_index)
        if self.curr_output_index >= next_output_index:
            logger.info(
                "waiting_for_next_output",
                index=self.curr_output_index,
                next_index=next_output_index,
            )
            return

        index = self.curr_output_index
        logger.info("checking_output", index=index)

        # Fetch output

        try:
            output = await self.oracle.get_l2_output(index)
        except Exception as e:
            logger.error("failed_to_query_output", index=index, err=str(e))
            return

        try:
            l2_height = await self.l2.block_number()
        except Exception as e:
            logger.error("failed_to_query_latest_l2_height", err=str(e))
            return
        if l2_height < output.l2_block_number:
            logger.warning(
                "l2_node_is_behind",
                l2_height=l2_height,
                output_height=output.l2_block_number,
            )
            return

        # Fetch the output root pre-image from L2

        try:
            block = await self.l2.get_block(output.l2_block_number)
        except Exception as e:
            logger.error("failed_to_query_l2_block", height=output.l2_block_number, err=str(e))
            return

        try:
            storage_root = await self.l2.get_storage_hash(L2_TO_L1_MESSAGE_PASSER, block.number)
        except Exception as e:
            logger.error(
                "failed_to_query_message_passer_proof",
                height=block.number,
                err=str(e),
            )
            return

        # Reconstruct & verify

        result = verify_output(output, block, storage_root, self.finalization_window)
        if not result.is_valid:
            logger.error(
                "output_root_mismatch",
                index=index,
                expected_output_root=to_hex(result.expected_root),
                actual_output_root=to_hex(result.actual_root),
                finalization_time=_format_time(result.finalization_time),
            )
            self.is_currently_mismatched = True
            self.metrics.set_mismatched(True)
            return

        logger.info(
            "validated_output",
            index=index,
            output_root=to_hex(result.expected_root),
            finalization_time=_format_time(result.finalization_time),
        )
        self.metrics.record_checked(index)

        self.curr_output_index = index + 1
        self.is_currently_mismatched = False
        self.metrics.set_mismatched(False)
