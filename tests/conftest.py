"""Shared fixtures: in-memory stand-ins for the L1 oracle and the L2 node."""

from __future__ import annotations

import hashlib

import pytest
from prometheus_client import CollectorRegistry

from faultmon.client.metrics import MonitorMetrics
from faultmon.core.types import L2BlockHeader, OutputProposal, OutputV0
from faultmon.verification.verifier import compute_output_root


def digest(label: str) -> bytes:
    return hashlib.sha256(label.encode()).digest()


def make_block(number: int, timestamp: int | None = None) -> L2BlockHeader:
    return L2BlockHeader(
        number=number,
        hash=digest(f"block-hash-{number}"),
        state_root=digest(f"state-root-{number}"),
        timestamp=timestamp if timestamp is not None else number * 2,
    )


def storage_root_for(number: int) -> bytes:
    return digest(f"message-passer-{number}")


def make_output(
    index: int,
    block: L2BlockHeader,
    timestamp: int,
    output_root: bytes | None = None,
) -> OutputProposal:
    if output_root is None:
        output_root = compute_output_root(
            OutputV0(
                state_root=block.state_root,
                message_passer_storage_root=storage_root_for(block.number),
                block_hash=block.hash,
            )
        )
    return OutputProposal(
        index=index,
        output_root=output_root,
        timestamp=timestamp,
        l2_block_number=block.number,
    )


class FakeOracle:
    def __init__(self, outputs: list[OutputProposal] | None = None, window: int = 500) -> None:
        self.outputs = list(outputs or [])
        self.window = window
        self.failing: set[str] = set()
        self.fetched: list[int] = []
        self.closed = 0

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise ConnectionError(f"{name} unavailable")

    async def connect(self) -> None:
        self._check("connect")

    async def close(self) -> None:
        self.closed += 1

    async def next_output_index(self) -> int:
        self._check("next_output_index")
        return len(self.outputs)

    async def get_l2_output(self, index: int) -> OutputProposal:
        self._check("get_l2_output")
        self.fetched.append(index)
        return self.outputs[index]

    async def finalization_period_seconds(self) -> int:
        self._check("finalization_period_seconds")
        return self.window


class FakeL2:
    def __init__(self, blocks: list[L2BlockHeader] | None = None, height: int | None = None) -> None:
        self.blocks = {b.number: b for b in blocks or []}
        self.height = height if height is not None else max(self.blocks, default=0)
        self.failing: set[str] = set()
        self.proof_requests: list[tuple[str, int]] = []
        self.closed = 0

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise ConnectionError(f"{name} unavailable")

    async def connect(self) -> None:
        self._check("connect")

    async def close(self) -> None:
        self.closed += 1

    async def block_number(self) -> int:
        self._check("block_number")
        return self.height

    async def get_block(self, block_number: int | None = None) -> L2BlockHeader:
        self._check("get_block")
        if block_number is None:
            return self.blocks[self.height]
        return self.blocks[block_number]

    async def get_storage_hash(self, account: str, block_number: int) -> bytes:
        self._check("get_storage_hash")
        self.proof_requests.append((account, block_number))
        return storage_root_for(block_number)


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MonitorMetrics:
    return MonitorMetrics(registry)
