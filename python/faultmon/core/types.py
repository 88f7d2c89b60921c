"""Core type definitions for the output root fault monitor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

Bytes32: TypeAlias = bytes
Address: TypeAlias = str

OUTPUT_VERSION_V0: Bytes32 = bytes(32)

# L2ToL1MessagePasser predeploy
L2_TO_L1_MESSAGE_PASSER: Address = "0x4200000000000000000000000000000000000016"


def to_hex(value: bytes) -> str:
    return "0x" + value.hex()


@dataclass(frozen=True, slots=True)
class OutputProposal:
    """An output root posted to the L2OutputOracle."""

    index: int
    output_root: Bytes32
    timestamp: int
    l2_block_number: int

    def is_finalized(self, finalization_window: int, current_time: int) -> bool:
        return self.timestamp + finalization_window < current_time


@dataclass(frozen=True, slots=True)
class L2BlockHeader:
    number: int
    hash: Bytes32
    state_root: Bytes32
    timestamp: int


@dataclass(frozen=True, slots=True)
class OutputV0:
    """Pre-image of a version 0 output root."""

    state_root: Bytes32
    message_passer_storage_root: Bytes32
    block_hash: Bytes32

    def marshal(self) -> bytes:
        return (
            OUTPUT_VERSION_V0
            + self.state_root
            + self.message_passer_storage_root
            + self.block_hash
        )
