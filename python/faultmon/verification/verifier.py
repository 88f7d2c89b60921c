"""Output root reconstruction and comparison."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from web3 import Web3

from faultmon.core.types import (
    Bytes32,
    L2BlockHeader,
    OutputProposal,
    OutputV0,
)


class VerificationStatus(Enum):
    VALID = "valid"
    MISMATCH = "mismatch"


@dataclass(frozen=True, slots=True)
class VerificationResult:
    status: VerificationStatus
    index: int
    expected_root: Bytes32
    actual_root: Bytes32
    finalization_time: int

    @property
    def is_valid(self) -> bool:
        return self.status is VerificationStatus.VALID


def compute_output_root(output: OutputV0) -> Bytes32:
    """keccak256(version || state_root || message_passer_storage_root || block_hash)"""
    return bytes(Web3.keccak(output.marshal()))


def verify_output(
    proposal: OutputProposal,
    block: L2BlockHeader,
    message_passer_storage_root: Bytes32,
    finalization_window: int,
) -> VerificationResult:
    """Rebuild the output root for ``block`` and compare it with ``proposal``."""
    expected = compute_output_root(
        OutputV0(
            state_root=block.state_root,
            message_passer_storage_root=message_passer_storage_root,
            block_hash=block.hash,
        )
    )
    status = (
        VerificationStatus.VALID
        if expected == proposal.output_root
        else VerificationStatus.MISMATCH
    )
    return VerificationResult(
        status=status,
        index=proposal.index,
        expected_root=expected,
        actual_root=proposal.output_root,
        finalization_time=block.timestamp + finalization_window,
    )
