"""Verification logic for posted output roots."""

from faultmon.verification.locator import find_first_unfinalized_index
from faultmon.verification.verifier import (
    VerificationResult,
    VerificationStatus,
    compute_output_root,
    verify_output,
)

__all__ = [
    "find_first_unfinalized_index",
    "VerificationResult",
    "VerificationStatus",
    "compute_output_root",
    "verify_output",
]
