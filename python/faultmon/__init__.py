"""
faultmon: L2 output root fault monitor

Watches the output roots an L2 proposer posts to the L1 L2OutputOracle,
rebuilds each root from L2 state, and raises an alarm the moment a posted
root disagrees with the chain inside its fault proof window.
"""

from faultmon.core.types import (
    L2BlockHeader,
    OutputProposal,
    OutputV0,
)

__version__ = "0.1.0"
__all__ = [
    "L2BlockHeader",
    "OutputProposal",
    "OutputV0",
]
