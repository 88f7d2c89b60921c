"""Minimal contract ABIs for the calls the monitor makes."""

OPTIMISM_PORTAL_ABI = [
    {"inputs": [], "name": "L2_ORACLE", "outputs": [{"internalType": "contract L2OutputOracle", "name": "", "type": "address"}], "stateMutability": "view", "type": "function"},
]

L2_OUTPUT_ORACLE_ABI = [
    {"inputs": [], "name": "nextOutputIndex", "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "finalizationPeriodSeconds", "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"internalType": "uint256", "name": "_l2OutputIndex", "type": "uint256"}], "name": "getL2Output", "outputs": [{"components": [{"internalType": "bytes32", "name": "outputRoot", "type": "bytes32"}, {"internalType": "uint128", "name": "timestamp", "type": "uint128"}, {"internalType": "uint128", "name": "l2BlockNumber", "type": "uint128"}], "internalType": "struct Types.OutputProposal", "name": "", "type": "tuple"}], "stateMutability": "view", "type": "function"},
]
