"""Chain readers for the L1 output oracle and the L2 execution node."""

from __future__ import annotations

from typing import Any

import structlog
from aiohttp import ClientTimeout
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.contract import AsyncContract
from web3.types import BlockData as Web3BlockData

from faultmon.core.types import Address, Bytes32, L2BlockHeader, OutputProposal
from faultmon.data.abi import L2_OUTPUT_ORACLE_ABI, OPTIMISM_PORTAL_ABI

logger = structlog.get_logger()


class _RpcReader:
    """Owns a single async web3 connection."""

    def __init__(self, rpc_url: str, timeout: float = 10.0) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._web3: AsyncWeb3 | None = None

    async def connect(self) -> None:
        provider = AsyncHTTPProvider(
            self.rpc_url, request_kwargs={"timeout": ClientTimeout(total=self.timeout)}
        )
        web3 = AsyncWeb3(provider)
        chain_id = await web3.eth.chain_id
        self._web3 = web3
        logger.info("connected_to_rpc", rpc=self.rpc_url, chain_id=chain_id)

    async def close(self) -> None:
        if self._web3 and self._web3.provider:
            await self._web3.provider.disconnect()
        self._web3 = None

    @property
    def web3(self) -> AsyncWeb3:
        if self._web3 is None:
            raise RuntimeError("Not connected. Call connect() first.")
        return self._web3


class L2ChainReader(_RpcReader):
    """Reads blocks and account proofs from an L2 execution node."""

    async def block_number(self) -> int:
        return await self.web3.eth.block_number

    async def get_block(self, block_number: int | None = None) -> L2BlockHeader:
        identifier: Any = "latest" if block_number is None else block_number
        raw = await self.web3.eth.get_block(identifier)
        return self._parse_block(raw)

    async def get_storage_hash(self, account: Address, block_number: int) -> Bytes32:
        proof = await self.web3.eth.get_proof(
            AsyncWeb3.to_checksum_address(account), [], block_number
        )
        return bytes(proof["storageHash"])

    def _parse_block(self, raw: Web3BlockData) -> L2BlockHeader:
        return L2BlockHeader(
            number=raw["number"],
            hash=bytes(raw["hash"]),
            state_root=bytes(raw["stateRoot"]),
            timestamp=raw["timestamp"],
        )


class OutputOracleReader(_RpcReader):
    """Reads output proposals from the L2OutputOracle behind an OptimismPortal."""

    def __init__(self, rpc_url: str, portal_address: Address, timeout: float = 10.0) -> None:
        super().__init__(rpc_url, timeout)
        self.portal_address = portal_address
        self._oracle: AsyncContract | None = None

    async def connect(self) -> None:
        await super().connect()
        portal = self.web3.eth.contract(
            address=AsyncWeb3.to_checksum_address(self.portal_address),
            abi=OPTIMISM_PORTAL_ABI,
        )
        oracle_address = await portal.functions.L2_ORACLE().call()
        self._oracle = self.web3.eth.contract(address=oracle_address, abi=L2_OUTPUT_ORACLE_ABI)
        logger.info("configured_l2_output_oracle", address=oracle_address)

    async def close(self) -> None:
        await super().close()
        self._oracle = None

    @property
    def oracle(self) -> AsyncContract:
        if self._oracle is None:
            raise RuntimeError("Not connected. Call connect() first.")
        return self._oracle

    async def next_output_index(self) -> int:
        return await self.oracle.functions.nextOutputIndex().call()

    async def finalization_period_seconds(self) -> int:
        return await self.oracle.functions.finalizationPeriodSeconds().call()

    async def get_l2_output(self, index: int) -> OutputProposal:
        output_root, timestamp, l2_block_number = await self.oracle.functions.getL2Output(index).call()
        return OutputProposal(
            index=index,
            output_root=bytes(output_root),
            timestamp=timestamp,
            l2_block_number=l2_block_number,
        )
