"""Chain data access for the fault monitor."""

from faultmon.data.extractor import L2ChainReader, OutputOracleReader

__all__ = ["L2ChainReader", "OutputOracleReader"]
