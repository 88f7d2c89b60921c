"""Tests for the first-unfinalized-output binary search."""

import asyncio
import math

import pytest

from faultmon.core.errors import OutputRetrievalError
from faultmon.verification.locator import find_first_unfinalized_index

from conftest import FakeOracle, make_block, make_output


def oracle_with_timestamps(timestamps: list[int]) -> FakeOracle:
    outputs = [
        make_output(i, make_block(100 * (i + 1)), timestamp=ts)
        for i, ts in enumerate(timestamps)
    ]
    return FakeOracle(outputs)


def locate(oracle: FakeOracle, window: int, now: int) -> int:
    return asyncio.run(
        find_first_unfinalized_index(oracle.get_l2_output, len(oracle.outputs), window, now)
    )


def brute_force(timestamps: list[int], window: int, now: int) -> int:
    for i, ts in enumerate(timestamps):
        if ts + window >= now:
            return i
    return len(timestamps)


class TestFindFirstUnfinalizedIndex:
    def test_two_outputs_first_finalized(self) -> None:
        oracle = oracle_with_timestamps([1_000, 2_000])
        assert locate(oracle, window=500, now=1_700) == 1

    def test_empty_list_returns_zero(self) -> None:
        oracle = FakeOracle([])
        assert locate(oracle, window=500, now=10_000) == 0
        assert oracle.fetched == []

    def test_all_finalized_returns_total(self) -> None:
        oracle = oracle_with_timestamps([100, 200, 300])
        assert locate(oracle, window=50, now=10_000) == 3

    def test_none_finalized_returns_zero(self) -> None:
        oracle = oracle_with_timestamps([100, 200, 300])
        assert locate(oracle, window=50, now=0) == 0

    def test_deadline_equal_to_now_is_not_finalized(self) -> None:
        oracle = oracle_with_timestamps([1_000, 2_000])
        assert locate(oracle, window=500, now=1_500) == 0
        assert locate(oracle, window=500, now=1_501) == 1

    @pytest.mark.parametrize("now", [0, 150, 999, 1_000, 1_001, 1_234, 5_000])
    def test_matches_linear_scan(self, now: int) -> None:
        timestamps = [10, 10, 90, 200, 350, 351, 600, 700, 700, 950]
        oracle = oracle_with_timestamps(timestamps)
        assert locate(oracle, window=40, now=now) == brute_force(timestamps, 40, now)

    def test_logarithmic_number_of_fetches(self) -> None:
        timestamps = list(range(0, 10_000, 10))
        oracle = oracle_with_timestamps(timestamps)
        locate(oracle, window=100, now=4_321)
        assert len(oracle.fetched) <= math.ceil(math.log2(len(timestamps))) + 1

    def test_fetch_failure_surfaces_retrieval_error(self) -> None:
        oracle = oracle_with_timestamps([1_000, 2_000, 3_000])
        oracle.failing.add("get_l2_output")
        with pytest.raises(OutputRetrievalError) as exc_info:
            locate(oracle, window=500, now=2_000)
        assert exc_info.value.index == 1
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_negative_total_rejected(self) -> None:
        oracle = FakeOracle([])
        with pytest.raises(ValueError):
            asyncio.run(find_first_unfinalized_index(oracle.get_l2_output, -1, 500, 0))
