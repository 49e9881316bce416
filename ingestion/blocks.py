"""ingestion/blocks.py

Approximate block numbers for a lookback window.

Used to pick the block range of the one-day swap window without a
timestamp-to-block lookup. Pure functions, no I/O.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

MAINNET_CHAIN_ID = 1
SEPOLIA_CHAIN_ID = 11155111

BLOCK_TIMES_SEC: Dict[int, int] = {
    MAINNET_CHAIN_ID: 12,
    SEPOLIA_CHAIN_ID: 12,
}

INTERVAL_SEC: Dict[str, int] = {
    "1h": 3600,
    "6h": 21600,
    "12h": 43200,
    "1d": 86400,
}


def approximate_blocks_for_timestamp(
    initial_timestamp_sec: int,
    latest_block: Mapping[str, int],
    interval: str,
    number_of_periods: int,
    chain_id: int,
) -> List[Dict[str, int]]:
    """
    Approximate blocks at ``initial_timestamp_sec`` and each earlier interval.

    Args:
        initial_timestamp_sec: Timestamp to look back from
        latest_block: {"number": ..., "timestamp": ...} of a known block
        interval: One of INTERVAL_SEC keys
        number_of_periods: How many blocks to return (>= 1)
        chain_id: Chain used for the block time

    Returns:
        List of {"number", "timestamp"}, oldest first. The last entry is the
        block estimated at ``initial_timestamp_sec``.

    Raises:
        ValueError: for periods < 1, unknown chain or unknown interval
    """
    if number_of_periods < 1:
        raise ValueError(f"number_of_periods must be >= 1, got {number_of_periods}")
    if chain_id not in BLOCK_TIMES_SEC:
        raise ValueError(f"Unrecognized chain_id: {chain_id}")
    if interval not in INTERVAL_SEC:
        raise ValueError(f"Unrecognized interval: {interval}")

    block_time = BLOCK_TIMES_SEC[chain_id]
    interval_sec = INTERVAL_SEC[interval]

    time_difference = int(latest_block["timestamp"]) - initial_timestamp_sec
    block_difference = time_difference // block_time
    initial_number = int(latest_block["number"]) - block_difference

    blocks: List[Dict[str, int]] = []
    for i in range(number_of_periods):
        delta_sec = i * interval_sec
        blocks.insert(0, {
            "number": initial_number - delta_sec // block_time,
            "timestamp": initial_timestamp_sec - delta_sec,
        })
    return blocks


def lookback_start_block(latest_block: Mapping[str, int], interval: str = "1d", chain_id: int = MAINNET_CHAIN_ID) -> int:
    """First block of the window ``interval`` before ``latest_block``."""
    if interval not in INTERVAL_SEC:
        raise ValueError(f"Unrecognized interval: {interval}")
    start_ts = int(latest_block["timestamp"]) - INTERVAL_SEC[interval]
    return approximate_blocks_for_timestamp(start_ts, latest_block, interval, 1, chain_id)[0]["number"]
