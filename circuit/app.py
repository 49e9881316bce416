"""circuit/app.py

Application circuits.

An AppCircuit declares its stream capacities once (allocate) and describes
its computation over padded inputs (define). IvCircuit is the Uniswap V3
implied-volatility circuit.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from config.circuit_schema import IvCircuitConfig

from .api import CircuitAPI
from .liquidity import current_band_tvl
from .output import OutputBuffer, check_output_width
from .records import DataInput, ReceiptRecord, StorageRecord
from .slots import LIQUIDITY, LIQUIDITY_SLOT_INDEX, SLOT0_INDEX, TICK, decode_packed_field
from .streams import DataStream
from .volatility import compute_volatility
from .volume import aggregate_volume

logger = logging.getLogger(__name__)


class AppCircuit(ABC):
    @abstractmethod
    def allocate(self) -> Tuple[int, int, int]:
        """Return (max_receipts, max_storage, max_transactions)."""

    @abstractmethod
    def define(self, api: CircuitAPI, data: DataInput, out: OutputBuffer) -> Any:
        """Constrain the inputs and write the outputs. May return intermediate values."""


@dataclass
class IvWitness:
    """Intermediate values of one IvCircuit evaluation."""
    total_volume: int = 0
    tick: int = 0
    liquidity: int = 0
    tick_tvl: int = 0
    ratio: int = 0
    sqrt_ratio: int = 0
    metric: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_volume": self.total_volume,
            "tick": self.tick,
            "liquidity": self.liquidity,
            "tick_tvl": self.tick_tvl,
            "ratio": self.ratio,
            "sqrt_ratio": self.sqrt_ratio,
            "metric": self.metric,
        }


class IvCircuit(AppCircuit):
    """
    iv = 2 * fee_tier * isqrt(daily_volume / tick_tvl) * isqrt(365)

    Receipts carry amount1 of Swap logs in field ``volume_field``. Storage
    index 0 is slot0 (current tick), index 1 is slot 4 (active liquidity).
    The metric is output as one Uint of ``output_bits``.
    """

    def __init__(self, config: Optional[IvCircuitConfig] = None):
        self.config = config or IvCircuitConfig()
        check_output_width(self.config.output_bits)

    def allocate(self) -> Tuple[int, int, int]:
        # Allocated space must be an integral multiple of 32
        return self.config.max_receipts, self.config.max_storage, self.config.max_transactions

    def _check_receipt(self, api: CircuitAPI, receipt: ReceiptRecord) -> None:
        cfg = self.config
        f = receipt.fields[cfg.volume_field]
        is_real = 1 - api.is_zero(f.event_id)

        api.assert_is_zero(is_real * (f.event_id - cfg.swap_event_id), "(event is not Swap)")
        api.assert_is_zero(is_real * int(f.is_topic), "(amount1 is log data, not a topic)")
        api.assert_is_zero(is_real * (f.field_index - cfg.amount1_data_index), "(field is not amount1)")
        # padding must stay neutral
        api.assert_is_zero((1 - is_real) * f.value, "(padding receipt carries a value)")
        if cfg.pool_address:
            api.assert_is_zero(is_real * (f.contract - cfg.pool_address), "(log not emitted by pool)")

    def _check_storage(self, api: CircuitAPI, record: StorageRecord, expected_slot: int) -> None:
        # both reads are required, padding is not accepted here
        api.assert_is_zero(api.is_zero(record.block_num), f"(missing storage read for slot {expected_slot})")
        api.assert_is_zero(record.slot - expected_slot, f"(expected slot {expected_slot})")
        if self.config.pool_address:
            api.assert_is_zero(record.address - self.config.pool_address, "(storage not read from pool)")

    def define(self, api: CircuitAPI, data: DataInput, out: OutputBuffer) -> IvWitness:
        cfg = self.config
        witness = IvWitness()

        receipts = DataStream(api, data.receipts, cfg.max_receipts)
        storage = DataStream(api, data.storage_slots, cfg.max_storage)

        receipts.map(lambda r: self._check_receipt(api, r))

        # Daily volume: sum of |amount1| over all swaps
        witness.total_volume = aggregate_volume(api, receipts, cfg.volume_field)
        logger.debug(f"[iv] total volume: {witness.total_volume}")

        slot0 = storage.get(0)
        slot4 = storage.get(1)
        self._check_storage(api, slot0, SLOT0_INDEX)
        self._check_storage(api, slot4, LIQUIDITY_SLOT_INDEX)
        api.assert_is_equal(slot0.block_num, slot4.block_num, "(slot0 and liquidity read at different blocks)")

        witness.tick = decode_packed_field(api, slot0.value, TICK)
        witness.liquidity = decode_packed_field(api, slot4.value, LIQUIDITY)
        logger.debug(f"[iv] current tick: {witness.tick}, liquidity: {witness.liquidity}")

        witness.tick_tvl = current_band_tvl(api, witness.tick, witness.liquidity, cfg.tick_band_width)

        vol = compute_volatility(api, witness.total_volume, witness.tick_tvl, cfg.fee_tier, cfg.sqrt_365)
        witness.ratio = vol.ratio
        witness.sqrt_ratio = vol.sqrt_ratio
        witness.metric = vol.metric
        logger.debug(f"[iv] ratio={vol.ratio} sqrt_ratio={vol.sqrt_ratio} iv={vol.metric}")

        out.output_uint(cfg.output_bits, witness.metric)
        return witness
