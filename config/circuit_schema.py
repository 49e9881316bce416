"""config/circuit_schema.py

Configuration schema for the IV circuit.

Every field is fixed at circuit setup. Changing any of them changes the
circuit, so there is no runtime reload. Ranges are checked when the
config is constructed, so an IvCircuitConfig that exists is usable.
"""

from dataclasses import dataclass
from typing import Any, Optional

# Uniswap V3 Swap(address,address,int256,int256,uint160,uint128,int24)
SWAP_EVENT_ID = 0xC42079F94A6350D7E6235F29174924F928CC2AC818EB64FED8004E115FBCCA67

# USDC/WETH 5 bps pool on mainnet
USDC_WETH_5BPS_POOL = 0x88E6A0C2DDD26FEEB64F039A2C41296FCB3F5640

# Uniswap V3 fee tiers, in hundredths of a basis point
FEE_TIERS = (100, 500, 3000, 10000)


@dataclass(frozen=True)
class IvCircuitConfig:
    """
    Setup-time parameters of the IV circuit.
    """
    # Stream capacities
    max_receipts: int = 32
    max_storage: int = 32
    max_transactions: int = 0

    # Pool
    pool_address: int = USDC_WETH_5BPS_POOL  # 0 disables the address check
    fee_tier: int = 500
    swap_event_id: int = SWAP_EVENT_ID

    # Receipt field carrying amount1, and its position in the log data
    volume_field: int = 0
    amount1_data_index: int = 1

    # Formula constants
    tick_band_width: int = 1
    sqrt_365: int = 19

    output_bits: int = 248

    def __post_init__(self):
        """Reject fee tiers, field indices and formula constants the circuit cannot use."""
        if self.fee_tier not in FEE_TIERS:
            raise ValueError(f"fee_tier must be one of {FEE_TIERS}, got {self.fee_tier}")
        self._validate_range("volume_field", self.volume_field, 0, 3)
        self._validate_range("amount1_data_index", self.amount1_data_index, 0, None)
        self._validate_range("tick_band_width", self.tick_band_width, 1, 887272)
        self._validate_range("sqrt_365", self.sqrt_365, 1, None)
        self._validate_range("pool_address", self.pool_address, 0, (1 << 160) - 1)
        self._validate_range("swap_event_id", self.swap_event_id, 0, (1 << 256) - 1)
        # capacities and output width are checked by the circuit at setup

    def _validate_range(self, name: str, value: Any, min_val: int, max_val: Optional[int] = None) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if value < min_val:
            raise ValueError(f"{name} {value} is below minimum {min_val}")
        if max_val is not None and value > max_val:
            raise ValueError(f"{name} {value} is above maximum {max_val}")
