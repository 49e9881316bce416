"""circuit/slots.py

Uniswap V3 pool storage layout and packed-field decoding.

slot0 packs, from the least significant bit:
    sqrtPriceX96                uint160   [0, 160)
    tick                        int24     [160, 184)
    observationIndex            uint16    [184, 200)
    observationCardinality      uint16    [200, 216)
    observationCardinalityNext  uint16    [216, 232)
    feeProtocol                 uint8     [232, 240)
    unlocked                    bool      [240, 248)

liquidity (uint128) sits alone in slot 4, at offset 0.

These offsets belong to the pool contract; another target contract needs
new descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .api import WORD_BITS, CircuitAPI

SLOT0_INDEX = 0
LIQUIDITY_SLOT_INDEX = 4


@dataclass(frozen=True)
class PackedField:
    name: str
    bit_offset: int
    bit_width: int
    signed: bool = False

    def __post_init__(self):
        if self.bit_width <= 0 or self.bit_offset < 0 or self.bit_offset + self.bit_width > WORD_BITS:
            raise ValueError(f"Field {self.name} [{self.bit_offset}, +{self.bit_width}) exceeds a 256-bit word")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bit_width - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bit_width - 1)) - 1 if self.signed else (1 << self.bit_width) - 1


SQRT_PRICE_X96 = PackedField("sqrt_price_x96", 0, 160)
TICK = PackedField("tick", 160, 24, signed=True)
OBSERVATION_INDEX = PackedField("observation_index", 184, 16)
OBSERVATION_CARDINALITY = PackedField("observation_cardinality", 200, 16)
OBSERVATION_CARDINALITY_NEXT = PackedField("observation_cardinality_next", 216, 16)
FEE_PROTOCOL = PackedField("fee_protocol", 232, 8)
UNLOCKED = PackedField("unlocked", 240, 8)

LIQUIDITY = PackedField("liquidity", 0, 128)

SLOT0_FIELDS = (
    SQRT_PRICE_X96,
    TICK,
    OBSERVATION_INDEX,
    OBSERVATION_CARDINALITY,
    OBSERVATION_CARDINALITY_NEXT,
    FEE_PROTOCOL,
    UNLOCKED,
)


def decode_packed_field(api: CircuitAPI, word: int, packed: PackedField) -> int:
    """Slice ``packed`` out of ``word``, sign-extending signed fields."""
    bits = api.to_binary(word, WORD_BITS)
    window = bits[packed.bit_offset:packed.bit_offset + packed.bit_width]
    return api.from_binary(window, signed=packed.signed)


def pack_field(value: int, packed: PackedField, word: int = 0) -> int:
    """
    Write ``value`` into ``word`` at the field position (off-circuit helper).

    Raises:
        ValueError: if value is outside the field's range
    """
    if value < packed.min_value or value > packed.max_value:
        raise ValueError(
            f"{packed.name}={value} outside [{packed.min_value}, {packed.max_value}]"
        )
    mask = ((1 << packed.bit_width) - 1) << packed.bit_offset
    raw = (value & ((1 << packed.bit_width) - 1)) << packed.bit_offset
    return (word & ~mask) | raw


@dataclass(frozen=True)
class Slot0State:
    sqrt_price_x96: int
    tick: int
    observation_index: int
    observation_cardinality: int
    observation_cardinality_next: int
    fee_protocol: int
    unlocked: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sqrt_price_x96": self.sqrt_price_x96,
            "tick": self.tick,
            "observation_index": self.observation_index,
            "observation_cardinality": self.observation_cardinality,
            "observation_cardinality_next": self.observation_cardinality_next,
            "fee_protocol": self.fee_protocol,
            "unlocked": self.unlocked,
        }


def decode_slot0(api: CircuitAPI, word: int) -> Slot0State:
    values = {f.name: decode_packed_field(api, word, f) for f in SLOT0_FIELDS}
    values["unlocked"] = bool(values["unlocked"])
    return Slot0State(**values)


def encode_slot0(state: Slot0State) -> int:
    word = 0
    for f in SLOT0_FIELDS:
        word = pack_field(int(getattr(state, f.name)), f, word)
    return word
