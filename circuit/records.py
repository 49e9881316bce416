"""circuit/records.py

Receipt and storage records supplied to the circuit.

All records are value data. Padding records are all-zero and every reduction
applied to them is neutral.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import eth_abi.abi
from eth_abi.exceptions import DecodingError, EncodingError
from hexbytes import HexBytes

# Number of log fields carried by one receipt
MAX_LOG_FIELDS = 4


def word_from_hex(data: str) -> int:
    """Parse a 0x-prefixed hex string into a 256-bit word."""
    if not data.startswith(("0x", "0X")):
        raise ValueError(f"Expected a 0x-prefixed hex string, got {data!r}")
    raw = HexBytes(data)
    if len(raw) > 32:
        raise ValueError(f"Value does not fit in 32 bytes: {data}")
    return int.from_bytes(raw, "big")


def word_to_hex(word: int) -> str:
    return "0x" + format(word, "064x")


def encode_int256(value: int) -> int:
    """Two's-complement encoding of a signed integer into a 256-bit word."""
    try:
        return int.from_bytes(eth_abi.abi.encode(["int256"], [value]), "big")
    except EncodingError as e:
        raise ValueError(f"Value out of int256 range: {value}") from e


def decode_int256(word: int) -> int:
    try:
        (value,) = eth_abi.abi.decode(["int256"], word.to_bytes(32, "big"))
    except (DecodingError, OverflowError) as e:
        raise ValueError(f"Not a 256-bit word: {word}") from e
    return value


@dataclass(frozen=True)
class LogField:
    """One field exported from a transaction log."""
    event_id: int = 0          # topic0 of the log
    is_topic: bool = False     # True when read from topics, False when from data
    field_index: int = 0       # index within topics or within the data words
    log_pos: int = 0           # position of the log in the receipt
    value: int = 0             # 256-bit word
    contract: int = 0          # emitting contract, 0 when not supplied

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": word_to_hex(self.event_id),
            "is_topic": self.is_topic,
            "field_index": self.field_index,
            "log_pos": self.log_pos,
            "value": word_to_hex(self.value),
            "contract": hex(self.contract),
        }


def _pad_fields(fields: Tuple[LogField, ...]) -> Tuple[LogField, ...]:
    if len(fields) > MAX_LOG_FIELDS:
        raise ValueError(f"A receipt carries at most {MAX_LOG_FIELDS} fields, got {len(fields)}")
    return tuple(fields) + (LogField(),) * (MAX_LOG_FIELDS - len(fields))


@dataclass(frozen=True)
class ReceiptRecord:
    tx_hash: int = 0
    block_num: int = 0
    fields: Tuple[LogField, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "fields", _pad_fields(tuple(self.fields)))

    @classmethod
    def padding(cls) -> "ReceiptRecord":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tx_hash": word_to_hex(self.tx_hash),
            "block_num": self.block_num,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class StorageRecord:
    block_num: int = 0
    address: int = 0
    slot: int = 0
    value: int = 0

    @classmethod
    def padding(cls) -> "StorageRecord":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_num": self.block_num,
            "address": hex(self.address),
            "slot": word_to_hex(self.slot),
            "value": word_to_hex(self.value),
        }


@dataclass(frozen=True)
class TransactionRecord:
    """Placeholder transaction record; the IV circuit allocates none."""
    tx_hash: int = 0
    block_num: int = 0

    @classmethod
    def padding(cls) -> "TransactionRecord":
        return cls()


@dataclass(frozen=True)
class DataInput:
    """Padded input streams handed to a circuit definition."""
    receipts: Tuple[ReceiptRecord, ...]
    storage_slots: Tuple[StorageRecord, ...]
    transactions: Tuple[TransactionRecord, ...] = ()
