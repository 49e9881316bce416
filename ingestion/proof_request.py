"""ingestion/proof_request.py

Builds padded circuit input from already-fetched swap logs and storage words.

The circuit allocates a fixed number of receipts, so only the largest swaps
by |amount1| are kept. Everything else is zero padding.

Swap logs use the decoded-event shape returned by the RPC client:
    {
        "address": "0x88e6...",
        "blockNumber": 22131566,
        "transactionHash": "0xf995...",
        "logIndex": 28,
        "topics": ["0xc420...", ...],
        "args": {"amount0": "-3171955626553", "amount1": "1564800000000000000000", ...}
    }
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from circuit.api import WORD_MAX
from circuit.records import (
    DataInput,
    LogField,
    ReceiptRecord,
    StorageRecord,
    TransactionRecord,
    encode_int256,
    word_from_hex,
)

logger = logging.getLogger(__name__)


class ProofRequestError(ValueError):
    pass


def _to_int(value: Any) -> int:
    """Accept ints, decimal strings and 0x-prefixed hex strings."""
    if isinstance(value, bool):
        raise ProofRequestError(f"Expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        try:
            return int(s, 16) if s.lower().startswith(("0x", "-0x")) else int(s)
        except ValueError:
            raise ProofRequestError(f"Expected an integer, got {value!r}")
    raise ProofRequestError(f"Expected an integer, got {value!r}")


def _hex_word(value: Any, what: str) -> int:
    try:
        return word_from_hex(str(value))
    except ValueError as e:
        raise ProofRequestError(f"Bad {what}: {e}")


def swap_amount1(log: Mapping[str, Any]) -> int:
    args = log.get("args") or {}
    if "amount1" not in args:
        raise ProofRequestError(f"Swap log without amount1: {log.get('transactionHash')}")
    return _to_int(args["amount1"])


def swaps_since(logs: Sequence[Mapping[str, Any]], start_block: int) -> List[Mapping[str, Any]]:
    """Swap logs emitted at or after ``start_block``."""
    return [log for log in logs if _to_int(log.get("blockNumber", 0)) >= start_block]


def select_largest_swaps(logs: Sequence[Mapping[str, Any]], n: int) -> List[Mapping[str, Any]]:
    """
    The ``n`` swaps with the largest |amount1|, largest first.

    Equal magnitudes keep their original order.
    """
    if n < 0:
        raise ProofRequestError(f"n must be non-negative, got {n}")
    indexed = sorted(enumerate(logs), key=lambda pair: (-abs(swap_amount1(pair[1])), pair[0]))
    return [log for _, log in indexed[:n]]


def swap_log_to_receipt(log: Mapping[str, Any], field_index: int = 1) -> ReceiptRecord:
    """One receipt carrying amount1 of a Swap log, read from the log data at ``field_index``."""
    topics = log.get("topics") or []
    if not topics:
        raise ProofRequestError(f"Swap log without topics: {log.get('transactionHash')}")

    field = LogField(
        event_id=_hex_word(topics[0], "topic0"),
        is_topic=False,
        field_index=field_index,
        log_pos=_to_int(log.get("logIndex", 0)),
        value=encode_int256(swap_amount1(log)),
        contract=_to_int(log.get("address", 0)),
    )
    return ReceiptRecord(
        tx_hash=_hex_word(log.get("transactionHash", "0x0"), "transaction hash"),
        block_num=_to_int(log.get("blockNumber", 0)),
        fields=(field,),
    )


def storage_record(block_num: Any, address: Any, slot: Any, value: Any) -> StorageRecord:
    """Storage read at ``block_num``. ``value`` is a 256-bit word: an int, a decimal string or 0x-hex."""
    word = _to_int(value)
    if word < 0 or word > WORD_MAX:
        raise ProofRequestError(f"Storage value is not a 256-bit word: {value!r}")
    return StorageRecord(
        block_num=_to_int(block_num),
        address=_to_int(address),
        slot=_to_int(slot),
        value=word,
    )


def _pad(items: List[Any], capacity: int, filler: Any, name: str) -> Tuple[Any, ...]:
    if len(items) > capacity:
        raise ProofRequestError(f"{len(items)} {name} exceed the allocated capacity of {capacity}")
    return tuple(items) + (filler,) * (capacity - len(items))


class ProofRequest:
    """Collects receipts and storage reads, then pads them to the circuit's capacities."""

    def __init__(self):
        self.receipts: List[ReceiptRecord] = []
        self.storage: List[StorageRecord] = []
        self.transactions: List[TransactionRecord] = []

    def add_receipt(self, receipt: ReceiptRecord) -> None:
        self.receipts.append(receipt)

    def add_storage(self, record: StorageRecord) -> None:
        self.storage.append(record)

    def add_swap_logs(self, logs: Sequence[Mapping[str, Any]], max_receipts: int, field_index: int = 1) -> int:
        """Add the ``max_receipts`` largest swaps. Returns the number added."""
        selected = select_largest_swaps(logs, max_receipts)
        for log in selected:
            self.add_receipt(swap_log_to_receipt(log, field_index))
        logger.info(f"[proof_request] kept {len(selected)} of {len(logs)} swap logs")
        return len(selected)

    def build_input(self, capacities: Tuple[int, int, int]) -> DataInput:
        max_receipts, max_storage, max_transactions = capacities
        return DataInput(
            receipts=_pad(self.receipts, max_receipts, ReceiptRecord.padding(), "receipts"),
            storage_slots=_pad(self.storage, max_storage, StorageRecord.padding(), "storage reads"),
            transactions=_pad(self.transactions, max_transactions, TransactionRecord.padding(), "transactions"),
        )


def build_iv_request(
    swap_logs: Sequence[Mapping[str, Any]],
    slot0: Mapping[str, Any],
    liquidity_slot: Mapping[str, Any],
    max_receipts: int,
    field_index: int = 1,
    pool_address: Optional[Any] = None,
) -> ProofRequest:
    """
    Proof request for the IV circuit: the largest swaps plus slot0 and the
    liquidity slot, in that storage order.

    Storage entries are mappings with ``blockNumber``, ``slot``, ``value`` and
    optionally ``address`` (defaults to ``pool_address``).
    """
    req = ProofRequest()
    req.add_swap_logs(swap_logs, max_receipts, field_index)
    for entry in (slot0, liquidity_slot):
        address = entry.get("address", pool_address)
        if address is None:
            raise ProofRequestError("storage entry without address and no pool_address given")
        req.add_storage(storage_record(entry["blockNumber"], address, entry["slot"], entry["value"]))
    return req


def load_swap_fixture(data: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Dict[str, Any], Dict[str, Any]]:
    """Split a fixture document into (swap_logs, slot0, liquidity_slot)."""
    try:
        storage = data["storage"]
        return list(data["swap_logs"]), storage["slot0"], storage["liquidity"]
    except (KeyError, TypeError) as e:
        raise ProofRequestError(f"Malformed fixture: missing {e}")
