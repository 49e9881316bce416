import json
from pathlib import Path

import pytest

from circuit.api import CircuitAPI
from circuit.records import DataInput, LogField, ReceiptRecord, StorageRecord, encode_int256
from config.circuit_schema import SWAP_EVENT_ID, USDC_WETH_5BPS_POOL, IvCircuitConfig

REPO_ROOT = Path(__file__).resolve().parent.parent
FIXTURE_PATH = REPO_ROOT / "integration" / "fixtures" / "iv" / "usdc_weth_5bps.json"

AMOUNT1_LARGEST = 1564800000000000000000
AMOUNT1_SECOND = 1469250000000000000000
SLOT0_WORD = 0x00010002D302D30140030DE900000000000056BAC52C49E2000000001151DBD7
LIQUIDITY_WORD = 0x000000000000000000000000000000000000000000000000F336F69B81B8268E
STORAGE_BLOCK = 22135817


def swap_receipt(amount1: int, tx_hash: int = 1, block_num: int = 22131566) -> ReceiptRecord:
    return ReceiptRecord(
        tx_hash=tx_hash,
        block_num=block_num,
        fields=(
            LogField(
                event_id=SWAP_EVENT_ID,
                is_topic=False,
                field_index=1,
                log_pos=3,
                value=encode_int256(amount1),
                contract=USDC_WETH_5BPS_POOL,
            ),
        ),
    )


def pad_receipts(receipts, capacity=32):
    return tuple(receipts) + (ReceiptRecord.padding(),) * (capacity - len(receipts))


def iv_input(amounts, slot0_word=SLOT0_WORD, liquidity_word=LIQUIDITY_WORD, capacity=32) -> DataInput:
    receipts = [swap_receipt(a, tx_hash=i + 1) for i, a in enumerate(amounts)]
    storage = (
        StorageRecord(block_num=STORAGE_BLOCK, address=USDC_WETH_5BPS_POOL, slot=0, value=slot0_word),
        StorageRecord(block_num=STORAGE_BLOCK, address=USDC_WETH_5BPS_POOL, slot=4, value=liquidity_word),
    )
    return DataInput(
        receipts=pad_receipts(receipts, capacity),
        storage_slots=storage + (StorageRecord.padding(),) * (capacity - len(storage)),
        transactions=(),
    )


@pytest.fixture
def api() -> CircuitAPI:
    return CircuitAPI()


@pytest.fixture
def iv_config() -> IvCircuitConfig:
    return IvCircuitConfig()


@pytest.fixture
def scenario_a() -> DataInput:
    return iv_input([AMOUNT1_LARGEST, AMOUNT1_SECOND])


@pytest.fixture
def scenario_b() -> DataInput:
    return iv_input([AMOUNT1_LARGEST, AMOUNT1_SECOND], liquidity_word=0)


@pytest.fixture
def swap_fixture() -> dict:
    return json.loads(FIXTURE_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def make_input():
    return iv_input


@pytest.fixture
def make_receipt():
    return swap_receipt
