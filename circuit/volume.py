"""circuit/volume.py

Swap volume aggregation: the sum of |amount1| over every receipt slot.
"""

from __future__ import annotations

from .api import CircuitAPI
from .records import ReceiptRecord
from .streams import DataStream


def receipt_abs_amount(api: CircuitAPI, receipt: ReceiptRecord, field: int = 0) -> int:
    """|value| of the designated log field, read as Int248. Padding yields 0."""
    signed_value = api.to_int248(receipt.fields[field].value)
    return api.abs_int248(signed_value)


def aggregate_volume(api: CircuitAPI, receipts: DataStream[ReceiptRecord], field: int = 0) -> int:
    """
    Total unsigned swap volume over the full receipt stream.

    Addition is the only reduction, so the result does not depend on the
    order of the records.
    """
    amounts = receipts.map(lambda r: receipt_abs_amount(api, r, field))
    return amounts.sum()
