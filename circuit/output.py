"""circuit/output.py

Circuit output buffer.

Each output_uint call appends ceil(bits / 8) big-endian bytes. A consumer
decodes a value by reading those bytes back as an unsigned big-endian integer.
"""

from __future__ import annotations

from .api import UINT248_BITS, CircuitAPI, CircuitSetupError, ConstraintViolationError


def check_output_width(bits: int) -> int:
    """Byte width of a Uint output of `bits` bits."""
    if bits <= 0 or bits > UINT248_BITS or bits % 8 != 0:
        raise CircuitSetupError(f"Output width must be a multiple of 8 in [8, {UINT248_BITS}], got {bits}")
    return bits // 8


class OutputBuffer:
    def __init__(self, api: CircuitAPI):
        self._api = api
        self._data = bytearray()

    def output_uint(self, bits: int, value: int) -> None:
        width = check_output_width(bits)
        self._api.assert_is_less_or_equal(0, value, "(output is unsigned)")
        if value >> bits:
            raise ConstraintViolationError(f"Output value {value} does not fit in {bits} bits")
        self._data += value.to_bytes(width, "big")

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


def decode_output_uint(data: bytes, bits: int, offset: int = 0) -> int:
    width = check_output_width(bits)
    chunk = data[offset:offset + width]
    if len(chunk) != width:
        raise ValueError(f"Output holds {len(data) - offset} bytes after offset {offset}, need {width}")
    return int.from_bytes(chunk, "big")
