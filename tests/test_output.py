import pytest

from circuit.api import CircuitSetupError, ConstraintViolationError
from circuit.output import OutputBuffer, decode_output_uint


@pytest.mark.parametrize("value", [0, 1, 247000, 2**64 + 5, 2**248 - 1])
def test_output_roundtrip_248(api, value):
    out = OutputBuffer(api)
    out.output_uint(248, value)
    data = out.to_bytes()
    assert len(data) == 31
    assert decode_output_uint(data, 248) == value


def test_output_is_big_endian(api):
    out = OutputBuffer(api)
    out.output_uint(16, 0x0102)
    assert out.to_bytes() == b"\x01\x02"


def test_outputs_are_concatenated(api):
    out = OutputBuffer(api)
    out.output_uint(64, 22135817)
    out.output_uint(248, 247000)
    data = out.to_bytes()
    assert len(data) == 8 + 31
    assert decode_output_uint(data, 64) == 22135817
    assert decode_output_uint(data, 248, offset=8) == 247000


def test_value_wider_than_output_is_rejected(api):
    out = OutputBuffer(api)
    with pytest.raises(ConstraintViolationError):
        out.output_uint(8, 256)
    with pytest.raises(ConstraintViolationError):
        out.output_uint(8, -1)


@pytest.mark.parametrize("bits", [0, 7, 250, 256])
def test_invalid_width_is_setup_error(api, bits):
    with pytest.raises(CircuitSetupError):
        OutputBuffer(api).output_uint(bits, 1)


def test_decode_short_buffer():
    with pytest.raises(ValueError):
        decode_output_uint(b"\x00" * 10, 248)
