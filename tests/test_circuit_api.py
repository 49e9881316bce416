import math

import pytest

from circuit.api import INT248_MAX, INT248_MIN, UINT248_MAX, CircuitAPI, ConstraintViolationError


def test_select_picks_by_flag(api):
    assert api.select(1, 7, 9) == 7
    assert api.select(0, 7, 9) == 9


def test_flags(api):
    assert api.is_zero(0) == 1
    assert api.is_zero(-3) == 0
    assert api.is_equal(4, 4) == 1
    assert api.is_equal(4, 5) == 0
    assert api.is_less_or_equal(-1, 0) == 1
    assert api.is_less_or_equal(1, 0) == 0


def test_select_rejects_non_boolean_flag(api):
    with pytest.raises(ConstraintViolationError):
        api.select(2, 7, 9)


@pytest.mark.parametrize("v", [0, 1, 2, 3, 4, 15, 16, 17, 173, 10**18, 2**200 + 12345, UINT248_MAX])
def test_sqrt_is_largest_non_overshooting_root(api, v):
    assert api.sqrt(v) == math.isqrt(v)


def test_sqrt_trace_length_does_not_depend_on_value():
    a, b = CircuitAPI(), CircuitAPI()
    a.sqrt(0)
    b.sqrt(UINT248_MAX)
    assert a.trace == b.trace


def test_div_or_zero(api):
    assert api.div_or_zero(17, 5) == 3
    assert api.div_or_zero(4, 5) == 0
    assert api.div_or_zero(17, 0) == 0


def test_to_int248_reads_low_bits_as_twos_complement(api):
    word_minus_one = (1 << 256) - 1
    assert api.to_int248(word_minus_one) == -1
    assert api.to_int248(5) == 5
    assert api.to_int248(1 << 247) == INT248_MIN


@pytest.mark.parametrize("v", [0, 1, -1, 12345, -12345, INT248_MAX, INT248_MIN])
def test_abs_int248(api, v):
    assert api.abs_int248(v) == abs(v)


def test_binary_roundtrip_signed(api):
    bits = api.to_binary(-3, 8)
    assert bits == [1, 0, 1, 1, 1, 1, 1, 1]
    assert api.from_binary(bits, signed=True) == -3
    assert api.from_binary(bits, signed=False) == 253


def test_uint248_range_checks(api):
    with pytest.raises(ConstraintViolationError):
        api.add(UINT248_MAX, 1)
    with pytest.raises(ConstraintViolationError):
        api.sub(1, 2)
    with pytest.raises(ConstraintViolationError):
        api.mul(1 << 200, 1 << 100)


def test_assertions(api):
    api.assert_is_equal(3, 3)
    api.assert_is_zero(0)
    api.assert_is_less_or_equal(2, 3)
    with pytest.raises(ConstraintViolationError, match="assert_is_equal"):
        api.assert_is_equal(3, 4)
    with pytest.raises(ConstraintViolationError, match="assert_is_zero"):
        api.assert_is_zero(1)
    with pytest.raises(ConstraintViolationError, match="assert_is_less_or_equal"):
        api.assert_is_less_or_equal(4, 3)
