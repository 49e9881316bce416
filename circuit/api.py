"""circuit/api.py

Arithmetic primitives for the IV circuit.

Every primitive is a total function over integers. Control decisions are
expressed as selects and 0/1 flags, so the sequence of primitives executed by
a circuit depends only on its declared capacities, never on witness values.
Each call is appended to ``CircuitAPI.trace`` so that property can be checked.

Failed assertions and range checks raise ConstraintViolationError.
"""

from __future__ import annotations

from typing import List, Sequence

UINT248_BITS = 248
INT248_BITS = 248
WORD_BITS = 256

UINT248_MAX = (1 << UINT248_BITS) - 1
INT248_MIN = -(1 << (INT248_BITS - 1))
INT248_MAX = (1 << (INT248_BITS - 1)) - 1
WORD_MAX = (1 << WORD_BITS) - 1


class CircuitError(Exception):
    """Base class for circuit errors."""


class CircuitSetupError(CircuitError):
    """Invalid circuit declaration (capacities, output widths). Raised once at setup."""


class ConstraintViolationError(CircuitError):
    """A witness failed an asserted equality, inequality or range check."""


class CircuitAPI:
    """
    Branch-free integer primitives used by circuit definitions.

    One instance per evaluation; it holds nothing but the op trace.
    """

    def __init__(self):
        self.trace: List[str] = []

    def _record(self, op: str) -> None:
        self.trace.append(op)

    def _check_uint248(self, op: str, v: int) -> int:
        if v < 0 or v > UINT248_MAX:
            raise ConstraintViolationError(f"{op}: value {v} out of Uint248 range")
        return v

    # ------------------------------------------------------------------
    # Flags and selection
    # ------------------------------------------------------------------

    def select(self, cond: int, a: int, b: int) -> int:
        """Return ``a`` when cond is 1, ``b`` when cond is 0, as ``b + cond * (a - b)``."""
        self._record("select")
        if cond not in (0, 1):
            raise ConstraintViolationError(f"select: condition must be 0 or 1, got {cond}")
        return b + cond * (a - b)

    def is_zero(self, v: int) -> int:
        self._record("is_zero")
        return int(v == 0)

    def is_equal(self, a: int, b: int) -> int:
        self._record("is_equal")
        return int(a == b)

    def is_less_or_equal(self, a: int, b: int) -> int:
        self._record("is_less_or_equal")
        return int(a <= b)

    # ------------------------------------------------------------------
    # Uint248 arithmetic
    # ------------------------------------------------------------------

    def add(self, a: int, b: int) -> int:
        self._record("add")
        return self._check_uint248("add", a + b)

    def sub(self, a: int, b: int) -> int:
        self._record("sub")
        return self._check_uint248("sub", a - b)

    def mul(self, a: int, b: int) -> int:
        self._record("mul")
        return self._check_uint248("mul", a * b)

    def div_or_zero(self, a: int, b: int) -> int:
        """
        Truncating division that evaluates to 0 when ``b`` is 0.

        The denominator is replaced by ``b + is_zero(b)`` so the quotient is
        always defined, then the zero case is selected away.
        """
        self._record("div_or_zero")
        b_is_zero = self.is_zero(b)
        safe_b = b + b_is_zero
        quotient = a // safe_b
        remainder = a - quotient * safe_b
        # quotient/remainder witness check: a = q*b + r, r < b
        self.assert_is_less_or_equal(remainder + 1, safe_b)
        return self.select(b_is_zero, 0, quotient)

    def sqrt(self, v: int, bits: int = UINT248_BITS) -> int:
        """
        Integer square root: the largest r with r*r <= v.

        Binary search over the bits of the root, most significant first, for a
        fixed ceil(bits / 2) rounds.
        """
        self._record("sqrt")
        root = 0
        for i in reversed(range((bits + 1) // 2)):
            candidate = root | (1 << i)
            fits = self.is_less_or_equal(candidate * candidate, v)
            root = self.select(fits, candidate, root)
        return root

    # ------------------------------------------------------------------
    # Signed values
    # ------------------------------------------------------------------

    def to_int248(self, word: int) -> int:
        """Interpret the low 248 bits of a 256-bit word as a two's-complement Int248."""
        self._record("to_int248")
        low = word & UINT248_MAX
        sign = (low >> (INT248_BITS - 1)) & 1
        return low - sign * (1 << INT248_BITS)

    def abs_int248(self, v: int) -> int:
        """Absolute value with the negation selected by the sign bit."""
        self._record("abs_int248")
        bits = self.to_binary(v, INT248_BITS)
        sign = bits[-1]
        return self.select(sign, -v, v)

    # ------------------------------------------------------------------
    # Bit decomposition
    # ------------------------------------------------------------------

    def to_binary(self, v: int, bits: int) -> List[int]:
        """Little-endian bit decomposition of ``v`` in two's complement over ``bits`` bits."""
        self._record("to_binary")
        u = v & ((1 << bits) - 1)
        return [(u >> i) & 1 for i in range(bits)]

    def from_binary(self, bits: Sequence[int], signed: bool = False) -> int:
        """Recompose little-endian bits; the top bit carries negative weight when ``signed``."""
        self._record("from_binary")
        v = 0
        for i, bit in enumerate(bits):
            if bit not in (0, 1):
                raise ConstraintViolationError(f"from_binary: bit {i} is not boolean: {bit}")
            v += bit << i
        if signed and bits:
            v -= bits[-1] << len(bits)
        return v

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def assert_is_equal(self, a: int, b: int, msg: str = "") -> None:
        self._record("assert_is_equal")
        if a != b:
            raise ConstraintViolationError(f"assert_is_equal failed: {a} != {b} {msg}".rstrip())

    def assert_is_zero(self, v: int, msg: str = "") -> None:
        self._record("assert_is_zero")
        if v != 0:
            raise ConstraintViolationError(f"assert_is_zero failed: {v} {msg}".rstrip())

    def assert_is_less_or_equal(self, a: int, b: int, msg: str = "") -> None:
        self._record("assert_is_less_or_equal")
        if a > b:
            raise ConstraintViolationError(f"assert_is_less_or_equal failed: {a} > {b} {msg}".rstrip())
