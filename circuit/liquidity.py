"""circuit/liquidity.py

Token-1 value of in-range liquidity over a narrow tick band.

The exact amount is L * (sqrt(p_b) - sqrt(p_a)), which needs 1.0001 ** (tick / 2).
There is no fractional power primitive, so the band is priced linearly:

    amount1 ~= L * |tick_b - tick_a|
"""

from __future__ import annotations

from .api import CircuitAPI

# Width of the band priced around the current tick
TICK_BAND_WIDTH = 1


def estimate_tick_tvl(api: CircuitAPI, tick_a: int, tick_b: int, liquidity: int) -> int:
    """Linear token-1 estimate of ``liquidity`` between two ticks, symmetric in the ticks."""
    a_le_b = api.is_less_or_equal(tick_a, tick_b)
    lower = api.select(a_le_b, tick_a, tick_b)
    upper = api.select(a_le_b, tick_b, tick_a)
    span = api.sub(upper, lower)
    return api.mul(liquidity, span)


def current_band_tvl(api: CircuitAPI, tick: int, liquidity: int, band_width: int = TICK_BAND_WIDTH) -> int:
    return estimate_tick_tvl(api, tick, tick + band_width, liquidity)
