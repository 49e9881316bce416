"""circuit/volatility.py

Implied volatility from daily volume and tick TVL.

The floating point formula is

    iv = 2 * (fee_tier / 1e6) * sqrt(daily_volume / tick_tvl) * sqrt(365)

The circuit keeps fee_tier in its native unit (500 for a 5 bps pool), so the
output is scaled by 1e6, and uses integer stand-ins for both square roots:

    metric = 2 * fee_tier * isqrt(daily_volume // tick_tvl) * SQRT_365

With tick_tvl == 0 the ratio is 0, so the metric is 0.
"""

from __future__ import annotations

from dataclasses import dataclass

from .api import CircuitAPI

# isqrt(365) == 19 (19.105 exact)
SQRT_365 = 19


@dataclass(frozen=True)
class VolatilityResult:
    ratio: int
    sqrt_ratio: int
    metric: int


def compute_volatility(
    api: CircuitAPI,
    daily_volume: int,
    tick_tvl: int,
    fee_tier: int,
    sqrt_365: int = SQRT_365,
) -> VolatilityResult:
    ratio = api.div_or_zero(daily_volume, tick_tvl)
    sqrt_ratio = api.sqrt(ratio)
    metric = api.mul(api.mul(api.mul(2, fee_tier), sqrt_ratio), sqrt_365)
    return VolatilityResult(ratio=ratio, sqrt_ratio=sqrt_ratio, metric=metric)
