"""Pure normalizers: raw measurements in, component points out.

Every table is ordered from best to worst and is read-only for the life of
the process. Nothing in this module does I/O.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .models import CustodyType

# (inclusive lower bound in USD, points)
LIQUIDITY_BUCKETS: tuple[tuple[float, int], ...] = (
    (10_000_000, 25),
    (5_000_000, 22),
    (2_000_000, 19),
    (1_000_000, 16),
    (500_000, 12),
    (250_000, 8),
    (100_000, 5),
)
LIQUIDITY_FLOOR = 2

# (exclusive upper bound in percent, points)
HOLDER_BUCKETS: tuple[tuple[float, int], ...] = (
    (5.0, 15),
    (10.0, 13),
    (15.0, 11),
    (25.0, 8),
    (40.0, 5),
)
HOLDER_FLOOR = 2

VOLUME_BUCKETS: tuple[tuple[float, int], ...] = (
    (1_000_000, 10),
    (500_000, 8),
    (250_000, 6),
    (100_000, 4),
    (50_000, 2),
)

CONSISTENCY_BUCKETS: tuple[tuple[float, int], ...] = (
    (0.3, 5),
    (0.5, 4),
    (0.8, 3),
    (1.2, 2),
    (2.0, 1),
)

TRADING_MAX = 15

PEG_BUCKETS: tuple[tuple[float, int], ...] = (
    (0.25, 10),
    (0.5, 9),
    (1.0, 7),
    (2.0, 5),
    (3.0, 3),
)
PEG_FLOOR = 1
PEG_NEUTRAL = 5

# (inclusive upper bound in hours, points)
REDEMPTION_BUCKETS: tuple[tuple[float, int], ...] = (
    (1, 10),
    (6, 8),
    (24, 6),
    (72, 4),
)
REDEMPTION_FLOOR = 2

CUSTODY_DECENTRALIZED = 25
CUSTODY_TRUSTED = 20
CUSTODY_OTHER = 15

# (inclusive lower bound on total score, grade, label)
GRADE_TABLE: tuple[tuple[int, str, str], ...] = (
    (95, "A+", "Excellent"),
    (90, "A", "Excellent"),
    (85, "A-", "Excellent"),
    (80, "B+", "Good"),
    (75, "B", "Good"),
    (70, "B-", "Fair"),
    (65, "C+", "Fair"),
    (60, "C", "Adequate"),
)
GRADE_FLOOR = ("C-", "Caution")


def _at_least(value: float, buckets: Sequence[tuple[float, int]], floor: int) -> int:
    for bound, points in buckets:
        if value >= bound:
            return points
    return floor


def _below(value: float, buckets: Sequence[tuple[float, int]], floor: int) -> int:
    for bound, points in buckets:
        if value < bound:
            return points
    return floor


def custody_points(
    custody_type: CustodyType,
    custodian: str,
    trusted_custodians: Sequence[str],
) -> int:
    """Decentralized custody scores the maximum; trusted institutions score above other custodians."""
    if custody_type == CustodyType.DECENTRALIZED:
        return CUSTODY_DECENTRALIZED
    if custodian in trusted_custodians:
        return CUSTODY_TRUSTED
    return CUSTODY_OTHER


def redemption_points(latency_hours: float) -> int:
    for bound, points in REDEMPTION_BUCKETS:
        if latency_hours <= bound:
            return points
    return REDEMPTION_FLOOR


def liquidity_points(liquidity_usd: float) -> int:
    return _at_least(liquidity_usd, LIQUIDITY_BUCKETS, LIQUIDITY_FLOOR)


def concentration_pct(balances: Sequence[float]) -> float:
    """Largest balance as a percent of the sampled balances.

    This is a share of the sampled top-N supply, not of circulating supply.
    Returns 0.0 for an empty or all-zero sample.
    """
    total = sum(balances)
    if not balances or total <= 0:
        return 0.0
    return max(balances) / total * 100


def holder_points(concentration: float) -> int:
    return _below(concentration, HOLDER_BUCKETS, HOLDER_FLOOR)


def volume_points(volume_24h_usd: float) -> int:
    return _at_least(volume_24h_usd, VOLUME_BUCKETS, 0)


def coefficient_of_variation(samples: Sequence[float]) -> Optional[float]:
    """Population standard deviation over mean. None when the mean is not positive."""
    if not samples:
        return None
    mean = sum(samples) / len(samples)
    if mean <= 0:
        return None
    variance = sum((s - mean) ** 2 for s in samples) / len(samples)
    return math.sqrt(variance) / mean


def consistency_points(coefficient: Optional[float]) -> int:
    """Lower variation scores higher. An unmeasured coefficient scores nothing."""
    if coefficient is None:
        return 0
    return _below(coefficient, CONSISTENCY_BUCKETS, 0)


def trading_points(volume_24h_usd: float, coefficient: Optional[float]) -> int:
    return min(TRADING_MAX, volume_points(volume_24h_usd) + consistency_points(coefficient))


def price_deviation_pct(price: float, anchor_price: float) -> float:
    if anchor_price <= 0:
        raise ValueError(f"anchor price must be positive, got {anchor_price}")
    return abs(price - anchor_price) / anchor_price * 100


def peg_points(deviation_pct: float) -> int:
    return _below(deviation_pct, PEG_BUCKETS, PEG_FLOOR)


def grade_for(total_score: int) -> tuple[str, str]:
    """Map a 0-100 total to (grade, label)."""
    for bound, grade, label in GRADE_TABLE:
        if total_score >= bound:
            return grade, label
    return GRADE_FLOOR
