"""
Liquidity (support / resistance) levels

Algorithm:
1. Local extrema: a high is a peak if it is the max high of the inclusive
   window [i - window, i + window]; a low is a trough if it is the min low.
   Only positions where the whole window fits are considered.
2. Clustering: sort ascending, walk once, open a new cluster when a value's
   relative distance from the running cluster mean exceeds tolerance.
3. Significance: keep clusters with at least min_touches members.
4. Level = mean of the cluster.

Clustering is a single greedy pass; clusters never re-merge once closed.
"""

import numpy as np

from core.models.market_data import Candle


def find_peaks_and_troughs(candles: list[Candle], window: int) -> tuple[list[float], list[float]]:
    """
    Local extrema of high/low

    Returns:
        (peaks, troughs), both sorted ascending
    """
    highs = np.array([c.high for c in candles], dtype=float)
    lows = np.array([c.low for c in candles], dtype=float)
    count = len(candles)

    peaks: list[float] = []
    troughs: list[float] = []
    for i in range(window, count - window):
        left, right = i - window, i + window + 1
        if highs[left:right].max() == highs[i]:
            peaks.append(float(highs[i]))
        if lows[left:right].min() == lows[i]:
            troughs.append(float(lows[i]))

    peaks.sort()
    troughs.sort()
    return peaks, troughs


def cluster_levels(prices: list[float], tolerance: float, min_touches: int) -> list[float]:
    """
    Greedy left-to-right clustering of ascending prices

    Args:
        prices: Extrema sorted ascending
        tolerance: Max relative distance from the running cluster mean (0.01 = 1%)
        min_touches: Min cluster size for a level to count

    Returns:
        Mean of every qualifying cluster, ascending
    """
    clusters: list[list[float]] = []
    for price in prices:
        if not clusters:
            clusters.append([price])
            continue

        current = clusters[-1]
        mean = sum(current) / len(current)
        if mean != 0 and abs(price - mean) / mean <= tolerance:
            current.append(price)
        else:
            clusters.append([price])

    return [sum(c) / len(c) for c in clusters if len(c) >= min_touches]


def compute_liquidity_levels(
    candles: list[Candle], window: int, tolerance: float, min_touches: int
) -> tuple[list[float], list[float]]:
    """
    Support and resistance levels

    Args:
        candles: Ascending candle series
        window: Half-width of the extrema window (e.g., 5)
        tolerance: Relative clustering tolerance (e.g., 0.01 for 1%)
        min_touches: Touches needed for a level (e.g., 3)

    Returns:
        (supports from troughs, resistances from peaks)

    Example:
        >>> supports, resistances = compute_liquidity_levels(candles, 5, 0.01, 3)
    """
    peaks, troughs = find_peaks_and_troughs(candles, window)
    supports = cluster_levels(troughs, tolerance, min_touches)
    resistances = cluster_levels(peaks, tolerance, min_touches)
    return supports, resistances
