"""Nearest-rank decile estimates over a band's valid zone pixels."""

from __future__ import annotations

import numpy as np

from zonaldrill.stats.aggregate import valid_values


def decile_values(population: np.ndarray, decile_count: int) -> list[float]:
    """Return ``decile_count`` order statistics of a population.

    With ``k = decile_count + 1`` and ``step = N // k`` the i-th decile sits
    at rank ``(i + 1) * step``. When ``k`` divides ``N`` exactly the value is
    averaged with its upper neighbour. Populations smaller than ``k`` are
    padded by repeating their members cyclically, so every slot holds a
    value from the population.
    """
    if decile_count <= 0:
        return []
    buf = np.sort(np.asarray(population, dtype=np.float32), kind="stable")
    size = int(buf.size)
    if size == 0:
        return []
    k = decile_count + 1
    step = size // k
    if step > 0:
        exact = size % k == 0
        deciles = []
        for i in range(decile_count):
            rank = (i + 1) * step
            if exact:
                upper = min(rank + 1, size - 1)
                deciles.append(float((buf[rank] + buf[upper]) / np.float32(2.0)))
            else:
                deciles.append(float(buf[rank]))
        return deciles

    padding = [0] * size
    for i in range(decile_count):
        padding[i % size] += 1
    deciles = []
    for index, repeat in enumerate(padding):
        deciles.extend([float(buf[index])] * repeat)
    return deciles


def compute_deciles(
    values: np.ndarray,
    mask: np.ndarray,
    nodata: float | None,
    decile_count: int,
) -> list[float]:
    """Return deciles of the valid zone pixels; clip bounds do not apply."""
    return decile_values(valid_values(values, mask, nodata), decile_count)
