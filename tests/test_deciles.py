from __future__ import annotations

import numpy as np
import pytest

from zonaldrill.stats.deciles import compute_deciles, decile_values

FULL_MASK = np.full((2, 2), 255, dtype=np.uint8)


def test_single_decile_averages_at_exact_split() -> None:
    values = np.array([[4.0, 2.0], [1.0, 3.0]], dtype=np.float32)
    assert compute_deciles(values, FULL_MASK, -999.0, 1) == [3.5]


def test_nearest_rank_when_split_is_not_exact() -> None:
    population = np.arange(10, dtype=np.float32)
    # N=10, k=4, step=2 -> ranks 2, 4, 6
    assert decile_values(population, 3) == [2.0, 4.0, 6.0]


def test_exact_split_with_unit_step_stays_in_bounds() -> None:
    # N=2, k=2, step=1: the upper neighbour of rank 1 is clamped to the last value.
    assert decile_values(np.array([5.0, 7.0]), 1) == [7.0]


def test_padding_repeats_population_members() -> None:
    deciles = decile_values(np.array([20.0, 10.0]), 5)
    assert len(deciles) == 5
    assert set(deciles) <= {10.0, 20.0}
    assert deciles == sorted(deciles)
    assert deciles == [10.0, 10.0, 10.0, 20.0, 20.0]


def test_deciles_are_non_decreasing() -> None:
    rng = np.random.default_rng(7)
    population = rng.normal(size=257).astype(np.float32)
    for count in (1, 4, 9, 19):
        deciles = decile_values(population, count)
        assert len(deciles) == count
        assert all(a <= b for a, b in zip(deciles, deciles[1:]))


def test_deciles_ignore_clip_but_respect_mask_and_nodata() -> None:
    values = np.array([[1.0, 2.0], [-999.0, 100.0]], dtype=np.float32)
    mask = np.array([[255, 255], [255, 0]], dtype=np.uint8)
    # population is [1, 2]: N=2, k=2, step=1, exact split
    assert compute_deciles(values, mask, -999.0, 1) == [2.0]


def test_empty_population_or_zero_count() -> None:
    assert decile_values(np.array([], dtype=np.float32), 3) == []
    assert decile_values(np.array([1.0, 2.0]), 0) == []


def test_nine_deciles_of_a_hundred_values() -> None:
    population = np.arange(1, 101, dtype=np.float32)
    deciles = decile_values(population, 9)
    # N=100, k=10, step=10, exact -> mean of buf[10i] and buf[10i+1]
    assert deciles[0] == pytest.approx(11.5)
    assert deciles[-1] == pytest.approx(91.5)
