from __future__ import annotations

import numpy as np
import pytest

from zonaldrill.errors import UnsupportedFormat
from zonaldrill.perf import MetricsRecorder
from zonaldrill.raster.models import PixelWindow
from zonaldrill.stats.sampler import (
    StrideGroup,
    coerce_band_strides,
    read_group,
    stride_groups,
)


class FakeSource:
    def __init__(self) -> None:
        self.calls: list[tuple[PixelWindow, tuple[int, ...]]] = []

    def read_window(self, window: PixelWindow, bands) -> np.ndarray:
        self.calls.append((window, tuple(bands)))
        return np.zeros((len(bands), window.count_y, window.count_x), dtype=np.float32)


def test_stride_groups_partition_in_order() -> None:
    groups = list(stride_groups([3, 1, 7, 9, 2, 8, 4], 3))
    assert [group.bands for group in groups] == [(3, 1, 7), (9, 2, 8), (4,)]
    assert [group.sampled for group in groups] == [(3, 7), (9, 8), (4,)]


def test_stride_of_one_reads_every_band() -> None:
    groups = list(stride_groups([1, 2, 3], 1))
    assert [group.sampled for group in groups] == [(1,), (2,), (3,)]


@pytest.mark.parametrize("value, expected", [(None, 1), (0, 1), (-4, 1), (1, 1), (5, 5)])
def test_coerce_band_strides(value, expected) -> None:
    assert coerce_band_strides(value) == expected


def test_non_positive_strides_fall_back_to_single_bands() -> None:
    assert [group.bands for group in stride_groups([1, 2], 0)] == [(1,), (2,)]


def test_two_band_group_reads_both_ends() -> None:
    assert StrideGroup((4, 5)).sampled == (4, 5)
    assert StrideGroup((4, 5)).span == 2


def test_read_group_accounts_native_bytes() -> None:
    source = FakeSource()
    window = PixelWindow(1, 2, 3, 4)
    recorder = MetricsRecorder()

    data = read_group(source, window, StrideGroup((1, 2, 3)), 2, recorder)

    assert data.shape == (2, 4, 3)
    assert source.calls == [(window, (1, 3))]
    assert recorder.bytes_read == 2 * 12 * 2


def test_read_group_rejects_unknown_sample_size() -> None:
    with pytest.raises(UnsupportedFormat):
        read_group(FakeSource(), PixelWindow(0, 0, 1, 1), StrideGroup((1,)), 0, MetricsRecorder())
