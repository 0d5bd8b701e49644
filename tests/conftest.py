from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
for entry in (SRC_ROOT, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

import pytest  # noqa: E402

from zonaldrill.request import ENV_BAND_STRIDES  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_stride_default(monkeypatch) -> None:
    """Prevent a local stride override from bleeding into tests."""
    monkeypatch.delenv(ENV_BAND_STRIDES, raising=False)
