import pytest

from ewcount.data.bars import Candle
from ewcount.ew.core.model import Pivot, PivotType

T0 = 1_700_000_000
DAY = 86_400

# Bar-by-bar closes of a clean bullish impulse (pivots at bars 2, 6, 8, 14, 17, 21)
# with a 122 -> 120 wiggle inside wave 3 that only the 1% filter picks up.
IMPULSE_PATH = [
    110, 105, 100, 105, 110, 115, 120, 115, 110, 116, 122,
    120, 130, 140, 150, 145, 140, 135, 140, 145, 150, 155,
]
IMPULSE_VOLUMES = {14: 1000.0, 21: 500.0}


def flat_candles(prices, volumes=None, t0=T0, step=DAY):
    vols = volumes or {}
    return [
        Candle(time=t0 + i * step, open=p, high=p, low=p, close=p, volume=vols.get(i, 100.0))
        for i, p in enumerate(prices)
    ]


def pivots_from(prices, indices=None, volumes=None):
    """Alternating pivots; the first one is a LOW when the second price is higher."""
    idx = indices or [i * 2 for i in range(len(prices))]
    vols = volumes or [0.0] * len(prices)
    kind = PivotType.LOW if len(prices) < 2 or prices[1] > prices[0] else PivotType.HIGH
    out = []
    for p, i, v in zip(prices, idx, vols):
        out.append(Pivot(index=i, price=float(p), type=kind, time=T0 + i * DAY, volume=v))
        kind = kind.opposite
    return out


@pytest.fixture
def impulse_candles():
    return flat_candles(IMPULSE_PATH, IMPULSE_VOLUMES)
