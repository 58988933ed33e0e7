"""
Trend Analyzer - reversal bets on lopsided windows and short streaks.

  1. One side above 60% of the window → predict the other side.
  2. The last 5 rounds end in 3 identical labels → predict the reversal.
  3. Otherwise follow the window majority (a tie goes to Low).
"""

import sys
sys.path.insert(0, '.')
from config import (
    HIGH_LABEL, LOW_LABEL, WEIGHT_TREND,
    TREND_DOMINANCE_RATIO, TREND_STREAK_LOOKBACK, TREND_STREAK_LENGTH,
)

from taixiu.engine.outcome import opposite


def ends_with_run(labels, label, count):
    """True if the last `count` labels all equal `label`."""
    if len(labels) < count:
        return False
    return all(x == label for x in labels[-count:])


class TrendAnalyzer:
    """Bets against a dominant label or a trailing run of three."""

    name = 'trend'
    weight = WEIGHT_TREND

    def predict(self, window, history=None):
        if not window:
            return None

        labels = [r['label'] for r in window]
        n = len(labels)
        high = labels.count(HIGH_LABEL)
        low = labels.count(LOW_LABEL)

        if high / n > TREND_DOMINANCE_RATIO:
            return LOW_LABEL
        if low / n > TREND_DOMINANCE_RATIO:
            return HIGH_LABEL

        last = labels[-TREND_STREAK_LOOKBACK:]
        for label in (HIGH_LABEL, LOW_LABEL):
            if ends_with_run(last, label, TREND_STREAK_LENGTH):
                return opposite(label)

        return HIGH_LABEL if high > low else LOW_LABEL
