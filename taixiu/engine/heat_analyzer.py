"""
Heat Analyzer - short-window temperature of the High side.

Looks at the last 10 rounds of the window. Above 70% High the table is
"hot" and is expected to cool down (Low); below 30% it is "cold" and is
expected to warm up (High). In between there is no opinion.
"""

import sys
sys.path.insert(0, '.')
from config import (
    HIGH_LABEL, LOW_LABEL, WEIGHT_HEAT,
    HEAT_WINDOW, HEAT_MIN_WINDOW, HEAT_HOT_RATIO, HEAT_COLD_RATIO,
)


class HeatAnalyzer:
    """Expects a hot or cold High frequency over the last ten rounds to even out."""

    name = 'heat'
    weight = WEIGHT_HEAT

    def high_frequency(self, window):
        recent = window[-HEAT_WINDOW:]
        if len(recent) < HEAT_MIN_WINDOW:
            return None
        return sum(1 for r in recent if r['label'] == HIGH_LABEL) / len(recent)

    def predict(self, window, history=None):
        freq = self.high_frequency(window)
        if freq is None:
            return None
        if freq > HEAT_HOT_RATIO:
            return LOW_LABEL
        if freq < HEAT_COLD_RATIO:
            return HIGH_LABEL
        return None
