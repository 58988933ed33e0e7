"""
Distribution Analyzer - mean reversion on the window's average total.

Three fair dice average 10.5. A window running above that votes Low,
below votes High, exactly on it abstains.
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import HIGH_LABEL, LOW_LABEL, WEIGHT_DISTRIBUTION, MIDPOINT_TOTAL


class DistributionAnalyzer:
    """Expects the mean total of the window to revert towards 10.5."""

    name = 'distribution'
    weight = WEIGHT_DISTRIBUTION

    def mean_total(self, window):
        if not window:
            return None
        return float(np.mean([r['total'] for r in window]))

    def predict(self, window, history=None):
        mean = self.mean_total(window)
        if mean is None:
            return None
        if mean > MIDPOINT_TOTAL:
            return LOW_LABEL
        if mean < MIDPOINT_TOTAL:
            return HIGH_LABEL
        return None
