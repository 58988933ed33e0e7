"""
Dice Pattern Analyzer - "what happened last time this roll shape came up".

Takes the pattern key of the latest round (sorted-dice fingerprint, so
3-3-4 and 4-3-3 are the same shape), finds every earlier round in the
whole history with the same key, and looks at the round that came right
after each of them. The majority label among those followers is the vote.
"""

import sys
sys.path.insert(0, '.')
from config import HIGH_LABEL, LOW_LABEL, WEIGHT_PATTERN, PATTERN_MIN_WINDOW


class DicePatternAnalyzer:
    """Predicts from what followed earlier rolls with the same dice shape."""

    name = 'pattern'
    weight = WEIGHT_PATTERN

    def get_followers(self, history):
        """Labels of the rounds that followed earlier occurrences of the latest shape."""
        records = history.all()
        if not records:
            return []

        current = records[-1]
        followers = []
        # The latest round is at the tail and has no follower yet
        for idx in range(len(records) - 1):
            rec = records[idx]
            if rec['pattern_key'] != current['pattern_key']:
                continue
            if rec['round_id'] is not None and rec['round_id'] == current['round_id']:
                continue
            followers.append(records[idx + 1]['label'])
        return followers

    def predict(self, window, history=None):
        if len(window) < PATTERN_MIN_WINDOW or history is None:
            return None

        followers = self.get_followers(history)
        if not followers:
            return None

        high = followers.count(HIGH_LABEL)
        low = followers.count(LOW_LABEL)
        return HIGH_LABEL if high > low else LOW_LABEL
