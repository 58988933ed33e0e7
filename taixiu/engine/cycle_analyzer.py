"""
Cycle Analyzer - short repeating label cycles (length 2, 3 and 4).

For each cycle length L the last L labels are the target. The L records
before them form the compared half; every place in that half where the
target occurs and is followed by another record inside the half votes
for its follower. The candidate length with the highest agreement wins.

With a compared half of exactly L records the target can only sit at the
very start of the half and its follower falls outside of it, so in
practice the fallback (reverse the last round) decides. The scan is kept
general so the half can be widened without touching the matching code.

Worst case O(window²) label comparisons; the window is 20 rounds.
"""

import sys
sys.path.insert(0, '.')
from config import HIGH_LABEL, LOW_LABEL, WEIGHT_CYCLE, CYCLE_MIN_WINDOW, CYCLE_LENGTHS

from taixiu.engine.outcome import opposite


def extract_cycle(labels, length):
    """Match the last `length` labels against the half before them.

    Returns dict(next, confidence, occurrences) or None when nothing matched.
    """
    if len(labels) < length * 2:
        return None

    target = labels[-length:]
    half = labels[-length * 2:-length]

    followers = []
    for i in range(len(half) - length + 1):
        if half[i:i + length] == target and i + length < len(half):
            followers.append(half[i + length])

    if not followers:
        return None

    high = followers.count(HIGH_LABEL)
    matches = len(followers)
    return {
        'next': HIGH_LABEL if high > matches / 2 else LOW_LABEL,
        'confidence': max(high, matches - high) / matches * 100,
        'occurrences': matches,
    }


class CycleAnalyzer:
    """Predicts from repeating label cycles of length 2-4, reversing the last label otherwise."""

    name = 'cycle'
    weight = WEIGHT_CYCLE

    def find_cycles(self, window):
        labels = [r['label'] for r in window]
        cycles = []
        for length in CYCLE_LENGTHS:
            if len(labels) >= length * 2:
                found = extract_cycle(labels, length)
                if found:
                    found['length'] = length
                    cycles.append(found)
        return cycles

    def predict(self, window, history=None):
        if len(window) < CYCLE_MIN_WINDOW:
            return None

        cycles = self.find_cycles(window)
        if cycles:
            best = cycles[0]
            for c in cycles[1:]:
                if c['confidence'] > best['confidence']:
                    best = c
            return best['next']

        return opposite(window[-1]['label'])
