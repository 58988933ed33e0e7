"""
Sequence Detector - records runs of three identical labels.

Every time a round is appended, the last three records are inspected.
If they share a label, a run anchored at the first of the three is
stored under that label. Only the most recent runs are retained.
"""

from collections import deque
from datetime import datetime

import sys
sys.path.insert(0, '.')
from config import LABELS, SEQUENCE_LENGTH, MAX_SEQUENCES_PER_LABEL


class SequenceDetector:
    def __init__(self, max_runs=MAX_SEQUENCES_PER_LABEL):
        self.max_runs = max_runs
        self.runs = {label: deque(maxlen=max_runs) for label in LABELS}

    def on_append(self, history):
        """Check the tail of the history store; returns the new run or None."""
        last = history.window(SEQUENCE_LENGTH)
        if len(last) < SEQUENCE_LENGTH:
            return None

        label = last[0]['label']
        if any(r['label'] != label for r in last):
            return None

        run = {
            'label': label,
            'start_round_id': last[0]['round_id'],
            'length': SEQUENCE_LENGTH,
            'detected_at': datetime.now(),
        }
        # deque(maxlen) drops the oldest run
        self.runs[label].append(run)
        return run

    def get_runs(self, label, limit=None):
        runs = list(self.runs[label])
        if limit is not None:
            runs = runs[-limit:]
        return runs

    def get_summary(self, limit=None):
        return {
            label: [
                {
                    'start_round_id': r['start_round_id'],
                    'length': r['length'],
                    'detected_at': r['detected_at'].isoformat(),
                }
                for r in self.get_runs(label, limit)
            ]
            for label in LABELS
        }
