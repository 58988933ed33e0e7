"""
History Store - bounded rolling window of outcome records.

Keeps at most MAX_HISTORY records (FIFO eviction) together with two
aggregate counters that are maintained incrementally:
  - sum_distribution:          count of stored records per total (3-18)
  - dice_combination_counts:   count per sorted-dice key

The sum distribution is decremented when a record is evicted. The dice
combination counts are NOT: they keep counting every round ever appended,
so they drift above the stored window once eviction starts.
"""

import numpy as np
from collections import Counter, deque
from itertools import islice

import sys
sys.path.insert(0, '.')
from config import MAX_HISTORY, TOTAL_MAX

from taixiu.engine.outcome import build_record, combination_key


class HistoryStore:
    def __init__(self, max_size=MAX_HISTORY):
        self.max_size = max_size
        self.records = deque()
        self.sum_distribution = np.zeros(TOTAL_MAX + 1, dtype=np.int64)
        self.dice_combination_counts = Counter()

    def append(self, round_id, d1, d2, d3, observed_at=None):
        """Build a record, push it to the tail, evict the head if over capacity.

        Raises InvalidInput (before touching any state) on bad dice.
        """
        record = build_record(round_id, d1, d2, d3, observed_at)

        self.records.append(record)
        self.sum_distribution[record['total']] += 1

        if len(self.records) > self.max_size:
            evicted = self.records.popleft()
            self.sum_distribution[evicted['total']] -= 1

        self.dice_combination_counts[combination_key(record['dice'])] += 1
        return record

    def window(self, n):
        """Last n records in chronological order (fewer if history is shorter)."""
        if n <= 0:
            return []
        if n >= len(self.records):
            return list(self.records)
        # walk back from the tail only
        tail = list(islice(reversed(self.records), n))
        tail.reverse()
        return tail

    def size(self):
        return len(self.records)

    def all(self):
        return list(self.records)

    def last(self):
        return self.records[-1] if self.records else None

    def labels(self):
        return [r['label'] for r in self.records]

    def __len__(self):
        return len(self.records)
