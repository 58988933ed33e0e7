"""
Stats Reporter - read-only aggregation over the history store.

Per-label counts, percentages, average totals and longest runs; the most
frequent dice combinations; the non-empty sum distribution; and a binomial
balance test of High vs Low against a fair 50/50 split (for three fair
dice P(total > 10) is exactly 108/216).
"""

from scipy import stats as scipy_stats

import sys
sys.path.insert(0, '.')
from config import (
    HIGH_LABEL, LOW_LABEL, TIE_LABEL, HIGH_THRESHOLD,
    TOTAL_MIN, TOTAL_MAX, TOP_COMBINATIONS,
)


def _pct(part, whole):
    return round(part / whole * 100, 2) if whole else 0.0


def longest_run(records, label):
    best = current = 0
    for r in records:
        if r['label'] == label:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def sum_type(total):
    if total > HIGH_THRESHOLD:
        return HIGH_LABEL
    if total < HIGH_THRESHOLD:
        return LOW_LABEL
    return TIE_LABEL


class StatsReporter:
    def __init__(self, history):
        self.history = history

    def label_summary(self, records, label):
        matching = [r for r in records if r['label'] == label]
        count = len(matching)
        return {
            'count': count,
            'percentage': _pct(count, len(records)),
            'average_total': round(sum(r['total'] for r in matching) / count, 2) if count else 0,
            'longest_streak': longest_run(records, label),
        }

    def sum_distribution(self):
        """Non-zero totals with count, share and High/Low/Tie type, most common first."""
        size = self.history.size()
        rows = []
        for total in range(TOTAL_MIN, TOTAL_MAX + 1):
            count = int(self.history.sum_distribution[total])
            if count > 0:
                rows.append({
                    'total': total,
                    'count': count,
                    'percentage': _pct(count, size),
                    'type': sum_type(total),
                })
        rows.sort(key=lambda x: x['count'], reverse=True)
        return rows

    def top_combinations(self, top_n=TOP_COMBINATIONS):
        return [[key, count] for key, count in
                self.history.dice_combination_counts.most_common(top_n)]

    def balance_test(self, records):
        """Two-sided binomial test of the High count against p = 0.5."""
        n = len(records)
        high = sum(1 for r in records if r['label'] == HIGH_LABEL)
        if n < 10:
            return {'high': high, 'n': n, 'p_value': 1.0, 'significant': False}

        p_value = float(scipy_stats.binomtest(high, n, 0.5).pvalue)
        return {
            'high': high,
            'n': n,
            'p_value': round(p_value, 4),
            'significant': p_value < 0.05,
        }

    def get_statistics(self, prediction_stats=None):
        records = self.history.all()
        report = {
            'total_rounds': len(records),
            'high': self.label_summary(records, HIGH_LABEL),
            'low': self.label_summary(records, LOW_LABEL),
            'sum_distribution': self.sum_distribution(),
            'dice_patterns': self.top_combinations(),
            'balance_test': self.balance_test(records),
        }
        if prediction_stats is not None:
            report['prediction_stats'] = prediction_stats.to_dict()
        return report
