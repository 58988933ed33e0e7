"""
Prediction Stats - running accuracy and win/lose streak accounting.

Two independent writers update this object and they are NOT reconciled:
  - the live path (record_live_result) moves the streak counters by one
    step each time a cached prediction is compared with a resolved round;
  - the backtester (apply_backtest) adds the simulated totals, overwrites
    the accuracy and REPLACES the streak counters with the ones computed
    from the simulated sequence.
A backtest therefore wipes whatever live streak was in progress, and the
totals mix live-free simulated counts from every backtest run. Callers
that need a clean live streak should read it before simulating.

method_performance is a placeholder: its numbers are random, not measured.
"""

import sys
sys.path.insert(0, '.')
from config import ANALYZER_WEIGHTS


def compute_streaks(outcomes):
    """Streak counters from an ordered sequence of correct/incorrect flags."""
    current_win = current_lose = max_win = max_lose = 0
    for correct in outcomes:
        if correct:
            current_win += 1
            current_lose = 0
            max_win = max(max_win, current_win)
        else:
            current_lose += 1
            current_win = 0
            max_lose = max(max_lose, current_lose)
    return {
        'current_win_streak': current_win,
        'max_win_streak': max_win,
        'current_lose_streak': current_lose,
        'max_lose_streak': max_lose,
    }


class PredictionStats:
    def __init__(self):
        self.total_predictions = 0
        self.correct_predictions = 0
        self.wrong_predictions = 0
        self.accuracy = 0.0
        self.streaks = compute_streaks([])
        self.method_performance = {
            name: {'usage': 0, 'accuracy': 0.0, 'placeholder': True}
            for name in ANALYZER_WEIGHTS
        }

    def record_live_result(self, correct):
        """One resolved live round: step the streak counters."""
        s = self.streaks
        if correct:
            s['current_win_streak'] += 1
            s['current_lose_streak'] = 0
            s['max_win_streak'] = max(s['max_win_streak'], s['current_win_streak'])
        else:
            s['current_lose_streak'] += 1
            s['current_win_streak'] = 0
            s['max_lose_streak'] = max(s['max_lose_streak'], s['current_lose_streak'])

    def apply_backtest(self, outcomes, accuracy):
        """Fold a backtest run in: add totals, overwrite accuracy and streaks."""
        total = len(outcomes)
        correct = sum(1 for o in outcomes if o)
        self.total_predictions += total
        self.correct_predictions += correct
        self.wrong_predictions += total - correct
        self.accuracy = accuracy
        self.streaks = compute_streaks(outcomes)

    def regenerate_method_performance(self, rng):
        """Fill the per-method table with random PLACEHOLDER values.

        Per-analyzer hit tracking is not implemented; these numbers only
        keep the report shape stable and must not be read as measurements.
        """
        self.method_performance = {
            name: {
                'usage': int(rng.integers(10, 30)),
                'accuracy': round(float(rng.uniform(60, 90)), 2),
                'placeholder': True,
            }
            for name in ANALYZER_WEIGHTS
        }
        return self.method_performance

    def to_dict(self):
        return {
            'total_predictions': self.total_predictions,
            'correct_predictions': self.correct_predictions,
            'wrong_predictions': self.wrong_predictions,
            'accuracy': self.accuracy,
            'streaks': dict(self.streaks),
            'method_performance': {k: dict(v) for k, v in self.method_performance.items()},
        }
