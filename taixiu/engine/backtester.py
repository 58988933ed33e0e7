"""
Backtester - replay history and score the engine against what happened.

simulate(sample_size):
  Take the most recent sample_size + 10 rounds. For every round from the
  11th on, build a FRESH engine fed only with the rounds before it, ask it
  for a prediction and compare with the actual label. Summaries:
    - overall accuracy
    - win rate per confidence band (60-70, 71-80, 81-90, 91-95)
    - confidence categories (high ≥80, medium ≥65, low <65)
    - streaks recomputed from the simulated sequence (overwrites stats)

  Each step rebuilds an engine from scratch, so a run costs
  O(sample_size × history). With the 500-round cap that is a few hundred
  thousand record operations per run.

compare_strategies():
  Score every analyzer on its own over a sliding 20-round window of the
  full history (abstain → coin flip).
"""

import sys
sys.path.insert(0, '.')
from config import (
    BACKTEST_WARMUP, BACKTEST_DISPLAY_STEPS, CONFIDENCE_BANDS,
    CONFIDENCE_CATEGORIES, CONFIDENCE_FALLBACK, STRATEGY_WINDOW,
    RECOMMEND_HIGH_ACCURACY, RECOMMEND_MEDIUM_ACCURACY,
)

from taixiu.engine.outcome import InsufficientData, InvalidInput
from taixiu.engine.history_store import HistoryStore
from taixiu.engine.combiner import random_label


def _pct(part, whole):
    return round(part / whole * 100, 2) if whole else 0.0


def confidence_band(confidence):
    conf = confidence if confidence else CONFIDENCE_FALLBACK
    for lower, label in CONFIDENCE_BANDS:
        if conf >= lower:
            return label
    return CONFIDENCE_BANDS[-1][1]


def confidence_category(confidence):
    conf = confidence if confidence else CONFIDENCE_FALLBACK
    for lower, name in CONFIDENCE_CATEGORIES:
        if conf >= lower:
            return name
    return CONFIDENCE_CATEGORIES[-1][1]


def win_rate_by_band(steps):
    """Accuracy per confidence band, non-empty bands only."""
    buckets = {label: [0, 0] for _, label in reversed(CONFIDENCE_BANDS)}
    for s in steps:
        b = buckets[confidence_band(s['confidence'])]
        b[0] += 1
        if s['correct']:
            b[1] += 1
    return {label: _pct(correct, total)
            for label, (total, correct) in buckets.items() if total > 0}


def confidence_distribution(steps):
    """Accuracy and sample share per coarse confidence category."""
    buckets = {name: [0, 0] for _, name in CONFIDENCE_CATEGORIES}
    for s in steps:
        b = buckets[confidence_category(s['confidence'])]
        b[0] += 1
        if s['correct']:
            b[1] += 1
    result = {}
    for name, (total, correct) in buckets.items():
        if total > 0:
            result[name] = {
                'total': total,
                'accuracy': _pct(correct, total),
                'percentage': _pct(total, len(steps)),
            }
    return result


def get_recommendation(report):
    """Plain-language verdict on a backtest report."""
    if isinstance(report, InsufficientData) or not report.get('accuracy'):
        return {'level': 'low', 'message': 'Need more data'}

    accuracy = report['accuracy']
    if accuracy >= RECOMMEND_HIGH_ACCURACY:
        return {
            'level': 'high',
            'message': 'High backtest accuracy, predictions track recent play',
            'action': 'Follow the prediction',
            'confidence': 'very high',
        }
    if accuracy >= RECOMMEND_MEDIUM_ACCURACY:
        return {
            'level': 'medium',
            'message': 'Average backtest accuracy, be careful',
            'action': 'Combine with other analysis',
            'confidence': 'medium',
        }
    return {
        'level': 'low',
        'message': 'Low backtest accuracy, do not rely on predictions',
        'action': 'Reference only, avoid large stakes',
        'confidence': 'low',
    }


class Backtester:
    """Replays stored history through fresh engines to score the predictor."""

    def __init__(self, engine):
        self.engine = engine

    def simulate(self, sample_size):
        if isinstance(sample_size, bool) or not isinstance(sample_size, int) or sample_size < 1:
            raise InvalidInput(f'sample_size must be a positive integer, got {sample_size!r}')

        required = sample_size + BACKTEST_WARMUP
        available = self.engine.history.size()
        if available < required:
            return InsufficientData(required, available,
                                    f'Need at least {required} rounds to simulate')

        test_data = self.engine.history.window(required)
        steps = []

        for i in range(BACKTEST_WARMUP, len(test_data)):
            temp_engine = self.engine.spawn()
            for rec in test_data[:i]:
                d1, d2, d3 = rec['dice']
                temp_engine.record_outcome(rec['round_id'], d1, d2, d3,
                                           observed_at=rec['observed_at'])

            prediction = temp_engine.predict_next()
            actual = test_data[i]
            steps.append({
                'round_id': actual['round_id'],
                'predicted': prediction['prediction'],
                'actual': actual['label'],
                'correct': prediction['prediction'] == actual['label'],
                'confidence': prediction['confidence'],
                'observed_at': actual['observed_at'].isoformat(),
            })

        outcomes = [s['correct'] for s in steps]
        correct = sum(1 for o in outcomes if o)
        accuracy = _pct(correct, len(steps))

        stats = self.engine.stats
        stats.apply_backtest(outcomes, accuracy)

        return {
            'simulation_period': f'last {sample_size} rounds',
            'sample_size': sample_size,
            'total_tests': len(steps),
            'correct_predictions': correct,
            'wrong_predictions': len(steps) - correct,
            'accuracy': accuracy,
            'win_rate': win_rate_by_band(steps),
            'confidence_distribution': confidence_distribution(steps),
            'method_performance': stats.regenerate_method_performance(self.engine.rng),
            'streaks': dict(stats.streaks),
            'predictions': steps[-BACKTEST_DISPLAY_STEPS:],
        }

    def score_strategy(self, analyzer, records):
        """Single-analyzer accuracy over a sliding window of `records`."""
        if len(records) < STRATEGY_WINDOW:
            return {'total': 0, 'correct': 0, 'accuracy': 0.0}

        store = HistoryStore(max_size=len(records))
        for rec in records[:STRATEGY_WINDOW]:
            store.append(rec['round_id'], *rec['dice'], observed_at=rec['observed_at'])

        correct = total = 0
        for i in range(STRATEGY_WINDOW, len(records)):
            vote = analyzer.predict(store.window(STRATEGY_WINDOW), store)
            if vote is None:
                vote = random_label(self.engine.rng)
            if vote == records[i]['label']:
                correct += 1
            total += 1
            rec = records[i]
            store.append(rec['round_id'], *rec['dice'], observed_at=rec['observed_at'])

        return {'total': total, 'correct': correct, 'accuracy': _pct(correct, total)}

    def compare_strategies(self):
        records = self.engine.history.all()
        results = []
        for analyzer in self.engine.analyzers:
            score = self.score_strategy(analyzer, records)
            results.append({'strategy': analyzer.name, 'weight': analyzer.weight, **score})

        best = results[0]
        for r in results[1:]:
            if r['accuracy'] > best['accuracy']:
                best = r

        return {
            'strategy_comparison': results,
            'best_strategy': best,
            'combined_strategy': {
                'name': 'weighted_combination',
                'accuracy': self.engine.stats.accuracy,
            },
        }
