"""
Prediction Engine - Engine context combining history, analyzers and stats.

One instance owns:
  - HistoryStore (bounded round history + aggregate counters)
  - SequenceDetector (three-in-a-row runs)
  - the five signal analyzers and the weighted combiner
  - PredictionStats (live streaks + backtest totals)
  - the cached prediction for the round in progress and the live round log

Public operations:
  record_outcome(round_id, d1, d2, d3)  → stored record (InvalidInput on bad dice)
  predict_next()                        → prediction dict, never fails
  get_statistics()                      → read-only statistics
  simulate(sample_size)                 → backtest report or InsufficientData
                                          (SIDE EFFECT: rewrites stats streaks)

All public operations take the engine lock, so a feed thread and request
handlers never interleave updates to the history or the stats.
"""

import threading
from collections import deque
from datetime import datetime

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    MAX_HISTORY, ANALYSIS_WINDOW, MIN_HISTORY_FOR_PREDICTION,
    RANDOM_PERTURBATION, ROUND_LOG_SIZE,
)

from taixiu.engine.outcome import record_to_dict
from taixiu.engine.history_store import HistoryStore
from taixiu.engine.sequence_detector import SequenceDetector
from taixiu.engine.trend_analyzer import TrendAnalyzer
from taixiu.engine.cycle_analyzer import CycleAnalyzer
from taixiu.engine.dice_pattern_analyzer import DicePatternAnalyzer
from taixiu.engine.distribution_analyzer import DistributionAnalyzer
from taixiu.engine.heat_analyzer import HeatAnalyzer
from taixiu.engine.combiner import PredictionCombiner, random_prediction
from taixiu.engine.prediction_stats import PredictionStats
from taixiu.engine.backtester import Backtester
from taixiu.engine.stats_reporter import StatsReporter
from taixiu.engine.pattern_reporter import PatternReporter


class PredictionEngine:
    """Owns the round history, the analyzers and the prediction stats behind one lock."""

    def __init__(self, rng=None, perturbation=RANDOM_PERTURBATION, max_history=MAX_HISTORY):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.perturbation = perturbation
        self.max_history = max_history

        self.history = HistoryStore(max_size=max_history)
        self.sequences = SequenceDetector()
        self.analyzers = [
            TrendAnalyzer(),
            CycleAnalyzer(),
            DicePatternAnalyzer(),
            DistributionAnalyzer(),
            HeatAnalyzer(),
        ]
        self.combiner = PredictionCombiner(rng=self.rng, perturbation=perturbation)
        self.stats = PredictionStats()
        self.stats_reporter = StatsReporter(self.history)
        self.pattern_reporter = PatternReporter(self.history, self.sequences, self.stats_reporter)

        # Live round tracking
        self.current_round_id = None
        self.last_prediction = None
        self.last_result = None
        self.round_log = deque(maxlen=ROUND_LOG_SIZE)

        self._lock = threading.RLock()

    def spawn(self):
        """Fresh engine with the same randomness settings and no history."""
        return PredictionEngine(rng=self.rng, perturbation=self.perturbation,
                                max_history=self.max_history)

    # ─── Core operations ────────────────────────────────────────────────

    def record_outcome(self, round_id, d1, d2, d3, observed_at=None):
        """Store one resolved round and update run detection."""
        with self._lock:
            record = self.history.append(round_id, d1, d2, d3, observed_at)
            self.sequences.on_append(self.history)
            return record

    def collect_votes(self):
        """Raw vote of every analyzer on the current window (no randomness)."""
        window = self.history.window(ANALYSIS_WINDOW)
        return [
            {
                'method': analyzer.name,
                'prediction': analyzer.predict(window, self.history),
                'weight': analyzer.weight,
            }
            for analyzer in self.analyzers
        ]

    def predict_next(self):
        """Prediction for the next round.

        Fewer than 10 rounds of history: coin flip, analyzers are skipped.
        """
        with self._lock:
            if self.history.size() < MIN_HISTORY_FOR_PREDICTION:
                return random_prediction(self.rng)
            return self.combiner.combine(self.collect_votes())

    def get_statistics(self):
        with self._lock:
            return self.stats_reporter.get_statistics(self.stats)

    def simulate(self, sample_size):
        """Backtest the last `sample_size` rounds.

        Returns InsufficientData when fewer than sample_size + 10 rounds are
        stored. NOTE: a successful run adds to the stats totals and replaces
        the streak counters (live streaks included) with the simulated ones.
        """
        with self._lock:
            return Backtester(self).simulate(sample_size)

    def compare_strategies(self):
        with self._lock:
            return Backtester(self).compare_strategies()

    def get_pattern_report(self):
        with self._lock:
            return self.pattern_reporter.get_report()

    # ─── Live round lifecycle ───────────────────────────────────────────

    def start_round(self, round_id):
        """A new round opened: predict it and cache the prediction."""
        with self._lock:
            self.current_round_id = round_id
            prediction = self.predict_next()
            prediction['round_id'] = round_id
            self.last_prediction = prediction
            return prediction

    def resolve_round(self, round_id, d1, d2, d3):
        """A round resolved: store it and score the cached prediction, if any."""
        with self._lock:
            if round_id is None:
                round_id = self.current_round_id
            record = self.record_outcome(round_id, d1, d2, d3)

            accuracy = None
            if self.last_prediction is not None:
                correct = self.last_prediction['prediction'] == record['label']
                accuracy = {
                    'previous_prediction': self.last_prediction['prediction'],
                    'actual_result': record['label'],
                    'correct': correct,
                    'confidence': self.last_prediction['confidence'],
                }
                self.stats.record_live_result(correct)

            entry = record_to_dict(record)
            entry['prediction_accuracy'] = accuracy
            self.round_log.append(entry)

            self.last_result = entry
            self.last_prediction = None
            self.current_round_id = None
            return entry

    def get_round_log(self, limit=None):
        with self._lock:
            log = list(self.round_log)
            if limit is not None:
                log = log[-limit:] if limit > 0 else []
            return log

    def recent_accuracy(self, limit=None):
        """Live hit rate over the last `limit` logged rounds; None if nothing was scored."""
        scored = [e for e in self.get_round_log(limit) if e['prediction_accuracy']]
        if not scored:
            return None
        correct = sum(1 for e in scored if e['prediction_accuracy']['correct'])
        return round(correct / len(scored) * 100, 2)

    def current_streak(self, limit=None):
        """Label and length of the run the logged rounds currently end on."""
        log = self.get_round_log(limit)
        if len(log) < 2:
            return {'type': 'none', 'length': 0}
        label = log[-1]['label']
        length = 1
        for entry in reversed(log[:-1]):
            if entry['label'] != label:
                break
            length += 1
        return {'type': label, 'length': length}

    def get_status(self):
        with self._lock:
            return {
                'data_points': self.history.size(),
                'accuracy': self.stats.accuracy,
                'current_round_id': self.current_round_id,
                'has_cached_prediction': self.last_prediction is not None,
                'last_result': self.last_result,
                'server_time': datetime.now().isoformat(),
            }
