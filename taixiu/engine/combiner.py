"""
Prediction Combiner - weighted vote of the five signal analyzers.

Every analyzer adds its weight to the High or Low bucket. An analyzer that
abstains still counts: a random label is drawn for it and it votes at its
full weight, flagged as a tiebreak in the breakdown. A small symmetric
perturbation (±5%) is then moved from one bucket to the other so that
near-ties don't always resolve the same way; the larger adjusted bucket
wins. Confidence is the bucket margin in percent, clamped to 55-95.

If every analyzer abstains the combiner falls back to a coin flip with
confidence 50.
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    HIGH_LABEL, LOW_LABEL, RANDOM_PERTURBATION,
    CONFIDENCE_MIN, CONFIDENCE_MAX, CONFIDENCE_FALLBACK,
)


def random_label(rng):
    return HIGH_LABEL if rng.random() > 0.5 else LOW_LABEL


def random_prediction(rng, reason='random'):
    """Coin-flip prediction used when there is nothing to reason about."""
    return {
        'prediction': random_label(rng),
        'confidence': CONFIDENCE_FALLBACK,
        'method': reason,
        'method_breakdown': [],
        'weighted_scores': None,
        'votes': {},
    }


class PredictionCombiner:
    """Merges analyzer votes into a single weighted High/Low prediction."""

    def __init__(self, rng=None, perturbation=RANDOM_PERTURBATION):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.perturbation = perturbation

    def combine(self, votes):
        """Merge analyzer votes into one prediction.

        Args:
            votes: list of dicts {method, prediction (label or None), weight}

        Returns:
            prediction dict with 'prediction', 'confidence', 'method_breakdown',
            'weighted_scores' and the raw 'votes' of every analyzer (None for
            an abstention).
        """
        raw_votes = {v['method']: v['prediction'] for v in votes}

        if all(v['prediction'] is None for v in votes):
            result = random_prediction(self.rng, reason='all_abstained')
            result['votes'] = raw_votes
            return result

        scores = {HIGH_LABEL: 0.0, LOW_LABEL: 0.0}
        breakdown = []
        for v in votes:
            tiebreak = v['prediction'] is None
            label = random_label(self.rng) if tiebreak else v['prediction']
            scores[label] += v['weight']
            breakdown.append({
                'method': v['method'],
                'prediction': label,
                'weight': v['weight'],
                'tiebreak': tiebreak,
            })

        if self.perturbation:
            noise = float(self.rng.uniform(-self.perturbation, self.perturbation))
        else:
            noise = 0.0
        scores[HIGH_LABEL] += noise
        scores[LOW_LABEL] -= noise

        final = HIGH_LABEL if scores[HIGH_LABEL] > scores[LOW_LABEL] else LOW_LABEL
        margin = round(abs(scores[HIGH_LABEL] - scores[LOW_LABEL]) * 100, 1)
        confidence = min(CONFIDENCE_MAX, max(CONFIDENCE_MIN, margin))

        return {
            'prediction': final,
            'confidence': confidence,
            'method': 'weighted',
            'method_breakdown': breakdown,
            'weighted_scores': {
                'high': round(scores[HIGH_LABEL], 3),
                'low': round(scores[LOW_LABEL], 3),
            },
            'votes': raw_votes,
        }
