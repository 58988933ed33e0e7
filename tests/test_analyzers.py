"""
Unit Tests for the signal analyzers and the PredictionCombiner:
TrendAnalyzer, CycleAnalyzer, DicePatternAnalyzer, DistributionAnalyzer,
HeatAnalyzer
"""
import pytest
import numpy as np
import sys
import os

# Add project root to path
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), '..')
sys.path.insert(0, PROJECT_ROOT)

from config import (
    HIGH_LABEL, LOW_LABEL, CONFIDENCE_MIN, CONFIDENCE_MAX, CONFIDENCE_FALLBACK,
    ANALYZER_WEIGHTS,
)
from taixiu.engine.outcome import build_record
from taixiu.engine.history_store import HistoryStore
from taixiu.engine.trend_analyzer import TrendAnalyzer, ends_with_run
from taixiu.engine.cycle_analyzer import CycleAnalyzer, extract_cycle
from taixiu.engine.dice_pattern_analyzer import DicePatternAnalyzer
from taixiu.engine.distribution_analyzer import DistributionAnalyzer
from taixiu.engine.heat_analyzer import HeatAnalyzer
from taixiu.engine.combiner import PredictionCombiner, random_label, random_prediction

H, L = HIGH_LABEL, LOW_LABEL
HIGH_DICE = (6, 5, 4)
LOW_DICE = (1, 2, 3)


def _window(labels):
    return [build_record(i, *(HIGH_DICE if lab == H else LOW_DICE))
            for i, lab in enumerate(labels)]


def _store(rolls, round_ids=None):
    store = HistoryStore()
    for i, dice in enumerate(rolls):
        rid = round_ids[i] if round_ids else i
        store.append(rid, *dice)
    return store


# ═══════════════════════════════════════════════════════════════
# TrendAnalyzer
# ═══════════════════════════════════════════════════════════════

class TestTrendAnalyzer:
    def test_empty_window_abstains(self):
        assert TrendAnalyzer().predict([]) is None

    def test_high_dominance_reverses(self):
        assert TrendAnalyzer().predict(_window([H] * 7 + [L] * 3)) == L

    def test_low_dominance_reverses(self):
        assert TrendAnalyzer().predict(_window([H] * 3 + [L] * 7)) == H

    def test_exactly_sixty_percent_is_not_dominance(self):
        # 6 High / 4 Low, no trailing run of three → majority High
        labels = [H, H, L, H, L, H, L, H, L, H]
        assert TrendAnalyzer().predict(_window(labels)) == H

    def test_trailing_run_reverses(self):
        labels = [L, L, H, L, L, H, L, H, H, H]
        assert TrendAnalyzer().predict(_window(labels)) == L

    def test_balanced_tie_goes_low(self):
        labels = [H, L] * 5
        assert TrendAnalyzer().predict(_window(labels)) == L

    def test_ends_with_run(self):
        assert ends_with_run([L, H, H, H], H, 3)
        assert not ends_with_run([H, H], H, 3)
        assert not ends_with_run([H, L, H], H, 3)


# ═══════════════════════════════════════════════════════════════
# CycleAnalyzer
# ═══════════════════════════════════════════════════════════════

class TestCycleAnalyzer:
    def test_short_window_abstains(self):
        assert CycleAnalyzer().predict(_window([H, L, H])) is None

    def test_fallback_reverses_last(self):
        assert CycleAnalyzer().predict(_window([H, L, H, L, H])) == L
        assert CycleAnalyzer().predict(_window([H, H, H, L])) == H

    def test_compared_half_has_no_followers(self):
        assert extract_cycle([H, L, H, L], 2) is None
        assert extract_cycle([H, L, H, H, L, H], 3) is None

    def test_too_short_for_length(self):
        assert extract_cycle([H, L, H], 2) is None

    def test_find_cycles_empty_for_full_window(self):
        assert CycleAnalyzer().find_cycles(_window([H, L] * 10)) == []


# ═══════════════════════════════════════════════════════════════
# DicePatternAnalyzer
# ═══════════════════════════════════════════════════════════════

class TestDicePatternAnalyzer:
    SHAPE = (1, 1, 2)        # Low, the shape being recalled
    OTHER = (1, 2, 3)        # Low, different shape

    def test_short_window_abstains(self):
        store = _store([self.SHAPE, HIGH_DICE, self.SHAPE, HIGH_DICE])
        assert DicePatternAnalyzer().predict(store.all(), store) is None

    def test_no_history_abstains(self):
        assert DicePatternAnalyzer().predict(_window([H] * 6), None) is None

    def test_followers_vote(self):
        store = _store([self.SHAPE, HIGH_DICE, (2, 1, 1), HIGH_DICE, self.OTHER, self.SHAPE])
        analyzer = DicePatternAnalyzer()
        assert analyzer.get_followers(store) == [H, H]
        assert analyzer.predict(store.all(), store) == H

    def test_follower_tie_goes_low(self):
        store = _store([self.SHAPE, HIGH_DICE, self.SHAPE, self.OTHER, self.OTHER, self.SHAPE])
        assert DicePatternAnalyzer().predict(store.all(), store) == L

    def test_unseen_shape_abstains(self):
        store = _store([HIGH_DICE, HIGH_DICE, HIGH_DICE, HIGH_DICE, self.SHAPE])
        assert DicePatternAnalyzer().predict(store.all(), store) is None

    def test_same_round_id_excluded(self):
        store = _store([self.SHAPE, HIGH_DICE, self.OTHER, self.OTHER, self.SHAPE],
                       round_ids=['r1', 'r2', 'r3', 'r4', 'r1'])
        assert DicePatternAnalyzer().get_followers(store) == []
        assert DicePatternAnalyzer().predict(store.all(), store) is None


# ═══════════════════════════════════════════════════════════════
# DistributionAnalyzer
# ═══════════════════════════════════════════════════════════════

class TestDistributionAnalyzer:
    def test_empty_abstains(self):
        assert DistributionAnalyzer().predict([]) is None

    def test_high_mean_votes_low(self):
        assert DistributionAnalyzer().predict(_window([H, H, L])) == L

    def test_low_mean_votes_high(self):
        assert DistributionAnalyzer().predict(_window([L, L, H])) == H

    def test_midpoint_abstains(self):
        window = [build_record(1, 1, 3, 6), build_record(2, 2, 3, 6)]   # 10 and 11
        assert DistributionAnalyzer().mean_total(window) == pytest.approx(10.5)
        assert DistributionAnalyzer().predict(window) is None


# ═══════════════════════════════════════════════════════════════
# HeatAnalyzer
# ═══════════════════════════════════════════════════════════════

class TestHeatAnalyzer:
    def test_short_window_abstains(self):
        assert HeatAnalyzer().predict(_window([H] * 4)) is None

    def test_hot_cools_down(self):
        assert HeatAnalyzer().predict(_window([H] * 8 + [L] * 2)) == L

    def test_cold_warms_up(self):
        assert HeatAnalyzer().predict(_window([H] * 2 + [L] * 8)) == H

    def test_neutral_abstains(self):
        assert HeatAnalyzer().predict(_window([H, L] * 5)) is None

    def test_thresholds_are_strict(self):
        assert HeatAnalyzer().predict(_window([H] * 7 + [L] * 3)) is None
        assert HeatAnalyzer().predict(_window([H] * 3 + [L] * 7)) is None

    def test_only_last_ten_count(self):
        labels = [H] * 10 + [H, L] * 5
        assert HeatAnalyzer().high_frequency(_window(labels)) == 0.5


# ═══════════════════════════════════════════════════════════════
# PredictionCombiner
# ═══════════════════════════════════════════════════════════════

def _votes(**preds):
    return [{'method': name, 'prediction': preds.get(name), 'weight': weight}
            for name, weight in ANALYZER_WEIGHTS.items()]


class TestPredictionCombiner:
    def test_all_abstain_falls_back(self):
        result = PredictionCombiner(rng=np.random.default_rng(1)).combine(_votes())
        assert result['prediction'] in (H, L)
        assert result['confidence'] == CONFIDENCE_FALLBACK
        assert result['method'] == 'all_abstained'
        assert set(result['votes']) == set(ANALYZER_WEIGHTS)

    def test_narrow_margin_clamped_to_min(self):
        combiner = PredictionCombiner(perturbation=0)
        result = combiner.combine(_votes(trend=H, cycle=L, pattern=H, distribution=L, heat=L))
        assert result['prediction'] == H
        assert result['confidence'] == CONFIDENCE_MIN

    def test_unanimous_clamped_to_max(self):
        combiner = PredictionCombiner(perturbation=0)
        result = combiner.combine(_votes(trend=H, cycle=H, pattern=H, distribution=H, heat=H))
        assert result['prediction'] == H
        assert result['confidence'] == CONFIDENCE_MAX

    def test_margin_becomes_confidence(self):
        combiner = PredictionCombiner(perturbation=0)
        result = combiner.combine(_votes(trend=L, cycle=L, pattern=H, distribution=L, heat=L))
        assert result['prediction'] == L
        assert result['confidence'] == pytest.approx(60.0)
        assert result['weighted_scores'] == {'high': 0.2, 'low': 0.8}

    def test_exact_tie_goes_low(self):
        combiner = PredictionCombiner(perturbation=0)
        votes = [
            {'method': 'a', 'prediction': H, 'weight': 0.5},
            {'method': 'b', 'prediction': L, 'weight': 0.5},
        ]
        assert combiner.combine(votes)['prediction'] == L

    def test_abstentions_vote_at_full_weight(self):
        combiner = PredictionCombiner(rng=np.random.default_rng(8), perturbation=0)
        result = combiner.combine(_votes(trend=H, heat=L))
        breakdown = {b['method']: b for b in result['method_breakdown']}
        assert list(breakdown) == list(ANALYZER_WEIGHTS)
        assert [m for m, b in breakdown.items() if b['tiebreak']] == ['cycle', 'pattern', 'distribution']
        assert breakdown['trend']['prediction'] == H
        assert breakdown['heat']['prediction'] == L
        assert all(b['prediction'] in (H, L) for b in breakdown.values())
        assert result['votes']['cycle'] is None
        scores = result['weighted_scores']
        assert scores['high'] + scores['low'] == pytest.approx(1.0, abs=1e-3)

    def test_tiebreaks_follow_the_generator(self):
        a = PredictionCombiner(rng=np.random.default_rng(21), perturbation=0)
        b = PredictionCombiner(rng=np.random.default_rng(21), perturbation=0)
        for _ in range(20):
            assert a.combine(_votes(trend=H)) == b.combine(_votes(trend=H))

    def test_full_vote_draws_nothing(self):
        rng = np.random.default_rng(4)
        combiner = PredictionCombiner(rng=rng, perturbation=0)
        combiner.combine(_votes(trend=L, cycle=L, pattern=H, distribution=L, heat=L))
        assert rng.random() == np.random.default_rng(4).random()

    def test_perturbation_keeps_clear_winner(self):
        combiner = PredictionCombiner(rng=np.random.default_rng(42))
        for _ in range(50):
            result = combiner.combine(_votes(trend=H, cycle=H, pattern=L, distribution=L, heat=L))
            assert result['prediction'] == H
            assert CONFIDENCE_MIN <= result['confidence'] <= CONFIDENCE_MAX

    def test_random_helpers(self):
        rng = np.random.default_rng(3)
        labels = {random_label(rng) for _ in range(100)}
        assert labels == {H, L}
        pred = random_prediction(rng)
        assert pred['confidence'] == CONFIDENCE_FALLBACK
        assert pred['method'] == 'random'
