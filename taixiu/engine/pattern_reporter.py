"""
Pattern Reporter - dashboard-oriented pattern analysis.

Hot and cold die faces, hour-of-day label split, the most recent
three-in-a-row runs, short insight strings and a rough risk level.
"""

from collections import Counter

import sys
sys.path.insert(0, '.')
from config import (
    DICE_MIN, DICE_MAX, HIGH_LABEL, LOW_LABEL,
    HOT_FACES_COUNT, HOURLY_MIN_ROUNDS, MIN_HISTORY_FOR_PREDICTION,
    RISK_SUM_SHARE, RISK_MAX_RUNS, RECENT_SEQUENCES,
)


def _pct(part, whole):
    return round(part / whole * 100, 2) if whole else 0.0


class PatternReporter:
    def __init__(self, history, sequences, stats_reporter):
        self.history = history
        self.sequences = sequences
        self.stats_reporter = stats_reporter

    def face_frequencies(self):
        records = self.history.all()
        counts = Counter()
        for r in records:
            counts.update(r['dice'])
        rolled = len(records) * 3
        return [
            {'number': face, 'frequency': counts.get(face, 0),
             'percentage': _pct(counts.get(face, 0), rolled)}
            for face in range(DICE_MIN, DICE_MAX + 1)
        ]

    def hot_faces(self, top_n=HOT_FACES_COUNT):
        if not self.history.size():
            return []
        faces = sorted(self.face_frequencies(), key=lambda f: f['frequency'], reverse=True)
        return faces[:top_n]

    def cold_faces(self, top_n=HOT_FACES_COUNT):
        if not self.history.size():
            return []
        faces = sorted(self.face_frequencies(), key=lambda f: f['frequency'])
        return faces[:top_n]

    def hourly_patterns(self):
        records = self.history.all()
        if len(records) < MIN_HISTORY_FOR_PREDICTION:
            return []

        by_hour = {}
        for r in records:
            hour = r['observed_at'].hour
            bucket = by_hour.setdefault(hour, {HIGH_LABEL: 0, LOW_LABEL: 0, 'total': 0})
            bucket[r['label']] += 1
            bucket['total'] += 1

        patterns = []
        for hour, data in by_hour.items():
            if data['total'] > HOURLY_MIN_ROUNDS:
                patterns.append({
                    'hour': hour,
                    'high_percentage': _pct(data[HIGH_LABEL], data['total']),
                    'low_percentage': _pct(data[LOW_LABEL], data['total']),
                    'total_games': data['total'],
                })
        patterns.sort(key=lambda p: p['total_games'], reverse=True)
        return patterns

    def generate_insights(self, analysis):
        insights = []
        if analysis['hot_numbers']:
            insights.append('Hot faces: ' + ', '.join(str(f['number']) for f in analysis['hot_numbers']))
        if analysis['cold_numbers']:
            insights.append('Cold faces: ' + ', '.join(str(f['number']) for f in analysis['cold_numbers']))
        if analysis['time_based_patterns']:
            best = analysis['time_based_patterns'][0]
            insights.append(f"Busiest hour: {best['hour']}h (High {best['high_percentage']}%)")
        return insights

    def assess_risk(self, analysis):
        level = 'medium'
        reasons = []

        if any(row['percentage'] > RISK_SUM_SHARE for row in analysis['total_distribution']):
            level = 'high'
            reasons.append('Uneven sum distribution, possible bias')

        if any(len(v) > RISK_MAX_RUNS for v in analysis['sequence_detection'].values()):
            level = 'high'
            reasons.append('Many three-in-a-row runs')

        return {'level': level, 'reasons': reasons}

    def get_report(self):
        analysis = {
            'hot_numbers': self.hot_faces(),
            'cold_numbers': self.cold_faces(),
            'frequent_combinations': self.stats_reporter.top_combinations(),
            'total_distribution': self.stats_reporter.sum_distribution(),
            'time_based_patterns': self.hourly_patterns(),
            'sequence_detection': self.sequences.get_summary(limit=RECENT_SEQUENCES),
        }
        return {
            'pattern_analysis': analysis,
            'predictive_insights': self.generate_insights(analysis),
            'risk_assessment': self.assess_risk(analysis),
        }
