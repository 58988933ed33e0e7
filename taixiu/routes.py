"""
HTTP Routes - JSON API over the prediction engine.
"""

from datetime import datetime

from flask import Blueprint, current_app, jsonify, request

import sys
sys.path.insert(0, '.')
from config import (
    SERVICE_NAME, HIGH_LABEL, LOW_LABEL, BACKTEST_DEFAULT_SAMPLE,
    BACKTEST_ADVANCED_SAMPLE, BACKTEST_WARMUP, HISTORY_DEFAULT_LIMIT,
)

from taixiu import get_engine
from taixiu.engine.outcome import InsufficientData, InvalidInput
from taixiu.engine.backtester import get_recommendation

main_bp = Blueprint('main', __name__)


def _as_dict(result):
    return result.to_dict() if isinstance(result, InsufficientData) else result


def _feed_connected():
    feed = current_app.extensions.get('taixiu_feed')
    return bool(feed and feed.connected)


@main_bp.errorhandler(InvalidInput)
def handle_invalid_input(e):
    return jsonify({'error': 'invalid_input', 'message': str(e)}), 400


@main_bp.route('/health')
def health():
    engine = get_engine(current_app)
    return jsonify({
        'status': 'ok',
        'service': SERVICE_NAME,
        'feed_connected': _feed_connected(),
        'prediction_engine': {
            'data_points': engine.history.size(),
            'accuracy': engine.stats.accuracy,
        },
        'timestamp': datetime.now().isoformat(),
    })


@main_bp.route('/api/current')
def current():
    engine = get_engine(current_app)
    status = engine.get_status()
    return jsonify({
        'last_result': status['last_result'],
        'next_prediction': engine.last_prediction,
        'current_round_id': status['current_round_id'],
        'prediction_stats': engine.stats.to_dict(),
        'system_status': {
            'feed_connected': _feed_connected(),
            'engine_data_points': status['data_points'],
        },
        'server_time': status['server_time'],
    })


@main_bp.route('/api/predict')
def predict():
    engine = get_engine(current_app)
    prediction = engine.predict_next()
    statistics = engine.get_statistics()
    simulation = engine.simulate(BACKTEST_DEFAULT_SAMPLE)
    return jsonify({
        'next_round_prediction': prediction,
        'engine_statistics': statistics,
        'historical_simulation': _as_dict(simulation),
        'current_time': datetime.now().isoformat(),
        'data_points': engine.history.size(),
    })


@main_bp.route('/api/predict/advanced')
def predict_advanced():
    engine = get_engine(current_app)
    sample_size = request.args.get('sample', type=int) or BACKTEST_ADVANCED_SAMPLE
    # Larger samples can never be satisfied by the bounded history
    sample_size = min(sample_size, engine.max_history - BACKTEST_WARMUP)

    simulation = engine.simulate(sample_size)
    report = {
        'simulation_config': {
            'sample_size': sample_size,
            'data_points': engine.history.size(),
            'period': 'historical_backtest',
        },
        'streak_analysis': dict(engine.stats.streaks),
        'recommendation': get_recommendation(simulation),
    }
    if isinstance(simulation, InsufficientData):
        report['error'] = simulation.to_dict()
        report['performance_summary'] = None
        report['detailed_predictions'] = []
    else:
        report['performance_summary'] = {
            'overall_accuracy': simulation['accuracy'],
            'win_rate_by_confidence': simulation['win_rate'],
            'confidence_distribution': simulation['confidence_distribution'],
            'method_performance': simulation['method_performance'],
        }
        report['detailed_predictions'] = simulation['predictions']
    return jsonify(report)


@main_bp.route('/api/analysis/patterns')
def pattern_analysis():
    return jsonify(get_engine(current_app).get_pattern_report())


@main_bp.route('/api/simulate/strategy')
def simulate_strategy():
    return jsonify(get_engine(current_app).compare_strategies())


@main_bp.route('/api/history')
def history():
    engine = get_engine(current_app)
    limit = request.args.get('limit', type=int) or HISTORY_DEFAULT_LIMIT
    if limit < 0:
        raise InvalidInput(f'limit must be positive, got {limit}')

    recent = engine.get_round_log(limit)
    statistics = engine.get_statistics()
    return jsonify({
        'current': engine.last_result,
        'recent_history': recent,
        'summary': {
            'total_rounds': len(engine.round_log),
            'recent_accuracy': engine.recent_accuracy(limit),
            'current_streak': engine.current_streak(limit),
            'prediction_performance': statistics['prediction_stats'],
        },
        'engine_stats': statistics,
    })


@main_bp.route('/api/stats')
def stats():
    engine = get_engine(current_app)
    log = engine.get_round_log()
    total = len(log)
    high = sum(1 for e in log if e['label'] == HIGH_LABEL)
    low = sum(1 for e in log if e['label'] == LOW_LABEL)
    size = engine.history.size()

    return jsonify({
        'basic_stats': {
            'total_rounds': total,
            'high_count': high,
            'low_count': low,
            'high_percentage': round(high / total * 100, 2) if total else 0.0,
            'low_percentage': round(low / total * 100, 2) if total else 0.0,
        },
        'advanced_stats': engine.get_statistics(),
        'prediction_performance': engine.stats.to_dict(),
        'last_update': engine.last_result['observed_at'] if engine.last_result else None,
        'data_quality': {
            'history_size': size,
            'simulation_ready': size >= BACKTEST_DEFAULT_SAMPLE + BACKTEST_WARMUP,
        },
    })
