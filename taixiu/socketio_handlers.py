"""
SocketIO Event Handlers - Real-time prediction and backtest requests.
"""

from flask import current_app
from flask_socketio import emit

from taixiu import socketio, get_engine

import sys
sys.path.insert(0, '.')
from config import BACKTEST_DEFAULT_SAMPLE

from taixiu.engine.outcome import InsufficientData, InvalidInput
from taixiu.engine.backtester import get_recommendation


@socketio.on('connect')
def handle_connect():
    engine = get_engine(current_app)
    emit('engine_state', {
        'status': engine.get_status(),
        'next_prediction': engine.last_prediction,
        'prediction_stats': engine.stats.to_dict(),
    })


@socketio.on('request_prediction')
def handle_request_prediction(data=None):
    engine = get_engine(current_app)
    emit('prediction_result', {
        'prediction': engine.predict_next(),
        'data_points': engine.history.size(),
    })


@socketio.on('run_simulation')
def handle_run_simulation(data=None):
    engine = get_engine(current_app)
    data = data or {}
    sample_size = data.get('sample_size', BACKTEST_DEFAULT_SAMPLE)

    try:
        result = engine.simulate(sample_size)
    except InvalidInput as e:
        emit('simulation_result', {'error': 'invalid_input', 'message': str(e)})
        return

    if isinstance(result, InsufficientData):
        print(f"[Backtest] {result.message}")
        emit('simulation_result', {
            'error': result.to_dict(),
            'recommendation': get_recommendation(result),
        })
        return

    print(f"[Backtest] {result['total_tests']} rounds replayed, accuracy {result['accuracy']}%")
    emit('simulation_result', {
        'simulation': result,
        'recommendation': get_recommendation(result),
    })
