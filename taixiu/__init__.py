"""
Flask Application Factory with SocketIO initialization.
"""

from flask import Flask
from flask_socketio import SocketIO

import sys
sys.path.insert(0, '.')
from config import SECRET_KEY, SOCKETIO_ASYNC_MODE

socketio = SocketIO()


def get_engine(app):
    return app.extensions['taixiu_engine']


def create_app(engine=None, async_mode=SOCKETIO_ASYNC_MODE):
    app = Flask(__name__)
    app.config['SECRET_KEY'] = SECRET_KEY
    app.json.sort_keys = False

    if engine is None:
        from taixiu.engine.prediction_engine import PredictionEngine
        engine = PredictionEngine()
    app.extensions['taixiu_engine'] = engine
    app.extensions['taixiu_feed'] = None   # set by run.py when the live feed starts

    from taixiu.routes import main_bp
    app.register_blueprint(main_bp)

    # Handlers must register before the first init_app so re-initialised
    # servers (one per app) pick them up again
    from taixiu import socketio_handlers  # noqa: F401

    socketio.init_app(app, cors_allowed_origins="*", async_mode=async_mode)

    return app
