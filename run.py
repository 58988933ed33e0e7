#!/usr/bin/env python3
"""
Tai Xiu Prediction Engine - Entry Point
Start the Flask + SocketIO server and, when a feed URL is configured,
the live game feed in a background task.
"""

import os
import sys

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import HOST, PORT, DEBUG, FEED_URL, SERVICE_NAME, SOCKETIO_ASYNC_MODE

if SOCKETIO_ASYNC_MODE == 'eventlet':
    # The blocking websocket-client feed must cooperate with the eventlet server
    import eventlet
    eventlet.monkey_patch()

from taixiu import create_app, socketio, get_engine
from taixiu.feed.feed_handler import FeedHandler
from taixiu.feed.feed_client import FeedClient

app = create_app()


def start_feed(app):
    handler = FeedHandler(get_engine(app), socketio=socketio)
    client = FeedClient(handler, sleep=socketio.sleep)
    app.extensions['taixiu_feed'] = client
    socketio.start_background_task(client.run_forever)
    return client


if __name__ == '__main__':
    print("=" * 60)
    print(f"  {SERVICE_NAME}")
    print("=" * 60)
    print(f"  Server:    http://localhost:{PORT}")
    print(f"  Feed:      {FEED_URL or 'disabled'}")
    print(f"  Debug:     {DEBUG}")
    print("=" * 60)
    print()

    if FEED_URL:
        start_feed(app)
    else:
        print("[Startup] TAIXIU_FEED_URL not set, serving without a live feed")

    socketio.run(app, host=HOST, port=PORT, debug=DEBUG, use_reloader=False)
