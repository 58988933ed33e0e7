"""
Feed Client - Keep a websocket connection to the game server alive.

On open the configured handshake frames (login + plugin subscriptions) are
sent one by one, FEED_HANDSHAKE_SPACING seconds apart. websocket-client
pings every FEED_PING_INTERVAL seconds. When the connection drops the
client waits FEED_RECONNECT_DELAY seconds and connects again, until stop()
is called.
"""

import json
import time

import websocket

import sys
sys.path.insert(0, '.')
from config import (
    FEED_URL, FEED_ORIGIN, FEED_USER_AGENT, FEED_HANDSHAKE,
    FEED_HANDSHAKE_SPACING, FEED_RECONNECT_DELAY, FEED_PING_INTERVAL,
)


class FeedClient:
    def __init__(self, handler, url=FEED_URL, handshake=None, origin=FEED_ORIGIN,
                 sleep=time.sleep):
        self.handler = handler
        self.url = url
        self.handshake = FEED_HANDSHAKE if handshake is None else handshake
        self.origin = origin or None
        self._sleep = sleep
        self._running = False
        self.connected = False
        self.ws = None

    # ─── websocket callbacks ────────────────────────────────────────────

    def on_open(self, ws):
        self.connected = True
        print(f"[Feed] Connected to {self.url}")
        self.send_handshake(ws)

    def send_handshake(self, ws):
        for i, frame in enumerate(self.handshake):
            if i > 0:
                self._sleep(FEED_HANDSHAKE_SPACING)
            ws.send(json.dumps(frame))

    def on_message(self, ws, message):
        self.handler.handle_message(message)

    def on_error(self, ws, error):
        print(f"[Feed] WebSocket error: {error}")

    def on_close(self, ws, close_status_code, close_msg):
        self.connected = False
        print(f"[Feed] WebSocket closed. Code: {close_status_code}, Reason: {close_msg}")

    # ─── connection loop ────────────────────────────────────────────────

    def connect(self):
        """One connection lifetime; returns when the socket closes."""
        self.ws = websocket.WebSocketApp(
            self.url,
            header=[f'User-Agent: {FEED_USER_AGENT}'],
            on_open=self.on_open,
            on_message=self.on_message,
            on_error=self.on_error,
            on_close=self.on_close,
        )
        self.ws.run_forever(origin=self.origin,
                            ping_interval=FEED_PING_INTERVAL,
                            ping_timeout=FEED_PING_INTERVAL - 5)

    def run_forever(self):
        if not self.url:
            print("[Feed] No feed URL configured, live feed disabled")
            return

        self._running = True
        while self._running:
            try:
                self.connect()
            except Exception as e:
                print(f"[Feed] Connection failed: {e}")
            if self._running:
                print(f"[Feed] Reconnecting in {FEED_RECONNECT_DELAY}s...")
                self._sleep(FEED_RECONNECT_DELAY)

    def stop(self):
        self._running = False
        if self.ws is not None:
            self.ws.close()
