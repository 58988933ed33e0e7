"""
Feed Handler - Turn game-server frames into engine round events.

Frames are JSON arrays; the payload object sits at index 1:
  cmd 1008 + sid                → a new round opened: predict & cache
  cmd 1003 + gBB + d1, d2, d3   → the open round resolved: record & score

Anything else (other commands, malformed JSON, missing dice) is ignored.
Resolved and opened rounds are broadcast over SocketIO when one is attached.
"""

import json

import sys
sys.path.insert(0, '.')
from config import FEED_CMD_NEW_ROUND, FEED_CMD_RESULT

from taixiu.engine.outcome import InvalidInput


class FeedHandler:
    def __init__(self, engine, socketio=None):
        self.engine = engine
        self.socketio = socketio
        self.update_count = 0

    def _emit(self, event, data):
        if self.socketio is not None:
            self.socketio.emit(event, data)

    def handle_message(self, message):
        """Dispatch one raw frame. Returns the event name handled, or None."""
        try:
            data = json.loads(message)
        except (ValueError, TypeError):
            return None

        if not isinstance(data, list) or len(data) < 2:
            return None
        payload = data[1]
        if not isinstance(payload, dict):
            return None

        cmd = payload.get('cmd')
        try:
            if cmd == FEED_CMD_NEW_ROUND and payload.get('sid'):
                self.on_new_round(payload['sid'])
                return 'round_started'
            if cmd == FEED_CMD_RESULT and 'gBB' in payload:
                if any(payload.get(k) is None for k in ('d1', 'd2', 'd3')):
                    return None
                self.on_result(payload['d1'], payload['d2'], payload['d3'])
                return 'round_result'
        except InvalidInput as e:
            print(f"[Feed] Rejected frame: {e}")
        except (ValueError, TypeError, KeyError) as e:
            print(f"[Feed] Error handling frame: {e}")
        return None

    def on_new_round(self, round_id):
        prediction = self.engine.start_round(round_id)
        print(f"[Feed] New round {round_id}: predict {prediction['prediction']} "
              f"({prediction['confidence']}%)")
        self._emit('round_started', {'round_id': round_id, 'prediction': prediction})
        return prediction

    def on_result(self, d1, d2, d3):
        entry = self.engine.resolve_round(None, d1, d2, d3)
        self.update_count += 1

        print(f"[Feed] Round {entry['round_id']}: {d1}-{d2}-{d3} = {entry['total']} "
              f"({entry['label']})")
        accuracy = entry['prediction_accuracy']
        if accuracy:
            verdict = 'HIT' if accuracy['correct'] else 'MISS'
            print(f"[Feed] Prediction {accuracy['previous_prediction']} - {verdict}")

        self._emit('round_result', {
            'result': entry,
            'update_count': self.update_count,
            'prediction_stats': self.engine.stats.to_dict(),
        })
        return entry
