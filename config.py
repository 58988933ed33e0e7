"""
Configuration constants for the Tai Xiu Prediction Engine.
Single source of truth for all tunable parameters.
"""

import os
import json

# ─── Outcome Classification ──────────────────────────────────────────
# Three dice, each 1-6. Total 3-18.
DICE_MIN = 1
DICE_MAX = 6
TOTAL_MIN = 3
TOTAL_MAX = 18
HIGH_LABEL = 'High'                 # "Tài"
LOW_LABEL = 'Low'                   # "Xỉu"
TIE_LABEL = 'Tie'                   # Only used by the sum-distribution report
LABELS = (HIGH_LABEL, LOW_LABEL)
HIGH_THRESHOLD = 10                 # total > 10 → High, everything else (10 included) → Low
MIDPOINT_TOTAL = 10.5               # Expected mean of three fair dice
PATTERN_KEY_LENGTH = 8              # Hex chars kept from the md5 digest of the sorted dice

# ─── History Store ───────────────────────────────────────────────────
MAX_HISTORY = 500                   # Rolling window cap, oldest record evicted first
ROUND_LOG_SIZE = 500                # Live round log (feed-side) cap

# ─── Sequence Detection ──────────────────────────────────────────────
SEQUENCE_LENGTH = 3                 # Runs of 3 identical labels
MAX_SEQUENCES_PER_LABEL = 10        # Keep only the 10 most recent runs per label

# ─── Prediction ──────────────────────────────────────────────────────
MIN_HISTORY_FOR_PREDICTION = 10     # Below this, predict_next is a pure coin flip
ANALYSIS_WINDOW = 20                # Analyzers look at the last 20 rounds

# Trend
TREND_DOMINANCE_RATIO = 0.6         # Either side above 60% of window → bet the reversal
TREND_STREAK_LOOKBACK = 5
TREND_STREAK_LENGTH = 3

# Cycle
CYCLE_MIN_WINDOW = 4
CYCLE_LENGTHS = (2, 3, 4)

# Dice pattern recall
PATTERN_MIN_WINDOW = 5

# Heat
HEAT_WINDOW = 10
HEAT_MIN_WINDOW = 5
HEAT_HOT_RATIO = 0.7                # High frequency above 70% → cool down (Low)
HEAT_COLD_RATIO = 0.3               # High frequency below 30% → warm up (High)

# ─── Combiner Weights ────────────────────────────────────────────────
WEIGHT_TREND = 0.35
WEIGHT_CYCLE = 0.25
WEIGHT_PATTERN = 0.20
WEIGHT_DISTRIBUTION = 0.15
WEIGHT_HEAT = 0.05

ANALYZER_WEIGHTS = {
    'trend': WEIGHT_TREND,
    'cycle': WEIGHT_CYCLE,
    'pattern': WEIGHT_PATTERN,
    'distribution': WEIGHT_DISTRIBUTION,
    'heat': WEIGHT_HEAT,
}

# ─── Confidence ──────────────────────────────────────────────────────
RANDOM_PERTURBATION = 0.05          # ±5% noise so near-ties don't lock into one side
CONFIDENCE_MIN = 55.0
CONFIDENCE_MAX = 95.0
CONFIDENCE_FALLBACK = 50.0          # Coin-flip predictions (not enough data / all abstain)

# ─── Backtest ────────────────────────────────────────────────────────
BACKTEST_WARMUP = 10                # Rounds fed to each fresh engine before the first scored step
BACKTEST_DEFAULT_SAMPLE = 100
BACKTEST_ADVANCED_SAMPLE = 200
BACKTEST_DISPLAY_STEPS = 20         # Steps returned for display
STRATEGY_WINDOW = 20                # Sliding window for single-strategy comparison

# Confidence bands (lower bound, label) - checked top-down, last band catches the rest
CONFIDENCE_BANDS = [
    (91, '91-95%'),
    (81, '81-90%'),
    (71, '71-80%'),
    (0, '60-70%'),
]

# Coarse confidence categories (lower bound, name)
CONFIDENCE_CATEGORIES = [
    (80, 'high'),
    (65, 'medium'),
    (0, 'low'),
]

# Recommendation thresholds on backtest accuracy
RECOMMEND_HIGH_ACCURACY = 70.0
RECOMMEND_MEDIUM_ACCURACY = 60.0

# ─── Statistics / Pattern Report ─────────────────────────────────────
TOP_COMBINATIONS = 10
HOT_FACES_COUNT = 3
HOURLY_MIN_ROUNDS = 5               # Hours with more than 5 rounds are reported
RISK_SUM_SHARE = 15.0               # Any single total above 15% of history → high risk
RISK_MAX_RUNS = 3                   # More than 3 retained runs for a label → high risk
RECENT_SEQUENCES = 5

# ─── Live Feed ───────────────────────────────────────────────────────
FEED_URL = os.environ.get('TAIXIU_FEED_URL', '')
FEED_ORIGIN = os.environ.get('TAIXIU_FEED_ORIGIN', '')
FEED_USER_AGENT = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                   '(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36')
# JSON array of frames sent after the socket opens (login + plugin subscriptions).
FEED_HANDSHAKE = json.loads(os.environ.get('TAIXIU_FEED_HANDSHAKE', '[]'))
FEED_HANDSHAKE_SPACING = 0.6        # Seconds between handshake frames
FEED_RECONNECT_DELAY = 2.5          # Seconds before reconnecting after close
FEED_PING_INTERVAL = 15             # Seconds between keep-alive pings
FEED_CMD_NEW_ROUND = 1008
FEED_CMD_RESULT = 1003

# ─── Server Settings ─────────────────────────────────────────────────
HOST = os.environ.get('TAIXIU_HOST', '0.0.0.0')
PORT = int(os.environ.get('TAIXIU_PORT', 3001))
DEBUG = False
SECRET_KEY = os.environ.get('TAIXIU_SECRET_KEY', 'taixiu-prediction-engine')
SOCKETIO_ASYNC_MODE = os.environ.get('TAIXIU_ASYNC_MODE', 'eventlet')
SERVICE_NAME = 'Tai Xiu Prediction Engine'
HISTORY_DEFAULT_LIMIT = 50
