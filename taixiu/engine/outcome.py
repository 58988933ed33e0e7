"""
Outcome Records - normalized representation of one resolved round.

A record carries the three dice, their total, the High/Low label derived
from the total, the observation time and a dice-shape fingerprint
(pattern key) that ignores dice ordering.
"""

import hashlib
from datetime import datetime

import sys
sys.path.insert(0, '.')
from config import (
    DICE_MIN, DICE_MAX, HIGH_THRESHOLD, HIGH_LABEL, LOW_LABEL,
    PATTERN_KEY_LENGTH,
)


class InvalidInput(ValueError):
    """Raised when a round carries dice outside 1-6 (or other malformed input)."""


class InsufficientData:
    """Typed 'not enough history' result. Returned, never raised."""

    def __init__(self, required, available, message=None):
        self.required = required
        self.available = available
        self.message = message or f'Need at least {required} rounds, have {available}'

    def to_dict(self):
        return {
            'error': 'insufficient_data',
            'message': self.message,
            'required': self.required,
            'available': self.available,
        }

    def __repr__(self):
        return f'InsufficientData(required={self.required}, available={self.available})'


def validate_dice(d1, d2, d3):
    """Return the dice as a tuple of ints or raise InvalidInput."""
    dice = (d1, d2, d3)
    for d in dice:
        # bool is an int subclass; True/False are not dice
        if isinstance(d, bool) or not isinstance(d, int):
            raise InvalidInput(f'dice must be integers {DICE_MIN}..{DICE_MAX}, got {d!r}')
        if d < DICE_MIN or d > DICE_MAX:
            raise InvalidInput(f'dice must be {DICE_MIN}..{DICE_MAX}, got {d}')
    return dice


def classify(total):
    """High if total > 10, else Low. A total of exactly 10 is Low."""
    return HIGH_LABEL if total > HIGH_THRESHOLD else LOW_LABEL


def opposite(label):
    return LOW_LABEL if label == HIGH_LABEL else HIGH_LABEL


def combination_key(dice):
    """Sorted dice joined with '-', e.g. (4, 3, 3) → '3-3-4'."""
    return '-'.join(str(d) for d in sorted(dice))


def pattern_key(dice):
    """Order-independent fingerprint of a roll: truncated md5 of the sorted dice."""
    digest = hashlib.md5(combination_key(dice).encode('ascii')).hexdigest()
    return digest[:PATTERN_KEY_LENGTH]


def build_record(round_id, d1, d2, d3, observed_at=None):
    """Validate the dice and build an outcome record dict."""
    dice = validate_dice(d1, d2, d3)
    total = sum(dice)
    return {
        'round_id': round_id,
        'dice': dice,
        'total': total,
        'label': classify(total),
        'observed_at': observed_at or datetime.now(),
        'pattern_key': pattern_key(dice),
    }


def record_to_dict(record):
    """JSON-friendly copy of a record (timestamps as ISO strings)."""
    return {
        'round_id': record['round_id'],
        'dice': list(record['dice']),
        'total': record['total'],
        'label': record['label'],
        'observed_at': record['observed_at'].isoformat(),
        'pattern_key': record['pattern_key'],
    }
