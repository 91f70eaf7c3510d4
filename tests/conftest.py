import math

import pytest

from gestures.landmarks import HandLandmarks


# Knuckle x offsets from the wrist for an upright hand
MCP_X = {'index': -0.035, 'middle': 0.0, 'ring': 0.03, 'pinky': 0.06}
SPREAD_DIR = {'index': -1, 'middle': 1, 'ring': 0, 'pinky': 0}

THUMB_TIPS = {
    'tucked': (-0.05, -0.065),
    'out': (-0.13, -0.09),
    'up': (-0.07, -0.13),
}

FINGER_BASE = {
    'index': HandLandmarks.INDEX_MCP,
    'middle': HandLandmarks.MIDDLE_MCP,
    'ring': HandLandmarks.RING_MCP,
    'pinky': HandLandmarks.PINKY_MCP,
}


def build_hand(
    fingers="0000",
    thumb="tucked",
    wrist=(0.5, 0.6),
    rotation=0.0,
    scale=1.0,
    spread=0.0,
    tips=None,
    handedness="Right",
):
    """
    Synthetic 21-point hand.

    fingers: pattern over index/middle/ring/pinky. thumb: 'tucked', 'out'
    (sideways) or 'up'. rotation (degrees) turns the hand about the wrist;
    90 points the fingers right, 180 points them down. tips overrides
    fingertip offsets (upright frame) by finger name, including 'thumb'.
    """
    offsets = [(0.0, 0.0)] * 21
    offsets[HandLandmarks.THUMB_CMC] = (-0.03, -0.02)
    offsets[HandLandmarks.THUMB_MCP] = (-0.06, -0.05)
    offsets[HandLandmarks.THUMB_IP] = (-0.08, -0.07)
    offsets[HandLandmarks.THUMB_TIP] = THUMB_TIPS[thumb]

    for name, flag in zip(('index', 'middle', 'ring', 'pinky'), fingers):
        base = FINGER_BASE[name]
        x = MCP_X[name]
        offsets[base] = (x, -0.10)
        if flag == '1':
            offsets[base + 1] = (x, -0.15)
            offsets[base + 2] = (x, -0.18)
            offsets[base + 3] = (x + SPREAD_DIR[name] * spread, -0.21)
        else:
            offsets[base + 1] = (x, -0.13)
            offsets[base + 2] = (x, -0.11)
            offsets[base + 3] = (x, -0.09)

    for name, tip in (tips or {}).items():
        index = HandLandmarks.THUMB_TIP if name == 'thumb' else FINGER_BASE[name] + 3
        offsets[index] = tip

    theta = math.radians(rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    landmarks = []
    for ox, oy in offsets:
        rx = ox * cos_t - oy * sin_t
        ry = ox * sin_t + oy * cos_t
        landmarks.append((wrist[0] + rx * scale, wrist[1] + ry * scale, 0.0))

    return HandLandmarks(landmarks=landmarks, handedness=handedness)


def pinched_hand(**kwargs):
    """All five fingertips bunched together above the palm."""
    kwargs.setdefault('tips', {
        'thumb': (-0.005, -0.11),
        'index': (-0.01, -0.12),
        'middle': (0.0, -0.125),
        'ring': (0.01, -0.12),
        'pinky': (0.015, -0.115),
    })
    return build_hand("0000", **kwargs)


@pytest.fixture
def make_hand():
    return build_hand


@pytest.fixture
def make_pinched_hand():
    return pinched_hand
