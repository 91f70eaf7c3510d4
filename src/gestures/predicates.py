"""
Geometric and motion predicates over hand landmarks.

Every predicate receives a HandView (two for the two-hand ones) plus the
keyword parameters written in the gesture grammar, and returns a bool.
All distances are in normalized landmark units.
"""
import math
from typing import Any, Callable, Collection, Dict, Optional, Tuple

from .landmarks import HandLandmarks, FINGER_JOINTS, FINGERS, TIPS, TRACKED_POINTS


Predicate = Callable[..., bool]

ONE_HAND_PREDICATES: Dict[str, Predicate] = {}
TWO_HAND_PREDICATES: Dict[str, Predicate] = {}


def predicate(
    name: str,
    registry: Optional[Dict[str, Predicate]] = None,
    choices: Optional[Dict[str, Collection[Any]]] = None,
):
    """
    Register a predicate under the name the grammar refers to it by.

    choices maps a parameter name to the values it may take; grammars are
    checked against it when they are loaded.
    """
    target = ONE_HAND_PREDICATES if registry is None else registry

    def register(func: Predicate) -> Predicate:
        func.choices = dict(choices or {})
        target[name] = func
        return func

    return register


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def distance_2d(p1, p2) -> float:
    """Calculate 2D distance between two points (ignoring z)."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def hand_axis(landmarks: HandLandmarks) -> Tuple[float, float]:
    """
    Unit vector from the wrist to the middle MCP (the hand's local "up").

    Falls back to image up when the two points coincide.
    """
    wrist = landmarks.get(HandLandmarks.WRIST)
    middle_mcp = landmarks.get(HandLandmarks.MIDDLE_MCP)
    ax, ay = middle_mcp[0] - wrist[0], middle_mcp[1] - wrist[1]
    mag = math.hypot(ax, ay)
    if mag < 0.001:
        return (0.0, -1.0)
    return (ax / mag, ay / mag)


def is_finger_extended(
    landmarks: HandLandmarks,
    finger: str,
    axis: Optional[Tuple[float, float]] = None,
) -> bool:
    """
    A finger is extended when its tip lies beyond its PIP joint along the
    hand axis. For an upright hand this is simply tip.y < pip.y.
    """
    _, pip_idx, tip_idx = FINGER_JOINTS[finger]
    fux, fuy = axis or hand_axis(landmarks)
    wrist = landmarks.get(HandLandmarks.WRIST)
    tip = landmarks.get(tip_idx)
    pip = landmarks.get(pip_idx)
    tip_proj = (tip[0] - wrist[0]) * fux + (tip[1] - wrist[1]) * fuy
    pip_proj = (pip[0] - wrist[0]) * fux + (pip[1] - wrist[1]) * fuy
    return tip_proj > pip_proj


def is_thumb_extended(landmarks: HandLandmarks, ratio: float = 1.2) -> bool:
    """Thumb is extended if the tip is far from the MCP compared to the IP."""
    mcp = landmarks.get(HandLandmarks.THUMB_MCP)
    tip_dist = distance_2d(landmarks.get(HandLandmarks.THUMB_TIP), mcp)
    ip_dist = distance_2d(landmarks.get(HandLandmarks.THUMB_IP), mcp)
    return tip_dist > ip_dist * ratio


def finger_states(landmarks: HandLandmarks) -> Tuple[bool, bool, bool, bool]:
    """Extension flags for (index, middle, ring, pinky)."""
    axis = hand_axis(landmarks)
    return tuple(is_finger_extended(landmarks, f, axis) for f in FINGERS)


class HandView:
    """One hand as the grammar sees it: landmarks, cached flags, history."""

    def __init__(self, landmarks: HandLandmarks, history=None):
        self.landmarks = landmarks
        self.history = history
        self.fingers = finger_states(landmarks)
        self.thumb_extended = is_thumb_extended(landmarks)

    def finger(self, name: str) -> bool:
        return self.fingers[FINGERS.index(name)]

    def matches_pattern(self, pattern: str) -> bool:
        """Match a 4-char pattern over index/middle/ring/pinky ('1', '0', 'x')."""
        for flag, want in zip(self.fingers, pattern):
            if want == 'x':
                continue
            if flag != (want == '1'):
                return False
        return True

    @property
    def all_up(self) -> bool:
        return all(self.fingers)

    @property
    def all_down(self) -> bool:
        return not any(self.fingers)


# ---------------------------------------------------------------------------
# Distance predicates
# ---------------------------------------------------------------------------

@predicate("all_tips_pinched")
def all_tips_pinched(hand: HandView, max_distance: float = 0.07) -> bool:
    """All four fingertips bunched near the thumb tip."""
    lm = hand.landmarks
    thumb = lm.get(TIPS['thumb'])
    return all(distance_2d(thumb, lm.get(TIPS[f])) < max_distance for f in FINGERS)


@predicate("pinch", choices={'finger': FINGERS})
def pinch(hand: HandView, finger: str = "index", max_distance: float = 0.05) -> bool:
    """Thumb tip touching the given fingertip."""
    lm = hand.landmarks
    return distance_2d(lm.get(TIPS['thumb']), lm.get(TIPS[finger])) < max_distance


@predicate("tips_apart", choices={'first': TIPS, 'second': TIPS})
def tips_apart(
    hand: HandView,
    first: str = "index",
    second: str = "middle",
    min_distance: float = 0.06,
) -> bool:
    """Two fingertips spread at least min_distance apart."""
    lm = hand.landmarks
    return distance_2d(lm.get(TIPS[first]), lm.get(TIPS[second])) >= min_distance


@predicate("thumb_lateral")
def thumb_lateral(hand: HandView, min_offset: float = 0.08) -> bool:
    """Thumb tip pushed sideways away from the index knuckle."""
    lm = hand.landmarks
    return abs(lm.get(TIPS['thumb'])[0] - lm.get(HandLandmarks.INDEX_MCP)[0]) > min_offset


@predicate("thumb_raised")
def thumb_raised(hand: HandView) -> bool:
    """Thumb tip sits above the index knuckle along the hand axis."""
    lm = hand.landmarks
    fux, fuy = hand_axis(lm)
    wrist = lm.get(HandLandmarks.WRIST)
    thumb = lm.get(TIPS['thumb'])
    knuckle = lm.get(HandLandmarks.INDEX_MCP)
    thumb_proj = (thumb[0] - wrist[0]) * fux + (thumb[1] - wrist[1]) * fuy
    knuckle_proj = (knuckle[0] - wrist[0]) * fux + (knuckle[1] - wrist[1]) * fuy
    return thumb_proj > knuckle_proj


# ---------------------------------------------------------------------------
# Orientation predicates
# ---------------------------------------------------------------------------

@predicate("horizontal", choices={'finger': FINGERS})
def horizontal(hand: HandView, finger: str = "index", ratio: float = 1.5) -> bool:
    """Finger lies sideways: lateral span exceeds vertical span by ratio."""
    mcp_idx, _, tip_idx = FINGER_JOINTS[finger]
    tip = hand.landmarks.get(tip_idx)
    mcp = hand.landmarks.get(mcp_idx)
    return abs(tip[0] - mcp[0]) > ratio * abs(tip[1] - mcp[1])


@predicate("pointing_down", choices={'finger': FINGERS})
def pointing_down(hand: HandView, finger: str = "index", margin: float = 0.05) -> bool:
    """Fingertip hangs below its knuckle by at least margin."""
    mcp_idx, _, tip_idx = FINGER_JOINTS[finger]
    return hand.landmarks.get(tip_idx)[1] > hand.landmarks.get(mcp_idx)[1] + margin


# ---------------------------------------------------------------------------
# Motion predicates (need HandHistory)
# ---------------------------------------------------------------------------

_DIRECTIONS = {
    'left': (-1.0, 0.0),
    'right': (1.0, 0.0),
    'up': (0.0, -1.0),
    'down': (0.0, 1.0),
}


@predicate("moving", choices={
    'point': TRACKED_POINTS,
    'direction': (None,) + tuple(_DIRECTIONS),
})
def moving(
    hand: HandView,
    frames: int = 10,
    min_distance: float = 0.06,
    point: str = "wrist",
    direction: Optional[str] = None,
    consistency: float = 0.6,
) -> bool:
    """
    Sustained displacement over the last `frames` samples.

    The net displacement must reach min_distance and at least `consistency`
    of the individual steps must move along it.
    """
    if hand.history is None:
        return False
    motion = hand.history.motion(frames, point)
    if motion is None:
        return False

    dx, dy, mag = motion
    if mag <= 0 or mag < min_distance:
        return False

    ux, uy = dx / mag, dy / mag
    if direction is not None:
        wx, wy = _DIRECTIONS[direction]
        # Within 45 degrees of the requested direction
        if ux * wx + uy * wy < math.sqrt(0.5):
            return False

    samples = hand.history.series(point, frames)
    steps = list(zip(samples, samples[1:]))
    along = sum(
        1 for a, b in steps
        if (b[0] - a[0]) * ux + (b[1] - a[1]) * uy > 0
    )
    return along >= consistency * len(steps)


@predicate("oscillating", choices={'axis': ('x', 'y'), 'point': TRACKED_POINTS})
def oscillating(
    hand: HandView,
    frames: int = 12,
    axis: str = "x",
    min_changes: int = 3,
    min_step: float = 0.002,
    point: str = "wrist",
) -> bool:
    """Back-and-forth motion: sign of the step alternates min_changes times."""
    if hand.history is None:
        return False
    samples = hand.history.series(point, frames)
    if samples is None:
        return False

    k = 0 if axis == "x" else 1
    values = [s[k] for s in samples]
    changes = 0
    for i in range(2, len(values)):
        prev = values[i - 1] - values[i - 2]
        curr = values[i] - values[i - 1]
        if prev * curr < 0 and abs(curr) > min_step:
            changes += 1
    return changes >= min_changes


@predicate("z_stroke", choices={'point': TRACKED_POINTS})
def z_stroke(
    hand: HandView,
    frames: int = 12,
    point: str = "index_tip",
    min_segment: float = 0.03,
    min_drop: float = 0.03,
    min_step: float = 0.002,
) -> bool:
    """
    A "Z" drawn in the air: right, back left, right again, ending lower
    than it started.
    """
    if hand.history is None:
        return False
    samples = hand.history.series(point, frames)
    if samples is None:
        return False

    # Collapse horizontal steps into signed runs
    runs = []
    for a, b in zip(samples, samples[1:]):
        dx = b[0] - a[0]
        if abs(dx) < min_step:
            continue
        sign = 1 if dx > 0 else -1
        if runs and runs[-1][0] == sign:
            runs[-1][1] += abs(dx)
        else:
            runs.append([sign, abs(dx)])

    strokes = []
    for sign, length in runs:
        if length >= min_segment and (not strokes or strokes[-1] != sign):
            strokes.append(sign)

    drop = samples[-1][1] - samples[0][1]
    if drop < min_drop:
        return False
    return any(strokes[i:i + 3] == [1, -1, 1] for i in range(len(strokes) - 2))


# ---------------------------------------------------------------------------
# Two-hand predicates
# ---------------------------------------------------------------------------

@predicate("tips_close", TWO_HAND_PREDICATES, choices={'finger': TIPS})
def tips_close(
    first: HandView,
    second: HandView,
    finger: str = "index",
    max_distance: float = 0.12,
) -> bool:
    """The same fingertip of both hands brought together."""
    tip = TIPS[finger]
    return distance_2d(first.landmarks.get(tip), second.landmarks.get(tip)) < max_distance
