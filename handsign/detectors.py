"""
Dynamic gesture detectors over the motion buffer.

Every detector is a pure function of the most recent frames (and the chin cue
of the current tick). It looks only at its own trailing window, returns a
GesturePattern when the gesture's kinematic signature is present and None
otherwise, including when the buffer is still too short.
"""
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .landmarks import finger_states, is_no_sign
from .motion import MotionBuffer
from .types import FaceCue, GestureCycle, GestureKind, GesturePattern, MotionFrame

# Frames each detector looks at
HELLO_FRAMES = 8
THANK_YOU_FRAMES = 6
PLEASE_FRAMES = 10
HELP_FRAMES = 6
LOVE_FRAMES = 4
SORRY_FRAMES = 9  # 7 measured turns
YES_FRAMES = 10
NO_FRAMES = 3

# Vertical bands (image y grows downward)
FOREHEAD_MAX_Y = 0.4
CHIN_CHEST_BAND = (0.4, 0.7)
PLEASE_CHEST_BAND = (0.35, 0.65)

HELLO_LEFT_SHIFT = 0.05
HELLO_ANY_SHIFT = 0.08
THANK_YOU_CHIN_TOLERANCE = 0.15
THANK_YOU_FORWARD_SHIFT = 0.06
HELP_RISE = 0.1
LOVE_CLOSING_STEP = 0.05

PLEASE_MIN_TOTAL_TURN = 0.75 * math.pi
PLEASE_MIN_STEP_TURN = 0.1
PLEASE_MIN_TURNING_STEPS = 6

SORRY_TOTAL_TURN = (math.pi / 3, math.pi)
SORRY_STEP_TURN = (0.05, 0.3)
SORRY_MIN_TURNING_STEPS = 4

YES_MIN_REVERSALS = 2
YES_MIN_TRAVEL = 0.1

NO_MIN_VOTES = 2

# Displacements shorter than this carry no heading
_STILL = 1e-6

# A live buffer or a plain list of frames, oldest first
Frames = Union[MotionBuffer, Sequence[MotionFrame]]
Detector = Callable[[Frames, Optional[FaceCue]], Optional[GesturePattern]]


def _window(frames: Frames, k: int) -> Optional[List[MotionFrame]]:
    """Trailing ``k`` frames, or None if the buffer is shorter than that."""
    if len(frames) < k:
        return None
    if isinstance(frames, MotionBuffer):
        return frames.last(k)
    return list(frames)[-k:]


def _centers(frames: Sequence[MotionFrame]) -> np.ndarray:
    return np.array([f.hand_center for f in frames], dtype=np.float64)


def _in_band(value: float, band: Tuple[float, float]) -> bool:
    return band[0] <= value <= band[1]


def turn_angles(points: np.ndarray) -> np.ndarray:
    """
    Unsigned turn between consecutive frame-to-frame motion vectors.

    Args:
        points: (n, 2) array of positions, oldest first

    Returns:
        Array of turns in radians, one per pair of consecutive moves
    """
    steps = np.diff(points, axis=0)
    moving = np.linalg.norm(steps, axis=1) > _STILL
    steps = steps[moving]
    if len(steps) < 2:
        return np.zeros(0)
    headings = np.arctan2(steps[:, 1], steps[:, 0])
    turns = np.diff(headings)
    turns = (turns + math.pi) % (2 * math.pi) - math.pi
    return np.abs(turns)


def detect_hello(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Hand starts at forehead height and moves outward."""
    window = _window(frames, HELLO_FRAMES)
    if window is None:
        return None
    pts = _centers(window)
    if pts[0, 1] >= FOREHEAD_MAX_Y:
        return None
    dx = pts[-1, 0] - pts[0, 0]
    if -dx > HELLO_LEFT_SHIFT or abs(dx) > HELLO_ANY_SHIFT:
        return GesturePattern("hello", True, 0.8)
    return None


def detect_thank_you(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """
    Open hand starts at the chin and moves forward.

    With a tracked chin the start must be near it; without one the start must
    fall in the generic chin/chest band, at lower confidence.
    """
    window = _window(frames, THANK_YOU_FRAMES)
    if window is None or window[0].hand_shape != "open":
        return None
    pts = _centers(window)
    start_y = pts[0, 1]
    if abs(pts[-1, 0] - pts[0, 0]) <= THANK_YOU_FORWARD_SHIFT:
        return None

    if face is not None and face.chin_detected and face.chin_position is not None:
        if abs(start_y - face.chin_position[1]) < THANK_YOU_CHIN_TOLERANCE:
            return GesturePattern("thank_you", True, 0.9)
        return None

    if _in_band(start_y, CHIN_CHEST_BAND):
        return GesturePattern("thank_you", True, 0.8)
    return None


def detect_please(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Open hand rubs a broad circle on the chest."""
    window = _window(frames, PLEASE_FRAMES)
    if window is None or window[0].hand_shape != "open":
        return None
    pts = _centers(window)
    if not _in_band(pts[0, 1], PLEASE_CHEST_BAND) or not _in_band(pts[:, 1].mean(), PLEASE_CHEST_BAND):
        return None

    turns = turn_angles(pts)
    turning = int(np.count_nonzero(turns > PLEASE_MIN_STEP_TURN))
    if turns.sum() > PLEASE_MIN_TOTAL_TURN and turning >= PLEASE_MIN_TURNING_STEPS:
        return GesturePattern("please", True, 0.85)
    return None


def detect_help(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Open hand lifts upward."""
    window = _window(frames, HELP_FRAMES)
    if window is None or window[0].hand_shape != "open":
        return None
    pts = _centers(window)
    if pts[0, 1] - pts[-1, 1] > HELP_RISE:
        return GesturePattern("help", True, 0.8)
    return None


def detect_love(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Hand at the chest closes in toward the center."""
    window = _window(frames, LOVE_FRAMES)
    if window is None:
        return None
    pts = _centers(window)
    if not _in_band(pts[:, 1].mean(), CHIN_CHEST_BAND):
        return None
    offsets = np.abs(pts[:, 0] - pts[:, 0].mean())
    if np.any(offsets[:-1] - offsets[1:] > LOVE_CLOSING_STEP):
        return GesturePattern("love", True, 0.75)
    return None


def detect_sorry(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Fist with thumb out rubs a small, tight circle on the chest."""
    window = _window(frames, SORRY_FRAMES)
    if window is None or window[0].hand_shape != "fist_thumb":
        return None
    pts = _centers(window)
    if not _in_band(pts[:, 1].mean(), CHIN_CHEST_BAND):
        return None

    turns = turn_angles(pts)
    total = turns.sum()
    low, high = SORRY_STEP_TURN
    turning = int(np.count_nonzero((turns > low) & (turns < high)))
    if SORRY_TOTAL_TURN[0] < total < SORRY_TOTAL_TURN[1] and turning >= SORRY_MIN_TURNING_STEPS:
        return GesturePattern("sorry", True, 0.8)
    return None


def detect_yes(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Fist with thumb out nods up and down."""
    window = _window(frames, YES_FRAMES)
    if window is None or window[0].hand_shape != "fist_thumb":
        return None
    dy = np.diff(_centers(window)[:, 1])
    signs = np.sign(dy[dy != 0])
    reversals = int(np.count_nonzero(signs[1:] != signs[:-1]))
    if reversals >= YES_MIN_REVERSALS and np.abs(dy).sum() > YES_MIN_TRAVEL:
        return GesturePattern("yes", True, 0.8)
    return None


def detect_no(frames: Frames, face: Optional[FaceCue] = None) -> Optional[GesturePattern]:
    """Thumb, index and middle held out in most of the last few frames."""
    window = _window(frames, NO_FRAMES)
    if window is None:
        return None
    votes = sum(1 for f in window if is_no_sign(finger_states(f.landmarks)))
    if votes >= NO_MIN_VOTES:
        return GesturePattern("no", True, 0.75)
    return None


# (name, detector, priority); lower priority wins
DETECTORS: List[Tuple[GestureKind, Detector, int]] = [
    ("hello", detect_hello, 0),
    ("thank_you", detect_thank_you, 1),
    ("please", detect_please, 2),
    ("help", detect_help, 3),
    ("love", detect_love, 4),
    ("sorry", detect_sorry, 5),
    ("yes", detect_yes, 6),
    ("no", detect_no, 7),
]

# gesture -> gesture whose match in the same cycle suppresses it
SUPPRESSED_BY: Dict[GestureKind, GestureKind] = {
    "sorry": "please",
    "yes": "thank_you",
}


def run_detectors(frames: Frames, face: Optional[FaceCue] = None) -> GestureCycle:
    """
    Run every detector over one buffer snapshot and pick at most one gesture.

    Matches are collected in priority order, then the suppression pairs are
    applied; the first surviving match is the winner.
    """
    matched: List[GesturePattern] = []
    for name, detector, _priority in sorted(DETECTORS, key=lambda d: d[2]):
        pattern = detector(frames, face)
        if pattern is not None and pattern.detected:
            matched.append(pattern)

    names = {p.type for p in matched}
    survivors = [p for p in matched if SUPPRESSED_BY.get(p.type) not in names]
    return GestureCycle(matched=survivors, winner=survivors[0] if survivors else None)
