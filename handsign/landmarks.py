"""
Hand landmark geometry: finger states, hand center and face cues.

All measurements are 2-D (x, y) in normalized image coordinates. A z value,
when present, is carried along but never consulted.
"""
import math
from typing import List, Optional, Sequence, Tuple

from .types import FaceCue, FingerState, Landmarks, Point

NUM_HAND_LANDMARKS = 21
CHIN_LANDMARK = 152

WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

# Tip must be this much farther from the wrist than the PIP joint
FINGER_EXTENSION_RATIO = 1.1
# Thumb tip vs. index MCP, measured from the wrist
THUMB_EXTENSION_RATIO = 1.2


class LandmarkError(ValueError):
    """Raised when a landmark set does not describe a complete hand."""


def validate_hand(landmarks: Optional[Landmarks]) -> List[Point]:
    """
    Check the landmark contract and return the points as a list.

    Args:
        landmarks: Sequence of 21 (x, y[, z]) points

    Returns:
        The same points as a list

    Raises:
        LandmarkError: if there are fewer than 21 points or a point has
            fewer than two coordinates
    """
    if landmarks is None:
        raise LandmarkError("No landmarks given")
    points = list(landmarks)
    if len(points) < NUM_HAND_LANDMARKS:
        raise LandmarkError(
            f"Expected {NUM_HAND_LANDMARKS} hand landmarks, got {len(points)}"
        )
    for i, point in enumerate(points[:NUM_HAND_LANDMARKS]):
        if len(point) < 2:
            raise LandmarkError(f"Landmark {i} has fewer than 2 coordinates")
    return points


def dist(a: Point, b: Point) -> float:
    """Euclidean distance between two points in the image plane."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def wrist_dist(landmarks: Landmarks, idx: int) -> float:
    """Distance from the wrist to landmark ``idx``."""
    return dist(landmarks[WRIST], landmarks[idx])


def is_finger_extended(landmarks: Landmarks, tip_idx: int, pip_idx: int) -> bool:
    """A finger is extended when its tip is clearly farther from the wrist than its PIP."""
    return wrist_dist(landmarks, tip_idx) > wrist_dist(landmarks, pip_idx) * FINGER_EXTENSION_RATIO


def is_thumb_extended(landmarks: Landmarks) -> bool:
    """The thumb is measured against the index MCP since its joints sit elsewhere."""
    return wrist_dist(landmarks, THUMB_TIP) > wrist_dist(landmarks, INDEX_MCP) * THUMB_EXTENSION_RATIO


def finger_states(landmarks: Landmarks) -> FingerState:
    """
    Compute the extended/curled state of all five fingers.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        FingerState with one flag per digit
    """
    return FingerState(
        thumb=is_thumb_extended(landmarks),
        index=is_finger_extended(landmarks, INDEX_TIP, INDEX_PIP),
        middle=is_finger_extended(landmarks, MIDDLE_TIP, MIDDLE_PIP),
        ring=is_finger_extended(landmarks, RING_TIP, RING_PIP),
        pinky=is_finger_extended(landmarks, PINKY_TIP, PINKY_PIP),
    )


def fingers_extended(landmarks: Landmarks) -> int:
    """Count the number of extended fingers (0-5)."""
    return finger_states(landmarks).count


def hand_center(landmarks: Landmarks) -> Tuple[float, float]:
    """
    Centroid of all 21 hand landmarks.

    Returns:
        (x, y) coordinates in [0..1] range
    """
    points = landmarks[:NUM_HAND_LANDMARKS]
    x_sum = sum(p[0] for p in points)
    y_sum = sum(p[1] for p in points)
    return (x_sum / len(points), y_sum / len(points))


def is_open_hand(fingers: FingerState) -> bool:
    return fingers.count == 5


def is_fist_with_thumb(fingers: FingerState) -> bool:
    return fingers.thumb and not (fingers.index or fingers.middle or fingers.ring or fingers.pinky)


def is_no_sign(fingers: FingerState) -> bool:
    """Thumb, index and middle out, ring and pinky curled."""
    return fingers.as_tuple() == (True, True, True, False, False)


def shape_name(fingers: FingerState, letter: Optional[str] = None) -> str:
    """
    Coarse hand-shape label stored with each motion frame.

    Gesture detectors key off these names; anything that is not one of the
    named shapes falls back to the frame's letter, or ``unknown``.
    """
    if is_open_hand(fingers):
        return "open"
    if fingers.count == 0:
        return "fist"
    if is_fist_with_thumb(fingers):
        return "fist_thumb"
    if is_no_sign(fingers):
        return "no_sign"
    return letter or "unknown"


def face_cue(face_landmarks: Optional[Sequence[Point]], chin_idx: int = CHIN_LANDMARK) -> FaceCue:
    """
    Build the chin cue for the current frame.

    A missing face (or one too short to contain the chin) yields an empty
    cue; nothing is remembered from earlier frames.
    """
    if not face_landmarks or len(face_landmarks) <= chin_idx:
        return FaceCue(chin_detected=False, chin_position=None)
    chin = face_landmarks[chin_idx]
    return FaceCue(chin_detected=True, chin_position=(chin[0], chin[1]))


def describe_fingers(fingers: FingerState) -> str:
    """Short ``T:1 I:0 M:0 R:0 P:0`` summary for the debug line."""
    t, i, m, r, p = (int(v) for v in fingers.as_tuple())
    return f"T:{t} I:{i} M:{m} R:{r} P:{p}"
