"""
Static ASL alphabet recognition from a single frame of hand landmarks.

Letters are matched by an ordered rule table. Many letters share a finger
state and are told apart only by finer geometry, so the order of ``RULES`` is
the precedence: the first rule whose predicate holds wins and later rules are
never evaluated.
"""
from typing import Callable, List, NamedTuple, Optional

from .landmarks import (
    INDEX_MCP, INDEX_PIP, INDEX_TIP,
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP,
    PINKY_TIP, RING_TIP, THUMB_TIP,
    dist, finger_states, validate_hand, wrist_dist,
)
from .types import FingerState, Landmarks, PoseClassification

# Thumb-only group
O_THUMB_INDEX_TIP = 0.12
T_THUMB_PIP = 0.12
A_THUMB_INDEX_PIP = 0.15
S_THUMB_INDEX_PIP = 0.15
# Zero-extended group
E_THUMB_TUCK_RATIO = 0.7
# Curved hand
C_SPREAD_MAX = 0.15
C_MIN_EXTENSION = 0.2
C_MAX_EXTENSION = 0.5
# Pointing down, used by P and Q
POINT_DOWN_MARGIN = 0.05
F_THUMB_INDEX_TIP = 0.15
# Index+middle group
U_TIP_GAP = 0.06
R_CROSS_RATIO = 0.8
H_TIP_GAP = 0.08
V_TIP_GAP = 0.05

NO_MATCH = PoseClassification(letter=None, confidence=0.0)

Predicate = Callable[[Landmarks, FingerState], bool]


class LetterRule(NamedTuple):
    letter: str
    confidence: float
    matches: Predicate


def _only(f: FingerState, thumb=False, index=False, middle=False, ring=False, pinky=False) -> bool:
    """True if the finger state is exactly the given combination."""
    return f.as_tuple() == (thumb, index, middle, ring, pinky)


def _index_middle(f: FingerState) -> bool:
    # thumb may be either way
    return f.index and f.middle and not f.ring and not f.pinky


def _thumb_only(f: FingerState) -> bool:
    return _only(f, thumb=True)


def _index_offset(lm: Landmarks):
    """Index tip displacement from its MCP as (dx, dy)."""
    return lm[INDEX_TIP][0] - lm[INDEX_MCP][0], lm[INDEX_TIP][1] - lm[INDEX_MCP][1]


def _index_points_down(lm: Landmarks) -> bool:
    return lm[INDEX_TIP][1] > lm[INDEX_MCP][1] + POINT_DOWN_MARGIN


def _tip_gap(lm: Landmarks) -> float:
    return dist(lm[INDEX_TIP], lm[MIDDLE_TIP])


def _is_e(lm, f):
    return f.count == 0 and wrist_dist(lm, THUMB_TIP) < E_THUMB_TUCK_RATIO * wrist_dist(lm, INDEX_MCP)


def _is_o(lm, f):
    return _thumb_only(f) and dist(lm[THUMB_TIP], lm[INDEX_TIP]) < O_THUMB_INDEX_TIP


def _is_t(lm, f):
    return (_thumb_only(f)
            and dist(lm[THUMB_TIP], lm[INDEX_PIP]) < T_THUMB_PIP
            and dist(lm[THUMB_TIP], lm[MIDDLE_PIP]) < T_THUMB_PIP)


def _is_a(lm, f):
    # thumb against the side of the fist, clear of both index tip and knuckle
    return (_thumb_only(f)
            and dist(lm[THUMB_TIP], lm[INDEX_TIP]) >= O_THUMB_INDEX_TIP
            and dist(lm[THUMB_TIP], lm[INDEX_PIP]) >= A_THUMB_INDEX_PIP)


def _is_s(lm, f):
    return _thumb_only(f) and dist(lm[THUMB_TIP], lm[INDEX_PIP]) < S_THUMB_INDEX_PIP


def _is_b(lm, f):
    return _only(f, index=True, middle=True, ring=True, pinky=True)


def _is_c(lm, f):
    tips = [wrist_dist(lm, i) for i in (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)]
    return (max(tips) - min(tips) < C_SPREAD_MAX
            and min(tips) > C_MIN_EXTENSION
            and max(tips) < C_MAX_EXTENSION)


def _is_m(lm, f):
    return _only(f, index=True, middle=True, ring=True)


def _is_d(lm, f):
    if not _only(f, index=True):
        return False
    dx, dy = _index_offset(lm)
    return dy < 0 and abs(dx) <= 0.5 * abs(dy)


def _is_z(lm, f):
    if not _only(f, index=True):
        return False
    dx, dy = _index_offset(lm)
    return 0.5 * abs(dy) < abs(dx) < 2 * abs(dy)


def _is_g(lm, f):
    if not _only(f, thumb=True, index=True):
        return False
    dx, dy = _index_offset(lm)
    return abs(dx) > abs(dy)


def _is_p(lm, f):
    return _only(f, thumb=True, index=True, middle=True) and _index_points_down(lm)


def _is_q(lm, f):
    return _only(f, thumb=True, index=True) and _index_points_down(lm)


def _is_f(lm, f):
    # index is pressed to the thumb and may read as curled
    return f.middle and f.ring and f.pinky and dist(lm[THUMB_TIP], lm[INDEX_TIP]) < F_THUMB_INDEX_TIP


def _is_u(lm, f):
    if not _index_middle(f):
        return False
    index_up = lm[INDEX_TIP][1] < lm[INDEX_PIP][1]
    middle_up = lm[MIDDLE_TIP][1] < lm[MIDDLE_PIP][1]
    return index_up and middle_up and _tip_gap(lm) < U_TIP_GAP


def _is_r(lm, f):
    if not _index_middle(f):
        return False
    crossed = _tip_gap(lm) < R_CROSS_RATIO * dist(lm[INDEX_PIP], lm[MIDDLE_PIP])
    if not crossed:
        return False
    offsets = [
        (lm[INDEX_TIP][0] - lm[INDEX_MCP][0], lm[INDEX_TIP][1] - lm[INDEX_MCP][1]),
        (lm[MIDDLE_TIP][0] - lm[MIDDLE_MCP][0], lm[MIDDLE_TIP][1] - lm[MIDDLE_MCP][1]),
    ]
    index_up = lm[INDEX_TIP][1] < lm[INDEX_PIP][1]
    middle_up = lm[MIDDLE_TIP][1] < lm[MIDDLE_PIP][1]
    any_vertical = any(abs(dy) > abs(dx) for dx, dy in offsets)
    return not (index_up and middle_up) and any_vertical


def _is_h(lm, f):
    if not _index_middle(f):
        return False
    index_dx, index_dy = _index_offset(lm)
    middle_dx = lm[MIDDLE_TIP][0] - lm[MIDDLE_MCP][0]
    middle_dy = lm[MIDDLE_TIP][1] - lm[MIDDLE_MCP][1]
    horizontal = abs(index_dx) > abs(index_dy) and abs(middle_dx) > abs(middle_dy)
    return horizontal and _tip_gap(lm) < H_TIP_GAP


def _is_k(lm, f):
    return _index_middle(f) and f.thumb


def _is_v(lm, f):
    return _index_middle(f) and not f.thumb and _tip_gap(lm) > V_TIP_GAP


def _is_n(lm, f):
    return _index_middle(f)


def _is_j(lm, f):
    return _only(f, thumb=True, index=True, pinky=True)


def _is_l(lm, f):
    return _only(f, thumb=True, index=True)


def _is_i(lm, f):
    return _only(f, pinky=True)


def _is_y(lm, f):
    return _only(f, thumb=True, pinky=True)


def _is_w(lm, f):
    return f.index and f.middle and f.ring and not f.pinky


def _is_x(lm, f):
    if f.count != 0:
        return False
    tip = wrist_dist(lm, INDEX_TIP)
    return wrist_dist(lm, INDEX_MCP) < tip < wrist_dist(lm, INDEX_PIP)


RULES: List[LetterRule] = [
    LetterRule("E", 0.9, _is_e),
    LetterRule("O", 0.85, _is_o),
    LetterRule("T", 0.8, _is_t),
    LetterRule("A", 0.9, _is_a),
    LetterRule("S", 0.85, _is_s),
    LetterRule("B", 0.9, _is_b),
    LetterRule("C", 0.8, _is_c),
    LetterRule("M", 0.75, _is_m),
    LetterRule("D", 0.9, _is_d),
    LetterRule("Z", 0.7, _is_z),
    LetterRule("G", 0.8, _is_g),
    LetterRule("P", 0.8, _is_p),
    LetterRule("Q", 0.8, _is_q),
    LetterRule("F", 0.8, _is_f),
    LetterRule("U", 0.85, _is_u),
    LetterRule("R", 0.85, _is_r),
    LetterRule("H", 0.85, _is_h),
    LetterRule("K", 0.85, _is_k),
    LetterRule("V", 0.9, _is_v),
    LetterRule("N", 0.75, _is_n),
    LetterRule("J", 0.8, _is_j),
    LetterRule("L", 0.9, _is_l),
    LetterRule("I", 0.9, _is_i),
    LetterRule("Y", 0.9, _is_y),
    LetterRule("W", 0.9, _is_w),
    LetterRule("X", 0.8, _is_x),
]


def match_rule(landmarks: Landmarks, fingers: Optional[FingerState] = None) -> Optional[LetterRule]:
    """Return the first rule that matches, or None."""
    if fingers is None:
        fingers = finger_states(landmarks)
    for rule in RULES:
        if rule.matches(landmarks, fingers):
            return rule
    return None


def classify_letter(landmarks: Landmarks) -> PoseClassification:
    """
    Classify one frame of hand landmarks as an ASL letter.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        PoseClassification with the letter and its rule confidence, or
        ``(None, 0.0)`` when no rule matches

    Raises:
        LandmarkError: if fewer than 21 landmarks are given
    """
    points = validate_hand(landmarks)
    rule = match_rule(points)
    if rule is None:
        return NO_MATCH
    return PoseClassification(letter=rule.letter, confidence=rule.confidence)
