"""
Type definitions for sign recognition.
"""
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Protocol, Sequence, Tuple, runtime_checkable

Point = Tuple[float, ...]
Landmarks = Sequence[Point]

GestureKind = Literal[
    "hello", "thank_you", "please", "help", "love", "sorry", "yes", "no"
]


@dataclass(frozen=True)
class FingerState:
    """Extended/curled flag for each digit of one frame."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    def as_tuple(self) -> Tuple[bool, bool, bool, bool, bool]:
        return (self.thumb, self.index, self.middle, self.ring, self.pinky)

    @property
    def count(self) -> int:
        """Number of extended fingers (0-5)."""
        return sum(self.as_tuple())


@dataclass(frozen=True)
class PoseClassification:
    """Best-matching letter for one frame."""
    letter: Optional[str]
    confidence: float


@dataclass(frozen=True)
class FaceCue:
    """Chin position of the current frame, if a face is tracked."""
    chin_detected: bool = False
    chin_position: Optional[Tuple[float, float]] = None


@dataclass
class MotionFrame:
    """Per-frame summary kept in the motion buffer."""
    timestamp: float
    hand_center: Tuple[float, float]
    hand_shape: str
    landmarks: List[Point]
    face_landmarks: Optional[List[Point]] = None


@dataclass(frozen=True)
class GesturePattern:
    """Output of a single gesture detector."""
    type: GestureKind
    detected: bool
    confidence: float


@dataclass
class GestureCycle:
    """Result of one arbitration pass over the motion buffer."""
    matched: List[GesturePattern] = field(default_factory=list)
    winner: Optional[GesturePattern] = None


@dataclass
class DetectionResult:
    """Static letter output for the presentation layer."""
    letter: Optional[str]
    confidence: float
    hand_detected: bool


@dataclass
class MotionDetectionResult:
    """Gesture output for the presentation layer."""
    gesture: Optional[GestureKind]
    confidence: float
    motion_detected: bool


@runtime_checkable
class PresenterProto(Protocol):
    """Abstract protocol for whatever shows recognized signs to the user."""

    async def show_letter(self, letter: str, text: str) -> None:
        """Show a committed letter and the full text buffer."""
        ...

    async def show_gesture(self, gesture: GestureKind, confidence: float) -> None:
        """Show an emitted gesture."""
        ...


@dataclass
class RecognitionState:
    """Everything the presentation layer shows for the current tick."""
    detection: DetectionResult
    motion: MotionDetectionResult
    text: str
    debug: str
