"""
Sign Language Recognition Core

Classifies MediaPipe hand landmarks into static ASL letters (A-Z) and a small
vocabulary of dynamic gestures, with debouncing and gesture arbitration.
"""

__version__ = "0.1.0"

from .types import (
    FingerState, PoseClassification, MotionFrame, FaceCue, GesturePattern,
    GestureCycle, DetectionResult, MotionDetectionResult, RecognitionState, PresenterProto,
)
from .config import load_config, Cfg
from .presenter_mock import MockPresenter
from .landmarks import LandmarkError, finger_states, fingers_extended, hand_center, face_cue
from .letters import classify_letter
from .motion import MotionBuffer
from .detectors import run_detectors
from .gestures import HandPresence, LetterStabilizer, GestureArbiter, TextBuffer, SignProcessor

__all__ = [
    "FingerState",
    "PoseClassification",
    "MotionFrame",
    "FaceCue",
    "GesturePattern",
    "GestureCycle",
    "DetectionResult",
    "MotionDetectionResult",
    "RecognitionState",
    "PresenterProto",
    "load_config",
    "Cfg",
    "MockPresenter",
    "LandmarkError",
    "finger_states",
    "fingers_extended",
    "hand_center",
    "face_cue",
    "classify_letter",
    "MotionBuffer",
    "run_detectors",
    "HandPresence",
    "LetterStabilizer",
    "GestureArbiter",
    "TextBuffer",
    "SignProcessor",
]
