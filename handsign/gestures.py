"""
Stabilization of raw per-frame recognition into letters and gestures.
"""
import logging
from collections import deque
from typing import Deque, Optional, Sequence, Tuple

from .config import Cfg, MODES
from .detectors import run_detectors
from .landmarks import describe_fingers, face_cue, finger_states, hand_center, shape_name, validate_hand
from .letters import classify_letter
from .motion import MotionBuffer
from .types import (
    DetectionResult, FaceCue, GestureCycle, GesturePattern, Landmarks,
    MotionDetectionResult, MotionFrame, Point, PoseClassification, RecognitionState,
)

logger = logging.getLogger(__name__)


class HandPresence:
    """
    Hysteresis on hand tracking.

    A hand becomes stably present after ``enter_frames`` consecutive tracked
    frames and stably absent after ``exit_frames`` consecutive misses, so
    brief dropouts don't interrupt recognition.
    """

    def __init__(self, cfg: Cfg):
        self.enter_frames = cfg.presence.enter_frames
        self.exit_frames = cfg.presence.exit_frames
        self.detected_frames = 0
        self.lost_frames = 0
        self.is_stable = False

    def update(self, hand_seen: bool) -> bool:
        """Record one frame and return whether the hand is stably present."""
        if hand_seen:
            self.detected_frames += 1
            self.lost_frames = 0
        else:
            self.lost_frames += 1
            self.detected_frames = 0

        if not self.is_stable and self.detected_frames >= self.enter_frames:
            self.is_stable = True
            logger.debug("Hand stable after %d frames", self.detected_frames)
        elif self.is_stable and self.lost_frames >= self.exit_frames:
            self.is_stable = False
            logger.debug("Hand lost after %d frames", self.lost_frames)

        return self.is_stable

    def reset(self) -> None:
        self.detected_frames = 0
        self.lost_frames = 0
        self.is_stable = False


class TextBuffer:
    """Accumulated output text."""

    def __init__(self):
        self.text = ""

    def append(self, s: str) -> None:
        self.text += s

    def endswith(self, s: str) -> bool:
        return self.text.endswith(s)

    def add_space(self) -> None:
        self.text += " "

    def backspace(self) -> None:
        self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ""


class LetterStabilizer:
    """
    Turns the flickering per-frame letter into committed output.

    A classification qualifies once its confidence clears the threshold and
    the cooldown since the last commit has passed. A letter commits when the
    last ``stable_repeats`` qualifying entries agree. A commit never appends a
    letter the text already ends with.
    """

    def __init__(self, cfg: Cfg, text: TextBuffer):
        self.text = text
        self.min_confidence = cfg.letters.min_confidence
        self.cooldown_s = cfg.letters.cooldown_ms / 1000.0
        self.stable_repeats = cfg.letters.stable_repeats
        self.history: Deque[str] = deque(maxlen=cfg.letters.history_len)
        self.last_commit_time: Optional[float] = None

    def qualifies(self, result: PoseClassification, t_now: float) -> bool:
        if result.letter is None or result.confidence <= self.min_confidence:
            return False
        if self.last_commit_time is not None and t_now - self.last_commit_time <= self.cooldown_s:
            return False
        return True

    def update(self, result: PoseClassification, t_now: float) -> Optional[str]:
        """
        Feed one raw classification.

        Args:
            result: Raw classification of the current frame
            t_now: Current timestamp in seconds

        Returns:
            The letter appended to the text, or None
        """
        if not self.qualifies(result, t_now):
            return None

        letter = result.letter
        if self.history and self.history[-1] != letter:
            # repeat pattern broken, keep only the newest candidate
            self.history.clear()
        self.history.append(letter)

        recent = list(self.history)[-self.stable_repeats:]
        if len(recent) < self.stable_repeats or any(r != letter for r in recent):
            return None

        self.last_commit_time = t_now
        self.history.clear()
        if self.text.endswith(letter):
            logger.debug("Letter %s already at end of text, not repeated", letter)
            return None

        self.text.append(letter)
        logger.info("✅ Letter committed: %s", letter)
        return letter

    def reset(self) -> None:
        self.history.clear()
        self.last_commit_time = None


class GestureArbiter:
    """
    Runs the gesture detectors on a fixed cadence and emits at most one gesture.

    The buffer is cleared after every emission so the same window can't fire
    twice; a cycle without a match leaves it accumulating.
    """

    def __init__(self, cfg: Cfg):
        self.interval_s = cfg.motion.evaluation_interval_ms / 1000.0
        self.last_evaluation_time: Optional[float] = None
        self.last_cycle: Optional[GestureCycle] = None

    def due(self, t_now: float) -> bool:
        if self.last_evaluation_time is None:
            return False
        return t_now - self.last_evaluation_time >= self.interval_s

    def update(self, buffer: MotionBuffer, face: FaceCue, t_now: float) -> Optional[MotionDetectionResult]:
        """
        Evaluate the buffer if the cadence has elapsed.

        Args:
            buffer: Motion buffer owned by the caller
            face: Chin cue of the current tick
            t_now: Current timestamp in seconds

        Returns:
            Result of this cycle, or None if no cycle ran
        """
        if self.last_evaluation_time is None:
            # the first tick starts the clock
            self.last_evaluation_time = t_now
            return None
        if not self.due(t_now):
            return None

        self.last_evaluation_time = t_now
        cycle = run_detectors(buffer, face)
        self.last_cycle = cycle

        if cycle.winner is None:
            logger.debug("No gesture in %d buffered frames", len(buffer))
            return MotionDetectionResult(gesture=None, confidence=0.0, motion_detected=False)

        buffer.clear()
        logger.info("👋 Gesture detected: %s (%.2f)", cycle.winner.type, cycle.winner.confidence)
        return MotionDetectionResult(
            gesture=cycle.winner.type,
            confidence=cycle.winner.confidence,
            motion_detected=True,
        )

    def reset(self) -> None:
        self.last_evaluation_time = None
        self.last_cycle = None


class SignProcessor:
    """
    Main per-tick processor that coordinates letter and gesture recognition.
    """

    def __init__(self, cfg: Cfg, mode: Optional[str] = None):
        """Initialize the processor with configuration."""
        self.cfg = cfg
        self.mode = mode or cfg.display.mode
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode!r}")

        self.presence = HandPresence(cfg)
        self.text = TextBuffer()
        self.letters = LetterStabilizer(cfg, self.text)
        self.buffer = MotionBuffer(cfg.motion.buffer_size)
        self.arbiter = GestureArbiter(cfg)

        self.detection = DetectionResult(letter=None, confidence=0.0, hand_detected=False)
        self.motion = MotionDetectionResult(gesture=None, confidence=0.0, motion_detected=False)
        self.face = FaceCue()
        self.debug = "Show your hand"

    def process_frame(self, landmarks: Optional[Landmarks], t_now: float,
                      face_landmarks: Optional[Sequence[Point]] = None
                      ) -> Tuple[Optional[str], Optional[GesturePattern], RecognitionState]:
        """
        Process one tracker frame.

        Args:
            landmarks: 21 hand landmarks (None if no hand detected)
            t_now: Current timestamp in seconds
            face_landmarks: Face mesh points (None if no face tracked);
                only consulted in motion mode

        Returns:
            Tuple of (committed_letter, emitted_gesture, state)

        Raises:
            LandmarkError: if a hand is given with fewer than 21 landmarks
        """
        points = validate_hand(landmarks) if landmarks is not None else None
        stable = self.presence.update(points is not None)
        if self.mode == "motion":
            face = face_cue(face_landmarks, self.cfg.motion.chin_landmark)
        else:
            face = FaceCue()
        self.face = face
        committed: Optional[str] = None
        gesture: Optional[GesturePattern] = None

        if points is not None:
            fingers = finger_states(points)
            classification = classify_letter(points)
            self.buffer.append(MotionFrame(
                timestamp=t_now,
                hand_center=hand_center(points),
                hand_shape=shape_name(fingers, classification.letter),
                landmarks=points,
                face_landmarks=list(face_landmarks) if face.chin_detected else None,
            ))

            if stable:
                self.detection = DetectionResult(
                    letter=classification.letter,
                    confidence=classification.confidence,
                    hand_detected=True,
                )
                if self.mode == "static":
                    committed = self.letters.update(classification, t_now)
                self.debug = (f"Fingers: {describe_fingers(fingers)} | "
                              f"Letter: {classification.letter or '?'} | "
                              f"Buffer: {len(self.buffer)}/{self.buffer.capacity}")

        if not stable:
            self.detection = DetectionResult(letter=None, confidence=0.0, hand_detected=False)
            self.debug = "Hand lost..." if self.presence.lost_frames > 0 else "Show your hand"

        if self.mode == "motion":
            result = self.arbiter.update(self.buffer, face, t_now)
            if result is not None:
                self.motion = result
                if self.arbiter.last_cycle is not None:
                    gesture = self.arbiter.last_cycle.winner

        return committed, gesture, self.state

    @property
    def state(self) -> RecognitionState:
        return RecognitionState(
            detection=self.detection,
            motion=self.motion,
            text=self.text.text,
            debug=self.debug,
        )

    def set_mode(self, mode: str) -> None:
        """Switch between letter and gesture recognition."""
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r}")
        if mode != self.mode:
            logger.info("Switching mode: %s -> %s", self.mode, mode)
            self.mode = mode
            self.reset()

    def reset(self) -> None:
        """Drop buffered motion, letter history and presence counters."""
        self.buffer.clear()
        self.letters.reset()
        self.presence.reset()
        self.arbiter.reset()
        self.detection = DetectionResult(letter=None, confidence=0.0, hand_detected=False)
        self.face = FaceCue()
        self.motion = MotionDetectionResult(gesture=None, confidence=0.0, motion_detected=False)
        self.debug = "Show your hand"

    def add_space(self) -> None:
        self.text.add_space()

    def backspace(self) -> None:
        self.text.backspace()

    def clear_text(self) -> None:
        self.text.clear()
        self.letters.history.clear()
