"""
Hand and face landmark tracking using MediaPipe.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional, List, Tuple

from .landmarks import CHIN_LANDMARK

# Hand skeleton edges for drawing
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (0, 9), (9, 10), (10, 11), (11, 12),
    (0, 13), (13, 14), (14, 15), (15, 16),
    (0, 17), (17, 18), (18, 19), (19, 20),
    (5, 9), (9, 13), (13, 17),
]

Point3 = Tuple[float, float, float]


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 0,
                 min_detection_conf: float = 0.5, min_tracking_conf: float = 0.5):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: 0 for the light model, 1 for the full one
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_rgb: np.ndarray) -> Optional[List[Point3]]:
        """
        Process an RGB frame and return hand landmarks.

        Args:
            frame_rgb: Input frame in RGB format

        Returns:
            List of 21 (x, y, z) coordinates, or None if no hand detected
        """
        results = self.hands.process(frame_rgb)

        if results.multi_hand_landmarks:
            # Only the first detected hand is used
            hand_landmarks = results.multi_hand_landmarks[0]
            return [(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark]

        return None

    def close(self) -> None:
        self.hands.close()

    def draw_landmarks(self, frame: np.ndarray, landmarks: List[Point3]) -> np.ndarray:
        """
        Draw the hand skeleton on the frame.

        Args:
            frame: Input frame (BGR)
            landmarks: List of normalized hand landmarks

        Returns:
            Frame with landmarks drawn
        """
        height, width = frame.shape[:2]
        pixels = [(int(p[0] * width), int(p[1] * height)) for p in landmarks]

        for start, end in HAND_CONNECTIONS:
            cv2.line(frame, pixels[start], pixels[end], (230, 200, 20), 2)

        for i, (px, py) in enumerate(pixels):
            if i == 0:
                color = (200, 60, 160)   # wrist
            elif i <= 4:
                color = (60, 60, 235)    # thumb
            elif i <= 8:
                color = (60, 220, 60)    # index
            elif i <= 12:
                color = (40, 230, 230)   # middle
            elif i <= 16:
                color = (0, 140, 255)    # ring
            else:
                color = (230, 200, 20)   # pinky
            cv2.circle(frame, (px, py), 5, color, -1)

        return frame


class FaceTracker:
    """Face mesh tracker; only the chin point is used downstream."""

    def __init__(self, max_num_faces: int = 1, min_detection_conf: float = 0.5,
                 min_tracking_conf: float = 0.5):
        self.mp_face_mesh = mp.solutions.face_mesh
        self.face_mesh = self.mp_face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=max_num_faces,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_rgb: np.ndarray) -> Optional[List[Point3]]:
        """
        Return the face mesh points of the first face, or None.
        """
        results = self.face_mesh.process(frame_rgb)

        if results.multi_face_landmarks:
            face_landmarks = results.multi_face_landmarks[0]
            return [(lm.x, lm.y, lm.z) for lm in face_landmarks.landmark]

        return None

    def close(self) -> None:
        self.face_mesh.close()

    def draw_chin(self, frame: np.ndarray, face_landmarks: List[Point3]) -> np.ndarray:
        height, width = frame.shape[:2]
        chin = face_landmarks[CHIN_LANDMARK]
        cv2.circle(frame, (int(chin[0] * width), int(chin[1] * height)), 8, (0, 0, 255), -1)
        return frame
