"""
Main application for sign language recognition.
"""
import cv2
import asyncio
import logging
import time
from typing import List, Optional

from .config import load_config, parse_cli_args
from .tracking import HandsTracker, FaceTracker
from .presenter_mock import MockPresenter
from .gestures import SignProcessor

logger = logging.getLogger(__name__)


class SignRecognitionApp:
    """Main application class for sign language recognition."""

    def __init__(self, config_path: Optional[str] = None, mode: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        mp_cfg = self.config.mediapipe
        self.tracker = HandsTracker(
            max_num_hands=mp_cfg.max_num_hands,
            model_complexity=mp_cfg.model_complexity,
            min_detection_conf=mp_cfg.min_detection_confidence,
            min_tracking_conf=mp_cfg.min_tracking_confidence
        )
        self.face_tracker = FaceTracker(
            max_num_faces=mp_cfg.face_max_num_faces,
            min_detection_conf=mp_cfg.min_detection_confidence,
            min_tracking_conf=mp_cfg.min_tracking_confidence
        )
        self.presenter = MockPresenter()
        self.processor = SignProcessor(self.config, mode=mode)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def run(self):
        """Run the main application loop."""
        print(f"Starting {self.config.display.window_name} ({self.processor.mode} mode)")
        print("Keys: space = space, b = backspace, c = clear, m = switch mode, q = quit")
        logger.info("🎥 Camera %d opened", self.config.camera.index)

        while True:
            ret, frame = self.cap.read()
            if not ret:
                print("Failed to read frame from camera")
                break

            # Mirror so the preview moves like the signer
            frame = cv2.flip(frame, 1)
            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

            landmarks = self.tracker.process(frame_rgb)
            face_landmarks = None
            if self.processor.mode == "motion":
                face_landmarks = self.face_tracker.process(frame_rgb)

            committed, gesture, state = self.processor.process_frame(
                landmarks=landmarks,
                t_now=time.time(),
                face_landmarks=face_landmarks
            )

            if committed:
                await self.presenter.show_letter(committed, state.text)
            if gesture:
                await self.presenter.show_gesture(gesture.type, gesture.confidence)

            if landmarks and self.config.display.show_landmarks:
                frame = self.tracker.draw_landmarks(frame, landmarks)
            if face_landmarks and self.config.display.show_landmarks:
                frame = self.face_tracker.draw_chin(frame, face_landmarks)

            if self.processor.mode == "static":
                det = state.detection
                status_text = (f"Letter: {det.letter} ({det.confidence:.2f})"
                               if det.letter else "Letter: -")
            else:
                mot = state.motion
                status_text = (f"Gesture: {mot.gesture} ({mot.confidence:.2f})"
                               if mot.motion_detected else "Gesture: -")
            ok = state.detection.hand_detected

            cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                        (0, 255, 0) if ok else (0, 0, 255), 2)
            cv2.putText(frame, state.debug, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
            cv2.putText(frame, f"Text: {state.text}", (10, frame.shape[0] - 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
            cv2.putText(frame, "space / b / c / m / q", (10, frame.shape[0] - 15),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

            cv2.imshow(self.config.display.window_name, frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            elif key == ord(' '):
                self.processor.add_space()
            elif key == ord('b'):
                self.processor.backspace()
            elif key == ord('c'):
                self.processor.clear_text()
            elif key == ord('m'):
                new_mode = "motion" if self.processor.mode == "static" else "static"
                self.processor.set_mode(new_mode)
                print(f"Mode: {new_mode}")

    def close(self):
        """Release camera and trackers."""
        self.processor.reset()
        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        self.face_tracker.close()
        cv2.destroyAllWindows()
        logger.info("🧹 Tracking stopped")


async def main(argv: Optional[List[str]] = None):
    """Entry point for the application."""
    import sys

    logging.basicConfig(level=logging.INFO)

    try:
        config_path, mode = parse_cli_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"Error: {e}")
        print("Usage: handsign [--config PATH] [--motion]")
        return

    app = None
    try:
        app = SignRecognitionApp(config_path=config_path, mode=mode)
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
    except Exception as e:
        logger.exception("Error: %s", e)
    finally:
        if app is not None:
            app.close()


def cli():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
