"""
Test cases for gesture detectors with synthetic hand trajectories.
"""
import math
import unittest
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from handsign.detectors import (
    detect_hello, detect_thank_you, detect_please, detect_help, detect_love,
    detect_sorry, detect_yes, detect_no, run_detectors, turn_angles,
)
from handsign.motion import MotionBuffer
from handsign.types import FaceCue, GesturePattern
from hand_fixtures import motion_frames, circle, path_from_turns, fist, no_sign_hand


def names(cycle):
    return [p.type for p in cycle.matched]


class TestTurnAngles(unittest.TestCase):

    def test_straight_line(self):
        points = np.array([(0.1 * i, 0.5) for i in range(5)])
        np.testing.assert_allclose(turn_angles(points), np.zeros(3), atol=1e-12)

    def test_still_frames_skipped(self):
        points = np.array([(0.0, 0.0), (0.0, 0.0), (0.1, 0.0), (0.1, 0.1)])
        np.testing.assert_allclose(turn_angles(points), [math.pi / 2])

    def test_too_few_moves(self):
        self.assertEqual(len(turn_angles(np.array([(0.0, 0.0), (0.1, 0.0)]))), 0)


class TestHello(unittest.TestCase):

    def test_forehead_wave(self):
        """Hand at y=0.3 moving from x=0.6 to x=0.5 over 8 frames."""
        frames = motion_frames([(0.6 - 0.1 * i / 7, 0.3) for i in range(8)])
        self.assertEqual(detect_hello(frames), GesturePattern("hello", True, 0.8))
        self.assertEqual(run_detectors(frames).winner.type, "hello")

    def test_large_move_right(self):
        frames = motion_frames([(0.4 + 0.1 * i / 7, 0.3) for i in range(8)])
        self.assertIsNotNone(detect_hello(frames))

    def test_too_low(self):
        frames = motion_frames([(0.6 - 0.1 * i / 7, 0.5) for i in range(8)])
        self.assertIsNone(detect_hello(frames))

    def test_short_window(self):
        frames = motion_frames([(0.6 - 0.1 * i / 6, 0.3) for i in range(7)])
        self.assertIsNone(detect_hello(frames))


class TestThankYou(unittest.TestCase):

    def setUp(self):
        self.frames = motion_frames([(0.5 + 0.02 * i, 0.55) for i in range(6)],
                                    shapes=["open"] + ["unknown"] * 5)

    def test_without_face(self):
        self.assertEqual(detect_thank_you(self.frames), GesturePattern("thank_you", True, 0.8))

    def test_near_chin(self):
        face = FaceCue(chin_detected=True, chin_position=(0.5, 0.5))
        self.assertEqual(detect_thank_you(self.frames, face), GesturePattern("thank_you", True, 0.9))

    def test_far_from_chin(self):
        """A tracked chin far from the start rules the gesture out."""
        face = FaceCue(chin_detected=True, chin_position=(0.5, 0.2))
        self.assertIsNone(detect_thank_you(self.frames, face))

    def test_requires_open_hand(self):
        frames = motion_frames([(0.5 + 0.02 * i, 0.55) for i in range(6)], shapes="fist")
        self.assertIsNone(detect_thank_you(frames))

    def test_requires_forward_move(self):
        frames = motion_frames([(0.5 + 0.01 * i, 0.55) for i in range(6)], shapes="open")
        self.assertIsNone(detect_thank_you(frames))


class TestCircles(unittest.TestCase):

    def test_please_full_circle(self):
        frames = motion_frames(circle(10, 0.1), shapes=["open"] + ["unknown"] * 9)
        self.assertEqual(detect_please(frames), GesturePattern("please", True, 0.85))
        self.assertEqual(run_detectors(frames).winner.type, "please")

    def test_please_needs_ten_frames(self):
        frames = motion_frames(circle(9, 0.1), shapes=["open"] + ["unknown"] * 8)
        self.assertIsNone(detect_please(frames))

    def test_sorry_quarter_circle(self):
        """The ten-frame quarter circle triggers sorry with either point spacing."""
        for closed in (False, True):
            with self.subTest(closed=closed):
                frames = motion_frames(circle(10, 0.1, sweep=math.pi / 2, closed=closed), shapes="fist_thumb")
                self.assertEqual(detect_sorry(frames), GesturePattern("sorry", True, 0.8))
                self.assertIsNone(detect_please(frames))
                cycle = run_detectors(frames)
                self.assertEqual(cycle.winner, GesturePattern("sorry", True, 0.8))
                self.assertNotIn("please", names(cycle))

    def test_sorry_measures_seven_turns(self):
        points = np.array(circle(10, 0.1, sweep=math.pi / 2)[-9:])
        turns = turn_angles(points)
        self.assertEqual(len(turns), 7)
        self.assertGreater(turns.sum(), math.pi / 3 + 0.02)

    def test_sorry_short_window(self):
        frames = motion_frames(circle(8, 0.1, sweep=math.pi / 2, closed=True), shapes="fist_thumb")
        self.assertIsNone(detect_sorry(frames))

    def test_broad_circle_is_not_sorry(self):
        frames = motion_frames(circle(10, 0.1), shapes="fist_thumb")
        self.assertIsNone(detect_sorry(frames))

    def test_sorry_requires_fist_thumb(self):
        frames = motion_frames(circle(10, 0.1, sweep=math.pi / 2, closed=True), shapes="open")
        self.assertIsNone(detect_sorry(frames))


class TestVerticalAndClosing(unittest.TestCase):

    def test_help_lift(self):
        frames = motion_frames([(0.5, 0.6 - 0.03 * i) for i in range(6)], shapes="open")
        self.assertEqual(detect_help(frames), GesturePattern("help", True, 0.8))

    def test_help_drop_is_not_help(self):
        frames = motion_frames([(0.5, 0.45 + 0.03 * i) for i in range(6)], shapes="open")
        self.assertIsNone(detect_help(frames))

    def test_love_closing_in(self):
        frames = motion_frames([(0.6, 0.5), (0.52, 0.5), (0.5, 0.5), (0.48, 0.5)])
        self.assertEqual(detect_love(frames), GesturePattern("love", True, 0.75))

    def test_love_still_hand(self):
        frames = motion_frames([(0.5, 0.5)] * 4)
        self.assertIsNone(detect_love(frames))

    def test_yes_nod(self):
        frames = motion_frames([(0.5, 0.5 + 0.05 * (i % 2)) for i in range(10)], shapes="fist_thumb")
        self.assertEqual(detect_yes(frames), GesturePattern("yes", True, 0.8))

    def test_yes_too_small(self):
        frames = motion_frames([(0.5, 0.5 + 0.005 * (i % 2)) for i in range(10)], shapes="fist_thumb")
        self.assertIsNone(detect_yes(frames))


class TestNo(unittest.TestCase):

    def test_majority_of_frames(self):
        frames = motion_frames([(0.5, 0.5)] * 3, landmarks=[no_sign_hand(), no_sign_hand(), fist()])
        self.assertEqual(detect_no(frames), GesturePattern("no", True, 0.75))

    def test_single_frame_is_not_enough(self):
        frames = motion_frames([(0.5, 0.5)] * 3, landmarks=[no_sign_hand(), fist(), fist()])
        self.assertIsNone(detect_no(frames))


class TestArbitration(unittest.TestCase):

    def test_empty_buffer(self):
        cycle = run_detectors([])
        self.assertIsNone(cycle.winner)
        self.assertEqual(cycle.matched, [])

    def test_reads_live_buffer(self):
        """A motion buffer is read through its trailing window, like a list."""
        frames = motion_frames(circle(10, 0.1, sweep=math.pi / 2), shapes="fist_thumb")
        buffer = MotionBuffer(20)
        for frame in frames:
            buffer.append(frame)
        self.assertEqual(run_detectors(buffer), run_detectors(frames))
        self.assertEqual(run_detectors(buffer).winner.type, "sorry")

    def test_please_suppresses_sorry(self):
        """A wide-then-tight circle satisfies both; only please survives."""
        points = path_from_turns((0.5, 0.5), 0.02, [0.6, 0.6] + [0.25] * 6)
        shapes = ["open", "fist_thumb"] + ["unknown"] * 8
        frames = motion_frames(points, shapes=shapes)
        self.assertIsNotNone(detect_please(frames))
        self.assertIsNotNone(detect_sorry(frames))

        cycle = run_detectors(frames)
        self.assertEqual(cycle.winner.type, "please")
        self.assertNotIn("sorry", names(cycle))

    def test_thank_you_suppresses_yes(self):
        xs = [0.5] * 4 + [0.5 + 0.02 * i for i in range(6)]
        ys = [0.5 + 0.05 * (i % 2) for i in range(10)]
        shapes = ["fist_thumb", "unknown", "unknown", "unknown", "open"] + ["unknown"] * 5
        frames = motion_frames(list(zip(xs, ys)), shapes=shapes)
        self.assertIsNotNone(detect_thank_you(frames))
        self.assertIsNotNone(detect_yes(frames))

        cycle = run_detectors(frames)
        self.assertEqual(cycle.winner, GesturePattern("thank_you", True, 0.8))
        self.assertNotIn("yes", names(cycle))

    def test_priority_order(self):
        """Hello outranks a simultaneous no."""
        frames = motion_frames([(0.6 - 0.1 * i / 7, 0.3) for i in range(8)], landmarks=no_sign_hand())
        cycle = run_detectors(frames)
        self.assertEqual(names(cycle), ["hello", "no"])
        self.assertEqual(cycle.winner.type, "hello")


if __name__ == "__main__":
    unittest.main()
