import sys
import os
import json
import logging
import tempfile
import unittest
import numpy as np

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from motion_tracker.logger import setup_logging, get_logger, JSONFormatter
from motion_tracker.core.tracking.motion_analyzer import MotionAnalyzer
from motion_tracker.core.models import Point

class TestLogging(unittest.TestCase):
    def setUp(self):
        self.root = logging.getLogger()
        self.saved_handlers = self.root.handlers[:]
        self.saved_level = self.root.level
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers = self.saved_handlers
        self.root.setLevel(self.saved_level)
        self.tmp.cleanup()

    def _read(self, path):
        for handler in self.root.handlers:
            handler.flush()
        with open(path, "r") as f:
            return [json.loads(line) for line in f if line.strip()]

    def test_jsonl_records(self):
        path = setup_logging(log_file=os.path.join(self.tmp.name, "run", "session.jsonl"))
        get_logger("UnitTest").info("FrameSampled", {"x": 1.5, "y": 2.0})

        records = self._read(path)
        self.assertEqual(records[0]["event"], "LoggingInitialized")
        last = records[-1]
        self.assertEqual(last["component"], "UnitTest")
        self.assertEqual(last["event"], "FrameSampled")
        self.assertEqual(last["level"], "INFO")
        self.assertEqual(last["data"], {"x": 1.5, "y": 2.0})

    def test_session_file_naming(self):
        path = setup_logging(session_id="cam0", log_dir=self.tmp.name)
        self.assertEqual(path, os.path.join(self.tmp.name, "tracking_cam0.jsonl"))

    def test_rejected_sample_is_logged(self):
        path = setup_logging(log_file=os.path.join(self.tmp.name, "tracker.jsonl"))
        analyzer = MotionAnalyzer()
        analyzer.track((0.0, 0.0), 1000.0)
        analyzer.track((1.0, 0.0), 1000.0)

        warnings = [r for r in self._read(path) if r["level"] == "WARNING"]
        self.assertEqual(len(warnings), 1)
        self.assertEqual(warnings[0]["component"], "MotionAnalyzer")
        self.assertEqual(warnings[0]["event"], "NonIncreasingTimestamp")
        self.assertEqual(warnings[0]["data"]["last_timestamp"], 1000.0)

    def test_verbose_captures_per_frame_debug(self):
        path = setup_logging(log_file=os.path.join(self.tmp.name, "debug.jsonl"), verbose=True)
        analyzer = MotionAnalyzer()
        analyzer.track((0.0, 0.0), 0.0)
        sample = analyzer.track((1.0, 0.0), 500.0)

        records = {r["event"]: r for r in self._read(path)}
        started = records["TrackingStarted"]["data"]
        self.assertEqual(started["position"], {"x": 0.0, "y": 0.0})
        self.assertEqual(started["velocity"], {"x": 0.0, "y": 0.0})

        tracked = records["MotionTracked"]["data"]
        self.assertEqual(tracked["timestamp"], 500.0)
        self.assertEqual(tracked["dt"], 0.5)
        self.assertEqual(tracked["raw_velocity"], {"x": 2.0, "y": 0.0})
        self.assertEqual(tracked["position"], {"x": sample.position.x, "y": sample.position.y})
        self.assertEqual(tracked["acceleration"], {"x": 0.0, "y": 0.0})

    def test_per_frame_events_skipped_when_not_verbose(self):
        path = setup_logging(log_file=os.path.join(self.tmp.name, "quiet.jsonl"))
        analyzer = MotionAnalyzer()
        analyzer.track((0.0, 0.0), 0.0)
        analyzer.track((1.0, 0.0), 1000.0)

        events = [r["event"] for r in self._read(path)]
        self.assertNotIn("TrackingStarted", events)
        self.assertNotIn("MotionTracked", events)

    def test_formatter_serializes_points_and_numpy(self):
        record = logging.LogRecord("X", logging.INFO, __file__, 1, "Estimate",
                                   ({"position": Point(1.0, 2.0), "det": np.float64(0.5)},), None)
        out = json.loads(JSONFormatter().format(record))
        self.assertEqual(out["data"], {"position": {"x": 1.0, "y": 2.0}, "det": 0.5})

    def test_formatter_without_data(self):
        record = logging.LogRecord("X", logging.INFO, __file__, 1, "TrackerReset", None, None)
        out = json.loads(JSONFormatter().format(record))
        self.assertEqual(out["event"], "TrackerReset")
        self.assertEqual(out["data"], {})

if __name__ == "__main__":
    unittest.main()
