# Tuning configuration loading (filter noise, history window, thresholds)
import json
import os

from .logger import get_logger

DEFAULT_TUNING_PATH = os.path.join(os.path.dirname(__file__), "tuning.json")

logger = get_logger("Config")

def load_tuning(file_path=None):
    """Load tuning values from a JSON file. Falls back to the packaged defaults."""
    path = file_path or DEFAULT_TUNING_PATH
    try:
        with open(path, "r") as f:
            tuning = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("TuningLoadFailed", {"path": path, "error": str(e)})
        return {}

    if not isinstance(tuning, dict):
        logger.error("TuningLoadFailed", {"path": path, "error": "top-level value must be an object"})
        return {}

    logger.info("TuningLoaded", {"path": path, "sections": sorted(tuning.keys())})
    return tuning

class Config:
    """A class to hold the tracker tuning configuration."""
    def __init__(self, tuning_path=None):
        self.tuning = load_tuning(tuning_path)

    @property
    def kalman(self):
        return self.tuning.get("kalman", {})

    @property
    def history(self):
        return self.tuning.get("history", {})

    @property
    def analysis(self):
        return self.tuning.get("analysis", {})

def load_config(file_path=None):
    """Load all configurations."""
    return Config(file_path)
