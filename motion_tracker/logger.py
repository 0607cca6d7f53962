import logging
import json
import dataclasses
import datetime
import sys
import os

def _to_json(obj):
    """Points and MotionSamples log as nested objects, numpy scalars as numbers."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, "item"):
        return obj.item()
    return str(obj)

class JSONFormatter(logging.Formatter):
    """
    Formatter to output logs in JSON Lines format.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "event": record.msg,  # CamelCase event name, e.g. 'SingularInnovation'
            "data": record.args if isinstance(record.args, dict) else {}
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=_to_json)

def setup_logging(session_id=None, log_file=None, verbose=False, log_dir="logs"):
    """
    Configures the root logger to write to a JSONL file and the console.

    Args:
        session_id (str): Optional ID to include in the filename (e.g. 'cam0').
                          If None, a timestamp is used.
        log_file (str): Specific path to log file. If provided, overrides dynamic naming.
        verbose (bool): If True, enable DEBUG level (per-frame estimates) and show logs on console.
        log_dir (str): Directory used when log_file is not given.

    Returns:
        str: Path of the JSONL log file.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if not verbose else logging.DEBUG)

    # clear existing handlers to avoid duplicates if re-initialized
    root_logger.handlers = []

    if log_file is None:
        os.makedirs(log_dir, exist_ok=True)

        if session_id:
            filename = f"tracking_{session_id}.jsonl"
        else:
            # Format: tracking_YYYY-MM-DD_HH-MM-SS.jsonl
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            filename = f"tracking_{timestamp}.jsonl"

        log_file = os.path.join(log_dir, filename)
    elif os.path.dirname(log_file):
        os.makedirs(os.path.dirname(log_file), exist_ok=True)

    # 1. File Handler (JSONL)
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.INFO if not verbose else logging.DEBUG)
    root_logger.addHandler(file_handler)

    # 2. Console Handler (Human Readable)
    # [TIME] [LEVEL] [COMPONENT] Event
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
    ))
    # Rejected samples and skipped updates are warnings; always surface them
    console_handler.setLevel(logging.WARNING if not verbose else logging.DEBUG)
    root_logger.addHandler(console_handler)

    logging.info("LoggingInitialized", {"log_file": log_file})
    return log_file

def get_logger(name):
    """
    Returns a logger instance with the given name.
    """
    return logging.getLogger(name)

def log_sample(logger, event, sample, level=logging.DEBUG, **extra):
    """
    Log one MotionSample as a per-frame event.

    Per-frame events are DEBUG by default, so they only reach the JSONL
    file when setup_logging(verbose=True) was used.
    """
    if not logger.isEnabledFor(level):
        return
    data = {
        "timestamp": sample.timestamp,
        "position": sample.position,
        "velocity": sample.velocity,
        "acceleration": sample.acceleration,
    }
    data.update(extra)
    logger.log(level, event, data)
