"""
Structured logging with round event logging.
"""

import logging
import logging.handlers
import os
import time
from collections import Counter


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure structured logging for the application."""
    # Compact console format
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    # Verbose format for log file
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(root_logger.level)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    # File handler (rotating)
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class RoundLogger:
    """Logs round outcomes and keeps an in-memory tally for the session."""

    def __init__(self):
        self.logger = logging.getLogger("round_events")
        self._tally = Counter()
        self._started = None

    def log_start(self):
        self._tally.clear()
        self._started = time.time()
        self.logger.info("Game started")

    def log_round(self, gesture_label, outcome, predictions=None):
        """Log one finished round."""
        self._tally[outcome] += 1
        if predictions:
            top = predictions[0]
            detail = f"{top.label} ({top.confidence:.2f})"
        else:
            detail = "N/A"
        self.logger.info(
            "Target: %-12s | Outcome: %-13s | Predicted: %s",
            gesture_label,
            outcome,
            detail,
        )

    def log_stop(self):
        elapsed = time.time() - self._started if self._started else 0.0
        self.logger.info(
            "Game stopped after %d rounds in %.0fs (%d matched)",
            self.total_rounds,
            elapsed,
            self._tally["match"],
        )

    @property
    def tally(self):
        return dict(self._tally)

    @property
    def total_rounds(self):
        return sum(self._tally.values())
