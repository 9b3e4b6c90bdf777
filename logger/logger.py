import json
import os
from datetime import datetime, timezone


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="turing_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    @classmethod
    def from_config(cls, config):
        return cls(config["output_directory"], config["log_file_prefix"])

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")
        return path

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")

    def log_run(self, entry: dict):
        """Log a run summary (status, steps, output or error), timestamped."""
        self.log({"timestamp": datetime.now(timezone.utc).isoformat(), **entry})

    def log_trace(self, entries: list):
        """Log per-step records of a run."""
        return self._log_to_file(f"trace_{self.today}.jsonl", entries)

    @staticmethod
    def step_entry(record):
        return {
            "step": record.step,
            "rule": str(record.rule),
            "state": record.state,
            "symbol": record.symbol
        }
