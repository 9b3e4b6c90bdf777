import json
import os
from datetime import datetime

from rich.console import Console

console = Console()

DEFAULT_CONFIG = {
    "start_state": "0",
    "halt_state": "halt",
    "max_steps": None,
    "max_tape_cells": None,
    "mode": "r",
    "log_runs": False,
    "trace_steps": False,
    "output_directory": "logs/",
    "log_file_prefix": "turing_"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "start_state": str,
    "halt_state": str,
    "max_steps": (int, type(None)),
    "max_tape_cells": (int, type(None)),
    "mode": str,
    "log_runs": bool,
    "trace_steps": bool,
    "output_directory": str,
    "log_file_prefix": str
}

MODES = ("r", "d")


def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass; reject it for the numeric limits
        wrong_bool = isinstance(config[key], bool) and expected_type is not bool
        if wrong_bool or not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    for key in ("start_state", "halt_state"):
        if not config[key] or config[key] == "*":
            raise ValueError(f"Config key '{key}' must be a non-empty state name other than '*'.")

    for key in ("max_steps", "max_tape_cells"):
        if config[key] is not None and config[key] <= 0:
            raise ValueError(f"Config key '{key}' must be positive or null.")

    if config["mode"] not in MODES:
        raise ValueError(f"Config key 'mode' must be one of {MODES}, got {config['mode']!r}.")


def default_config():
    config = DEFAULT_CONFIG.copy()
    validate_config(config)
    return config


def load_config(path="config/runtime_config.json", verbose=False):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    if config["log_runs"]:
        os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        console.print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            console.print(f"  {key}: {value}")

    return config
