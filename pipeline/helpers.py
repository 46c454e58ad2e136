# pipeline/helpers.py
"""
Small helper utilities shared by the engine and the dashboard.
"""

from pathlib import Path
import json

import yaml


def load_config(path):
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_json(path):
    p = Path(path)
    with open(p, "r") as f:
        return json.load(f)


def format_feature_name(name: str) -> str:
    # downtime_percent -> Downtime Percent
    return " ".join(part[:1].upper() + part[1:] for part in name.split("_") if part)
