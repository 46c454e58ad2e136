import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from pipeline.helpers import load_config

ROOT = Path(__file__).resolve().parents[1]
CONFIG_PATH = ROOT / "streamlit_app" / "config.yaml"

API_URL_ENV = "EPOCHGUARD_API_URL"

DEFAULT_TIMEOUTS = {
    "analyze": 30.0,
    "shap_analyze": 10.0,
    "metrics": 10.0,
    "contact": 10.0,
    "stored_shap": 5.0,
}


@dataclass(frozen=True)
class Settings:
    api_url: str = "http://localhost:8000"
    timeouts: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TIMEOUTS))
    max_sample_explanations: int = 4

    def timeout(self, call: str) -> float:
        return self.timeouts.get(call, DEFAULT_TIMEOUTS["metrics"])


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Read the YAML config, then let the environment override the backend URL.
    A missing file falls back to defaults.
    """
    path = Path(path) if path is not None else CONFIG_PATH
    cfg = load_config(path) if path.exists() else {}

    timeouts = dict(DEFAULT_TIMEOUTS)
    for name, seconds in (cfg.get("timeouts") or {}).items():
        timeouts[name] = float(seconds)

    api_url = os.environ.get(API_URL_ENV) or cfg.get("api_url") or Settings.api_url

    return Settings(
        api_url=api_url.rstrip("/"),
        timeouts=timeouts,
        max_sample_explanations=int(
            cfg.get("max_sample_explanations", Settings.max_sample_explanations)
        ),
    )
