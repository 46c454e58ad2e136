from pathlib import Path

from api.schemas import DemoShapAnalysis, EnsembleMetrics, MetricsResponse
from pipeline.helpers import load_json

ROOT = Path(__file__).resolve().parents[1]
ART = ROOT / "models" / "artifacts"


def load_demo_shap() -> DemoShapAnalysis:
    """Pre-computed SHAP analysis shown when the backend has none to offer."""
    return DemoShapAnalysis.model_validate(load_json(ART / "demo_shap_analysis.json"))


def load_demo_metrics() -> EnsembleMetrics:
    payload = MetricsResponse.model_validate(load_json(ART / "demo_metrics.json"))
    return payload.model_performance.hybrid_ensemble
