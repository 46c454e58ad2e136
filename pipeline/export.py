from datetime import date
from typing import List, Optional

import pandas as pd

from api.schemas import AnalysisData, ExplanationModel
from pipeline.statistics import risk_level

RESULTS_FILE_NAME = "epochguard_analysis_results.csv"
RESULTS_COLUMNS = ["Node_Index", "Prediction", "Risk_Probability", "Risk_Level"]


def results_frame(predictions: List[int], probabilities: List[float]) -> pd.DataFrame:
    """One row per node, Node_Index starting at 1."""
    return pd.DataFrame({
        "Node_Index": range(1, len(predictions) + 1),
        "Prediction": ["Malicious" if p == 1 else "Benign" for p in predictions],
        "Risk_Probability": [f"{p:.4f}" for p in probabilities],
        "Risk_Level": [risk_level(p) for p in probabilities],
    }, columns=RESULTS_COLUMNS)


def results_to_csv(data: AnalysisData) -> str:
    return results_frame(data.predictions, data.probabilities).to_csv(
        index=False, lineterminator="\n"
    )


def shap_export_file_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"epochguard_shap_analysis_{today.isoformat()}.json"


def explanation_to_json(model: ExplanationModel) -> str:
    return model.model_dump_json(indent=2)
