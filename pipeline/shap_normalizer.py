"""
Map every SHAP payload the dashboard can receive onto one ExplanationModel.

Sources:
  - live  : /analyze response, hybrid values without a DT/RF split
  - demo  : stored/pre-computed analysis, split already present
  - local : output of the local engine shaped like a live response
"""

from typing import Dict, List, Optional, Union

from pydantic import TypeAdapter

from api.schemas import (
    AnalysisMetadata,
    Contribution,
    DemoShapSource,
    ExplainedFeature,
    ExplanationModel,
    HybridFeature,
    HybridShap,
    HybridStatistics,
    LiveShapAnalysis,
    LiveShapSource,
    LocalShapSource,
    SampleExplanation,
    ShapFeature,
    ShapSource,
)

LIVE_SHAP_METHODS = ["TreeExplainer", "Live Analysis", "Hybrid Weighting"]
LOCAL_SHAP_METHODS = ["Feature Importance Proxy", "Local Analysis", "Hybrid Weighting"]

_INCREASE_WORDS = ("increase", "positive", "higher")
_DECREASE_WORDS = ("decrease", "negative", "lower")

_SOURCE_ADAPTER = TypeAdapter(ShapSource)


# ---------------- Small helpers ----------------
def _direction_label(direction: Optional[str]) -> Optional[str]:
    if not direction:
        return None
    text = direction.strip().lower()
    if any(word in text for word in _DECREASE_WORDS):
        return "Decreases"
    if any(word in text for word in _INCREASE_WORDS):
        return "Increases"
    return None


def impact_label(shap_value: float, direction: Optional[str] = None) -> str:
    """
    Two-valued impact for one contribution.
    The sign decides; a supplied direction string only breaks a zero.
    """
    if shap_value > 0:
        return "Increases"
    if shap_value < 0:
        return "Decreases"
    return _direction_label(direction) or "Decreases"


def _prediction_label(prediction) -> str:
    if isinstance(prediction, str):
        return "Malicious" if prediction.strip().lower().startswith("mal") else "Benign"
    return "Malicious" if int(prediction) == 1 else "Benign"


def _individual(features: List[ShapFeature]) -> List[ExplainedFeature]:
    return [
        ExplainedFeature(
            feature=f.feature,
            importance=f.importance,
            mean_abs_shap_value=(
                f.mean_abs_shap_value if f.mean_abs_shap_value is not None else f.importance
            ),
            rank=f.rank,
        )
        for f in features
    ]


def hybrid_statistics(
    individual: List[ExplainedFeature],
    top_hybrid: List[HybridFeature],
) -> HybridStatistics:
    """Top feature and the share of total importance held by the top five."""
    total = sum(f.importance for f in individual)
    top = sum(f.hybrid_shap_value for f in top_hybrid[:5])

    if top_hybrid:
        most_important = top_hybrid[0].feature
    elif individual:
        most_important = individual[0].feature
    else:
        most_important = ""

    return HybridStatistics(
        most_important_feature=most_important,
        top_5_cumulative_percentage=round(top / total * 100, 1) if total else 0.0,
    )


# ---------------- Adapters ----------------
def _from_live_shape(
    analysis: LiveShapAnalysis,
    feature_names: List[str],
    source: str,
    shap_methods: List[str],
) -> ExplanationModel:
    metadata = analysis.hybrid_model_shap.hybrid_analysis_metadata
    individual = _individual(analysis.individual_model_shap)

    # weights are taken as given; they need not sum to 1
    top_hybrid = [
        HybridFeature(
            rank=f.rank,
            feature=f.feature,
            hybrid_shap_value=f.hybrid_shap_value,
            dt_contribution=f.hybrid_shap_value * metadata.dt_weight,
            rf_contribution=f.hybrid_shap_value * metadata.rf_weight,
        )
        for f in analysis.hybrid_model_shap.top_5_hybrid_features
    ]

    stats = analysis.hybrid_model_shap.hybrid_statistics
    if stats is None:
        stats = hybrid_statistics(individual, top_hybrid)

    samples = [
        SampleExplanation(
            sample_id=s.sample_id,
            # the backend only reports the predicted class
            actual_label=s.predicted_class,
            predicted_probability=s.predicted_probability,
            prediction=_prediction_label(s.predicted_class),
            feature_contributions={
                c.feature: Contribution(
                    shap_value=c.shap_value,
                    feature_value=c.feature_value,
                    impact=impact_label(c.shap_value, c.impact_direction),
                )
                for c in s.top_contributing_features
            },
        )
        for s in analysis.sample_explanations
    ]

    if analysis.shap_metadata is not None:
        total_features = analysis.shap_metadata.features_analyzed
    else:
        total_features = len(individual)

    return ExplanationModel(
        source=source,
        individual_model_shap=individual,
        hybrid_model_shap=HybridShap(
            top_5_hybrid_features=top_hybrid,
            hybrid_analysis_metadata=metadata,
            hybrid_statistics=stats,
        ),
        sample_explanations=samples,
        analysis_metadata=AnalysisMetadata(
            total_features_analyzed=total_features,
            feature_names=list(feature_names) or [f.feature for f in individual],
            shap_methods=list(shap_methods),
        ),
    )


def _from_live(source: LiveShapSource) -> ExplanationModel:
    return _from_live_shape(source.analysis, source.feature_names, "live", LIVE_SHAP_METHODS)


def _from_local(source: LocalShapSource) -> ExplanationModel:
    return _from_live_shape(source.analysis, source.feature_names, "local", LOCAL_SHAP_METHODS)


def _from_demo(source: DemoShapSource) -> ExplanationModel:
    analysis = source.analysis

    samples = []
    for s in analysis.sample_explanations:
        contributions: Dict[str, Contribution] = {
            feature: Contribution(
                shap_value=c.shap_value,
                feature_value=c.feature_value,
                impact=impact_label(c.shap_value, c.impact),
            )
            for feature, c in s.feature_contributions.items()
        }
        samples.append(SampleExplanation(
            sample_id=s.sample_id,
            actual_label=s.actual_label,
            predicted_probability=s.predicted_probability,
            prediction=_prediction_label(s.prediction),
            feature_contributions=contributions,
        ))

    return ExplanationModel(
        source="demo",
        individual_model_shap=_individual(analysis.individual_model_shap),
        hybrid_model_shap=HybridShap(
            top_5_hybrid_features=list(analysis.hybrid_model_shap.top_5_hybrid_features),
            hybrid_analysis_metadata=analysis.hybrid_model_shap.hybrid_analysis_metadata,
            hybrid_statistics=analysis.hybrid_model_shap.hybrid_statistics,
        ),
        sample_explanations=samples,
        analysis_metadata=analysis.analysis_metadata,
    )


_ADAPTERS = {
    "live": _from_live,
    "demo": _from_demo,
    "local": _from_local,
}


def normalize(source: Union[LiveShapSource, DemoShapSource, LocalShapSource, dict]) -> ExplanationModel:
    """
    Build the canonical ExplanationModel from any supported SHAP source.
    Plain dicts must carry a `kind` tag.
    """
    if isinstance(source, dict):
        source = _SOURCE_ADAPTER.validate_python(source)
    return _ADAPTERS[source.kind](source)
