import pandas as pd

from api.schemas import ExplanationModel, SampleExplanation
from pipeline.helpers import format_feature_name


def individual_frame(model: ExplanationModel) -> pd.DataFrame:
    """Individual (Random Forest) ranking, ready for st.bar_chart."""
    df = pd.DataFrame([
        {
            "rank": f.rank,
            "feature": format_feature_name(f.feature),
            "importance": f.importance or f.mean_abs_shap_value,
        }
        for f in model.individual_model_shap
    ], columns=["rank", "feature", "importance"])

    return df.sort_values("rank").reset_index(drop=True)


def hybrid_frame(model: ExplanationModel) -> pd.DataFrame:
    """
    Hybrid ranking with the DT/RF split of each value.
    Shares are relative to the hybrid value, zero when it is zero.
    """
    rows = []
    for f in model.hybrid_model_shap.top_5_hybrid_features:
        total = f.hybrid_shap_value
        rows.append({
            "rank": f.rank,
            "feature": format_feature_name(f.feature),
            "hybrid_shap_value": total,
            "dt_contribution": f.dt_contribution,
            "rf_contribution": f.rf_contribution,
            "dt_share_pct": round(f.dt_contribution / total * 100, 1) if total else 0.0,
            "rf_share_pct": round(f.rf_contribution / total * 100, 1) if total else 0.0,
        })

    return pd.DataFrame(rows, columns=[
        "rank", "feature", "hybrid_shap_value",
        "dt_contribution", "rf_contribution", "dt_share_pct", "rf_share_pct"
    ])


def comparison_frame(model: ExplanationModel, top_n: int = 5) -> pd.DataFrame:
    """Individual vs hybrid value for the top features, position by position."""
    individual = model.individual_model_shap[:top_n]
    hybrid = model.hybrid_model_shap.top_5_hybrid_features[:top_n]

    rows = []
    for ind, hyb in zip(individual, hybrid):
        ind_value = ind.importance or ind.mean_abs_shap_value
        delta = hyb.hybrid_shap_value - ind_value
        if delta > 0:
            direction = "↑"
        elif delta < 0:
            direction = "↓"
        else:
            direction = "="

        rows.append({
            "feature": format_feature_name(ind.feature),
            "individual": ind_value,
            "hybrid": hyb.hybrid_shap_value,
            "delta": round(abs(delta), 4),
            "direction": direction,
        })

    return pd.DataFrame(rows, columns=["feature", "individual", "hybrid", "delta", "direction"])


def sample_frame(sample: SampleExplanation) -> pd.DataFrame:
    df = pd.DataFrame([
        {
            "feature": format_feature_name(name),
            "feature_value": round(c.feature_value, 2),
            "shap_value": round(c.shap_value, 3),
            "impact": f"{c.impact} Risk",
        }
        for name, c in sample.feature_contributions.items()
    ], columns=["feature", "feature_value", "shap_value", "impact"])

    df["abs"] = df["shap_value"].abs()
    df = df.sort_values("abs", ascending=False).drop(columns="abs")

    return df.reset_index(drop=True)
