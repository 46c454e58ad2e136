import pandas as pd

from pipeline.feature_importance import FEATURE_NAMES
from pipeline.local_analysis import analyze_locally


def _rows():
    return pd.DataFrame({
        "node_id": [str(i) for i in range(20)],
        "downtime_percent": [f"{i * 2.5}" for i in range(20)],
        "node_latency": ["n/a"] * 20,
        "label": ["1"] * 5 + ["0"] * 15,
    })


def test_local_analysis_is_consistent(rng):
    data = analyze_locally("upload.csv", _rows(), rng=rng)

    assert len(data.predictions) == len(data.probabilities) == 20
    assert sum(data.predictions) == 5
    assert data.statistics.malicious_nodes == 5
    assert [f.feature for f in data.feature_importance] == FEATURE_NAMES
    assert data.data_info.required_features == FEATURE_NAMES


def test_local_shap_samples_follow_predictions(rng):
    rows = _rows()
    data = analyze_locally("upload.csv", rows, rng=rng, max_samples=4)
    shap = data.live_shap_analysis

    assert len(shap.sample_explanations) == 4
    assert shap.hybrid_model_shap.hybrid_analysis_metadata.dt_weight == 0.4

    for i, sample in enumerate(shap.sample_explanations):
        assert sample.predicted_class == data.predictions[i]
        assert sample.predicted_probability == round(data.probabilities[i], 4)
        for contrib in sample.top_contributing_features:
            assert (contrib.shap_value > 0) == (sample.predicted_class == 1)

        by_name = {c.feature: c for c in sample.top_contributing_features}
        assert by_name["downtime_percent"].feature_value == float(rows["downtime_percent"].iloc[i])
        # non-numeric or missing columns read as 0
        assert by_name["node_latency"].feature_value == 0.0
        assert by_name["stake_distribution_rate"].feature_value == 0.0
