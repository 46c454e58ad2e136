import pytest
from pydantic import ValidationError

from api.schemas import DemoShapSource, LiveShapAnalysis, LiveShapSource, LocalShapSource
from pipeline.demo_data import load_demo_shap
from pipeline.shap_normalizer import impact_label, normalize
from payloads import live_payload


def test_live_split_uses_given_weights():
    model = normalize(LiveShapSource(analysis=LiveShapAnalysis.model_validate(live_payload())))

    first = model.hybrid_model_shap.top_5_hybrid_features[0]
    assert model.source == "live"
    assert first.dt_contribution == pytest.approx(0.18 * 0.4)
    assert first.rf_contribution == pytest.approx(0.18 * 0.6)


def test_weights_not_summing_to_one_pass_through():
    model = normalize({"kind": "live", "analysis": live_payload(dt_weight=0.5, rf_weight=0.7)})

    meta = model.hybrid_model_shap.hybrid_analysis_metadata
    assert (meta.dt_weight, meta.rf_weight) == (0.5, 0.7)
    second = model.hybrid_model_shap.top_5_hybrid_features[1]
    assert second.dt_contribution == pytest.approx(0.06)
    assert second.rf_contribution == pytest.approx(0.084)


def test_live_samples_become_feature_mapping():
    model = normalize({"kind": "live", "analysis": live_payload()})

    sample = model.sample_explanations[0]
    assert sample.sample_id == 3
    assert sample.prediction == "Malicious"
    assert sample.actual_label == 1
    assert set(sample.feature_contributions) == {"downtime_percent", "node_latency", "coin_age"}

    down = sample.feature_contributions["downtime_percent"]
    assert (down.shap_value, down.feature_value, down.impact) == (0.3, 80.0, "Increases")
    # sign beats a contradicting direction string
    assert sample.feature_contributions["node_latency"].impact == "Decreases"
    # a zero value falls back to the supplied direction
    assert sample.feature_contributions["coin_age"].impact == "Increases"


def test_live_statistics_computed_when_missing():
    model = normalize({"kind": "live", "analysis": live_payload()})

    stats = model.hybrid_model_shap.hybrid_statistics
    assert stats.most_important_feature == "downtime_percent"
    assert stats.top_5_cumulative_percentage == pytest.approx(75.0)


def test_live_statistics_passed_through_when_present():
    model = normalize({"kind": "live", "analysis": live_payload(with_stats=True)})
    assert model.hybrid_model_shap.hybrid_statistics.top_5_cumulative_percentage == 42.0


def test_live_metadata_and_mean_abs_default():
    model = normalize(LiveShapSource(
        analysis=LiveShapAnalysis.model_validate(live_payload()),
        feature_names=["a", "b"],
    ))

    assert model.analysis_metadata.total_features_analyzed == 3
    assert model.analysis_metadata.feature_names == ("a", "b")
    assert model.individual_model_shap[0].mean_abs_shap_value == 0.2


def test_demo_fixture_passes_split_through():
    model = normalize(DemoShapSource(analysis=load_demo_shap()))

    assert model.source == "demo"
    first = model.hybrid_model_shap.top_5_hybrid_features[0]
    assert (first.dt_contribution, first.rf_contribution) == (0.0387, 0.0580)
    assert model.hybrid_model_shap.hybrid_statistics.top_5_cumulative_percentage == 85.2
    assert [s.prediction for s in model.sample_explanations] == ["Malicious", "Benign"]
    assert len(model.individual_model_shap) == 7


def test_local_source_is_tagged_local():
    model = normalize(LocalShapSource(analysis=LiveShapAnalysis.model_validate(live_payload())))
    assert model.source == "local"
    assert "Local Analysis" in model.analysis_metadata.shap_methods


def test_explanation_model_is_immutable():
    model = normalize({"kind": "live", "analysis": live_payload()})
    with pytest.raises(ValidationError):
        model.source = "demo"


def test_explanation_model_contents_cannot_be_mutated_in_place():
    model = normalize(DemoShapSource(analysis=load_demo_shap()))
    sample = model.sample_explanations[0]

    with pytest.raises(AttributeError):
        model.sample_explanations.clear()
    with pytest.raises(AttributeError):
        model.hybrid_model_shap.top_5_hybrid_features.append(None)
    with pytest.raises(TypeError):
        sample.feature_contributions["downtime_percent"] = None
    assert len(model.sample_explanations) == 2


def test_unknown_kind_is_rejected():
    with pytest.raises(ValidationError):
        normalize({"kind": "mystery", "analysis": {}})


@pytest.mark.parametrize("value,direction,expected", [
    (0.2, None, "Increases"),
    (-0.2, None, "Decreases"),
    (0.0, None, "Decreases"),
    (0.0, "Increases", "Increases"),
    (0.0, "negative", "Decreases"),
    (0.0, "sideways", "Decreases"),
    (-0.5, "increases_risk", "Decreases"),
])
def test_impact_label(value, direction, expected):
    assert impact_label(value, direction) == expected
