import logging
from types import MappingProxyType
from typing import Annotated, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

logger = logging.getLogger("epochguard.schemas")


# ---------------- Engine entities ----------------
class LabelCounts(BaseModel):
    benign: int = Field(ge=0)
    malicious: int = Field(ge=0)

    @property
    def total(self) -> int:
        return self.benign + self.malicious


class Statistics(BaseModel):
    total_samples: int
    benign_nodes: int
    malicious_nodes: int
    benign_percentage: float
    malicious_percentage: float
    average_risk_score: float
    high_risk_nodes: int
    low_risk_nodes: int


class FeatureImportance(BaseModel):
    feature: str
    importance: float
    rank: int


# ---------------- /analyze ----------------
class DataInfo(BaseModel):
    required_features: List[str] = []


class AnalysisData(BaseModel):
    predictions: List[int]
    probabilities: List[float]
    statistics: Statistics
    feature_importance: List[FeatureImportance] = []
    live_shap_analysis: Optional["LiveShapAnalysis"] = None
    data_info: Optional[DataInfo] = None

    @field_validator("live_shap_analysis", mode="wrap")
    @classmethod
    def _drop_unusable_shap(cls, value, handler):
        # predictions stay usable when only the SHAP block is broken
        try:
            return handler(value)
        except ValidationError as e:
            logger.warning("Ignoring unusable live SHAP block (%d error(s))", e.error_count())
            return None


class AnalysisResponse(BaseModel):
    status: str = "success"
    message: str = ""
    data: AnalysisData


class AnalysisResult(BaseModel):
    """
    What the dashboard renders for one analysis run.
    status: remote (backend answered), fallback (local engine), error.
    """

    status: Literal["remote", "fallback", "error"]
    file_name: str
    data: Optional[AnalysisData] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.data is not None


# ---------------- /metrics ----------------
class EnsembleMetrics(BaseModel):
    accuracy: float = Field(ge=0.0, le=1.0)
    precision: float = Field(ge=0.0, le=1.0)
    recall: float = Field(ge=0.0, le=1.0)
    f1_score: float = Field(ge=0.0, le=1.0)


class ModelPerformance(BaseModel):
    hybrid_ensemble: EnsembleMetrics


class MetricsResponse(BaseModel):
    model_performance: ModelPerformance


class MetricsResult(BaseModel):
    source: Literal["remote", "demo"]
    metrics: EnsembleMetrics


# ---------------- /contact ----------------
class ContactMessage(BaseModel):
    name: str
    email: str
    message: str


# ---------------- SHAP: shared pieces ----------------
class HybridMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    dt_weight: float
    rf_weight: float
    dt_accuracy: float = 0.0
    rf_accuracy: float = 0.0


class HybridStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    most_important_feature: str
    top_5_cumulative_percentage: float


class ShapFeature(BaseModel):
    feature: str
    importance: float
    rank: int
    mean_abs_shap_value: Optional[float] = None


# ---------------- SHAP: live backend shape ----------------
class LiveHybridFeature(BaseModel):
    rank: int
    feature: str
    hybrid_shap_value: float


class LiveHybridShap(BaseModel):
    top_5_hybrid_features: List[LiveHybridFeature]
    hybrid_analysis_metadata: HybridMetadata
    hybrid_statistics: Optional[HybridStatistics] = None


class LiveContribution(BaseModel):
    feature: str
    shap_value: float
    feature_value: float = 0.0
    impact_direction: Optional[str] = None


class LiveSampleExplanation(BaseModel):
    sample_id: int
    predicted_class: Literal[0, 1]
    predicted_probability: float
    top_contributing_features: List[LiveContribution] = []


class LiveShapMetadata(BaseModel):
    features_analyzed: int


class LiveShapAnalysis(BaseModel):
    individual_model_shap: List[ShapFeature]
    hybrid_model_shap: LiveHybridShap
    sample_explanations: List[LiveSampleExplanation] = []
    shap_metadata: Optional[LiveShapMetadata] = None


AnalysisData.model_rebuild()


# ---------------- SHAP: demo / stored shape ----------------
class Contribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    shap_value: float
    feature_value: float
    impact: Literal["Increases", "Decreases"]


class DemoContribution(BaseModel):
    shap_value: float
    feature_value: float
    impact: Optional[str] = None


class HybridFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    feature: str
    hybrid_shap_value: float
    dt_contribution: float
    rf_contribution: float


class DemoHybridShap(BaseModel):
    top_5_hybrid_features: List[HybridFeature]
    hybrid_analysis_metadata: HybridMetadata
    hybrid_statistics: HybridStatistics


class DemoSampleExplanation(BaseModel):
    sample_id: int
    actual_label: int
    predicted_probability: float
    prediction: str
    feature_contributions: Dict[str, DemoContribution]


class AnalysisMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_features_analyzed: int
    feature_names: Tuple[str, ...]
    shap_methods: Tuple[str, ...]


class DemoShapAnalysis(BaseModel):
    individual_model_shap: List[ShapFeature]
    hybrid_model_shap: DemoHybridShap
    sample_explanations: List[DemoSampleExplanation] = []
    analysis_metadata: AnalysisMetadata


# ---------------- SHAP: tagged sources ----------------
class LiveShapSource(BaseModel):
    kind: Literal["live"] = "live"
    analysis: LiveShapAnalysis
    feature_names: List[str] = []


class DemoShapSource(BaseModel):
    kind: Literal["demo"] = "demo"
    analysis: DemoShapAnalysis


class LocalShapSource(BaseModel):
    kind: Literal["local"] = "local"
    analysis: LiveShapAnalysis
    feature_names: List[str] = []


ShapSource = Annotated[
    Union[LiveShapSource, DemoShapSource, LocalShapSource],
    Field(discriminator="kind"),
]


# ---------------- SHAP: canonical display model ----------------
class ExplainedFeature(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature: str
    importance: float
    mean_abs_shap_value: float
    rank: int


class HybridShap(BaseModel):
    model_config = ConfigDict(frozen=True)

    top_5_hybrid_features: Tuple[HybridFeature, ...]
    hybrid_analysis_metadata: HybridMetadata
    hybrid_statistics: HybridStatistics


class SampleExplanation(BaseModel):
    model_config = ConfigDict(frozen=True)

    sample_id: int
    actual_label: int
    predicted_probability: float
    prediction: Literal["Malicious", "Benign"]
    feature_contributions: Mapping[str, Contribution]

    @field_validator("feature_contributions")
    @classmethod
    def _read_only(cls, value):
        return MappingProxyType(dict(value))

    @field_serializer("feature_contributions")
    def _as_dict(self, value) -> Dict[str, Contribution]:
        return dict(value)


class ExplanationModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Literal["live", "demo", "local"]
    individual_model_shap: Tuple[ExplainedFeature, ...]
    hybrid_model_shap: HybridShap
    sample_explanations: Tuple[SampleExplanation, ...]
    analysis_metadata: AnalysisMetadata


class ShapAnalysisResult(BaseModel):
    """
    What the SHAP page renders.
    status: live / stored come from the backend, local / demo are fallbacks.
    """

    status: Literal["live", "stored", "local", "demo", "error"]
    file_name: Optional[str] = None
    explanation: Optional[ExplanationModel] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.explanation is not None
