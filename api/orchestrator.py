"""
Degrade-gracefully wiring between the backend and the local engine.

One remote attempt per call, bounded by its timeout. When it fails the local
engine (or a demo fixture) answers instead. Nothing here raises to the
dashboard: every outcome is a tagged result.
"""

import logging
from typing import Optional

import numpy as np

from api.client import EpochGuardClient
from api.errors import CSVParseError, InvalidFileError, RemoteUnavailableError
from api.schemas import (
    AnalysisResult,
    ContactMessage,
    DemoShapSource,
    LiveShapSource,
    LocalShapSource,
    MetricsResult,
    ShapAnalysisResult,
)
from pipeline.csv_reader import read_csv_upload, validate_csv_file
from pipeline.demo_data import load_demo_metrics, load_demo_shap
from pipeline.local_analysis import analyze_locally
from pipeline.shap_normalizer import normalize

logger = logging.getLogger("epochguard.orchestrator")

FALLBACK_MESSAGE = "Backend unavailable. Showing a locally generated demo analysis."


def _client(client: Optional[EpochGuardClient]) -> EpochGuardClient:
    return client if client is not None else EpochGuardClient()


# ---------------- Main analysis ----------------
def run_analysis(
    file_name: str,
    content: bytes,
    client: Optional[EpochGuardClient] = None,
    rng: Optional[np.random.Generator] = None,
    content_type: Optional[str] = None,
) -> AnalysisResult:
    """
    Idle -> RequestingRemote -> Success
                             -> RemoteFailed -> LocalFallback -> Success | Error
    """
    try:
        validate_csv_file(file_name, content_type)
    except InvalidFileError as e:
        return AnalysisResult(status="error", file_name=file_name, message=str(e))

    client = _client(client)

    # ---------------- Remote attempt ----------------
    try:
        response = client.analyze(file_name, content)
        logger.info("Remote analysis of %s succeeded", file_name)
        return AnalysisResult(
            status="remote",
            file_name=file_name,
            data=response.data,
            message=response.message,
        )
    except RemoteUnavailableError as e:
        logger.warning("Remote analysis failed (%s); falling back to local engine", e)

    # ---------------- Local fallback ----------------
    try:
        rows = read_csv_upload(file_name, content, content_type)
    except CSVParseError as e:
        logger.error("Cannot analyse %s locally: %s", file_name, e)
        return AnalysisResult(status="error", file_name=file_name, message=str(e))

    data = analyze_locally(
        file_name, rows, rng=rng,
        max_samples=client.settings.max_sample_explanations,
    )
    return AnalysisResult(
        status="fallback",
        file_name=file_name,
        data=data,
        message=FALLBACK_MESSAGE,
    )


# ---------------- SHAP analysis ----------------
def run_shap_analysis(
    file_name: str,
    content: bytes,
    client: Optional[EpochGuardClient] = None,
    rng: Optional[np.random.Generator] = None,
    content_type: Optional[str] = None,
) -> ShapAnalysisResult:
    """Live SHAP for an uploaded file, with a local stand-in when the backend is down."""
    try:
        validate_csv_file(file_name, content_type)
    except InvalidFileError as e:
        return ShapAnalysisResult(status="error", file_name=file_name, message=str(e))

    client = _client(client)

    try:
        response = client.analyze(file_name, content, timeout=client.settings.timeout("shap_analyze"))
        live = response.data.live_shap_analysis
        if live is None:
            raise RemoteUnavailableError("/analyze", "response carries no live SHAP analysis")
        feature_names = response.data.data_info.required_features if response.data.data_info else []
        return ShapAnalysisResult(
            status="live",
            file_name=file_name,
            explanation=normalize(LiveShapSource(analysis=live, feature_names=feature_names)),
        )
    except RemoteUnavailableError as e:
        logger.warning("Live SHAP analysis failed (%s); using local explanation", e)

    try:
        rows = read_csv_upload(file_name, content, content_type)
    except CSVParseError as e:
        logger.error("Cannot explain %s locally: %s", file_name, e)
        return ShapAnalysisResult(status="error", file_name=file_name, message=str(e))

    data = analyze_locally(
        file_name, rows, rng=rng,
        max_samples=client.settings.max_sample_explanations,
    )
    source = LocalShapSource(
        analysis=data.live_shap_analysis,
        feature_names=data.data_info.required_features,
    )
    return ShapAnalysisResult(
        status="local",
        file_name=file_name,
        explanation=normalize(source),
        message="Failed to reach the backend. Showing a local explanation instead.",
    )


def load_stored_shap(client: Optional[EpochGuardClient] = None) -> ShapAnalysisResult:
    """Backend's pre-computed analysis, or the bundled demo fixture."""
    client = _client(client)
    try:
        stored = client.fetch_stored_shap()
        return ShapAnalysisResult(status="stored", explanation=normalize(DemoShapSource(analysis=stored)))
    except RemoteUnavailableError as e:
        logger.warning("Stored SHAP analysis unavailable (%s); using demo data", e)

    return ShapAnalysisResult(
        status="demo",
        explanation=normalize(DemoShapSource(analysis=load_demo_shap())),
        message="Backend unavailable. Showing demo SHAP analysis.",
    )


# ---------------- Metrics / contact ----------------
def load_metrics(client: Optional[EpochGuardClient] = None) -> MetricsResult:
    client = _client(client)
    try:
        return MetricsResult(source="remote", metrics=client.fetch_metrics())
    except RemoteUnavailableError as e:
        logger.warning("Metrics unavailable (%s); using demo metrics", e)
        return MetricsResult(source="demo", metrics=load_demo_metrics())


def submit_contact(message: ContactMessage, client: Optional[EpochGuardClient] = None) -> bool:
    """
    Send the contact form. The user is always told it was sent; a dead
    backend only shows up in the log.
    """
    client = _client(client)
    try:
        client.send_contact(message)
    except RemoteUnavailableError as e:
        logger.warning("Contact message not delivered (%s)", e)
    return True
