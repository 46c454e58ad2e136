import logging
from typing import Optional

import requests
from pydantic import ValidationError

from api.config import Settings, load_settings
from api.errors import RemoteUnavailableError
from api.schemas import (
    AnalysisResponse,
    ContactMessage,
    DemoShapAnalysis,
    EnsembleMetrics,
    MetricsResponse,
)

logger = logging.getLogger("epochguard.client")


class EpochGuardClient:
    """
    Thin HTTP client for the classifier backend.
    Every call makes exactly one attempt with an explicit timeout; any failure
    comes out as RemoteUnavailableError.
    """

    def __init__(self, settings: Optional[Settings] = None, session=None):
        self.settings = settings or load_settings()
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.settings.api_url}/{endpoint.lstrip('/')}"

    def _request(self, method: str, endpoint: str, timeout: float, **kwargs) -> dict:
        try:
            resp = self.session.request(method, self._url(endpoint), timeout=timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.Timeout as e:
            raise RemoteUnavailableError(endpoint, f"timed out after {timeout:g}s") from e
        except requests.HTTPError as e:
            raise RemoteUnavailableError(endpoint, _error_detail(e.response)) from e
        except requests.RequestException as e:
            raise RemoteUnavailableError(endpoint, str(e)) from e
        except ValueError as e:
            raise RemoteUnavailableError(endpoint, f"invalid JSON body: {e}") from e

    # ---------------- Endpoints ----------------
    def analyze(self, file_name: str, content: bytes, timeout: Optional[float] = None) -> AnalysisResponse:
        timeout = timeout if timeout is not None else self.settings.timeout("analyze")
        body = self._request(
            "POST", "/analyze", timeout,
            files={"file": (file_name, content, "text/csv")},
        )
        return _parse(AnalysisResponse, body, "/analyze")

    def fetch_metrics(self) -> EnsembleMetrics:
        body = self._request("GET", "/metrics", self.settings.timeout("metrics"))
        return _parse(MetricsResponse, body, "/metrics").model_performance.hybrid_ensemble

    def send_contact(self, message: ContactMessage) -> None:
        self._request("POST", "/contact", self.settings.timeout("contact"), json=message.model_dump())

    def fetch_stored_shap(self) -> DemoShapAnalysis:
        body = self._request("GET", "/shap-analysis", self.settings.timeout("stored_shap"))
        data = body.get("data") if isinstance(body, dict) else None
        return _parse(DemoShapAnalysis, data, "/shap-analysis")


def _parse(model, body, endpoint: str):
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RemoteUnavailableError(endpoint, f"unexpected response shape: {e.error_count()} error(s)") from e


def _error_detail(response) -> str:
    if response is None:
        return "HTTP error without response"
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    return f"HTTP {response.status_code}: {detail or response.reason}"
