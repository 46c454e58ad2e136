import pytest
import requests

from api.errors import RemoteUnavailableError
from api.schemas import ContactMessage
from conftest import FakeResponse, make_client
from payloads import ANALYZE_BODY, METRICS_BODY


def test_analyze_posts_multipart_with_analyze_timeout(settings):
    client = make_client(settings, {("POST", "/analyze"): FakeResponse(body=ANALYZE_BODY)})

    response = client.analyze("nodes.csv", b"a,b\n1,2\n")

    call = client.session.calls[0]
    assert call["timeout"] == 30.0
    assert call["files"]["file"][0] == "nodes.csv"
    assert response.data.statistics.total_samples == 2
    assert response.data.live_shap_analysis is None


def test_metrics_and_contact_use_shorter_timeouts(settings):
    client = make_client(settings, {
        ("GET", "/metrics"): FakeResponse(body=METRICS_BODY),
        ("POST", "/contact"): FakeResponse(body={"status": "ok"}),
    })

    metrics = client.fetch_metrics()
    client.send_contact(ContactMessage(name="Ada", email="ada@example.org", message="hi"))

    assert metrics.f1_score == 0.935
    assert [c["timeout"] for c in client.session.calls] == [10.0, 10.0]
    assert client.session.calls[1]["json"]["email"] == "ada@example.org"
    assert settings.timeout("analyze") > settings.timeout("metrics")


@pytest.mark.parametrize("answer", [
    requests.Timeout("read timed out"),
    requests.ConnectionError("refused"),
    FakeResponse(status_code=500, body={"detail": "model not loaded"}, reason="Server Error"),
    FakeResponse(status_code=404, body=ValueError("not json"), reason="Not Found"),
    FakeResponse(body=ValueError("not json")),
    FakeResponse(body={"data": {"predictions": "nope"}}),
    FakeResponse(body=[1, 2, 3]),
])
def test_every_failure_becomes_remote_unavailable(settings, answer):
    client = make_client(settings, {("POST", "/analyze"): answer})

    with pytest.raises(RemoteUnavailableError) as exc:
        client.analyze("nodes.csv", b"a\n1\n")

    assert exc.value.endpoint == "/analyze"


def test_http_error_detail_is_kept(settings):
    client = make_client(settings, {
        ("GET", "/metrics"): FakeResponse(status_code=503, body={"detail": "warming up"}, reason="Unavailable"),
    })

    with pytest.raises(RemoteUnavailableError) as exc:
        client.fetch_metrics()

    assert "503" in exc.value.reason
    assert "warming up" in exc.value.reason


def test_stored_shap_requires_data_envelope(settings):
    client = make_client(settings, {("GET", "/shap-analysis"): FakeResponse(body={"nothing": 1})})

    with pytest.raises(RemoteUnavailableError):
        client.fetch_stored_shap()
