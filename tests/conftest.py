import numpy as np
import pytest
import requests

from api.client import EpochGuardClient
from api.config import Settings


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


class FakeSession:
    """Records every call; answers from a {(method, path): response|exception} table."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        path = "/" + url.split("://", 1)[-1].split("/", 1)[-1]
        self.calls.append({"method": method, "path": path, "timeout": timeout, **kwargs})
        answer = self.routes.get((method, path))
        if answer is None:
            raise requests.ConnectionError(f"no route to {path}")
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def settings():
    return Settings(api_url="http://backend.test", max_sample_explanations=3)


@pytest.fixture
def offline_client(settings):
    return EpochGuardClient(settings=settings, session=FakeSession())


def make_client(settings, routes):
    return EpochGuardClient(settings=settings, session=FakeSession(routes))


def csv_bytes(header, rows):
    lines = [",".join(header)] + [",".join(str(v) for v in row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")
