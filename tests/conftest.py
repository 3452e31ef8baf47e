"""
Shared fixtures for the sendBeneficiaries tests.
"""

import json

import pytest


class MockResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, json_data=None, text=None, reason="OK"):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = text.encode("utf-8")
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        # Raises ValueError for non-JSON bodies, like requests does
        return json.loads(self.text)


class PostRecorder:
    """Replacement for requests.post that records calls and replays responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, headers=None, json=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def mock_post(monkeypatch):
    """Install a PostRecorder as requests.post."""
    def install(*responses):
        recorder = PostRecorder(*responses)
        monkeypatch.setattr("requests.post", recorder)
        return recorder
    return install


@pytest.fixture
def beneficiary_csv(tmp_path):
    """A two-row beneficiary CSV."""
    content = (
        "beneficiary.bank_details.account_name,beneficiary.bank_details.bank_country_code,"
        "beneficiary.bank_details.account_number,payment_methods,nickname\n"
        "Acme Pty Ltd,AU,123456789,LOCAL,acme\n"
        "Globex Ltd,GB,31926819,\"LOCAL,SWIFT\",\n"
    )
    path = tmp_path / "beneficiaries.csv"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_credentials(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    for name in ("CLIENT_ID", "API_KEY", "AIRWALLEX_TOKEN", "AWX_BASE_URL", "AWX_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
