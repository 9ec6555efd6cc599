"""
Pytest configuration and shared fixtures.
"""
import re
from pathlib import Path

import pytest
from openpyxl import Workbook

from creditpos.errors import TransportError
from creditpos.processor import BatchPaths


CLIENT_RE = re.compile(r"<Codice_Cliente>(.*?)</Codice_Cliente>")


def soap_response(client_code: str) -> str:
    """A response as the endpoint sends it: the message escaped inside <Body>."""
    return (
        '<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soapenv:Body><ser:retrieveCreditPositionResponse xmlns:ser=\"urn:x\">"
        f"<Body>&lt;messaggio cliente=\"{client_code}\"&gt;ok&lt;/messaggio&gt;</Body>"
        "</ser:retrieveCreditPositionResponse></soapenv:Body></soapenv:Envelope>"
    )


def expected_body(client_code: str) -> str:
    return f'<messaggio cliente="{client_code}">ok</messaggio>'


class FakeTransport:
    """Stands in for SoapClient; answers by client code, can fail on a given call."""

    def __init__(self, fail_on_call=None, error=None, responses=None):
        self.envelopes = []
        self.fail_on_call = fail_on_call
        self.error = error or TransportError("Request failed with status 500", status_code=500)
        self.responses = responses or {}

    def send(self, envelope: str) -> str:
        self.envelopes.append(envelope)
        if self.fail_on_call is not None and len(self.envelopes) == self.fail_on_call:
            raise self.error
        client_code = CLIENT_RE.search(envelope).group(1)
        return self.responses.get(client_code, soap_response(client_code))

    @property
    def calls(self):
        return len(self.envelopes)


def write_workbook(path: Path, rows) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    for row in rows:
        ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def batch_paths(tmp_path):
    return BatchPaths(
        input_file=tmp_path / "input.xlsx",
        output_file=tmp_path / "united_output_file.xml",
    )


@pytest.fixture
def credit_env(monkeypatch):
    """Minimal valid CREDITPOS_* environment; other CREDITPOS_* variables cleared."""
    import os

    for key in list(os.environ):
        if key.startswith("CREDITPOS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CREDITPOS_ENDPOINT_URL", "https://services.example.com/ws")
    monkeypatch.setenv("CREDITPOS_USERNAME", "AXTR2505")
    monkeypatch.setenv("CREDITPOS_PASSWORD", "secret")
    return monkeypatch
