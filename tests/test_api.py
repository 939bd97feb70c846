"""
API endpoint tests for the vietqr FastAPI application.
"""

import base64
import logging

import pytest

from tests.conftest import DYNAMIC_PAYLOAD, STATIC_PAYLOAD
from vietqr.services.errors import RenderingFailure

DYNAMIC_REQUEST = {
    "bank_bin": "970436",
    "account_number": "1234567890",
    "amount": 25000,
    "purpose": "Thanh toan don hang",
    "merchant_name": "My Store",
}


class TestSystemEndpoints:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics(self, test_client, api_headers):
        test_client.post("/v1/qr", json=DYNAMIC_REQUEST, headers=api_headers)
        response = test_client.get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers.get("content-type", "")
        assert "vietqr_payloads_generated_total" in response.text
        assert "vietqr_payload_length_chars_count" in response.text

    def test_request_metrics(self, test_client):
        test_client.get("/health")
        text = test_client.get("/metrics").text
        assert 'vietqr_http_requests_total{method="GET",route="/health",status="200"}' in text
        assert 'vietqr_http_request_duration_seconds_count{method="GET",route="/health"}' in text


class TestGenerateQr:
    def test_requires_api_key(self, test_client):
        response = test_client.post("/v1/qr", json=DYNAMIC_REQUEST)
        assert response.status_code == 422

    def test_rejects_wrong_api_key(self, test_client):
        response = test_client.post("/v1/qr", json=DYNAMIC_REQUEST, headers={"X-API-Key": "nope"})
        assert response.status_code == 401

    def test_dynamic(self, test_client, api_headers):
        response = test_client.post("/v1/qr", json=DYNAMIC_REQUEST, headers=api_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["payload"] == DYNAMIC_PAYLOAD
        assert data["crc"] == "E9D5"
        assert data["point_of_initiation"] == "12"
        assert base64.b64decode(data["qr_png_base64"])[:4] == b"\x89PNG"

    def test_static(self, test_client, api_headers):
        body = {"bank_bin": "970415", "account_number": "0987654321", "amount": 0, "merchant_name": "Nguyen Van A"}
        response = test_client.post("/v1/qr", json=body, headers=api_headers)
        assert response.status_code == 200
        assert response.json()["payload"] == STATIC_PAYLOAD
        assert response.json()["point_of_initiation"] == "11"

    def test_non_numeric_bank_bin(self, test_client, api_headers):
        body = {**DYNAMIC_REQUEST, "bank_bin": "ABCDEF"}
        response = test_client.post("/v1/qr", json=body, headers=api_headers)
        assert response.status_code == 422

    def test_negative_amount(self, test_client, api_headers):
        body = {**DYNAMIC_REQUEST, "amount": -1}
        response = test_client.post("/v1/qr", json=body, headers=api_headers)
        assert response.status_code == 422

    def test_value_too_long(self, test_client, api_headers):
        body = {**DYNAMIC_REQUEST, "purpose": "x" * 120}
        response = test_client.post("/v1/qr", json=body, headers=api_headers)
        assert response.status_code == 422
        assert response.json()["code"] == "ERR_VALUE_TOO_LONG"

    def test_image(self, test_client, api_headers):
        response = test_client.post("/v1/qr/image", json=DYNAMIC_REQUEST, headers=api_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-vietqr-crc"] == "E9D5"
        assert response.content[:4] == b"\x89PNG"


class TestVerifyQr:
    def test_valid_payload(self, test_client, api_headers):
        response = test_client.post("/v1/qr/verify", json={"payload": DYNAMIC_PAYLOAD}, headers=api_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["crc_valid"] is True
        assert data["bank_bin"] == "970436"
        assert data["account_number"] == "1234567890"
        assert data["amount"] == "25000"
        assert data["purpose"] == "Thanh toan don hang"

    def test_tampered_payload(self, test_client, api_headers):
        tampered = STATIC_PAYLOAD.replace("Nguyen Van A", "Nguyen Van B")
        response = test_client.post("/v1/qr/verify", json={"payload": tampered}, headers=api_headers)
        assert response.status_code == 200
        assert response.json()["crc_valid"] is False

    def test_malformed_payload(self, test_client, api_headers):
        response = test_client.post("/v1/qr/verify", json={"payload": "0002"}, headers=api_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "ERR_BAD_PAYLOAD"


class _FailingGenerator:
    title = "vietqr"

    def create(self, options):
        raise RuntimeError("generator exploded")


@pytest.fixture
def failing_client():
    from fastapi.testclient import TestClient

    from vietqr.api import app, get_generator

    app.dependency_overrides[get_generator] = _FailingGenerator
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestErrorHandling:
    def test_unhandled_exception(self, failing_client, api_headers):
        response = failing_client.post("/v1/qr", json=DYNAMIC_REQUEST, headers=api_headers)
        assert response.status_code == 500
        assert response.json() == {"code": "ERR_INTERNAL", "message": "Internal server error"}

    def test_rendering_failure(self, test_client, api_headers, monkeypatch):
        def _raise(payload, title="vietqr"):
            raise RenderingFailure("Payload does not fit in a QR code")

        monkeypatch.setattr("vietqr.services.generator.render_qr_payload", _raise)
        response = test_client.post("/v1/qr", json=DYNAMIC_REQUEST, headers=api_headers)
        assert response.status_code == 500
        assert response.json()["code"] == "ERR_RENDER_FAILED"
        assert "does not fit" in response.json()["message"]

    def test_rendering_failure_is_counted(self, test_client, api_headers, monkeypatch):
        def _raise(payload, title="vietqr"):
            raise RenderingFailure()

        monkeypatch.setattr("vietqr.services.generator.render_qr_payload", _raise)
        test_client.post("/v1/qr/image", json=DYNAMIC_REQUEST, headers=api_headers)
        text = test_client.get("/metrics").text
        assert 'vietqr_service_errors_total{code="ERR_RENDER_FAILED",route="/v1/qr/image"}' in text


class TestInsecureDefaults:
    @pytest.mark.parametrize("environment,level", [("development", logging.WARNING), ("production", logging.ERROR)])
    def test_default_api_key_logged(self, monkeypatch, caplog, environment, level):
        from vietqr import api

        monkeypatch.setattr(api.settings, "api_key", "dev-secret-key")
        monkeypatch.setattr(api.settings, "environment", environment)
        with caplog.at_level(logging.WARNING, logger="vietqr.api"):
            api._warn_insecure_defaults()

        record = next(r for r in caplog.records if r.name == "vietqr.api")
        assert record.levelno == level
        assert record.environment == environment

    def test_configured_api_key_is_silent(self, caplog):
        from vietqr import api

        with caplog.at_level(logging.WARNING, logger="vietqr.api"):
            api._warn_insecure_defaults()
        assert not [r for r in caplog.records if r.name == "vietqr.api"]
