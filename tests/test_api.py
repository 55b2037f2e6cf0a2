"""Tests for the FastAPI REST endpoints."""

import datetime as dt
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from receipt_ocr.api.app import app
from receipt_ocr.extraction.field_extractor import ExtractionResult
from receipt_ocr.forms.prefill import PrefillResult
from receipt_ocr.utils.config import AppConfig
from receipt_ocr.validation.rules_engine import RulesEngine


@pytest.fixture
def client() -> TestClient:
    """Create a FastAPI test client."""
    return TestClient(app)


def _success_result() -> PrefillResult:
    return PrefillResult(
        success=True,
        notice="Recibo processado! Revise os dados antes de salvar.",
        extraction=ExtractionResult(
            amount=Decimal("45.90"),
            date=dt.date(2023, 12, 1),
            description="MERCADO CENTRAL",
        ),
        raw_text="MERCADO CENTRAL\nTOTAL R$ 45,90",
        ocr_confidence=0.91,
    )


def _failure_result() -> PrefillResult:
    return PrefillResult(
        success=False,
        notice="Erro ao processar recibo. Preencha os dados manualmente.",
    )


def _mock_components(prefill_service: MagicMock) -> tuple:
    return AppConfig(), prefill_service, RulesEngine()


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert isinstance(data["tesseract_available"], bool)
        assert data["ocr_language"] == "por"


class TestCategoriesEndpoint:
    """Tests for the /categories endpoint."""

    def test_list_categories(self, client: TestClient) -> None:
        response = client.get("/categories")
        assert response.status_code == 200
        data = response.json()
        assert data["types"] == ["income", "expense"]
        assert len(data["categories"]) == 10
        assert "Saúde" in data["categories"]


class TestExtractEndpoint:
    """Tests for the /extract endpoint."""

    @patch("receipt_ocr.api.app._get_components")
    def test_extract_success(
        self, mock_components: MagicMock, client: TestClient, receipt_png_bytes: bytes
    ) -> None:
        service = MagicMock()
        service.prefill.return_value = _success_result()
        mock_components.return_value = _mock_components(service)

        response = client.post(
            "/extract",
            files={"file": ("receipt.png", receipt_png_bytes, "image/png")},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["fields"] == {
            "amount": "45.90",
            "date": "2023-12-01",
            "description": "MERCADO CENTRAL",
        }
        assert data["ocr_confidence"] == 0.91
        assert "receipt_id" in data
        assert "processing_time_ms" in data
        service.prefill.assert_called_once_with(receipt_png_bytes, "receipt.png")

    @patch("receipt_ocr.api.app._get_components")
    def test_extract_ocr_failure_is_not_http_error(
        self, mock_components: MagicMock, client: TestClient, receipt_png_bytes: bytes
    ) -> None:
        service = MagicMock()
        service.prefill.return_value = _failure_result()
        mock_components.return_value = _mock_components(service)

        response = client.post(
            "/extract",
            files={"file": ("receipt.png", receipt_png_bytes, "image/png")},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["notice"].startswith("Erro ao processar recibo")
        assert data["fields"] == {"amount": None, "date": None, "description": None}

    def test_extract_unsupported_file_type(self, client: TestClient) -> None:
        response = client.post(
            "/extract",
            files={"file": ("receipt.txt", b"plain text", "text/plain")},
        )
        assert response.status_code == 400

    @patch("receipt_ocr.api.app._get_components")
    def test_extract_unexpected_error(
        self, mock_components: MagicMock, client: TestClient, receipt_png_bytes: bytes
    ) -> None:
        service = MagicMock()
        service.prefill.side_effect = ValueError("boom")
        mock_components.return_value = _mock_components(service)

        response = client.post(
            "/extract",
            files={"file": ("receipt.png", receipt_png_bytes, "image/png")},
        )
        assert response.status_code == 500


class TestBatchExtractEndpoint:
    """Tests for the /extract/batch endpoint."""

    @patch("receipt_ocr.api.app._get_components")
    def test_batch_extract(
        self, mock_components: MagicMock, client: TestClient, receipt_png_bytes: bytes
    ) -> None:
        service = MagicMock()
        service.prefill.side_effect = [_success_result(), _failure_result()]
        mock_components.return_value = _mock_components(service)

        response = client.post(
            "/extract/batch",
            files=[
                ("files", ("r1.png", receipt_png_bytes, "image/png")),
                ("files", ("r2.png", receipt_png_bytes, "image/png")),
            ],
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_receipts"] == 2
        assert data["successful"] == 1
        assert data["failed"] == 1
        assert data["success"] is True

    @patch("receipt_ocr.api.app._get_components")
    def test_batch_with_rejected_file(
        self, mock_components: MagicMock, client: TestClient, receipt_png_bytes: bytes
    ) -> None:
        service = MagicMock()
        service.prefill.return_value = _success_result()
        mock_components.return_value = _mock_components(service)

        response = client.post(
            "/extract/batch",
            files=[
                ("files", ("r1.png", receipt_png_bytes, "image/png")),
                ("files", ("notes.txt", b"text", "text/plain")),
            ],
        )
        data = response.json()
        assert data["successful"] == 1
        assert data["results"][1]["error"].startswith("Unsupported file type")


class TestExtractTextEndpoint:
    """Tests for the /extract/text endpoint."""

    def test_extract_text(self, client: TestClient, receipt_text: str) -> None:
        response = client.post("/extract/text", json={"text": receipt_text})
        assert response.status_code == 200
        data = response.json()
        assert data["fields"] == {
            "amount": "45.90",
            "date": "2023-12-01",
            "description": "MERCADO CENTRAL",
        }
        assert [c["value"] for c in data["candidates"]] == ["45.90", "20.00"]
        assert data["candidates"][0]["score"] == 6

    def test_extract_empty_text(self, client: TestClient) -> None:
        response = client.post("/extract/text", json={"text": ""})
        assert response.status_code == 200
        data = response.json()
        assert data["fields"] == {"amount": None, "date": None, "description": None}
        assert data["candidates"] == []


class TestValidateEndpoint:
    """Tests for the /transactions/validate endpoint."""

    def test_valid_transaction(self, client: TestClient) -> None:
        response = client.post(
            "/transactions/validate",
            json={
                "type": "expense",
                "amount": 45.9,
                "date": "2023-12-01",
                "description": "MERCADO CENTRAL",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["errors"] == {}

    def test_invalid_transaction(self, client: TestClient) -> None:
        response = client.post(
            "/transactions/validate",
            json={
                "type": "expense",
                "amount": "-3.00",
                "date": "2023-12-01",
                "description": "",
            },
        )
        data = response.json()
        assert data["valid"] is False
        assert set(data["errors"]) == {"amount", "description"}

    def test_nan_amount_is_rejected_not_crashing(self, client: TestClient) -> None:
        response = client.post(
            "/transactions/validate",
            json={
                "type": "expense",
                "amount": "NaN",
                "date": "2023-12-01",
                "description": "MERCADO CENTRAL",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert set(data["errors"]) == {"amount"}
