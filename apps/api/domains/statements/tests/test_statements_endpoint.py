"""Tests for the statements domain router: upload an export, get canonical CSV back."""

import io

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.core.config import Settings
from apps.api.core.errors import (
    PayloadTooLargeError,
    UnsupportedFileError,
    ValidationError,
    register_error_handlers,
)
from apps.api.domains.statements.router import router
from apps.api.domains.statements.service import normalize_upload, validate_upload
from packages.statement_normalizer import BankKind

HEADER = "Date,Transaction Description,Debit,Credit,Currency,CardName,Transaction,Location"

ICICI_SAMPLE = """Date,Transaction Description,Debit,Credit
,,JOHN DOE,
05-03-2024,"ZOMATO, ANDHERI MUMBAI",450.00,
06-03-2024,FLIPKART Bangalore,,1200.00
"""

GENERIC_SAMPLE = """Statement export
Date,Debit,Credit,Transaction Details
12-01-2024,500.00,,AMAZON BLR
"""


@pytest.fixture
def app():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router, prefix="/api/v1")
    return app


@pytest.fixture
def client(app, monkeypatch):
    monkeypatch.setattr(
        "apps.api.domains.statements.router.get_settings",
        lambda: Settings(_env_file=None, MAX_UPLOAD_BYTES=4096, QUOTE_TEXT_FIELDS=False),
    )
    return TestClient(app, raise_server_exceptions=False)


def _upload(client, name, content, **data):
    return client.post(
        "/api/v1/statements/normalize",
        files={"file": (name, io.BytesIO(content.encode("utf-8")), "text/csv")},
        data=data,
    )


def test_normalize_returns_csv(client):
    response = _upload(client, "Input_ICICI.csv", ICICI_SAMPLE)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.split("\n") == [
        HEADER,
        "05-03-2024,ZOMATO, ANDHERI,450.00,0.00,INR,JOHN DOE,Domestic,mumbai",
        "06-03-2024,FLIPKART,0.00,1200.00,INR,JOHN DOE,Domestic,bangalore",
    ]


def test_download_name_swaps_input_for_output(client):
    response = _upload(client, "Input_ICICI.csv", ICICI_SAMPLE)

    assert response.headers["content-disposition"] == 'attachment; filename="Output_ICICI.csv"'


def test_quote_text_fields_form_flag(client):
    response = _upload(client, "Input_ICICI.csv", ICICI_SAMPLE, quote_text_fields="true")

    assert response.text.split("\n")[1].startswith('"05-03-2024","ZOMATO, ANDHERI",')


def test_generic_upload_detects_bank_from_header(client):
    response = _upload(client, "statement.csv", GENERIC_SAMPLE)

    assert response.status_code == 200
    assert response.text.split("\n")[1] == "12-01-2024,AMAZON,500.00,0.00,INR,Unknown,Domestic,blr"


def test_explicit_bank_form_field(client):
    response = _upload(client, "statement.csv", "12-01-2024,500.00,,AMAZON BLR\n", bank="Axis")

    assert response.text.split("\n")[1] == "12-01-2024,AMAZON,500.00,0.00,INR,Unknown,Domestic,blr"


def test_unknown_bank_is_rejected(client):
    response = _upload(client, "statement.csv", GENERIC_SAMPLE, bank="SBI")

    assert response.status_code == 422


def test_rejects_non_csv(client):
    response = client.post(
        "/api/v1/statements/normalize",
        files={"file": ("photo.jpg", io.BytesIO(b"\xff\xd8\xff"), "image/jpeg")},
    )

    assert response.status_code == 400
    assert response.json()["title"] == "Bad Request"


def test_rejects_oversized_upload(client):
    response = _upload(client, "Input_HDFC.csv", "x" * 5000)

    assert response.status_code == 413


def test_rejects_empty_upload(client):
    response = _upload(client, "Input_HDFC.csv", "")

    assert response.status_code == 422
    body = response.json()
    assert body["title"] == "Unprocessable Entity"
    assert body["detail"] == "Uploaded file is empty"


def test_invalid_utf8_is_problem_detail(client):
    response = client.post(
        "/api/v1/statements/normalize",
        files={"file": ("Input_HDFC.csv", io.BytesIO(b"05-03-2024,CAF\xe9,1.00\n"), "text/csv")},
    )

    assert response.status_code == 422
    body = response.json()
    assert "UTF-8" in body["detail"]
    assert body["instance"] == "/api/v1/statements/normalize"


class TestUploadService:
    def test_validate_upload_accepts_txt(self):
        validate_upload("Input_IDFC.TXT", 10, 100)

    def test_validate_upload_extension(self):
        with pytest.raises(UnsupportedFileError):
            validate_upload("statement.pdf", 10, 100)

    def test_validate_upload_empty(self):
        with pytest.raises(ValidationError):
            validate_upload("statement.csv", 0, 100)

    def test_validate_upload_size(self):
        with pytest.raises(PayloadTooLargeError):
            validate_upload("statement.csv", 101, 100)

    def test_normalize_upload_picks_bank_from_name(self):
        result = normalize_upload(
            "Input_ICICI.csv",
            ICICI_SAMPLE.encode("utf-8"),
            max_bytes=4096,
            quote_text_fields=False,
        )

        assert result.bank == BankKind.ICICI
        assert result.filename == "Output_ICICI.csv"
        assert result.content.startswith(HEADER.encode("utf-8"))
