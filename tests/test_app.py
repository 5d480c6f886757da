"""
Tests for the HTTP API.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from app import app


@pytest.fixture
def client():  # noqa: ANN201
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def _upload(path: Path, name: str = "people.xlsx", **form: str) -> dict:
    data = {"file": (io.BytesIO(path.read_bytes()), name)}
    data.update(form)
    return data


class TestRead:
    def test_reads_people(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post("/api/read", data=_upload(people_book),
                           content_type="multipart/form-data")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["count"] == 2
        assert body["records"] == [
            {"name": "Ana", "age": 30},
            {"name": "Bo", "age": None},
        ]

    def test_header_rows_and_sheet(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post(
            "/api/read",
            data=_upload(people_book, header_rows="0", sheet_index="1"),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        assert resp.get_json()["records"] == [{"name": "Created", "age": 45306}]

    def test_sheet_out_of_range(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post(
            "/api/read",
            data=_upload(people_book, sheet_index="7"),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 404
        assert resp.get_json()["success"] is False

    def test_bad_parameter(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post(
            "/api/read",
            data=_upload(people_book, header_rows="one"),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_no_file(self, client) -> None:  # noqa: ANN001
        resp = client.post("/api/read", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "No file uploaded"

    def test_wrong_extension(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post("/api/read", data=_upload(people_book, name="people.csv"),
                           content_type="multipart/form-data")
        assert resp.status_code == 400

    def test_not_a_workbook(self, client) -> None:  # noqa: ANN001
        data = {"file": (io.BytesIO(b"Name,Age\nAna,30\n"), "people.xlsx")}
        resp = client.post("/api/read", data=data, content_type="multipart/form-data")
        assert resp.status_code == 400


class TestSheets:
    def test_lists_sheets(self, client, people_book: Path) -> None:  # noqa: ANN001
        resp = client.post("/api/sheets", data=_upload(people_book),
                           content_type="multipart/form-data")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["sheets"] == ["People", "Notes"]
        assert body["count"] == 2


class TestHealth:
    def test_health(self, client) -> None:  # noqa: ANN001
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "online"
