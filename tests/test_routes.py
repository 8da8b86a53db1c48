"""Tests for the HTTP API.

Routes run against an isolated app whose controller uses an LLM stand-in
and in-memory history; no test contacts a real provider.
"""

import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from conftest import make_headshot_payload
from cv_architect.core.config import settings

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _docx_bytes(text: str) -> bytes:
    doc = Document()
    doc.add_paragraph(text)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _analyze_text(client: TestClient, text: str = "Jane Doe, Data Analyst", **fields):
    return client.post("/v1/cv/analyze", data={"cv_text": text, **fields})


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["llm_configured"] is True


class TestAnalyzeCv:
    def test_pasted_text(self, client: TestClient, llm) -> None:
        response = _analyze_text(client, job_description="Senior Data Analyst", target_market="Global")

        assert response.status_code == 200
        body = response.json()
        assert body["scores"]["overallScore"] == 71
        assert body["jobTitleDetected"] == "Backend Engineer"
        assert body["timestamp"] is not None

        prompt = llm.generate_json.call_args.args[0][0]
        assert "**USD**" in prompt
        assert '"Senior Data Analyst"' in prompt

    def test_default_market_is_bangladesh(self, client: TestClient, llm) -> None:
        _analyze_text(client)

        prompt = llm.generate_json.call_args.args[0][0]
        assert "**BDT**" in prompt

    def test_docx_upload_sent_as_text(self, client: TestClient, llm) -> None:
        response = client.post(
            "/v1/cv/analyze",
            files={"cv_file": ("cv.docx", _docx_bytes("Jane Doe, SQL expert"), DOCX_MIME)},
        )

        assert response.status_code == 200
        cv_part = llm.generate_json.call_args.args[0][1]
        assert cv_part == "CV TEXT CONTENT:\nJane Doe, SQL expert"

    def test_legacy_doc_rejected(self, client: TestClient, llm) -> None:
        response = client.post(
            "/v1/cv/analyze",
            files={"cv_file": ("cv.doc", b"\xd0\xcf\x11\xe0" + b"\x00" * 64, "application/msword")},
        )

        assert response.status_code == 415
        assert response.json()["error"]["code"] == "legacy_doc_unsupported"
        assert response.json()["error"]["message"] == (
            "Legacy .doc format is not supported. Please save as .docx or PDF."
        )
        llm.generate_json.assert_not_awaited()

    def test_disallowed_type(self, client: TestClient, llm) -> None:
        response = client.post(
            "/v1/cv/analyze",
            files={"cv_file": ("cv.txt", b"plain text cv", "text/plain")},
        )

        assert response.status_code == 415
        assert response.json()["error"]["message"] == "Please upload a PDF, Word Doc (DOCX), or Image file."
        llm.generate_json.assert_not_awaited()

    def test_file_too_large(
        self, client: TestClient, llm, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "max_upload_size_mb", 1)

        response = client.post(
            "/v1/cv/analyze",
            files={"cv_file": ("cv.pdf", b"%PDF-1.4" + b"\x00" * (1024 * 1024), "application/pdf")},
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "file_too_large"
        llm.generate_json.assert_not_awaited()

    def test_empty_cv(self, client: TestClient, llm) -> None:
        response = _analyze_text(client, text="   ")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "empty_cv"
        assert response.json()["error"]["message"] == "No CV content provided"
        llm.generate_json.assert_not_awaited()

    def test_file_and_text_together(self, client: TestClient) -> None:
        response = client.post(
            "/v1/cv/analyze",
            data={"cv_text": "Jane Doe"},
            files={"cv_file": ("scan.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ambiguous_cv_source"

    def test_unknown_market(self, client: TestClient) -> None:
        response = _analyze_text(client, target_market="Mars")

        assert response.status_code == 422

    def test_provider_failure_classified(self, client: TestClient, llm) -> None:
        llm.generate_json.side_effect = RuntimeError("Gemini API error: 429 quota exhausted")

        response = _analyze_text(client)

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "quota_exceeded"
        dashboard = client.get("/v1/dashboard").json()
        assert dashboard["status"] == "ERROR"
        assert dashboard["error"]["code"] == "quota_exceeded"

    def test_malformed_answer(self, client: TestClient, llm) -> None:
        llm.generate_json.return_value = {"scores": {"atsScore": 50}}

        response = _analyze_text(client)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "malformed_response"
        assert client.get("/v1/history").json() == []


class TestHistoryRoutes:
    def test_list_get_select_delete(self, client: TestClient, llm) -> None:
        _analyze_text(client)
        _analyze_text(client)

        listing = client.get("/v1/history").json()
        assert len(listing) == 2
        assert listing[0]["title"] == "Backend Engineer"
        assert listing[0]["score"] == 71
        assert int(listing[0]["id"]) > int(listing[1]["id"])

        item = client.get(f"/v1/history/{listing[1]['id']}").json()
        assert item["result"]["scores"]["overallScore"] == 71

        client.post("/v1/dashboard/reset")
        selected = client.post(f"/v1/history/{listing[1]['id']}/select").json()
        assert selected["status"] == "RESULTS"
        assert selected["activeTab"] == "overview"
        assert llm.generate_json.await_count == 2

        remaining = client.delete(f"/v1/history/{listing[0]['id']}").json()
        assert [r["id"] for r in remaining] == [listing[1]["id"]]
        assert client.delete(f"/v1/history/{listing[0]['id']}").status_code == 200

    def test_unknown_item(self, client: TestClient) -> None:
        response = client.get("/v1/history/123")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "history_item_not_found"


class TestDashboardRoutes:
    def test_initial_snapshot(self, client: TestClient) -> None:
        body = client.get("/v1/dashboard").json()

        assert body["status"] == "IDLE"
        assert body["form"]["targetMarket"] == "Bangladesh"
        assert body["activeTab"] == "overview"
        assert body["headshot"]["status"] == "IDLE"

    def test_form_edits(self, client: TestClient) -> None:
        client.put("/v1/dashboard/form/cv-text", json={"text": "pasted"})
        body = client.put("/v1/dashboard/form/file", json={"fileName": "cv.pdf"}).json()
        assert body["form"]["fileName"] == "cv.pdf"
        assert body["form"]["cvText"] == ""

        body = client.put("/v1/dashboard/form/market", json={"market": "Tech"}).json()
        assert body["form"]["targetMarket"] == "Tech"

        body = client.delete("/v1/dashboard/form/file").json()
        assert body["form"]["fileName"] is None

    def test_tabs(self, client: TestClient) -> None:
        _analyze_text(client)

        client.put("/v1/dashboard/tab", json={"tab": "keywords"})
        tabs = client.get("/v1/dashboard/tabs").json()
        assert [t["id"] for t in tabs if t["active"]] == ["keywords"]

        view = client.get("/v1/dashboard/tabs/keywords").json()
        assert view["keywords"]["missing"] == ["Kubernetes", "Terraform"]
        assert view["learningPath"][0]["skill"] == "Kubernetes"

    def test_result_tab_before_analysis(self, client: TestClient) -> None:
        response = client.get("/v1/dashboard/tabs/overview")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "no_result"

    def test_reset(self, client: TestClient) -> None:
        _analyze_text(client, target_market="Global")

        body = client.post("/v1/dashboard/reset").json()

        assert body["status"] == "IDLE"
        assert body["result"] is None
        assert body["form"]["targetMarket"] == "Bangladesh"
        assert len(body["history"]) == 1


class TestReportAndDocuments:
    def test_report_requires_result(self, client: TestClient) -> None:
        assert client.get("/v1/report").status_code == 404

    def test_current_report(self, client: TestClient) -> None:
        _analyze_text(client)

        response = client.get("/v1/report")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Overall Score: 71/100" in response.text

    def test_history_report(self, client: TestClient) -> None:
        _analyze_text(client)
        item_id = client.get("/v1/history").json()[0]["id"]

        response = client.get(f"/v1/history/{item_id}/report")

        assert response.status_code == 200
        assert "Backend Engineer" in response.text

    def test_template_download(self, client: TestClient) -> None:
        response = client.get("/v1/documents/templates/ats")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/msword")
        assert 'filename="ATS_Standard_CV_Template.doc"' in response.headers["content-disposition"]
        assert response.content.startswith(b"\xef\xbb\xbf")

    def test_unknown_template(self, client: TestClient) -> None:
        assert client.get("/v1/documents/templates/creative").status_code == 404

    def test_cover_letter_download(self, client: TestClient) -> None:
        assert client.get("/v1/documents/cover-letter").status_code == 404

        _analyze_text(client)
        response = client.get("/v1/documents/cover-letter")

        assert response.status_code == 200
        assert 'filename="Cover_Letter.doc"' in response.headers["content-disposition"]
        assert "Dear Hiring Manager,<br/>" in response.content.decode("utf-8")


class TestHeadshotRoute:
    def test_success(self, client: TestClient, llm) -> None:
        llm.generate_json.return_value = make_headshot_payload()

        response = client.post(
            "/v1/headshot/analyze", files={"photo": ("me.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 200
        assert response.json()["score"] == 82
        assert client.get("/v1/history").json() == []
        assert client.get("/v1/dashboard/tabs/photo").json()["headshot"]["status"] == "RESULTS"

    def test_non_image_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/v1/headshot/analyze", files={"photo": ("cv.pdf", b"%PDF-1.4", "application/pdf")}
        )

        assert response.status_code == 415

    def test_failure_is_generic(self, client: TestClient, llm) -> None:
        llm.generate_json.side_effect = RuntimeError("Gemini API error: 503")

        response = client.post(
            "/v1/headshot/analyze", files={"photo": ("me.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Failed to analyze photo"
